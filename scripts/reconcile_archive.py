#!/usr/bin/env python3
"""
Resolve archive records left pending by interrupted archive or restore moves.

Usage:
    python scripts/reconcile_archive.py [--grace-seconds N]
"""

import argparse
import sys
from datetime import timedelta
from typing import List, Optional

from productivity_archive.core.database import session_scope
from productivity_archive.services.reconciliation import ReconciliationService
from productivity_archive.utils.dates import utcnow
from productivity_archive.utils.logging import setup_logging


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Archive reconciliation sweep")
    parser.add_argument(
        "--grace-seconds",
        type=int,
        default=None,
        help="Only touch records pending for longer than this (default from settings)",
    )
    args = parser.parse_args(argv)

    setup_logging()

    older_than = None
    if args.grace_seconds is not None:
        older_than = utcnow() - timedelta(seconds=args.grace_seconds)

    with session_scope() as session:
        report = ReconciliationService(session).sweep(older_than)

    print(f"Examined:             {report.examined}")
    print(f"Archives completed:   {report.archives_completed}")
    print(f"Archives rolled back: {report.archives_rolled_back}")
    print(f"Restores completed:   {report.restores_completed}")
    print(f"Restores reverted:    {report.restores_reverted}")
    for record_id in report.failed:
        print(f"  ! could not resolve {record_id}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
