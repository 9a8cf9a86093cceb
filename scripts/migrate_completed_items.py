#!/usr/bin/env python3
"""
Move completed items into the archive.

Archives every task and project whose status is Completed and every note
flagged as archived, using the owner of each item as the acting user.

Usage:
    python scripts/migrate_completed_items.py [--dry-run]
"""

import argparse
import sys
from typing import List, Optional

from productivity_archive.core.database import init_db, session_scope
from productivity_archive.services.archive_service import ArchiveService
from productivity_archive.services.migration import BulkArchiver, MigrationSummary
from productivity_archive.utils.logging import setup_logging


def print_summary(summary: MigrationSummary) -> None:
    """Print per-type counts for a migration run."""
    mode = "DRY RUN" if summary.dry_run else "MIGRATION"
    print(f"\n=== {mode} SUMMARY ===")
    for item_type in sorted(summary.candidates):
        print(
            f"  {item_type:<10} candidates: {summary.candidates[item_type]:>5}  "
            f"archived: {summary.archived.get(item_type, 0):>5}  "
            f"skipped: {summary.skipped.get(item_type, 0):>5}  "
            f"failed: {summary.failed.get(item_type, 0):>5}"
        )
    if not summary.candidates:
        print("  No completed items found")
    for error in summary.errors:
        print(f"  ! {error}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Move completed tasks, projects and archived notes into the archive"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count the items that would be archived",
    )
    args = parser.parse_args(argv)

    setup_logging()
    init_db()

    with session_scope() as session:
        summary = BulkArchiver(ArchiveService(session)).run(dry_run=args.dry_run)

    print_summary(summary)
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
