"""Reconciliation of archive records left in a pending state.

A move that fails between its two committed phases leaves its record in
``pending_archive`` or ``pending_restore``. The sweep looks at which side of
the move actually happened and finishes or undoes it accordingly.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from productivity_archive.core.exceptions import StoreFailureError
from productivity_archive.models import ArchiveRecord, ArchiveState
from productivity_archive.services.base import BaseService
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome counts of one sweep."""

    examined: int = 0
    archives_completed: int = 0
    archives_rolled_back: int = 0
    restores_completed: int = 0
    restores_reverted: int = 0
    failed: List[str] = field(default_factory=list)


class ReconciliationService(BaseService):
    """Resolves archive records stuck mid-move."""

    def sweep(self, older_than: Optional[datetime] = None) -> ReconciliationReport:
        """Resolve pending records last touched before ``older_than``.

        Defaults to now minus ``reconciliation_grace_seconds`` so moves that
        are still in flight are left alone.
        """
        if older_than is None:
            older_than = self.now() - timedelta(
                seconds=self.settings.reconciliation_grace_seconds
            )

        report = ReconciliationReport()
        for record in self.archive.find_pending(older_than):
            report.examined += 1
            try:
                if record.state == ArchiveState.PENDING_ARCHIVE:
                    self._resolve_archive(record, report)
                else:
                    self._resolve_restore(record, report)
                self.commit()
            except StoreFailureError as e:
                self.rollback()
                report.failed.append(str(record.id))
                logger.error(
                    "reconciliation_failed", record_id=str(record.id), error=e.message
                )

        logger.info(
            "reconciliation_sweep_finished",
            examined=report.examined,
            archives_completed=report.archives_completed,
            archives_rolled_back=report.archives_rolled_back,
            restores_completed=report.restores_completed,
            restores_reverted=report.restores_reverted,
            failed=len(report.failed),
        )
        return report

    def _resolve_archive(
        self, record: ArchiveRecord, report: ReconciliationReport
    ) -> None:
        store = self.items.for_type(record.item_type)
        if store.exists(record.original_id):
            # live item was never removed
            self.archive.delete(record)
            report.archives_rolled_back += 1
            logger.info("pending_archive_rolled_back", record_id=str(record.id))
        else:
            self.archive.set_state(record, ArchiveState.ARCHIVED)
            report.archives_completed += 1
            logger.info("pending_archive_completed", record_id=str(record.id))

    def _resolve_restore(
        self, record: ArchiveRecord, report: ReconciliationReport
    ) -> None:
        store = self.items.for_type(record.item_type)
        restored_id = record.restored_item_id or record.original_id
        if store.exists(restored_id):
            self.archive.delete(record)
            report.restores_completed += 1
            logger.info(
                "pending_restore_completed",
                record_id=str(record.id),
                item_id=str(restored_id),
            )
        else:
            self.archive.set_state(record, ArchiveState.ARCHIVED)
            report.restores_reverted += 1
            logger.info("pending_restore_reverted", record_id=str(record.id))
