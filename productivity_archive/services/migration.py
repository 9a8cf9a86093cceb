"""One-off migration of already completed items into the archive."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from productivity_archive.core.exceptions import ArchiveError, StoreFailureError
from productivity_archive.models import (
    ItemType,
    Note,
    Project,
    ProjectStatus,
    Task,
    TaskStatus,
)
from productivity_archive.services.archive_service import ArchiveService
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class MigrationSummary:
    """Counts per item type for one migration run."""

    dry_run: bool = False
    candidates: Dict[str, int] = field(default_factory=dict)
    archived: Dict[str, int] = field(default_factory=dict)
    skipped: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def bump(self, bucket: Dict[str, int], item_type: ItemType) -> None:
        bucket[item_type.value] = bucket.get(item_type.value, 0) + 1

    @property
    def total_archived(self) -> int:
        return sum(self.archived.values())


class BulkArchiver:
    """Archive completed tasks, completed projects and archived notes.

    Each item goes through the normal archival transaction with its owner
    as the acting user, so the resulting records are indistinguishable from
    ones archived interactively.
    """

    def __init__(self, service: ArchiveService):
        """Initialize with the archive service that performs each move."""
        self.service = service
        self.session = service.session

    def candidates(self) -> Iterator[Tuple[ItemType, Any, Optional[uuid.UUID]]]:
        """Yield ``(item_type, item, acting_user_id)`` for every candidate."""
        try:
            tasks = (
                self.session.query(Task)
                .filter(Task.status == TaskStatus.COMPLETED)
                .all()
            )
            projects = (
                self.session.query(Project)
                .filter(Project.status == ProjectStatus.COMPLETED)
                .all()
            )
            notes = self.session.query(Note).filter(Note.archived.is_(True)).all()
        except SQLAlchemyError as e:
            raise StoreFailureError(f"Error scanning migration candidates: {e}") from e

        for task in tasks:
            yield ItemType.TASK, task, task.assignee_id
        for project in projects:
            yield ItemType.PROJECT, project, project.owner_id
        for note in notes:
            yield ItemType.NOTE, note, note.user_id

    def run(self, dry_run: bool = False) -> MigrationSummary:
        """Archive every candidate; with ``dry_run`` only count them."""
        summary = MigrationSummary(dry_run=dry_run)
        # materialise first, archiving deletes rows from the scanned tables
        pending = [(t, item.id, user) for t, item, user in self.candidates()]

        for item_type, item_id, user_id in pending:
            summary.bump(summary.candidates, item_type)
            if user_id is None:
                logger.warning(
                    "migration_item_without_owner",
                    item_type=item_type.value,
                    item_id=str(item_id),
                )
                summary.bump(summary.skipped, item_type)
                continue
            if dry_run:
                continue

            try:
                self.service.archive_item(user_id, item_type, item_id)
            except ArchiveError as e:
                summary.bump(summary.failed, item_type)
                summary.errors.append(f"{item_type.value} {item_id}: {e.message}")
                logger.error(
                    "migration_item_failed",
                    item_type=item_type.value,
                    item_id=str(item_id),
                    error=e.message,
                    code=e.code,
                )
                continue
            summary.bump(summary.archived, item_type)

        logger.info(
            "migration_finished",
            dry_run=dry_run,
            candidates=summary.candidates,
            archived=summary.archived,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        return summary
