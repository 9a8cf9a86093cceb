"""Persistence for archive records."""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import asc, desc, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from productivity_archive.core.exceptions import ConflictError, StoreFailureError
from productivity_archive.models import ArchiveRecord, ArchiveState
from productivity_archive.schemas.archive import ArchiveFilters
from productivity_archive.utils.dates import to_naive_utc, utcnow
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)

_SORT_COLUMNS = {
    "completed_at": ArchiveRecord.completed_at,
    "title": ArchiveRecord.title,
}


class ArchiveStore:
    """Durable collection of archive records."""

    def __init__(self, session: Session):
        """Initialize store with database session."""
        self.session = session

    def add_pending(self, record: ArchiveRecord) -> ArchiveRecord:
        """Insert a record in ``pending_archive`` state.

        The unique idempotency key makes this insert the mutual-exclusion
        point for concurrent archives of the same item.
        """
        record.state = ArchiveState.PENDING_ARCHIVE
        try:
            with self.session.begin_nested():
                self.session.add(record)
                self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"{record.item_type.value} {record.original_id} "
                "is already being archived"
            ) from e
        except SQLAlchemyError as e:
            raise StoreFailureError(f"Error saving archive record: {e}") from e
        return record

    def get(
        self,
        record_id: uuid.UUID,
        state: Optional[ArchiveState] = ArchiveState.ARCHIVED,
    ) -> Optional[ArchiveRecord]:
        """Fetch a record by id, by default only if fully archived."""
        try:
            record = self.session.get(ArchiveRecord, record_id)
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error loading archive record {record_id}: {e}"
            ) from e
        if record is None or (state is not None and record.state != state):
            return None
        return record

    def set_state(self, record: ArchiveRecord, state: ArchiveState) -> None:
        """Move a record to another lifecycle state."""
        try:
            record.state = state
            if state != ArchiveState.PENDING_RESTORE:
                record.restored_item_id = None
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error updating archive record {record.id}: {e}"
            ) from e

    def claim_for_restore(
        self, record: ArchiveRecord, restored_item_id: uuid.UUID
    ) -> bool:
        """Atomically move an archived record into ``pending_restore``.

        Returns False when another request claimed the record first.
        """
        try:
            result = self.session.execute(
                update(ArchiveRecord)
                .where(ArchiveRecord.id == record.id)
                .where(ArchiveRecord.state == ArchiveState.ARCHIVED)
                .values(
                    state=ArchiveState.PENDING_RESTORE,
                    restored_item_id=restored_item_id,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error claiming archive record {record.id}: {e}"
            ) from e
        if result.rowcount != 1:
            return False
        self.session.refresh(record)
        return True

    def record_restored_id(self, record: ArchiveRecord, item_id: uuid.UUID) -> None:
        """Remember which live item a pending restore created."""
        try:
            record.restored_item_id = item_id
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error updating archive record {record.id}: {e}"
            ) from e

    def delete(self, record: ArchiveRecord) -> None:
        """Remove a record from the archive."""
        try:
            self.session.delete(record)
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error deleting archive record {record.id}: {e}"
            ) from e

    def query(
        self,
        user_id: uuid.UUID,
        filters: Optional[ArchiveFilters] = None,
        limit: Optional[int] = None,
    ) -> List[ArchiveRecord]:
        """Return archived records for a user matching ``filters``."""
        filters = filters or ArchiveFilters()
        query = self._base_query(user_id)

        if filters.item_type is not None:
            query = query.filter(ArchiveRecord.item_type == filters.item_type)
        if filters.start_date is not None:
            query = query.filter(
                ArchiveRecord.completed_at >= to_naive_utc(filters.start_date)
            )
        if filters.end_date is not None:
            query = query.filter(
                ArchiveRecord.completed_at <= to_naive_utc(filters.end_date)
            )
        if filters.project_id is not None:
            query = query.filter(ArchiveRecord.project_id == filters.project_id)

        direction = desc if filters.sort.startswith("-") else asc
        column = _SORT_COLUMNS[filters.sort.lstrip("-")]
        query = query.order_by(direction(column), direction(ArchiveRecord.id))

        if limit is not None:
            query = query.limit(limit)

        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.error("archive_query_failed", user_id=str(user_id), error=str(e))
            raise StoreFailureError(f"Error querying archive: {e}") from e

    def find_pending(self, older_than: datetime) -> List[ArchiveRecord]:
        """Records stuck in a ``pending_*`` state since before ``older_than``."""
        try:
            return (
                self.session.query(ArchiveRecord)
                .filter(
                    ArchiveRecord.state.in_(
                        [ArchiveState.PENDING_ARCHIVE, ArchiveState.PENDING_RESTORE]
                    )
                )
                .filter(ArchiveRecord.updated_at <= older_than)
                .order_by(ArchiveRecord.updated_at)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error scanning pending archive records: {e}"
            ) from e

    def _base_query(self, user_id: uuid.UUID) -> Query:
        return (
            self.session.query(ArchiveRecord)
            .filter(ArchiveRecord.user_id == user_id)
            .filter(ArchiveRecord.state == ArchiveState.ARCHIVED)
        )
