"""Archive service: moves completed items into the archive and reads it back.

Archiving is a move between two stores, done in two committed phases:

1. insert the archive record in ``pending_archive`` state (the unique
   idempotency key makes concurrent archives of the same item collide here),
2. delete the live item and flip the record to ``archived``.

A failure in phase 2 leaves a ``pending_archive`` record behind, which the
reconciliation sweep resolves.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from productivity_archive.core.exceptions import (
    ArchiveError,
    ForbiddenError,
    InconsistentStateError,
    InvalidRangeError,
    InvalidStateError,
    NotFoundError,
    StoreFailureError,
    ValidationError,
)
from productivity_archive.models import ArchiveRecord, ArchiveState
from productivity_archive.repositories.item_store import resolve_item_type
from productivity_archive.schemas.archive import ArchiveFilters
from productivity_archive.schemas.metadata import dump_metadata
from productivity_archive.schemas.metrics import Comparison, ProductivityMetrics
from productivity_archive.services.audit import notify
from productivity_archive.services.authorization import AuthorizationResolver
from productivity_archive.services.base import BaseService
from productivity_archive.services.item_types import ItemTypeHandler, get_handler
from productivity_archive.services.metrics import (
    compare_periods,
    compute_metrics,
    validate_range,
)
from productivity_archive.utils.dates import (
    milliseconds_between,
    period_window,
    to_naive_utc,
)
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


class ArchiveService(BaseService):
    """Archival transaction plus the archive's read operations."""

    def __init__(self, *args: Any, **kwargs: Any):
        """Initialize archive service."""
        super().__init__(*args, **kwargs)
        self.authorizer = AuthorizationResolver(self.items)

    def archive_item(
        self, user_id: uuid.UUID, item_type: Any, item_id: uuid.UUID
    ) -> ArchiveRecord:
        """Move a live item into the archive.

        Raises:
            InvalidItemTypeError: ``item_type`` is not archivable
            NotFoundError: no live item with ``item_id``
            ForbiddenError: the user may not act on the item
            InvalidStateError: a task or project that is not completed
            ConflictError: the item is already being archived
            InconsistentStateError: the record was saved but the live item
                could not be removed
        """
        item_type = resolve_item_type(item_type)
        handler = get_handler(item_type)
        log = logger.bind(
            user_id=str(user_id), item_type=item_type.value, item_id=str(item_id)
        )
        log.debug("archive_requested")

        store = self.items.for_type(item_type)
        item = store.get(item_id)
        if item is None:
            log.warning("archive_item_not_found")
            raise NotFoundError(f"{item_type.value} not found with id {item_id}")

        if not self.authorizer.can_archive(user_id, item, item_type):
            log.warning("archive_unauthorized")
            raise ForbiddenError(f"Not authorized to archive this {item_type.value}")

        if handler.requires_completion and not handler.is_completed(item):
            log.warning("archive_incomplete_item", status=str(item.status.value))
            raise InvalidStateError(
                f"Cannot archive {item_type.value} that is not completed"
            )

        record = self.build_record(user_id, handler, item)

        try:
            self.archive.add_pending(record)
            self.commit()
        except ArchiveError:
            self.rollback()
            raise

        try:
            store.delete(item)
            self.archive.set_state(record, ArchiveState.ARCHIVED)
            self.commit()
        except StoreFailureError as e:
            self.rollback()
            log.warning(
                "archive_consistency_warning",
                record_id=str(record.id),
                error=e.message,
            )
            notify(
                self.audit_sink,
                user_id,
                f"{item_type.value}_archive",
                "failed",
                item_id=str(item_id),
                archive_id=str(record.id),
                error=e.message,
            )
            raise InconsistentStateError(
                f"Archived {item_type.value} {item_id} but could not remove the "
                f"original; record {record.id} awaits reconciliation"
            ) from e

        log.info("item_archived", record_id=str(record.id))
        notify(
            self.audit_sink,
            user_id,
            f"{item_type.value}_archive",
            "success",
            item_id=str(item_id),
            archive_id=str(record.id),
        )
        return record

    def archive_on_completion(
        self, user_id: uuid.UUID, item_type: Any, item_id: uuid.UUID
    ) -> Optional[ArchiveRecord]:
        """Archive an item the CRUD layer just marked completed.

        Returns None, touching nothing, when the item is not completed yet.
        """
        item_type = resolve_item_type(item_type)
        handler = get_handler(item_type)
        item = self.items.for_type(item_type).get(item_id)
        if item is not None and not handler.is_completed(item):
            return None
        return self.archive_item(user_id, item_type, item_id)

    def build_record(
        self, user_id: uuid.UUID, handler: ItemTypeHandler, item: Any
    ) -> ArchiveRecord:
        """Snapshot a live item into an unsaved archive record."""
        now = self.now()
        created_at = getattr(item, "created_at", None)
        completion_time = None
        if created_at is not None:
            created_at = to_naive_utc(created_at)
            completion_time = milliseconds_between(created_at, now)

        return ArchiveRecord(
            user_id=user_id,
            item_type=handler.item_type,
            original_id=item.id,
            title=handler.title_of(item),
            description=handler.description_of(item),
            created_at=created_at or now,
            completed_at=now,
            completion_time=completion_time,
            priority=handler.priority_of(item),
            project_id=handler.project_of(item),
            item_metadata=dump_metadata(handler.extract_metadata(item)),
            state=ArchiveState.PENDING_ARCHIVE,
            idempotency_key=ArchiveRecord.make_idempotency_key(
                handler.item_type, item.id, "archive"
            ),
        )

    def get_record(self, record_id: uuid.UUID) -> Optional[ArchiveRecord]:
        """Fetch one archived record."""
        return self.archive.get(record_id)

    def list_archive(
        self, user_id: uuid.UUID, filters: Optional[ArchiveFilters] = None
    ) -> List[ArchiveRecord]:
        """Archived records for a user, most recent first by default."""
        filters = filters or ArchiveFilters()
        if filters.start_date and filters.end_date:
            validate_range(
                (to_naive_utc(filters.start_date), to_naive_utc(filters.end_date)),
                "date range",
            )
        limit = filters.limit or self.settings.default_list_limit
        records = self.archive.query(user_id, filters, limit=limit)

        logger.info(
            "archive_items_retrieved",
            user_id=str(user_id),
            count=len(records),
            item_type=filters.item_type.value if filters.item_type else None,
        )
        return records

    def get_metrics(
        self,
        user_id: uuid.UUID,
        period: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        project_id: Optional[uuid.UUID] = None,
    ) -> ProductivityMetrics:
        """Productivity metrics for the current period or an explicit range.

        A recognised ``period`` selects the calendar day, week (from Sunday),
        month or year containing now and wins over explicit dates.
        """
        window = period_window(period, self.now()) if period else None
        if window is not None:
            start_date, end_date = window
        else:
            start_date = to_naive_utc(start_date) if start_date else None
            end_date = to_naive_utc(end_date) if end_date else None
            if start_date and end_date and end_date < start_date:
                raise InvalidRangeError("end_date precedes start_date")

        filters = ArchiveFilters(
            start_date=start_date, end_date=end_date, project_id=project_id
        )
        records = self.archive.query(user_id, filters)
        metrics = compute_metrics(records, period)

        logger.info(
            "productivity_metrics_computed",
            user_id=str(user_id),
            period=period,
            total_items=metrics.total_items,
        )
        return metrics

    def compare_metrics(
        self,
        user_id: uuid.UUID,
        period1_start: Optional[datetime],
        period1_end: Optional[datetime],
        period2_start: Optional[datetime],
        period2_end: Optional[datetime],
    ) -> Comparison:
        """Compare two periods of the user's archive.

        Both periods come from a single query so they share one snapshot.
        """
        bounds = (period1_start, period1_end, period2_start, period2_end)
        if any(bound is None for bound in bounds):
            raise ValidationError("All period start and end dates are required")

        p1_start, p1_end, p2_start, p2_end = [to_naive_utc(b) for b in bounds]
        validate_range((p1_start, p1_end), "period 1")
        validate_range((p2_start, p2_end), "period 2")

        records = self.archive.query(
            user_id,
            ArchiveFilters(
                start_date=min(p1_start, p2_start), end_date=max(p1_end, p2_end)
            ),
        )
        first = [r for r in records if p1_start <= r.completed_at <= p1_end]
        second = [r for r in records if p2_start <= r.completed_at <= p2_end]

        comparison = compare_periods(
            first, second, (p1_start, p1_end), (p2_start, p2_end)
        )
        logger.info(
            "productivity_comparison_generated",
            user_id=str(user_id),
            period1_count=len(first),
            period2_count=len(second),
        )
        return comparison
