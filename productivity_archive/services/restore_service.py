"""Restore service: rebuilds live items from archive records.

Restoring runs in three committed steps so an interrupted restore is always
visible on the record:

1. claim the record (``archived`` -> ``pending_restore``),
2. create the live item, reusing the original id when possible,
3. delete the record.
"""

import uuid
from dataclasses import dataclass
from typing import Any

from productivity_archive.core.exceptions import (
    ConflictError,
    ForbiddenError,
    IdentifierCollisionError,
    InconsistentStateError,
    NotFoundError,
    StoreFailureError,
)
from productivity_archive.models import (
    ArchiveRecord,
    ArchiveState,
    BaseModel,
    ItemType,
)
from productivity_archive.repositories.item_store import ItemStore
from productivity_archive.services.audit import notify
from productivity_archive.services.authorization import AuthorizationResolver
from productivity_archive.services.base import BaseService
from productivity_archive.services.item_types import (
    ItemTypeHandler,
    RestoreContext,
    get_handler,
)
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RestoreResult:
    """A live item recreated from an archive record."""

    item: BaseModel
    item_type: ItemType
    original_id: uuid.UUID

    @property
    def reused_original_id(self) -> bool:
        """True when the item came back under its archived id."""
        return self.item.id == self.original_id


class RestoreService(BaseService):
    """Brings archived items back into their live collections."""

    def restore_item(self, user_id: uuid.UUID, record_id: uuid.UUID) -> RestoreResult:
        """Recreate the live item for an archive record and drop the record.

        Raises:
            NotFoundError: no archived record with ``record_id``
            ForbiddenError: the record belongs to another user
            ConflictError: the original item still exists, or another
                request is restoring the same record
            ValidationError: the record cannot produce a valid live item
            InconsistentStateError: the live item exists but the record
                could not be removed
        """
        log = logger.bind(user_id=str(user_id), record_id=str(record_id))

        record = self.archive.get(record_id)
        if record is None:
            raise NotFoundError(f"Archived item not found with id {record_id}")

        if not AuthorizationResolver.can_restore(user_id, record):
            log.warning("restore_unauthorized")
            raise ForbiddenError("Not authorized to restore this item")

        item_type = record.item_type
        original_id = record.original_id
        handler = get_handler(item_type)
        store = self.items.for_type(item_type)

        if store.exists(original_id):
            log.warning("restore_original_exists", original_id=str(original_id))
            raise ConflictError(
                f"Cannot restore {item_type.value}, the original item still exists"
            )

        ctx = RestoreContext(
            acting_user_id=user_id,
            now=self.now(),
            due_date_shift_days=self.settings.restore_due_date_shift_days,
            end_date_shift_months=self.settings.restore_end_date_shift_months,
        )
        draft = handler.reconstruct(record, ctx)

        if not self.archive.claim_for_restore(record, original_id):
            self.rollback()
            raise ConflictError(f"Archived item {record_id} is already being restored")
        self.commit()

        try:
            item = self._create_live_item(store, handler, draft, record)
            self.commit()
        except Exception:
            # release on any failure, not just store errors
            self.rollback()
            self._release_claim(record)
            raise

        try:
            self.archive.delete(record)
            self.commit()
        except StoreFailureError as e:
            self.rollback()
            log.warning(
                "restore_consistency_warning",
                restored_item_id=str(item.id),
                error=e.message,
            )
            raise InconsistentStateError(
                f"Restored {item_type.value} {item.id} but could not remove archive "
                f"record {record_id}; it awaits reconciliation"
            ) from e

        result = RestoreResult(item=item, item_type=item_type, original_id=original_id)
        log.info(
            "item_restored",
            item_type=item_type.value,
            item_id=str(item.id),
            reused_original_id=result.reused_original_id,
        )
        notify(
            self.audit_sink,
            user_id,
            f"{item_type.value}_restore",
            "success",
            archive_id=str(record_id),
            original_id=str(original_id),
            item_id=str(item.id),
        )
        return result

    def _create_live_item(
        self,
        store: ItemStore,
        handler: ItemTypeHandler,
        draft: Any,
        record: ArchiveRecord,
    ) -> BaseModel:
        """Create the item under its original id, or once under a new one."""
        try:
            return store.create(handler.instantiate(draft, record.original_id))
        except IdentifierCollisionError:
            new_id = uuid.uuid4()
            logger.info(
                "restore_identifier_conflict",
                record_id=str(record.id),
                original_id=str(record.original_id),
                new_item_id=str(new_id),
            )
            item = store.create(handler.instantiate(draft, new_id))
            self.archive.record_restored_id(record, new_id)
            return item

    def _release_claim(self, record: ArchiveRecord) -> None:
        """Put a claimed record back to ``archived`` after a failed create."""
        try:
            self.archive.set_state(record, ArchiveState.ARCHIVED)
            self.commit()
        except StoreFailureError as e:
            self.rollback()
            logger.warning("restore_release_failed", record_id=str(record.id))
            raise InconsistentStateError(
                f"Archive record {record.id} is stuck pending restore"
            ) from e
