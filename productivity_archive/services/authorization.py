"""Authorization for archiving and restoring items."""

import uuid
from typing import Any

from productivity_archive.core.exceptions import InvalidItemTypeError
from productivity_archive.models import ArchiveRecord
from productivity_archive.repositories.item_store import (
    ItemStoreAdapter,
    resolve_item_type,
)
from productivity_archive.services.item_types import get_handler
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


class AuthorizationResolver:
    """Decides whether a user may archive a live item or restore a record."""

    def __init__(self, items: ItemStoreAdapter):
        """Initialize resolver with the project membership lookup."""
        self.items = items

    def can_archive(self, user_id: uuid.UUID, item: Any, item_type: Any) -> bool:
        """Apply the per-type capability rule; unknown types are refused."""
        try:
            handler = get_handler(resolve_item_type(item_type))
        except InvalidItemTypeError:
            return False

        allowed = handler.authorize(user_id, item, self.items)
        if not allowed:
            logger.debug(
                "authorization_denied",
                user_id=str(user_id),
                item_type=handler.item_type.value,
                item_id=str(getattr(item, "id", None)),
            )
        return allowed

    @staticmethod
    def can_restore(user_id: uuid.UUID, record: ArchiveRecord) -> bool:
        """Only the owner of an archive record may restore it."""
        return record.user_id == user_id
