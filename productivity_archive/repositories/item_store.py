"""Uniform access to the live item collections.

Each archivable item type lives in its own table with its own schema. The
archive services only ever need to find, create and delete items, so this
adapter hides the per-type model behind one small interface.
"""

import uuid
from typing import Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from productivity_archive.core.exceptions import (
    IdentifierCollisionError,
    InvalidItemTypeError,
    StoreFailureError,
)
from productivity_archive.models import (
    BaseModel,
    Bookmark,
    ItemType,
    Note,
    Project,
    Snippet,
    Task,
)
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

ITEM_MODELS: Dict[ItemType, Type[BaseModel]] = {
    ItemType.TASK: Task,
    ItemType.PROJECT: Project,
    ItemType.NOTE: Note,
    ItemType.BOOKMARK: Bookmark,
    ItemType.SNIPPET: Snippet,
}


def resolve_item_type(value: object) -> ItemType:
    """Coerce a raw value onto ItemType or raise InvalidItemTypeError."""
    if isinstance(value, ItemType):
        return value
    try:
        return ItemType(str(value))
    except ValueError:
        valid = ", ".join(t.value for t in ItemType)
        raise InvalidItemTypeError(
            f"Invalid item type '{value}'. Must be one of: {valid}"
        ) from None


class ItemStore(Generic[T]):
    """Find, create and delete live items of a single type."""

    def __init__(self, session: Session, model_class: Type[T]):
        """Initialize the store for ``model_class``."""
        self.session = session
        self.model_class = model_class

    def get(self, item_id: uuid.UUID) -> Optional[T]:
        """Fetch a live item by id."""
        try:
            return self.session.get(self.model_class, item_id)
        except SQLAlchemyError as e:
            logger.error(
                "item_lookup_failed",
                model=self.model_class.__name__,
                item_id=str(item_id),
                error=str(e),
            )
            raise StoreFailureError(
                f"Error loading {self.model_class.__name__} {item_id}: {e}"
            ) from e

    def exists(self, item_id: uuid.UUID) -> bool:
        """Check whether a live item with ``item_id`` exists."""
        return self.get(item_id) is not None

    def create(self, item: T) -> T:
        """Insert a new live item.

        Raises:
            IdentifierCollisionError: another row already uses ``item.id``
            StoreFailureError: any other persistence failure
        """
        try:
            with self.session.begin_nested():
                self.session.add(item)
                self.session.flush()
        except IntegrityError as e:
            if self._row_exists(item.id):
                raise IdentifierCollisionError(
                    f"{self.model_class.__name__} id {item.id} is already in use"
                ) from e
            raise StoreFailureError(
                f"Error creating {self.model_class.__name__}: {e}"
            ) from e
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error creating {self.model_class.__name__}: {e}"
            ) from e
        return item

    def delete(self, item: T) -> None:
        """Remove a live item from its collection."""
        try:
            self.session.delete(item)
            self.session.flush()
        except SQLAlchemyError as e:
            raise StoreFailureError(
                f"Error deleting {self.model_class.__name__} {item.id}: {e}"
            ) from e

    def _row_exists(self, item_id: uuid.UUID) -> bool:
        return (
            self.session.query(self.model_class.id)
            .filter(self.model_class.id == item_id)
            .first()
            is not None
        )


class ItemStoreAdapter:
    """Entry point to the five live collections."""

    def __init__(self, session: Session):
        """Initialize adapter with database session."""
        self.session = session

    def for_type(self, item_type: ItemType) -> ItemStore:
        """Return the store backing ``item_type``."""
        return ItemStore(self.session, ITEM_MODELS[item_type])

    def get_project(self, project_id: Optional[uuid.UUID]) -> Optional[Project]:
        """Membership lookup used when authorizing task access."""
        if project_id is None:
            return None
        return self.for_type(ItemType.PROJECT).get(project_id)
