"""Archive record model.

An archive record is the durable, type-tagged snapshot of a live item that
was moved out of its collection. The data columns are written once; only the
lifecycle columns (``state``, ``idempotency_key``, ``restored_item_id`` and
``updated_at``) change while a move is in flight.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import BigInteger, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from productivity_archive.utils.dates import utcnow

from .base import BaseModel
from .db_types import UUID, JSONType
from .enums import ArchiveState, ItemType, Priority, enum_values


class ArchiveRecord(BaseModel):
    """Archived item with the metadata needed for analytics and restore."""

    __tablename__ = "archive_records"
    __table_args__ = (
        Index("ix_archive_user_type_completed", "user_id", "item_type", "completed_at"),
        Index("ix_archive_user_completed", "user_id", "completed_at"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)
    item_type: Mapped[ItemType] = mapped_column(
        SQLEnum(ItemType, values_callable=enum_values, native_enum=False),
        nullable=False,
        index=True,
    )
    original_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )
    completion_time: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    priority: Mapped[Optional[Priority]] = mapped_column(
        SQLEnum(Priority, values_callable=enum_values, native_enum=False),
        nullable=True,
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(), nullable=True, index=True
    )
    # "metadata" is reserved on declarative classes
    item_metadata: Mapped[Dict[str, Any]] = mapped_column(
        "metadata", JSONType, nullable=False, default=dict
    )

    state: Mapped[ArchiveState] = mapped_column(
        SQLEnum(ArchiveState, values_callable=enum_values, native_enum=False),
        nullable=False,
        default=ArchiveState.PENDING_ARCHIVE,
        index=True,
    )
    idempotency_key: Mapped[Optional[str]] = mapped_column(
        String(120), nullable=True, unique=True
    )
    restored_item_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    @staticmethod
    def make_idempotency_key(
        item_type: ItemType, original_id: uuid.UUID, operation: str
    ) -> str:
        """Derive the key that serialises moves of the same logical item."""
        return f"{item_type.value}:{original_id}:{operation}"

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ArchiveRecord(id={self.id}, item_type={self.item_type.value}, "
            f"state={self.state.value})>"
        )
