"""Base model classes for database models."""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from productivity_archive.utils.dates import utcnow

from .db_types import UUID

Base: Any = declarative_base()


class TimestampMixin:
    """Mixin for adding timestamp fields to live item models."""

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, default=utcnow
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )


class BaseModel(Base):
    """Base model class with a UUID primary key."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(), primary_key=True, default=uuid.uuid4, nullable=False
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize base model."""
        super().__init__(**kwargs)
        if not self.id:
            self.id = uuid.uuid4()

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<{self.__class__.__name__}(id={self.id})>"
