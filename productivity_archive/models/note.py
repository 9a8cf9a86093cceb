"""Note model."""

import uuid
from typing import List, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin
from .db_types import UUID, JSONType


class Note(BaseModel, TimestampMixin):
    """A free-form note owned by a single user."""

    __tablename__ = "notes"

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, default="")
    tags: Mapped[List[str]] = mapped_column(JSONType, default=list)
    color: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
