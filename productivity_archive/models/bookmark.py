"""Bookmark model."""

import uuid
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin
from .db_types import UUID


class Bookmark(BaseModel, TimestampMixin):
    """A saved URL owned by a single user."""

    __tablename__ = "bookmarks"

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    folder_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
