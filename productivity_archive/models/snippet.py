"""Code snippet model."""

import uuid
from typing import List, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin
from .db_types import UUID, JSONType


class Snippet(BaseModel, TimestampMixin):
    """A code snippet owned by a single user."""

    __tablename__ = "snippets"

    user_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    language: Mapped[str] = mapped_column(String(50), nullable=False, default="text")
    tags: Mapped[List[str]] = mapped_column(JSONType, default=list)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
