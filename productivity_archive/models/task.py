"""Task model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin
from .db_types import UUID
from .enums import Priority, TaskStatus, enum_values


class Task(BaseModel, TimestampMixin):
    """A unit of work that belongs to a project and has an assignee."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, values_callable=enum_values, native_enum=False),
        default=TaskStatus.NOT_STARTED,
        nullable=False,
    )
    priority: Mapped[Optional[Priority]] = mapped_column(
        SQLEnum(Priority, values_callable=enum_values, native_enum=False),
        nullable=True,
    )
    # Plain id, not a foreign key: the project may be sitting in the archive
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(), nullable=True, index=True
    )
    assignee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(), nullable=True, index=True
    )
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    estimated_time: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
