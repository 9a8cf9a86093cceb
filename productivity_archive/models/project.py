"""Project and project membership models."""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, TimestampMixin
from .db_types import UUID
from .enums import Priority, ProjectStatus, enum_values


class Project(BaseModel, TimestampMixin):
    """A container of tasks with an owner and a set of members."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    owner_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)
    status: Mapped[ProjectStatus] = mapped_column(
        SQLEnum(ProjectStatus, values_callable=enum_values, native_enum=False),
        default=ProjectStatus.PLANNING,
        nullable=False,
    )
    priority: Mapped[Optional[Priority]] = mapped_column(
        SQLEnum(Priority, values_callable=enum_values, native_enum=False),
        nullable=True,
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    memberships = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def member_ids(self) -> List[uuid.UUID]:
        """User ids of all project members."""
        return [membership.user_id for membership in self.memberships]

    def set_members(self, user_ids: List[uuid.UUID]) -> None:
        """Replace the member list, ignoring duplicates."""
        seen = []
        for user_id in user_ids:
            if user_id not in seen:
                seen.append(user_id)
        self.memberships = [ProjectMember(user_id=user_id) for user_id in seen]

    def has_member(self, user_id: uuid.UUID) -> bool:
        """Check whether a user is the owner or a member of the project."""
        return self.owner_id == user_id or user_id in self.member_ids


class ProjectMember(BaseModel):
    """Membership of a user in a project."""

    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id"),)

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(), nullable=False, index=True)

    project = relationship("Project", back_populates="memberships")
