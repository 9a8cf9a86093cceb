"""Enumerations shared by live item and archive models."""

from enum import Enum
from typing import Any, Optional


class ItemType(str, Enum):
    """Types of live items that can be archived."""

    TASK = "task"
    PROJECT = "project"
    NOTE = "note"
    BOOKMARK = "bookmark"
    SNIPPET = "snippet"

    @property
    def collection(self) -> str:
        """Name of the live collection the item belongs to."""
        return f"{self.value}s"


class Priority(str, Enum):
    """Priority of a task or project."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def normalize(cls, value: Any) -> Optional["Priority"]:
        """Map ``"high"``, ``"HIGH"`` or a Priority onto a Priority; else None."""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        return None


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PLANNING = "Planning"
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"


class ArchiveState(str, Enum):
    """Two-phase lifecycle of an archive record."""

    PENDING_ARCHIVE = "pending_archive"
    ARCHIVED = "archived"
    PENDING_RESTORE = "pending_restore"


def enum_values(enum_cls: Any) -> list:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
