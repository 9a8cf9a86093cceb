"""Database models for live items and the archive."""

from .archive import ArchiveRecord
from .base import Base, BaseModel
from .bookmark import Bookmark
from .enums import ArchiveState, ItemType, Priority, ProjectStatus, TaskStatus
from .note import Note
from .project import Project, ProjectMember
from .snippet import Snippet
from .task import Task

__all__ = [
    "Base",
    "BaseModel",
    "ArchiveRecord",
    "ArchiveState",
    "ItemType",
    "Priority",
    "TaskStatus",
    "ProjectStatus",
    "Task",
    "Project",
    "ProjectMember",
    "Note",
    "Bookmark",
    "Snippet",
]
