"""Type-specific metadata bags stored on archive records.

Each archivable item type owns one model; the archive record's ``item_type``
decides which model its ``metadata`` column must validate against.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Type, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from productivity_archive.models.enums import ItemType


class MetadataBag(BaseModel):
    """Fields common to every metadata bag."""

    model_config = ConfigDict(extra="forbid")

    original_collection: str


class TaskMetadata(MetadataBag):
    """Task fields that do not fit the flattened archive shape."""

    item_type: Literal["task"] = "task"
    assignee: Optional[UUID] = None
    due_date: Optional[datetime] = None
    estimated_time: Optional[float] = None


class ProjectMetadata(MetadataBag):
    """Project fields that do not fit the flattened archive shape."""

    item_type: Literal["project"] = "project"
    owner: Optional[UUID] = None
    members: List[UUID] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    progress: Optional[int] = None


class NoteMetadata(MetadataBag):
    """Note fields that do not fit the flattened archive shape."""

    item_type: Literal["note"] = "note"
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None


class BookmarkMetadata(MetadataBag):
    """Bookmark fields that do not fit the flattened archive shape."""

    item_type: Literal["bookmark"] = "bookmark"
    url: Optional[str] = None
    folder: Optional[str] = None


class SnippetMetadata(MetadataBag):
    """Snippet fields that do not fit the flattened archive shape."""

    item_type: Literal["snippet"] = "snippet"
    language: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: Optional[str] = None


AnyMetadata = Union[
    TaskMetadata, ProjectMetadata, NoteMetadata, BookmarkMetadata, SnippetMetadata
]

METADATA_MODELS: Dict[ItemType, Type[MetadataBag]] = {
    ItemType.TASK: TaskMetadata,
    ItemType.PROJECT: ProjectMetadata,
    ItemType.NOTE: NoteMetadata,
    ItemType.BOOKMARK: BookmarkMetadata,
    ItemType.SNIPPET: SnippetMetadata,
}

def parse_metadata(item_type: ItemType, raw: Optional[Dict[str, Any]]) -> AnyMetadata:
    """Validate a stored metadata bag against the model for ``item_type``."""
    data = dict(raw or {})
    data.setdefault("item_type", item_type.value)
    data.setdefault("original_collection", item_type.collection)
    model = METADATA_MODELS[item_type]
    return model.model_validate(data)  # type: ignore[return-value]


def dump_metadata(bag: MetadataBag) -> Dict[str, Any]:
    """Serialize a metadata bag to plain JSON types for storage."""
    return bag.model_dump(mode="json")
