"""Archive request/response schemas."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from productivity_archive.models.enums import ItemType, Priority

SortKey = Literal["-completed_at", "completed_at", "-title", "title"]


class ArchiveItemRequest(BaseModel):
    """Request to archive a live item."""

    item_type: str = Field(..., description="task, project, note, bookmark or snippet")
    item_id: UUID


class ArchiveFilters(BaseModel):
    """Filters accepted by archive listings."""

    item_type: Optional[ItemType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    project_id: Optional[UUID] = None
    sort: SortKey = "-completed_at"
    limit: Optional[int] = Field(default=None, ge=1, le=1000)


class ArchiveRecordResponse(BaseModel):
    """Archive record as returned to API callers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    item_type: ItemType
    original_id: UUID
    title: str
    description: str = ""
    created_at: datetime
    completed_at: datetime
    completion_time: Optional[int] = None
    priority: Optional[Priority] = None
    project_id: Optional[UUID] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias="item_metadata"
    )


class ArchiveListResponse(BaseModel):
    """Envelope for archive listings."""

    success: bool = True
    count: int
    data: List[ArchiveRecordResponse]


class RestoredItemResponse(BaseModel):
    """Summary of an item recreated from the archive."""

    success: bool = True
    item_type: ItemType
    item_id: UUID
    original_id: UUID
    reused_original_id: bool
    message: str


class ArchiveItemResponse(BaseModel):
    """Envelope returned after archiving an item."""

    success: bool = True
    data: ArchiveRecordResponse
    message: str
