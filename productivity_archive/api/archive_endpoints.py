"""Archive REST API endpoints.

This module exposes archiving, archive listings, productivity metrics,
period comparison and restore over HTTP. Failures surface as ArchiveError
and are rendered by the handler in ``productivity_archive.api.errors``.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from productivity_archive.api.dependencies import (
    get_archive_service,
    get_current_user_id,
    get_restore_service,
)
from productivity_archive.core.exceptions import ForbiddenError, NotFoundError
from productivity_archive.repositories.item_store import resolve_item_type
from productivity_archive.schemas.archive import (
    ArchiveFilters,
    ArchiveItemRequest,
    ArchiveItemResponse,
    ArchiveListResponse,
    ArchiveRecordResponse,
    RestoredItemResponse,
    SortKey,
)
from productivity_archive.schemas.metrics import ComparisonResponse, MetricsResponse
from productivity_archive.services.archive_service import ArchiveService
from productivity_archive.services.restore_service import RestoreService
from productivity_archive.utils.logging import get_logger

router = APIRouter(prefix="/archive", tags=["archive"])
logger = get_logger(__name__)

# Module-level dependency variables to avoid B008 errors
current_user_dependency = Depends(get_current_user_id)
archive_service_dependency = Depends(get_archive_service)
restore_service_dependency = Depends(get_restore_service)


@router.post(
    "/", response_model=ArchiveItemResponse, status_code=status.HTTP_201_CREATED
)
async def archive_item(
    request: ArchiveItemRequest,
    user_id: uuid.UUID = current_user_dependency,
    service: ArchiveService = archive_service_dependency,
) -> ArchiveItemResponse:
    """Move a completed item into the archive."""
    record = service.archive_item(user_id, request.item_type, request.item_id)
    return ArchiveItemResponse(
        data=ArchiveRecordResponse.model_validate(record),
        message=f"{record.item_type.value} archived successfully",
    )


@router.get("/", response_model=ArchiveListResponse)
async def list_archive(
    item_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    project_id: Optional[uuid.UUID] = None,
    sort: SortKey = "-completed_at",
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user_id: uuid.UUID = current_user_dependency,
    service: ArchiveService = archive_service_dependency,
) -> ArchiveListResponse:
    """List the caller's archived items."""
    filters = ArchiveFilters(
        item_type=resolve_item_type(item_type) if item_type else None,
        start_date=start_date,
        end_date=end_date,
        project_id=project_id,
        sort=sort,
        limit=limit,
    )
    records = service.list_archive(user_id, filters)
    return ArchiveListResponse(
        count=len(records),
        data=[ArchiveRecordResponse.model_validate(r) for r in records],
    )


@router.get("/metrics", response_model=MetricsResponse)
async def get_productivity_metrics(
    period: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    project_id: Optional[uuid.UUID] = None,
    user_id: uuid.UUID = current_user_dependency,
    service: ArchiveService = archive_service_dependency,
) -> MetricsResponse:
    """Productivity metrics for a period or date range."""
    metrics = service.get_metrics(
        user_id,
        period=period,
        start_date=start_date,
        end_date=end_date,
        project_id=project_id,
    )
    return MetricsResponse(data=metrics)


@router.get("/compare", response_model=ComparisonResponse)
async def compare_productivity(
    period1_start: Optional[datetime] = None,
    period1_end: Optional[datetime] = None,
    period2_start: Optional[datetime] = None,
    period2_end: Optional[datetime] = None,
    user_id: uuid.UUID = current_user_dependency,
    service: ArchiveService = archive_service_dependency,
) -> ComparisonResponse:
    """Compare productivity between two date ranges."""
    comparison = service.compare_metrics(
        user_id, period1_start, period1_end, period2_start, period2_end
    )
    return ComparisonResponse(data=comparison)


@router.get("/{record_id}", response_model=ArchiveRecordResponse)
async def get_archive_record(
    record_id: uuid.UUID,
    user_id: uuid.UUID = current_user_dependency,
    service: ArchiveService = archive_service_dependency,
) -> ArchiveRecordResponse:
    """Fetch one of the caller's archived items."""
    record = service.get_record(record_id)
    if record is None:
        raise NotFoundError(f"Archived item not found with id {record_id}")
    if record.user_id != user_id:
        raise ForbiddenError("Not authorized to view this item")
    return ArchiveRecordResponse.model_validate(record)


@router.post("/restore/{record_id}", response_model=RestoredItemResponse)
async def restore_archived_item(
    record_id: uuid.UUID,
    user_id: uuid.UUID = current_user_dependency,
    service: RestoreService = restore_service_dependency,
) -> RestoredItemResponse:
    """Recreate an archived item in its live collection."""
    result = service.restore_item(user_id, record_id)
    return RestoredItemResponse(
        item_type=result.item_type,
        item_id=result.item.id,
        original_id=result.original_id,
        reused_original_id=result.reused_original_id,
        message=f"{result.item_type.value.capitalize()} restored successfully",
    )
