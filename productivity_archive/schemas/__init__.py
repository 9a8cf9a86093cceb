"""Pydantic schemas for archive records, metadata bags and metrics."""

from .archive import (
    ArchiveFilters,
    ArchiveItemRequest,
    ArchiveItemResponse,
    ArchiveListResponse,
    ArchiveRecordResponse,
    RestoredItemResponse,
)
from .metadata import (
    BookmarkMetadata,
    MetadataBag,
    NoteMetadata,
    ProjectMetadata,
    SnippetMetadata,
    TaskMetadata,
    dump_metadata,
    parse_metadata,
)
from .metrics import (
    Comparison,
    ComparisonResponse,
    MetricsDifferences,
    MetricsResponse,
    PeriodMetrics,
    ProductivityMetrics,
)

__all__ = [
    "ArchiveFilters",
    "ArchiveItemRequest",
    "ArchiveItemResponse",
    "ArchiveListResponse",
    "ArchiveRecordResponse",
    "RestoredItemResponse",
    "MetadataBag",
    "TaskMetadata",
    "ProjectMetadata",
    "NoteMetadata",
    "BookmarkMetadata",
    "SnippetMetadata",
    "dump_metadata",
    "parse_metadata",
    "Comparison",
    "ComparisonResponse",
    "MetricsResponse",
    "MetricsDifferences",
    "PeriodMetrics",
    "ProductivityMetrics",
]
