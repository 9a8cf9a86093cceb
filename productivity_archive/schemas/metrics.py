"""Productivity metrics and period comparison schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ProductivityMetrics(BaseModel):
    """Aggregate view over a set of archive records."""

    total_items: int = 0
    items_by_type: Dict[str, int] = Field(default_factory=dict)
    items_by_day: Dict[str, int] = Field(default_factory=dict)
    average_completion_time: float = 0
    most_productive_day: Optional[str] = None
    most_productive_hour: Optional[int] = None
    priority_distribution: Dict[str, int] = Field(
        default_factory=lambda: {"High": 0, "Medium": 0, "Low": 0, "None": 0}
    )

    # Only the breakdown matching the requested period is populated
    hourly_breakdown: Optional[List[int]] = None
    day_of_week_breakdown: Optional[Dict[str, int]] = None
    day_of_month_breakdown: Optional[Dict[int, int]] = None
    monthly_breakdown: Optional[Dict[str, int]] = None


class PeriodMetrics(BaseModel):
    """Metrics for one side of a comparison."""

    start: datetime
    end: datetime
    metrics: ProductivityMetrics


class MetricsDifferences(BaseModel):
    """Second period minus first period."""

    total_items: int
    percentage_change: Optional[float] = None
    items_by_type: Dict[str, int] = Field(default_factory=dict)


class Comparison(BaseModel):
    """Side-by-side metrics for two date ranges."""

    period1: PeriodMetrics
    period2: PeriodMetrics
    differences: MetricsDifferences


class MetricsResponse(BaseModel):
    """Envelope for the metrics endpoint."""

    success: bool = True
    data: ProductivityMetrics


class ComparisonResponse(BaseModel):
    """Envelope for the compare endpoint."""

    success: bool = True
    data: Comparison
