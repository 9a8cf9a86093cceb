"""Productivity metrics over archive records.

Everything here is a pure function of the records handed in; callers select
the record set (date range, type, project) before calling. Nothing is cached
between calls.
"""

import calendar
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from productivity_archive.core.exceptions import InvalidRangeError
from productivity_archive.models.enums import Priority
from productivity_archive.schemas.metrics import (
    Comparison,
    MetricsDifferences,
    PeriodMetrics,
    ProductivityMetrics,
)
from productivity_archive.utils.dates import DateRange

PRIORITY_BUCKETS = ("High", "Medium", "Low", "None")

# Sunday first
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
MONTH_NAMES = tuple(calendar.month_name[1:])


def _value(field: Any) -> Any:
    return getattr(field, "value", field)


def _weekday_index(moment: datetime) -> int:
    # datetime.weekday() is Monday == 0
    return (moment.weekday() + 1) % 7


def _first_max(counts: Dict[str, int]) -> Optional[str]:
    best_key = None
    best = 0
    for key, count in counts.items():
        if count > best:
            best_key, best = key, count
    return best_key


def hourly_activity(records: Iterable[Any]) -> List[int]:
    """Completions per hour of day (0-23)."""
    hours = [0] * 24
    for record in records:
        hours[record.completed_at.hour] += 1
    return hours


def compute_metrics(
    records: Sequence[Any], period: Optional[str] = None
) -> ProductivityMetrics:
    """Aggregate archive records into productivity metrics.

    Args:
        records: archive records (anything with ``item_type``, ``completed_at``,
            ``priority`` and ``completion_time`` attributes)
        period: ``day``, ``week``, ``month`` or ``year`` selects the matching
            breakdown; anything else adds none

    Returns:
        ProductivityMetrics for the record set
    """
    metrics = ProductivityMetrics(total_items=len(records))
    priorities = {bucket: 0 for bucket in PRIORITY_BUCKETS}

    for record in records:
        item_type = _value(record.item_type)
        metrics.items_by_type[item_type] = metrics.items_by_type.get(item_type, 0) + 1

        day_key = record.completed_at.date().isoformat()
        metrics.items_by_day[day_key] = metrics.items_by_day.get(day_key, 0) + 1

        priority = Priority.normalize(record.priority)
        bucket = priority.value if priority else "None"
        priorities[bucket] += 1

    metrics.priority_distribution = priorities
    metrics.most_productive_day = _first_max(metrics.items_by_day)

    timed = [r.completion_time for r in records if r.completion_time is not None]
    if timed:
        metrics.average_completion_time = sum(timed) / len(timed)

    hours = hourly_activity(records)
    peak = max(hours)
    if peak > 0:
        metrics.most_productive_hour = hours.index(peak)

    if period == "day":
        metrics.hourly_breakdown = hours
    elif period == "week":
        weekdays = [0] * 7
        for record in records:
            weekdays[_weekday_index(record.completed_at)] += 1
        metrics.day_of_week_breakdown = dict(zip(WEEKDAY_NAMES, weekdays))
    elif period == "month":
        days: Dict[int, int] = {}
        for record in records:
            day = record.completed_at.day
            days[day] = days.get(day, 0) + 1
        metrics.day_of_month_breakdown = days
    elif period == "year":
        months = [0] * 12
        for record in records:
            months[record.completed_at.month - 1] += 1
        metrics.monthly_breakdown = dict(zip(MONTH_NAMES, months))

    return metrics


def validate_range(date_range: DateRange, label: str = "range") -> None:
    """Reject ranges whose end precedes their start."""
    start, end = date_range
    if end < start:
        raise InvalidRangeError(
            f"Invalid {label}: end {end.isoformat()} precedes start {start.isoformat()}"
        )


def compare_periods(
    records_a: Sequence[Any],
    records_b: Sequence[Any],
    range_a: DateRange,
    range_b: DateRange,
) -> Comparison:
    """Compare metrics of two periods; differences are B minus A."""
    validate_range(range_a, "period 1")
    validate_range(range_b, "period 2")

    metrics_a = compute_metrics(records_a)
    metrics_b = compute_metrics(records_b)

    total_diff = metrics_b.total_items - metrics_a.total_items
    percentage = None
    if metrics_a.total_items > 0:
        percentage = total_diff / metrics_a.total_items * 100

    by_type: Dict[str, int] = {}
    for item_type in list(metrics_a.items_by_type) + list(metrics_b.items_by_type):
        if item_type not in by_type:
            by_type[item_type] = metrics_b.items_by_type.get(
                item_type, 0
            ) - metrics_a.items_by_type.get(item_type, 0)

    return Comparison(
        period1=PeriodMetrics(start=range_a[0], end=range_a[1], metrics=metrics_a),
        period2=PeriodMetrics(start=range_b[0], end=range_b[1], metrics=metrics_b),
        differences=MetricsDifferences(
            total_items=total_diff,
            percentage_change=percentage,
            items_by_type=by_type,
        ),
    )
