"""Date helpers for archive timestamps and reporting windows.

All timestamps are stored as naive UTC datetimes; the calendar components of
those values (date, hour, weekday) are what the metrics bucket on.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

DateRange = Tuple[datetime, datetime]


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def milliseconds_between(start: datetime, end: datetime) -> int:
    """Whole milliseconds from ``start`` to ``end``, never negative."""
    delta = to_naive_utc(end) - to_naive_utc(start)
    return max(0, int(delta.total_seconds() * 1000))


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping to the end of shorter months."""
    return value + relativedelta(months=months)


def period_window(period: str, now: datetime) -> Optional[DateRange]:
    """Return the inclusive calendar window containing ``now`` for a period.

    Weeks start on Sunday. Unknown periods return ``None`` (all time).
    """
    day_start = datetime.combine(now.date(), time.min)
    if period == "day":
        start = day_start
        end = start + timedelta(days=1)
    elif period == "week":
        # Python weekday(): Monday == 0, so Sunday is 6
        start = day_start - timedelta(days=(now.weekday() + 1) % 7)
        end = start + timedelta(days=7)
    elif period == "month":
        start = day_start.replace(day=1)
        end = start + relativedelta(months=1)
    elif period == "year":
        start = day_start.replace(month=1, day=1)
        end = start + relativedelta(years=1)
    else:
        return None
    return start, end - timedelta(microseconds=1)
