"""Helpers to convert, bound and format points in time."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from .models import INT64_MAX, INT64_MIN, Interval

# Queries treat the upper bound as exclusive, so the maximum value itself is
# left out to keep the interval usable at every call site.
FOREVER = Interval(INT64_MIN, INT64_MAX - 1)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MILLI = timedelta(milliseconds=1)

Timestamp = Union[int, datetime]


def to_millis(value: Timestamp) -> int:
    """Convert a datetime (naive values are local time) to epoch milliseconds."""
    if isinstance(value, int):
        return value
    if value.tzinfo is None:
        value = value.astimezone()
    return (value - _EPOCH) // _ONE_MILLI


def from_millis(millis: int, tz: Optional[timezone] = None) -> datetime:
    """Convert epoch milliseconds to a datetime in ``tz`` (local if omitted)."""
    return (_EPOCH + timedelta(milliseconds=millis)).astimezone(tz)


def interval_for_day(day: Union[date, datetime]) -> Interval:
    """Return the local-time interval covering the whole day containing ``day``."""
    if isinstance(day, datetime):
        day = day.date()
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1) - _ONE_MILLI
    return Interval(to_millis(start), to_millis(end))


def format_duration(millis: int) -> str:
    total_seconds = int(round(millis / 1000))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
