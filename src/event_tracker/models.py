"""Domain models for recorded events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .errors import InvalidEvent, InvalidInterval

# Timestamps are stored in SQLite integer columns.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True, slots=True)
class Interval:
    """A range of time expressed as epoch milliseconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        for bound in (self.start, self.end):
            if not INT64_MIN <= bound <= INT64_MAX:
                raise InvalidInterval(
                    f"Interval bound {bound} is outside of the storable range"
                )
        if self.start > self.end:
            raise InvalidInterval(
                f"Interval start ({self.start}) must be <= end ({self.end})"
            )

    @classmethod
    def from_datetimes(cls, start: datetime, end: datetime) -> "Interval":
        from .timeutils import to_millis

        return cls(to_millis(start), to_millis(end))

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlap(self, other: "Interval") -> Optional["Interval"]:
        """Return the portion of this interval that also lies in ``other``.

        Bounds are inclusive, so two intervals sharing a single endpoint
        overlap in a zero-length interval.  Returns None when the intervals
        are disjoint.
        """
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start > end:
            return None
        return Interval(start, end)

    def __str__(self) -> str:
        return f"[{self.start}, {self.end}]"


@dataclass(frozen=True, slots=True)
class Event:
    """A time interval with a free-form description.

    Two events with the same description are still distinct records when their
    intervals differ.
    """

    interval: Interval
    description: str

    def __post_init__(self) -> None:
        if not self.description:
            raise InvalidEvent("Cannot create event without a description")

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    @property
    def duration(self) -> int:
        return self.interval.duration

    def __str__(self) -> str:
        return f"{self.interval}: {self.description}"
