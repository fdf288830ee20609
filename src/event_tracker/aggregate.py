"""Aggregation of same-description events and their ranking."""

from __future__ import annotations

import functools
from dataclasses import dataclass

from .models import Event, Interval


def _interval_key(interval: Interval) -> tuple[int, int]:
    """Sort intervals by ascending start and then by growing duration."""
    return (interval.start, interval.duration)


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class AggregateEvent:
    """All occurrences of one event within a query window.

    The durations of the occurrences are accumulated and the start of the
    latest one is kept so that ties between aggregates of equal length are won
    by the most recent activity.  Instances are only created through
    :class:`AggregateEventBuilder`.
    """

    description: str
    intervals: tuple[Interval, ...]

    @property
    def total_duration(self) -> int:
        return sum(interval.duration for interval in self.intervals)

    @property
    def latest_start(self) -> int:
        return self.intervals[-1].start

    @property
    def ranking_key(self) -> tuple[int, int]:
        return (self.total_duration, self.latest_start)

    def compare(self, other: "AggregateEvent") -> int:
        """Return -1, 0 or 1 as this aggregate ranks below, equal or above."""
        mine = self.ranking_key
        theirs = other.ranking_key
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        assert self == other, "ranking is inconsistent with equality"
        return 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AggregateEvent):
            return NotImplemented
        return self.compare(other) < 0

    def __str__(self) -> str:
        return " ".join(
            [f"{self.description}:"] + [str(interval) for interval in self.intervals]
        )


class AggregateEventBuilder:
    """Collects occurrences of one event and produces an AggregateEvent."""

    def __init__(self, first: Event) -> None:
        self._events: list[Event] = [first]

    @property
    def description(self) -> str:
        return self._events[0].description

    def accumulate(self, other: Event) -> "AggregateEventBuilder":
        assert other.description == self.description, (
            f"cannot aggregate {other.description!r} into {self.description!r}"
        )
        self._events.append(other)
        return self

    def build(self) -> AggregateEvent:
        intervals: dict[tuple[int, int], Interval] = {}
        for event in self._events:
            key = _interval_key(event.interval)
            assert key not in intervals, f"duplicate interval {event.interval}"
            intervals[key] = event.interval
        ordered = tuple(intervals[key] for key in sorted(intervals))
        return AggregateEvent(description=self.description, intervals=ordered)
