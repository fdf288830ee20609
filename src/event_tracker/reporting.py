"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from .aggregate import AggregateEvent
from .models import Event
from .timeutils import FOREVER, format_duration, from_millis, interval_for_day
from .tracker import Tracker


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, tracker: Tracker) -> None:
        self.tracker = tracker

    def print_summary(self, now: datetime) -> None:
        today = interval_for_day(now)
        print(f"Last activity:          {describe(self.tracker.most_recent_event())}")
        print(
            "Top activity today:     "
            f"{describe(self.tracker.top_event_in_interval(today))}"
        )
        print(
            "Top activity all time:  "
            f"{describe(self.tracker.top_event_in_interval(FOREVER))}"
        )

    def print_history(self, day: datetime) -> None:
        aggregates = self.tracker.aggregate_events_in_interval(interval_for_day(day))
        if not aggregates:
            print("No activity recorded for the selected day.")
            return

        print(f"History for {day.strftime('%Y-%m-%d')}")
        print("-" * 40)
        for aggregate in reversed(aggregates):
            print(
                f"  {aggregate.description[:30]:<30} "
                f"{format_duration(aggregate.total_duration)}"
            )

    def print_events(self, day: datetime) -> None:
        events = sorted(
            self.tracker.events_in_interval(interval_for_day(day)),
            key=lambda event: event.start,
        )
        if not events:
            print("No activity recorded for the selected day.")
            return

        print(f"Events for {day.strftime('%Y-%m-%d')}")
        print("-" * 40)
        for event in events:
            start = from_millis(event.start).strftime("%H:%M:%S")
            end = from_millis(event.end).strftime("%H:%M:%S")
            print(f"  {start}-{end}  {event.description}")


def describe(event: Optional[Union[Event, AggregateEvent]]) -> str:
    if event is None:
        return "n/a"
    if isinstance(event, AggregateEvent):
        duration = event.total_duration
    else:
        duration = event.duration
    return f"{event.description} ({format_duration(duration)})"
