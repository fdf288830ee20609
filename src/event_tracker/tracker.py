"""Query and command facade over the event store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .aggregate import AggregateEvent, AggregateEventBuilder
from .db import DatabasePath, EventStore, database_connection
from .errors import BadEvent, InvalidInterval
from .models import Event, Interval
from .timeutils import FOREVER, Timestamp, to_millis

logger = logging.getLogger(__name__)


class Tracker:
    """Records events and answers range queries over them.

    The tracker owns no connection of its own: callers construct the
    :class:`EventStore` and keep it alive for as long as the tracker is used.
    All operations are synchronous and may hit the disk.
    """

    def __init__(self, store: EventStore) -> None:
        self._store = store

    @property
    def store(self) -> EventStore:
        return self._store

    def add_event(self, start: Timestamp, end: Timestamp, description: str) -> None:
        """Record a new event.

        Raises BadEvent if the details do not form a valid event or if the
        event would overlap an existing one.
        """
        try:
            interval = Interval(to_millis(start), to_millis(end))
        except InvalidInterval as exc:
            raise BadEvent(str(exc)) from exc
        self._store.put(Event(interval, description))

    def events_in_interval(self, interval: Interval) -> set[Event]:
        """Return the events within ``interval``, cut to fit inside it."""
        return self._store.query(interval)

    def aggregate_events_in_interval(self, interval: Interval) -> list[AggregateEvent]:
        """Aggregate the events within ``interval`` by description.

        The result is sorted in ascending rank: shortest total duration first,
        with ties ordered by latest start.
        """
        # Events cut by the interval boundaries are what make a plain SQL
        # GROUP BY unsuitable here.
        builders: dict[str, AggregateEventBuilder] = {}
        for event in self.events_in_interval(interval):
            builder = builders.get(event.description)
            if builder is None:
                builders[event.description] = AggregateEventBuilder(event)
            else:
                builder.accumulate(event)
        return sorted(builder.build() for builder in builders.values())

    def top_event_in_interval(self, interval: Interval) -> Optional[AggregateEvent]:
        """Return the longest activity within ``interval``, or None."""
        aggregates = self.aggregate_events_in_interval(interval)
        if not aggregates:
            return None
        return aggregates[-1]

    def most_recent_event(self) -> Optional[Event]:
        """Return the event with the latest start time, or None."""
        events = self._store.query(FOREVER, limit=1)
        if not events:
            return None
        (event,) = events
        return event


@contextmanager
def open_tracker(path: DatabasePath) -> Iterator[Tracker]:
    """Open the database at ``path`` and yield a tracker backed by it."""
    with database_connection(path) as conn:
        logger.debug("Opened tracker database at %s", path)
        yield Tracker(EventStore(conn))
