"""Record described time intervals and query them by range."""

from __future__ import annotations

from .aggregate import AggregateEvent, AggregateEventBuilder
from .errors import (
    BadEvent,
    CorruptStore,
    InvalidEvent,
    InvalidInterval,
    OverlappingEvent,
    TrackerError,
    UnsupportedSchemaVersion,
)
from .models import Event, Interval
from .timeutils import FOREVER
from .tracker import Tracker, open_tracker

__all__ = [
    "AggregateEvent",
    "AggregateEventBuilder",
    "BadEvent",
    "CorruptStore",
    "Event",
    "FOREVER",
    "Interval",
    "InvalidEvent",
    "InvalidInterval",
    "OverlappingEvent",
    "Tracker",
    "TrackerError",
    "UnsupportedSchemaVersion",
    "open_tracker",
]
