"""Exceptions raised by the event tracker."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker failures."""


class InvalidInterval(TrackerError, ValueError):
    """An interval was constructed with its end before its start."""


class BadEvent(TrackerError):
    """An event cannot be recorded as given.

    Raised for events without a description and for events that would overlap
    data already in the store.  Callers are expected to ask the user for a
    different range or description.
    """


class InvalidEvent(BadEvent, ValueError):
    """An event was constructed with an empty description."""


class OverlappingEvent(BadEvent):
    """An event would overlap data already in the store."""


class CorruptStore(TrackerError):
    """Persisted data violates an invariant the tracker maintains itself."""


class UnsupportedSchemaVersion(CorruptStore):
    """The database was written with a schema version we cannot handle."""

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(
            f"Database schema version {found} is not supported "
            f"(expected {expected}); upgrades are not implemented"
        )
        self.found = found
        self.expected = expected
