"""Default location of the events database."""

from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_path


def get_db_path() -> Path:
    """Return the events database path in the per-user data directory.

    The directory is created if it does not exist yet.
    """
    directory = user_data_path("EventTracker", "EventTracker", roaming=True, ensure_exists=True)
    return directory / "events.sqlite3"
