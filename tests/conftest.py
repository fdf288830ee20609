"""Shared fixtures for the tracker tests."""

from __future__ import annotations

import pytest

from event_tracker.db import EventStore, open_database
from event_tracker.tracker import Tracker


@pytest.fixture
def conn():
    """An in-memory database, empty at the start of each test."""
    connection = open_database(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def store(conn):
    return EventStore(conn)


@pytest.fixture
def tracker(store):
    return Tracker(store)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "events.sqlite3"
