"""Tests for the SQLite event store."""

import sqlite3

import pytest

from event_tracker import (
    FOREVER,
    BadEvent,
    CorruptStore,
    Event,
    Interval,
    OverlappingEvent,
    UnsupportedSchemaVersion,
)
from event_tracker.db import (
    SCHEMA_VERSION,
    EventStore,
    database_connection,
    open_database,
    schema_version,
    transaction,
)


def put(store, start, end, description):
    store.put(Event(Interval(start, end), description))


def insert_raw(conn, start, end, description):
    conn.execute(
        "INSERT INTO events (start_millis, end_millis, description) VALUES (?, ?, ?)",
        (start, end, description),
    )


@pytest.fixture
def striped_store(store):
    """Store holding [0,9], [10,19], [20,29], [30,39] and [40,49]."""
    put(store, 0, 9, "Outside")
    put(store, 10, 19, "Partially inside")
    put(store, 20, 29, "Inside")
    put(store, 30, 39, "Partially inside")
    put(store, 40, 49, "Outside")
    return store


def test_new_database_is_stamped_with_schema_version(conn):
    assert schema_version(conn) == SCHEMA_VERSION


def test_put_then_query_returns_event(store):
    put(store, 1, 2, "One element")
    assert store.query(FOREVER) == {Event(Interval(1, 2), "One element")}
    assert store.count() == 1


def test_put_several(store):
    put(store, 10, 15, "Element")
    put(store, 20, 25, "Element")
    put(store, 30, 35, "Element")
    assert store.count() == 3
    assert len(store.query(FOREVER)) == 3


@pytest.mark.parametrize(
    "start,end",
    [
        (20, 25),  # identical
        (23, 28),  # crosses the end
        (18, 21),  # crosses the start
        (21, 24),  # contained
        (16, 29),  # contains
        (25, 27),  # touches the end
        (17, 20),  # touches the start
    ],
)
def test_put_rejects_overlap_and_leaves_store_unchanged(store, start, end):
    put(store, 10, 15, "First")
    put(store, 20, 25, "Second")
    put(store, 30, 35, "Second")
    before = store.query(FOREVER)

    with pytest.raises(BadEvent, match="would overlap"):
        put(store, start, end, "Second bis")

    assert store.count() == 3
    assert store.query(FOREVER) == before


def test_overlap_error_names_the_conflicting_event(store):
    put(store, 20, 25, "Second")
    with pytest.raises(OverlappingEvent, match=r"one of them is: \[20, 25\]: Second"):
        put(store, 23, 28, "Other")


def test_put_allows_gaps_of_one_millisecond(store):
    put(store, 0, 9, "A")
    put(store, 10, 19, "B")
    assert store.count() == 2


def test_query_empty_store(store):
    assert store.query(FOREVER) == set()


def test_query_clips_events_at_the_boundaries(striped_store):
    assert striped_store.query(Interval(17, 36)) == {
        Event(Interval(17, 19), "Partially inside"),
        Event(Interval(20, 29), "Inside"),
        Event(Interval(30, 36), "Partially inside"),
    }


def test_query_upper_bound_is_exclusive(striped_store):
    # [40,49] starts exactly at the end of the query interval.
    assert striped_store.query(Interval(35, 40)) == {
        Event(Interval(35, 39), "Partially inside"),
    }


def test_query_no_events_in_interval(store):
    put(store, 10, 20, "Outside")
    put(store, 30, 40, "Outside")
    put(store, 80, 90, "Outside")
    assert store.query(Interval(41, 79)) == set()


def test_query_limit_keeps_most_recent_starts(striped_store):
    assert striped_store.query(FOREVER, limit=2) == {
        Event(Interval(30, 39), "Partially inside"),
        Event(Interval(40, 49), "Outside"),
    }
    assert striped_store.query(FOREVER, limit=1) == {
        Event(Interval(40, 49), "Outside"),
    }


def test_query_returns_independent_copies(striped_store):
    events = striped_store.query(FOREVER)
    events.clear()
    assert len(striped_store.query(FOREVER)) == 5


def test_query_reports_malformed_interval(conn, store):
    insert_raw(conn, 50, 40, "Backwards")
    with pytest.raises(CorruptStore, match="Bad event"):
        store.query(FOREVER)


def test_query_reports_empty_description(conn, store):
    insert_raw(conn, 10, 20, "")
    with pytest.raises(CorruptStore, match="Bogus event"):
        store.query(FOREVER)


def test_put_reports_malformed_conflicting_row(conn, store):
    insert_raw(conn, 50, 40, "Backwards")
    with pytest.raises(CorruptStore):
        put(store, 40, 55, "New")


def test_put_reports_insert_that_writes_nothing(conn, store):
    put(store, 0, 9, "Kept")
    conn.execute(
        "CREATE TRIGGER swallow BEFORE INSERT ON events "
        "BEGIN SELECT RAISE(IGNORE); END"
    )

    with pytest.raises(CorruptStore, match="Failed to put event"):
        put(store, 20, 29, "Lost")

    assert store.count() == 1
    assert store.query(FOREVER) == {Event(Interval(0, 9), "Kept")}


def test_transaction_rolls_back_on_error(conn):
    with pytest.raises(RuntimeError):
        with transaction(conn):
            insert_raw(conn, 1, 2, "Doomed")
            raise RuntimeError("boom")
    assert EventStore(conn).count() == 0


def test_events_survive_reopening(db_path):
    with database_connection(db_path) as conn:
        put(EventStore(conn), 100, 200, "Persisted")
    with database_connection(db_path) as conn:
        assert EventStore(conn).query(FOREVER) == {
            Event(Interval(100, 200), "Persisted")
        }


def test_unsupported_schema_version_fails_loudly(db_path):
    with database_connection(db_path) as conn:
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION + 1}")

    with pytest.raises(UnsupportedSchemaVersion) as excinfo:
        open_database(db_path)
    assert excinfo.value.found == SCHEMA_VERSION + 1
    assert excinfo.value.expected == SCHEMA_VERSION


def test_schema_enforces_unique_bounds(conn):
    insert_raw(conn, 0, 10, "A")
    with pytest.raises(sqlite3.IntegrityError):
        insert_raw(conn, 0, 20, "B")
    with pytest.raises(sqlite3.IntegrityError):
        insert_raw(conn, 5, 10, "C")
