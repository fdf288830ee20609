"""SQLite persistence layer for recorded events."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import (
    CorruptStore,
    InvalidEvent,
    InvalidInterval,
    OverlappingEvent,
    UnsupportedSchemaVersion,
)
from .models import Event, Interval

logger = logging.getLogger(__name__)

# Any change to the schema below requires bumping this by one.
SCHEMA_VERSION = 1

DatabasePath = Union[Path, str]


def open_database(
    path: DatabasePath, *, check_same_thread: bool = True
) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database.

    Pass ``":memory:"`` to get a private, in-memory database.
    """
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    try:
        initialize_schema(conn)
    except Exception:
        conn.close()
        raise
    return conn


@contextmanager
def database_connection(
    path: DatabasePath, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run a block inside a write transaction, rolling back on any error."""
    conn.execute("BEGIN IMMEDIATE")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    else:
        conn.execute("COMMIT")


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create the schema of a new database or validate an existing one.

    Upgrades and downgrades are not implemented: opening a database stamped
    with any other version fails.
    """
    version = schema_version(conn)
    if version == SCHEMA_VERSION:
        return
    if version != 0:
        raise UnsupportedSchemaVersion(version, SCHEMA_VERSION)

    with transaction(conn):
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS events (
                id INTEGER PRIMARY KEY,
                start_millis INTEGER NOT NULL UNIQUE,
                end_millis INTEGER NOT NULL UNIQUE,
                description TEXT NOT NULL
            )
            """
        )
        conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    logger.debug("Initialized schema version %d", SCHEMA_VERSION)


class EventStore:
    """Durable table of non-overlapping events."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def put(self, event: Event) -> None:
        """Store a new event.

        Raises OverlappingEvent if the event would overlap (or merely touch) any event
        already in the store.  The check and the insert run in a single
        transaction, so a failed call leaves the store untouched.
        """
        with transaction(self._conn):
            row = self._conn.execute(
                """
                SELECT start_millis, end_millis, description
                FROM events
                WHERE start_millis <= ? AND end_millis >= ?
                LIMIT 1
                """,
                (event.end, event.start),
            ).fetchone()
            if row is not None:
                existing = Event(_row_interval(row), row["description"])
                raise OverlappingEvent(
                    f"Cannot put new event {event} because it would overlap "
                    f"other events in the database; one of them is: {existing}"
                )

            try:
                cur = self._conn.execute(
                    """
                    INSERT INTO events (start_millis, end_millis, description)
                    VALUES (?, ?, ?)
                    """,
                    (event.start, event.end, event.description),
                )
            except sqlite3.IntegrityError as exc:
                raise OverlappingEvent(
                    f"Cannot put new event {event}: {exc}"
                ) from exc
            if cur.rowcount != 1:
                logger.warning("Failed to put event %s", event)
                raise CorruptStore(f"Failed to put event {event}")
        logger.info("Put new event %s with row ID %d", event, cur.lastrowid)

    def query(self, interval: Interval, limit: Optional[int] = None) -> set[Event]:
        """Return the events that intersect ``interval``.

        An event matches when its start or its end falls within
        ``[interval.start, interval.end)``.  Matched events are cut down to the
        part inside ``interval``.  With a ``limit`` only the events with the
        most recent start times are returned.
        """
        sql = """
            SELECT start_millis, end_millis, description
            FROM events
            WHERE (start_millis >= ? AND start_millis < ?)
               OR (end_millis >= ? AND end_millis < ?)
            ORDER BY start_millis DESC
        """
        params: list[int] = [interval.start, interval.end] * 2
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        events: set[Event] = set()
        for row in self._conn.execute(sql, params):
            event = _parse_event(row, interval)
            assert event not in events, f"duplicate event {event} in store"
            events.add(event)
        return events

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(id) FROM events").fetchone()[0]


def _row_interval(row: sqlite3.Row) -> Interval:
    try:
        return Interval(row["start_millis"], row["end_millis"])
    except InvalidInterval as exc:
        raise CorruptStore(f"Bad event in database: {exc}") from exc


def _parse_event(row: sqlite3.Row, query_interval: Interval) -> Event:
    """Build an event from a row, clipped to the interval used to fetch it."""
    effective = _row_interval(row).overlap(query_interval)
    if effective is None:
        raise CorruptStore(
            f"Fetched event [{row['start_millis']}, {row['end_millis']}] is "
            f"outside of the query interval {query_interval}"
        )
    try:
        return Event(effective, row["description"])
    except InvalidEvent as exc:
        raise CorruptStore(f"Bogus event in database: {exc}") from exc
