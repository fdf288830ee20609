"""FastAPI application that exposes the tracker over a local JSON API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from .aggregate import AggregateEvent
from .db import SCHEMA_VERSION
from .errors import BadEvent, CorruptStore, InvalidInterval, OverlappingEvent
from .models import Event, Interval
from .paths import get_db_path
from .timeutils import FOREVER
from .tracker import open_tracker

logger = logging.getLogger(__name__)


class EventCreate(BaseModel):
    start: int
    end: int
    description: str

    model_config = ConfigDict(extra="forbid")


def create_app(*, db_path: Optional[Path] = None) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())

    app = FastAPI(title="Event Tracker", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path

    @app.exception_handler(CorruptStore)
    async def _corrupt_store(request: Request, exc: CorruptStore) -> JSONResponse:
        logger.error("Corrupt store at %s: %s", request.app.state.db_path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        with open_tracker(request.app.state.db_path) as tracker:
            count = tracker.store.count()
        return {
            "database_path": str(request.app.state.db_path),
            "schema_version": SCHEMA_VERSION,
            "event_count": count,
        }

    @app.get("/api/events")
    def events(
        request: Request,
        start: Optional[int] = Query(
            default=None, description="Start of the interval in epoch milliseconds."
        ),
        end: Optional[int] = Query(
            default=None, description="End of the interval in epoch milliseconds."
        ),
    ) -> Dict[str, Any]:
        interval = _parse_interval(start, end)
        with open_tracker(request.app.state.db_path) as tracker:
            found = tracker.events_in_interval(interval)
        return {
            "interval": _interval_payload(interval),
            "events": [
                _event_payload(event)
                for event in sorted(found, key=lambda event: event.start)
            ],
        }

    @app.post("/api/events", status_code=201)
    def create_event(payload: EventCreate, request: Request) -> Dict[str, Any]:
        with open_tracker(request.app.state.db_path) as tracker:
            try:
                tracker.add_event(payload.start, payload.end, payload.description)
            except OverlappingEvent as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            except BadEvent as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _event_payload(
            Event(Interval(payload.start, payload.end), payload.description)
        )

    @app.get("/api/aggregates")
    def aggregates(
        request: Request,
        start: Optional[int] = Query(default=None),
        end: Optional[int] = Query(default=None),
    ) -> Dict[str, Any]:
        interval = _parse_interval(start, end)
        with open_tracker(request.app.state.db_path) as tracker:
            found = tracker.aggregate_events_in_interval(interval)
        return {
            "interval": _interval_payload(interval),
            "aggregates": [_aggregate_payload(item) for item in reversed(found)],
        }

    @app.get("/api/top")
    def top(
        request: Request,
        start: Optional[int] = Query(default=None),
        end: Optional[int] = Query(default=None),
    ) -> Dict[str, Any]:
        interval = _parse_interval(start, end)
        with open_tracker(request.app.state.db_path) as tracker:
            aggregate = tracker.top_event_in_interval(interval)
        return {
            "interval": _interval_payload(interval),
            "top": _aggregate_payload(aggregate) if aggregate else None,
        }

    @app.get("/api/latest")
    def latest(request: Request) -> Dict[str, Any]:
        with open_tracker(request.app.state.db_path) as tracker:
            event = tracker.most_recent_event()
        return {"event": _event_payload(event) if event else None}

    return app


def _parse_interval(start: Optional[int], end: Optional[int]) -> Interval:
    try:
        return Interval(
            FOREVER.start if start is None else start,
            FOREVER.end if end is None else end,
        )
    except InvalidInterval as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _interval_payload(interval: Interval) -> Dict[str, int]:
    return {"start": interval.start, "end": interval.end}


def _event_payload(event: Event) -> Dict[str, Any]:
    return {
        "start": event.start,
        "end": event.end,
        "description": event.description,
        "duration": event.duration,
    }


def _aggregate_payload(aggregate: AggregateEvent) -> Dict[str, Any]:
    return {
        "description": aggregate.description,
        "total_duration": aggregate.total_duration,
        "latest_start": aggregate.latest_start,
        "intervals": [_interval_payload(item) for item in aggregate.intervals],
    }
