"""Command-line interface for the event tracker."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import LOG_FORMAT, TrackerSettings
from .errors import TrackerError

app = typer.Typer(help="Record what you spend your time on and review it.")

_DB_HELP = "Location of the events SQLite database."


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


@app.command()
def record(
    start: str = typer.Option(..., "--start", help="Start time in ISO 8601 format."),
    end: Optional[str] = typer.Option(
        None, "--end", help="End time in ISO 8601 format. Defaults to now."
    ),
    description: Optional[str] = typer.Option(
        None,
        "--description",
        "-d",
        help="What you were doing. Defaults to the most recent description.",
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=_DB_HELP),
) -> None:
    """Record an event."""
    from .tracker import open_tracker

    settings = TrackerSettings.resolve(db_path)
    start_time = _parse_datetime(start)
    end_time = _parse_datetime(end) if end else datetime.now()

    try:
        with open_tracker(settings.db_path) as tracker:
            if description is None:
                previous = tracker.most_recent_event()
                if previous is None:
                    typer.echo("No previous event; --description is required.", err=True)
                    raise typer.Exit(code=1)
                description = previous.description
            tracker.add_event(start_time, end_time, description)
    except TrackerError as exc:
        typer.echo(f"Cannot record event: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Recorded: {description}")


@app.command()
def events(
    date: Optional[str] = typer.Option(
        None, "--date", help="Date (YYYY-MM-DD) to list. Defaults to today."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=_DB_HELP),
) -> None:
    """List the events of a day."""
    from .reporting import SummaryPrinter
    from .tracker import open_tracker

    settings = TrackerSettings.resolve(db_path)
    with open_tracker(settings.db_path) as tracker:
        SummaryPrinter(tracker).print_events(_parse_day(date))


@app.command()
def history(
    date: Optional[str] = typer.Option(
        None, "--date", help="Date (YYYY-MM-DD) to aggregate. Defaults to today."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=_DB_HELP),
) -> None:
    """Print the time spent per activity in a day, longest first."""
    from .reporting import SummaryPrinter
    from .tracker import open_tracker

    settings = TrackerSettings.resolve(db_path)
    with open_tracker(settings.db_path) as tracker:
        SummaryPrinter(tracker).print_history(_parse_day(date))


@app.command()
def summary(
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=_DB_HELP),
) -> None:
    """Print the last activity and the top activities."""
    from .reporting import SummaryPrinter
    from .tracker import open_tracker

    settings = TrackerSettings.resolve(db_path)
    with open_tracker(settings.db_path) as tracker:
        SummaryPrinter(tracker).print_summary(datetime.now())


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    db_path: Optional[Path] = typer.Option(None, "--db", path_type=Path, help=_DB_HELP),
) -> None:
    """Serve the JSON API."""
    from .server_runner import run_server

    settings = TrackerSettings.resolve(db_path)
    run_server(
        host=host,
        port=port,
        db_path=settings.db_path,
    )


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid timestamp: {value}") from exc


def _parse_day(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now()
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise typer.BadParameter("Invalid date format") from exc
