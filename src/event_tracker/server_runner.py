"""Launcher for the local JSON API."""

from __future__ import annotations

import logging
from pathlib import Path

import uvicorn

from .webapp import create_app

logger = logging.getLogger(__name__)


def run_server(
    *,
    db_path: Path,
    host: str = "127.0.0.1",
    port: int = 8765,
    log_level: str = "info",
) -> None:
    """Serve the tracker API until interrupted."""
    app = create_app(db_path=db_path)
    logger.info("Serving %s on http://%s:%d (docs at /docs)", db_path, host, port)
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
