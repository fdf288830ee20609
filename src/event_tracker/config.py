"""Configuration models and helpers for the event tracker."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .paths import get_db_path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration shared by the CLI commands."""

    db_path: Path

    @classmethod
    def resolve(cls, db_path: Optional[Path] = None) -> "TrackerSettings":
        """Use ``db_path`` if given, else the default in the user data dir."""
        return cls(db_path=Path(db_path) if db_path is not None else get_db_path())
