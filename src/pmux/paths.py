from __future__ import annotations

import os
from pathlib import Path

SNAPSHOT_FILENAME = ".pmux.config"


def default_snapshot_path() -> Path:
    override = os.environ.get("PMUX_SNAPSHOT")
    if override:
        return Path(override).expanduser()
    return Path.home() / SNAPSHOT_FILENAME


def resolve_snapshot_path(explicit: Path | None) -> Path:
    if explicit is not None:
        return explicit.expanduser()
    return default_snapshot_path()
