from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from .errors import SnapshotError
from .model import Config

logger = logging.getLogger(__name__)

# Files written before versioning carry no "Version" key and load as version 1.
SCHEMA_VERSION = 1


def atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + f".tmp.{int(time.time() * 1000)}")
    tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    tmp.replace(path)


def save_snapshot(path: Path, config: Config) -> None:
    payload: dict[str, Any] = {"Version": SCHEMA_VERSION}
    payload.update(config.to_dict())
    try:
        atomic_write_json(path, payload)
    except OSError as e:
        raise SnapshotError(f"cannot write snapshot {path}: {e}") from e
    logger.debug("wrote snapshot %s", path)


def load_snapshot(path: Path) -> Config:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SnapshotError(f"no snapshot at {path}") from e
    except OSError as e:
        raise SnapshotError(f"cannot read snapshot {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"snapshot {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        version = data.get("Version", SCHEMA_VERSION)
        if not isinstance(version, int) or isinstance(version, bool):
            raise SnapshotError(f"snapshot {path}: 'Version' must be an integer")
        if version > SCHEMA_VERSION:
            raise SnapshotError(
                f"snapshot {path} has schema version {version}, this pmux reads up to {SCHEMA_VERSION}"
            )

    return Config.from_dict(data)


def load_previous(path: Path) -> Config | None:
    """Load the snapshot about to be overwritten, if there is a usable one."""

    if not path.exists():
        return None
    try:
        return load_snapshot(path)
    except SnapshotError as e:
        logger.warning("ignoring previous snapshot: %s", e)
        return None
