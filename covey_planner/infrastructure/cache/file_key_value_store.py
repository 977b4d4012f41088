"""Local filesystem KeyValueStore for offline collection snapshots.

Storage layout:
    <cache_dir>/<sanitised_key>.json    one file per key
"""

import logging
import os
import re
from pathlib import Path

from covey_planner.application.interfaces import KeyValueStore

logger = logging.getLogger(__name__)


def _sanitise(key: str, max_len: int = 200) -> str:
    """Replace characters that are unsafe in filenames with underscores."""
    return re.sub(r"[^\w\-.]", "_", key)[:max_len].strip("_") or "unnamed"


class FileKeyValueStore(KeyValueStore):
    """Infrastructure adapter that keeps each value in its own file.

    Writes go to a temporary file first and are moved into place, so a
    crash mid-write never leaves a truncated snapshot behind.
    """

    def __init__(self, cache_dir: str | Path):
        self._cache_dir = Path(cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._cache_dir / f"{_sanitise(key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, "utf-8")
        os.replace(tmp_path, path)
        logger.debug("Cached %s (%d bytes)", path.name, len(value))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
