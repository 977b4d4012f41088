"""Best-effort offline snapshot of the last known-good collection."""

import json
import logging
from collections.abc import Iterable
from typing import Any

from covey_planner.application.interfaces import KeyValueStore

logger = logging.getLogger(__name__)


class LocalCache:
    """Serializes collections into a KeyValueStore, one key per owner scope.

    Never raises: write failures (quota, I/O, unserializable values) are
    logged and reported as False; missing or corrupt entries read as empty.
    The cache is overwritten wholesale; it is a fallback, not a merge store.
    """

    def __init__(self, store: KeyValueStore, namespace: str = "covey"):
        self._store = store
        self._namespace = namespace

    @staticmethod
    def scope(table: str, owner_id: str) -> str:
        """Owner scope key for one table, e.g. ``tasks:u1``."""
        return f"{table}:{owner_id}"

    def _key(self, owner_scope: str) -> str:
        return f"{self._namespace}:{owner_scope}"

    def save(self, owner_scope: str, collection: Iterable[dict[str, Any]]) -> bool:
        try:
            payload = json.dumps(list(collection))
        except (TypeError, ValueError) as exc:
            logger.warning("Could not serialize cache for %s: %s", owner_scope, exc)
            return False
        try:
            self._store.set(self._key(owner_scope), payload)
        except Exception as exc:
            logger.warning("Could not write cache for %s: %s", owner_scope, exc)
            return False
        return True

    def load(self, owner_scope: str) -> list[dict[str, Any]]:
        try:
            raw = self._store.get(self._key(owner_scope))
        except Exception as exc:
            logger.warning("Could not read cache for %s: %s", owner_scope, exc)
            return []
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Discarding corrupt cache for %s: %s", owner_scope, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding cache for %s: expected a list", owner_scope)
            return []
        return [item for item in data if isinstance(item, dict)]

    def clear(self, owner_scope: str) -> None:
        try:
            self._store.delete(self._key(owner_scope))
        except Exception as exc:
            logger.warning("Could not clear cache for %s: %s", owner_scope, exc)
