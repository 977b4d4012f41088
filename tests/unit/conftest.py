"""In-memory fakes of the sync ports, shared by the unit tests."""

import asyncio
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from covey_planner.application.interfaces import (
    OWNER_COLUMN,
    Notifier,
    OrderBy,
    RemoteStore,
)
from covey_planner.application.schemas.tables import RecordDescriptor
from covey_planner.application.services import LocalCache, SyncedCollection
from covey_planner.domain.entities import SyncWarning
from covey_planner.domain.exceptions import RemoteStoreError, UnscopedQueryError
from covey_planner.infrastructure.cache import InMemoryKeyValueStore


class FakeRemoteStore(RemoteStore):
    """In-memory fake store. Add ``"op"`` or ``"op:table"`` to ``fail`` to simulate outages."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.fail: set[str] = set()
        self.delay: dict[str, float] = {}
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str]] = []

    async def _enter(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if self.gate is not None:
            await self.gate.wait()
        if operation in self.delay:
            await asyncio.sleep(self.delay[operation])
        if operation in self.fail or f"{operation}:{table}" in self.fail:
            raise RemoteStoreError(operation, table, "simulated outage")

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        for row in rows:
            self.tables[table][row["id"]] = dict(row)

    def calls_for(self, operation: str) -> list[str]:
        return [table for op, table in self.calls if op == operation]

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: OrderBy | None = None,
    ) -> list[dict[str, Any]]:
        if not filters.get(OWNER_COLUMN):
            raise UnscopedQueryError(table)
        await self._enter("select", table)
        rows = [
            dict(row)
            for row in self.tables[table].values()
            if all(row.get(name) == value for name, value in filters.items())
        ]
        if order is not None:
            rows.sort(key=lambda r: r[order.column], reverse=order.descending)
        return rows

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        await self._enter("insert", table)
        self.tables[table][row["id"]] = dict(row)
        return dict(row)

    async def update(
        self,
        table: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        owner_id: str,
    ) -> bool:
        await self._enter("update", table)
        row = self.tables[table].get(record_id)
        if row is None or row[OWNER_COLUMN] != owner_id:
            return False
        row.update(patch)
        return True

    async def delete(self, table: str, record_id: str, *, owner_id: str) -> bool:
        await self._enter("delete", table)
        row = self.tables[table].get(record_id)
        if row is None or row[OWNER_COLUMN] != owner_id:
            return False
        del self.tables[table][record_id]
        return True


class FakeNotifier(Notifier):
    """Collects delivered warnings."""

    def __init__(self):
        self.warnings: list[SyncWarning] = []

    async def notify(self, warning: SyncWarning) -> None:
        self.warnings.append(warning)


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(kv_store: InMemoryKeyValueStore) -> LocalCache:
    return LocalCache(kv_store)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_collection(
    remote: FakeRemoteStore, cache: LocalCache, notifier: FakeNotifier
) -> Callable[..., SyncedCollection]:
    """Factory for collections wired to the shared fakes."""

    def factory(descriptor: RecordDescriptor, **kwargs: Any) -> SyncedCollection:
        kwargs.setdefault("notifier", notifier)
        return SyncedCollection(descriptor, remote, cache, **kwargs)

    return factory
