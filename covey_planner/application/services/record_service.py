"""Application service (use case) behind the owner-scoped record API."""

from collections.abc import Mapping
from typing import Any

from covey_planner.application.interfaces import OWNER_COLUMN, OrderBy, RemoteStore
from covey_planner.application.schemas.tables import get_descriptor
from covey_planner.domain.exceptions import EntityNotFoundError, UnscopedQueryError


class RecordService:
    """Orchestrates record CRUD for one request. Depends on the RemoteStore port (DI)."""

    def __init__(self, store: RemoteStore):
        self._store = store

    async def list_records(
        self,
        table: str,
        owner_id: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        descriptor = get_descriptor(table)
        if not owner_id:
            raise UnscopedQueryError(table)
        order = OrderBy(order_by, descending) if order_by else descriptor.order
        return await self._store.select(
            table, {**(filters or {}), OWNER_COLUMN: owner_id}, order
        )

    async def create_record(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        get_descriptor(table)
        return await self._store.insert(table, row)

    async def update_record(
        self, table: str, record_id: str, patch: Mapping[str, Any], *, owner_id: str
    ) -> dict[str, Any]:
        descriptor = get_descriptor(table)
        updated = await self._store.update(table, record_id, patch, owner_id=owner_id)
        if not updated:
            raise EntityNotFoundError(descriptor.label, record_id)
        rows = await self._store.select(table, {OWNER_COLUMN: owner_id, "id": record_id})
        return rows[0]

    async def delete_record(self, table: str, record_id: str, *, owner_id: str) -> bool:
        get_descriptor(table)
        return await self._store.delete(table, record_id, owner_id=owner_id)
