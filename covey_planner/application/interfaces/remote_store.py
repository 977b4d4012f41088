"""Abstract interface (port) for the remote record store, the source of truth."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

OWNER_COLUMN = "user_id"


@dataclass(frozen=True)
class OrderBy:
    """Sort instruction for a select."""

    column: str
    descending: bool = False


class RemoteStore(ABC):
    """Port for per-table record CRUD, implemented in the infrastructure layer.

    Every operation is scoped by owner: ``select`` filters must include
    ``OWNER_COLUMN`` and ``update``/``delete`` take the owner explicitly.
    Implementations raise ``RemoteStoreError`` on any store or network failure.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: OrderBy | None = None,
    ) -> list[dict[str, Any]]:
        """Return all rows of *table* matching every equality filter."""
        ...

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """Persist a new row and return it as stored.

        Inserting an id that already exists for the same owner overwrites
        that row, so re-sending a client-generated id is idempotent.
        """
        ...

    @abstractmethod
    async def update(
        self,
        table: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        owner_id: str,
    ) -> bool:
        """Apply *patch* to one row. Returns False if no such row exists."""
        ...

    @abstractmethod
    async def delete(self, table: str, record_id: str, *, owner_id: str) -> bool:
        """Delete one row. Returns True if deleted, False if not found."""
        ...
