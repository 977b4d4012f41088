"""HTTP client for the record API: implements the RemoteStore interface.

Talks to ``/records/{table}`` endpoints of a Covey Planner server using
httpx. Network failures, timeouts and non-2xx responses are translated into
``RemoteStoreError`` so synced collections can take their warning path.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from covey_planner.application.interfaces import OWNER_COLUMN, OrderBy, RemoteStore
from covey_planner.domain.exceptions import RemoteStoreError, UnscopedQueryError

logger = logging.getLogger(__name__)


class HttpRemoteStore(RemoteStore):
    """Infrastructure adapter that connects to a remote record API.

    An injected ``httpx.AsyncClient`` is reused for every call and left
    open; otherwise a short-lived client is created per request.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        operation: str,
        table: str,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}/records/{table}{path}"
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.request(
                method, url, params=params, json=json, timeout=self._timeout
            )
        except httpx.TimeoutException as exc:
            raise RemoteStoreError(operation, table, f"timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise RemoteStoreError(operation, table, f"request failed: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return response

    @staticmethod
    def _raise_store_error(operation: str, table: str, response: httpx.Response) -> None:
        """Raise RemoteStoreError from a non-2xx response."""
        try:
            detail = response.json().get("detail", response.text)
        except (ValueError, AttributeError):
            detail = response.text
        raise RemoteStoreError(
            operation,
            table,
            f"HTTP {response.status_code}: {detail}",
            status_code=response.status_code,
        )

    async def select(
        self,
        table: str,
        filters: Mapping[str, Any],
        order: OrderBy | None = None,
    ) -> list[dict[str, Any]]:
        owner_id = filters.get(OWNER_COLUMN)
        if not owner_id:
            raise UnscopedQueryError(table)

        params: dict[str, Any] = {"owner_id": owner_id}
        for name, value in filters.items():
            if name == OWNER_COLUMN:
                continue
            params[name] = str(value).lower() if isinstance(value, bool) else str(value)
        if order is not None:
            params["order_by"] = order.column
            params["descending"] = "true" if order.descending else "false"

        response = await self._request("select", table, "GET", "", params=params)
        if response.status_code != 200:
            self._raise_store_error("select", table, response)
        rows = response.json()
        if not isinstance(rows, list):
            raise RemoteStoreError("select", table, "response body is not a list of rows")
        return rows

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        response = await self._request("insert", table, "POST", "", json=dict(row))
        if response.status_code not in (200, 201):
            self._raise_store_error("insert", table, response)
        return response.json()

    async def update(
        self,
        table: str,
        record_id: str,
        patch: Mapping[str, Any],
        *,
        owner_id: str,
    ) -> bool:
        response = await self._request(
            "update",
            table,
            "PATCH",
            f"/{record_id}",
            params={"owner_id": owner_id},
            json=dict(patch),
        )
        if response.status_code == 404:
            return False
        if response.status_code != 200:
            self._raise_store_error("update", table, response)
        return True

    async def delete(self, table: str, record_id: str, *, owner_id: str) -> bool:
        response = await self._request(
            "delete", table, "DELETE", f"/{record_id}", params={"owner_id": owner_id}
        )
        if response.status_code == 404:
            return False
        if response.status_code not in (200, 204):
            self._raise_store_error("delete", table, response)
        return True
