"""In-process broadcaster that streams sync warnings to connected SSE clients."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from covey_planner.application.interfaces import Notifier
from covey_planner.domain.entities import SyncWarning

logger = logging.getLogger(__name__)

SYNC_WARNING_EVENT = "sync_warning"
KEEPALIVE = ": keepalive\n\n"


def format_event(event_type: str, data: dict[str, Any]) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


class SSEManager(Notifier):
    """Fans sync warnings out to connected clients as toast events.

    Every client subscribes for one owner and only receives that owner's
    warnings. Each client owns a bounded queue. A client too slow to drain
    its queue is disconnected so it cannot hold up delivery to the others.
    """

    def __init__(self, max_queue_size: int = 100) -> None:
        self._max_queue_size = max_queue_size
        self._clients: list[tuple[str, asyncio.Queue[str | None]]] = []

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def subscribe(
        self, owner_id: str, heartbeat: float | None = None
    ) -> AsyncGenerator[str, None]:
        """Yield formatted SSE messages for *owner_id* until shutdown or disconnect.

        With *heartbeat* set, an SSE comment is sent whenever that many
        seconds pass without an event, keeping idle proxies from closing
        the stream.
        """
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._max_queue_size)
        self._clients.append((owner_id, queue))
        logger.debug("SSE client connected for %s (%d total)", owner_id, len(self._clients))
        try:
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), timeout=heartbeat)
                except asyncio.TimeoutError:
                    yield KEEPALIVE
                    continue
                if message is None:
                    break
                yield message
        finally:
            self._drop(queue)

    async def broadcast(
        self, event_type: str, data: dict[str, Any], *, owner_id: str | None = None
    ) -> None:
        """Send an event to every client, or only to *owner_id*'s clients when given."""
        message = format_event(event_type, data)
        for client_owner, queue in list(self._clients):
            if owner_id is not None and client_owner != owner_id:
                continue
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("SSE client queue full, disconnecting")
                self._close(queue)

    async def notify(self, warning: SyncWarning) -> None:
        if warning.owner_id is None:
            logger.debug("Dropping unowned %s warning for %s", warning.kind.value, warning.table)
            return
        await self.broadcast(SYNC_WARNING_EVENT, warning.to_dict(), owner_id=warning.owner_id)

    async def shutdown(self) -> None:
        """Disconnect all connected clients."""
        for _, queue in list(self._clients):
            self._close(queue)

    # ── Helpers ─────────────────────────────────────────────────────

    def _close(self, queue: asyncio.Queue[str | None]) -> None:
        # Make room for the end-of-stream marker on a full queue.
        self._drop(queue)
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(None)

    def _drop(self, queue: asyncio.Queue[str | None]) -> None:
        self._clients = [(owner, q) for owner, q in self._clients if q is not queue]
