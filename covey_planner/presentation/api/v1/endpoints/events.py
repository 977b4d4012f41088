"""Server-sent event stream of sync warnings."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from covey_planner.application.services import SSEManager
from covey_planner.config import get_settings
from covey_planner.infrastructure.dependencies import get_sse_manager

router = APIRouter(tags=["Events"])


@router.get("/events")
async def sync_warning_stream(
    owner_id: str = Query(..., min_length=1),
    sse: SSEManager = Depends(get_sse_manager),
) -> StreamingResponse:
    """SSE endpoint for one owner's sync warnings.

    Clients connect via EventSource and receive 'sync_warning' events
    whenever one of their loads falls back to cached data or one of their
    changes fails to sync.
    """
    return StreamingResponse(
        sse.subscribe(owner_id, heartbeat=get_settings().sse_heartbeat_seconds),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
