"""Change Stream - Server-Sent Events feed of change notifications.

Invariants:
    - Each client gets its own subscription, closed when the stream ends
    - Only events published after the client connected are delivered
    - A keepalive comment is sent when no change arrives within the interval

Design Decisions:
    - StreamingResponse for SSE: event_generator yields formatted SSE lines
    - SSE headers prevent proxy/browser buffering of streamed events
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from simpledb.api.dependencies import get_provider
from simpledb.services.provider import ProviderContext

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/changes", tags=["changes"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}
KEEPALIVE_SECONDS = 15.0


def format_sse(data: dict) -> str:
    return f"event: change\ndata: {json.dumps(data)}\n\n"


@router.get("")
async def stream_changes(
    request: Request, provider: ProviderContext = Depends(get_provider),
):
    """Stream change events as they are published."""
    subscription = provider.notifier.subscribe()

    async def event_generator():
        try:
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(
                        subscription.queue.get(), timeout=KEEPALIVE_SECONDS,
                    )
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield format_sse(event.to_dict())
        finally:
            subscription.close()
            logger.debug("Change stream closed")

    return StreamingResponse(
        event_generator(), media_type="text/event-stream", headers=SSE_HEADERS,
    )
