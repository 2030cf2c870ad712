"""
Dashboard live updates over server-sent events.

Each stream holds one subscription per store for exactly as long as the
client stays connected.
"""

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import ExitStack

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from shopdesk.api.dependencies import get_app_settings, get_catalog, get_sales
from shopdesk.config import Settings, get_logger
from shopdesk.core.interfaces import ChangeEvent, ICatalogStore, ISalesStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def format_event(event: ChangeEvent) -> str:
    """Encode a change event as an SSE message."""
    payload = {
        "collection": event.collection,
        "kind": event.kind.value,
        "id": event.entity_id,
    }
    return f"event: {event.collection}\ndata: {json.dumps(payload)}\n\n"


async def change_stream(
    stores: list[ICatalogStore | ISalesStore],
    keepalive_seconds: float,
    is_disconnected: Callable[[], Awaitable[bool]] | None = None,
) -> AsyncIterator[str]:
    """Yield SSE messages for store changes until the client goes away."""
    queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
    with ExitStack() as subscriptions:
        for store in stores:
            subscriptions.enter_context(store.subscribe(queue.put_nowait))
        logger.info("dashboard_stream_opened", stores=len(stores))

        try:
            yield ": connected\n\n"
            while True:
                if is_disconnected is not None and await is_disconnected():
                    break
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=keepalive_seconds)
                except TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield format_event(event)
        finally:
            logger.info("dashboard_stream_closed")


@router.get("/events")
async def dashboard_events(
    request: Request,
    catalog: ICatalogStore = Depends(get_catalog),
    sales: ISalesStore = Depends(get_sales),
    settings: Settings = Depends(get_app_settings),
) -> StreamingResponse:
    """Stream product and sale changes as server-sent events."""
    return StreamingResponse(
        change_stream(
            [catalog, sales],
            settings.api.events_keepalive_seconds,
            request.is_disconnected,
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
