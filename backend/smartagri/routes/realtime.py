"""Realtime change notifications over Server-Sent Events."""

import asyncio
import json
import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import StreamingResponse

from smartagri.errors import NotFound
from smartagri.realtime import INSERT, get_feed, queue_handler

logger = logging.getLogger(__name__)

# Tables whose inserts are published
STREAMABLE_TABLES = {"sensor_readings", "recommendations"}

# Seconds between keep-alive comments on an idle stream
KEEPALIVE_SECONDS = 15

router = APIRouter(prefix="/api/realtime", tags=["realtime"])


def sse_event(event_type: str, data: dict) -> str:
    """Format data as an SSE event."""
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


@router.get("/{table}")
async def stream_changes(
    table: str,
    request: Request,
    event: str = Query(INSERT, description="Event kind to listen for"),
):
    """Stream change notifications for a table.

    SSE event type is the lower-cased event kind (e.g. "insert"); data is
    {"table", "event", "record"}.
    """
    if table not in STREAMABLE_TABLES:
        raise NotFound(f"Unknown table: {table}")

    feed = get_feed()
    queue: asyncio.Queue = asyncio.Queue()
    subscription = feed.subscribe(table, event, queue_handler(queue))
    logger.info(f"Realtime stream opened: {table}:{subscription.event}")

    async def event_stream():
        try:
            while not await request.is_disconnected():
                try:
                    payload = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield sse_event(payload["event"].lower(), payload)
        finally:
            feed.unsubscribe(subscription)
            logger.info(f"Realtime stream closed: {table}:{subscription.event}")

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
