"""Server-Sent Events: live generations and control events."""

import asyncio
import json
import uuid

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from simulation.state import StateSnapshot

router = APIRouter(tags=["events"])

KEEPALIVE_SECONDS = 1.0

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


def format_sse(event, data):
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


def encode(item):
    """Snapshots go out as ``generation`` frames, everything else as ``control``."""
    if isinstance(item, StateSnapshot):
        return format_sse("generation", item.to_dict())
    return format_sse("control", item)


async def stream(request, subscriber):
    yield encode(await _engine.get_snapshot())
    while not await request.is_disconnected():
        try:
            item = await asyncio.wait_for(subscriber.queue.get(), timeout=KEEPALIVE_SECONDS)
        except asyncio.TimeoutError:
            yield ": keep-alive\n\n"
            continue
        yield encode(item)


@router.get("/events")
async def events(request: Request):
    """Current generation first, then every published generation and control event."""
    name = f"sse-{uuid.uuid4().hex[:8]}"
    subscriber = await _bus.subscribe(name, max_queue_size=10)

    async def body():
        try:
            async for frame in stream(request, subscriber):
                yield frame
        finally:
            await _bus.unsubscribe(name)

    return StreamingResponse(body(), media_type="text/event-stream")
