"""Display sync routes (read-only): snapshot pull and the push event stream."""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse, ServerSentEvent

from queuebot.api.core.dependencies import get_queue_service
from queuebot.shared.queue_service import QueueService
from queuebot.shared.sync import CONNECTED_EVENT, SNAPSHOT_EVENT, QueueSink

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/display", tags=["display"])

KEEPALIVE_SECONDS = 15


def snapshot_event(payload: dict[str, Any]) -> ServerSentEvent:
    return ServerSentEvent(data=json.dumps(payload, ensure_ascii=False), event=SNAPSHOT_EVENT)


async def stream_snapshots(service: QueueService, sink: QueueSink) -> AsyncIterator[ServerSentEvent]:
    """Events for every snapshot pushed to ``sink``.

    The sink is only registered once the body is being sent, and the
    ``finally`` unregisters it when the client leaves (the response cancels
    the generator) or the generator is closed.
    """
    try:
        service.broadcaster.register(sink)
        yield ServerSentEvent(data="ok", event=CONNECTED_EVENT)
        while True:
            snapshot = await sink.get()
            yield snapshot_event(snapshot.to_payload())
    finally:
        service.broadcaster.unregister(sink)
        sink.close()


@router.get("/snapshot")
async def get_snapshot(
    service: QueueService = Depends(get_queue_service),
) -> dict[str, Any]:
    """Current {queue, settings} payload, without pushing anything."""
    return service.snapshot().to_payload()


@router.post("/request-snapshot")
async def request_snapshot(
    service: QueueService = Depends(get_queue_service),
) -> dict[str, Any]:
    """Pull trigger: push the current snapshot to every display and return it."""
    return service.request_snapshot().to_payload()


@router.get("/events")
async def snapshot_events(
    service: QueueService = Depends(get_queue_service),
) -> EventSourceResponse:
    """Server-sent events stream of full snapshots, with keep-alive pings."""
    return EventSourceResponse(
        stream_snapshots(service, QueueSink()),
        ping=KEEPALIVE_SECONDS,
        headers={"Cache-Control": "no-cache, no-transform", "X-Accel-Buffering": "no"},
    )
