"""Owner-to-display snapshot synchronization.

The owner process holds the live queue and pushes full snapshots to every
registered display sink. Display processes only overwrite their cached copy
of the last snapshot; they never merge and have no way to mutate the queue.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from queuebot.shared.models.queue import QueueEntry, QueueSettings

logger = logging.getLogger(__name__)

NOT_INITIALIZED_TEXT = "Waiting for queue data..."
EMPTY_QUEUE_TEXT = "Queue is empty"

# SSE event names. CONNECTED_EVENT is sent once the stream's sink is registered.
SNAPSHOT_EVENT = "queueSnapshot"
CONNECTED_EVENT = "connected"


@dataclass(frozen=True)
class QueueSnapshot:
    """Full queue + settings state as sent to display processes."""

    queue: tuple[QueueEntry, ...]
    settings: QueueSettings

    def to_payload(self) -> dict[str, Any]:
        return {
            "queue": [entry.to_document() for entry in self.queue],
            "settings": self.settings.to_document(),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> QueueSnapshot:
        return cls(
            queue=tuple(QueueEntry.from_document(e) for e in payload.get("queue") or []),
            settings=QueueSettings.from_document(payload.get("settings") or {}),
        )


# ============================================
# Owner side
# ============================================


class DisplaySink(Protocol):
    def send(self, snapshot: QueueSnapshot) -> None: ...


class SinkClosedError(RuntimeError):
    """The display behind a sink is gone or not draining."""


class QueueSink:
    """Sink backed by an asyncio queue, drained by one display stream."""

    def __init__(self, maxsize: int = 100) -> None:
        self._queue: asyncio.Queue[QueueSnapshot] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def send(self, snapshot: QueueSnapshot) -> None:
        if self.closed:
            raise SinkClosedError("display sink is closed")
        try:
            self._queue.put_nowait(snapshot)
        except asyncio.QueueFull:
            raise SinkClosedError("display sink is not draining") from None

    async def get(self, timeout: float | None = None) -> QueueSnapshot:
        """Next snapshot in send order. Raises TimeoutError after timeout seconds."""
        return await asyncio.wait_for(self._queue.get(), timeout=timeout)

    def close(self) -> None:
        self.closed = True


class SnapshotBroadcaster:
    """Sends snapshots to every registered display sink.

    Each call is one independent send to all sinks. A failing sink is logged
    and skipped; it is not retried and stays registered, so the next change
    tries it again.
    """

    def __init__(self) -> None:
        self._sinks: list[DisplaySink] = []

    @property
    def sink_count(self) -> int:
        return len(self._sinks)

    def register(self, sink: DisplaySink) -> None:
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.info(f"Display sink registered ({len(self._sinks)} connected)")

    def unregister(self, sink: DisplaySink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)
            logger.info(f"Display sink unregistered ({len(self._sinks)} connected)")

    def publish(self, snapshot: QueueSnapshot) -> int:
        """Push a changed state, but only while display sync is enabled."""
        if not snapshot.settings.display_settings.enabled:
            return 0
        return self.push(snapshot)

    def push(self, snapshot: QueueSnapshot) -> int:
        """Send to every sink regardless of settings. Returns successful deliveries."""
        delivered = 0
        for sink in list(self._sinks):
            try:
                sink.send(snapshot)
                delivered += 1
            except Exception as e:
                logger.warning(f"Display sink delivery failed: {type(e).__name__}: {e}")
        return delivered


# ============================================
# Display side
# ============================================


def format_wait(joined_at: datetime, now: datetime) -> str:
    """Short wait label: '12m' under an hour, '1h 5m' above."""
    minutes = max(0, int((now - joined_at).total_seconds() // 60))
    if minutes < 60:
        return f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


@dataclass(frozen=True)
class DisplayRow:
    position: int
    username: str
    is_playing: bool
    message: str | None = None
    wait: str | None = None


@dataclass(frozen=True)
class DisplayState:
    """What the overlay renders. ``initialized`` is False until a snapshot arrives."""

    initialized: bool
    total: int = 0
    rows: tuple[DisplayRow, ...] = ()
    placeholder: str | None = None
    show_position: bool = True
    background_opacity: float = 0.7

    @property
    def title(self) -> str | None:
        return f"Queue ({self.total})" if self.initialized else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "initialized": self.initialized,
            "title": self.title,
            "total": self.total,
            "placeholder": self.placeholder,
            "showPosition": self.show_position,
            "backgroundOpacity": self.background_opacity,
            "rows": [
                {
                    "position": row.position,
                    "username": row.username,
                    "isPlaying": row.is_playing,
                    "message": row.message,
                    "wait": row.wait,
                }
                for row in self.rows
            ],
        }


@dataclass
class DisplayView:
    """Display-side cache of the last snapshot received from the owner."""

    last_snapshot: QueueSnapshot | None = None
    received: int = 0

    @property
    def initialized(self) -> bool:
        return self.last_snapshot is not None

    def receive(self, payload: QueueSnapshot | Mapping[str, Any]) -> None:
        """Replace the cached snapshot. Receiving the same state twice is harmless."""
        if not isinstance(payload, QueueSnapshot):
            payload = QueueSnapshot.from_payload(payload)
        self.last_snapshot = payload
        self.received += 1

    def render(self, now: datetime | None = None) -> DisplayState:
        snapshot = self.last_snapshot
        if snapshot is None:
            return DisplayState(initialized=False, placeholder=NOT_INITIALIZED_TEXT)

        display = snapshot.settings.display_settings
        now = now or datetime.now(timezone.utc)
        shown = snapshot.queue[: max(display.display_count, 0)]

        rows = tuple(
            DisplayRow(
                position=index + 1,
                username=entry.username,
                is_playing=entry.is_playing,
                message=entry.message if display.show_message else None,
                wait=format_wait(entry.joined_at, now) if display.show_wait_time else None,
            )
            for index, entry in enumerate(shown)
        )
        return DisplayState(
            initialized=True,
            total=len(snapshot.queue),
            rows=rows,
            placeholder=None if snapshot.queue else EMPTY_QUEUE_TEXT,
            show_position=display.show_position,
            background_opacity=display.background_opacity,
        )
