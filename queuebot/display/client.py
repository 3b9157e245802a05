"""Display-side connection to the owner process.

Opens the owner's snapshot event stream and, once the owner confirms the
subscription, asks for a snapshot so a display that starts after the last
organic push still gets the state.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from queuebot.shared.models.queue import SettingsError
from queuebot.shared.sync import CONNECTED_EVENT, SNAPSHOT_EVENT, DisplayView

logger = logging.getLogger(__name__)


@dataclass
class ServerSentEvent:
    event: str = "message"
    data: str = ""


async def iter_sse(lines: AsyncIterator[str]) -> AsyncIterator[ServerSentEvent]:
    """Group text/event-stream lines into events. Comment lines are skipped."""
    event: str | None = None
    data: list[str] = []
    async for line in lines:
        if not line:
            if data:
                yield ServerSentEvent(event=event or "message", data="\n".join(data))
            event, data = None, []
            continue
        if line.startswith(":"):
            continue

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "event":
            event = value
        elif name == "data":
            data.append(value)


class DisplayClient:
    """Keeps a DisplayView in sync with the owner over HTTP.

    The view is only ever overwritten with whole snapshots. When the owner
    is unreachable the last snapshot (or the uninitialized state) is kept and
    the stream is retried with capped backoff.
    """

    def __init__(
        self,
        view: DisplayView,
        owner_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        initial_delay: float = 5.0,
        max_delay: float = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.view = view
        self.owner_url = owner_url.rstrip("/")
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.sleep = sleep
        self.connected = False

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _apply(self, payload: Any) -> bool:
        try:
            self.view.receive(payload)
        except (SettingsError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring malformed snapshot: {type(e).__name__}: {e}")
            return False
        return True

    async def request_snapshot(self) -> bool:
        """Ask the owner to push its current state; applies the returned copy too."""
        try:
            resp = await self._client.post(f"{self.owner_url}/api/display/request-snapshot")
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Snapshot request failed: {type(e).__name__}: {e}")
            return False
        return self._apply(payload)

    async def stream_once(self) -> None:
        """Follow the owner's event stream until it ends."""
        timeout = httpx.Timeout(10.0, read=None)
        async with self._client.stream(
            "GET", f"{self.owner_url}/api/display/events", timeout=timeout
        ) as resp:
            resp.raise_for_status()
            self.connected = True
            logger.info(f"Connected to owner at {self.owner_url}")

            async for event in iter_sse(resp.aiter_lines()):
                if event.event == CONNECTED_EVENT:
                    # Our sink is registered now, so the requested push reaches us too
                    await self.request_snapshot()
                    continue
                if event.event != SNAPSHOT_EVENT:
                    continue
                try:
                    payload = json.loads(event.data)
                except ValueError as e:
                    logger.warning(f"Ignoring undecodable snapshot event: {e}")
                    continue
                self._apply(payload)

    async def run(self) -> None:
        """Stream forever, reconnecting with backoff: 5s → 10s → ... → 60s max.

        A stream that ended cleanly is retried after the initial delay; only
        consecutive failures grow the delay.
        """
        delay = self.initial_delay
        while True:
            try:
                await self.stream_once()
            except asyncio.CancelledError:
                raise
            except httpx.HTTPError as e:
                logger.warning(
                    f"Owner unreachable ({type(e).__name__}: {e}), retrying in {delay:.0f}s"
                )
                wait = delay
                delay = min(delay * 2, self.max_delay)
            else:
                logger.info("Owner event stream ended")
                wait = delay = self.initial_delay
            finally:
                self.connected = False

            await self.sleep(wait)
