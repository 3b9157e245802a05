"""Overlay HTTP server for the display process"""

import logging
import time
from typing import Any

from aiohttp import web

from queuebot.shared.sync import DisplayView

logger = logging.getLogger("Display.Server")

OVERLAY_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Queue</title>
<style>
  :root { --bg-opacity: 0.7; }
  body { margin: 0; font-family: sans-serif; color: #fff; background: transparent; }
  #queue { background: rgba(0, 0, 0, var(--bg-opacity)); padding: 8px 12px; border-radius: 6px; }
  .row { display: flex; gap: 8px; padding: 2px 0; }
  .row.playing { color: #7cf29c; }
  .message { opacity: 0.8; font-style: italic; }
  .wait { margin-left: auto; opacity: 0.7; }
  .placeholder { opacity: 0.7; }
  .title { font-weight: bold; padding-bottom: 4px; }
</style>
</head>
<body>
<div id="queue"><div class="placeholder">Waiting for queue data...</div></div>
<script>
const POLL_MS = __POLL_MS__;
function el(tag, cls, text) {
  const node = document.createElement(tag);
  if (cls) node.className = cls;
  if (text !== undefined && text !== null) node.textContent = text;
  return node;
}
async function refresh() {
  try {
    const resp = await fetch("/api/state", { cache: "no-store" });
    const state = await resp.json();
    document.documentElement.style.setProperty("--bg-opacity", state.backgroundOpacity);
    const root = document.getElementById("queue");
    root.replaceChildren();
    if (state.title) root.appendChild(el("div", "title", state.title));
    if (state.placeholder) {
      root.appendChild(el("div", "placeholder", state.placeholder));
      return;
    }
    for (const row of state.rows) {
      const line = el("div", row.isPlaying ? "row playing" : "row");
      if (state.showPosition) line.appendChild(el("span", "position", row.position + "."));
      line.appendChild(el("span", "username", row.username));
      if (row.message) line.appendChild(el("span", "message", row.message));
      if (row.wait) line.appendChild(el("span", "wait", row.wait));
      root.appendChild(line);
    }
  } catch (e) {
    // owner or display server not reachable, keep what is shown
  }
}
refresh();
setInterval(refresh, POLL_MS);
</script>
</body>
</html>
"""


class OverlayServer:
    """Serves the overlay page and the rendered queue state it polls."""

    def __init__(
        self,
        view: DisplayView,
        host: str = "127.0.0.1",
        port: int = 8100,
        poll_interval_ms: int = 1000,
        client: Any = None,
    ):
        self.view = view
        self.host = host
        self.port = port
        self.poll_interval_ms = poll_interval_ms
        self.client: Any = client
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_get("/", self.handle_overlay)
        self.app.router.add_get("/api/state", self.handle_state)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    async def handle_overlay(self, request: web.Request) -> web.Response:
        html = OVERLAY_HTML.replace("__POLL_MS__", str(self.poll_interval_ms))
        return web.Response(text=html, content_type="text/html")

    async def handle_state(self, request: web.Request) -> web.Response:
        """Rendered view of the last snapshot"""
        return web.json_response(self.view.render().to_dict())

    async def handle_health(self, request: web.Request) -> web.Response:
        """Liveness, always 200"""
        ready = self.view.initialized
        return web.json_response({"status": "healthy" if ready else "starting", "ready": ready})

    async def handle_status(self, request: web.Request) -> web.Response:
        return web.json_response(
            {
                "service": "queuebot-display",
                "initialized": self.view.initialized,
                "snapshots_received": self.view.received,
                "owner_connected": bool(self.client and self.client.connected),
                "uptime_seconds": int(time.time() - self._start_time),
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        return web.Response(text="pong")

    async def start(self) -> None:
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            logger.info(f"Overlay server started on {self.host}:{self.port}")
            logger.info(f"  GET http://{self.host}:{self.port}/ - Overlay page")
        except Exception as e:
            logger.exception(f"Failed to start overlay server: {e}")
            raise

    async def stop(self) -> None:
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Overlay server stopped")
            except Exception as e:
                logger.exception(f"Error stopping overlay server: {e}")
