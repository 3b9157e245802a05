"""Read-only display process: mirrors owner snapshots onto an overlay page."""

from queuebot.display.client import DisplayClient, ServerSentEvent, iter_sse
from queuebot.display.server import OverlayServer

__all__ = ["DisplayClient", "OverlayServer", "ServerSentEvent", "iter_sse"]
