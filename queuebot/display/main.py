"""Display process: overlay server fed by the owner's snapshot stream."""

import asyncio
import logging

from queuebot.core.config import DisplayProcessSettings, get_display_settings
from queuebot.core.logging import setup_logging
from queuebot.display.client import DisplayClient
from queuebot.display.server import OverlayServer
from queuebot.shared.sync import DisplayView

LOGGER: logging.Logger = logging.getLogger("Display")


async def run(settings: DisplayProcessSettings) -> None:
    view = DisplayView()
    client = DisplayClient(view, settings.owner_url)
    server = OverlayServer(
        view,
        host=settings.display_host,
        port=settings.display_port,
        poll_interval_ms=settings.poll_interval_ms,
        client=client,
    )

    await server.start()
    try:
        await client.run()
    finally:
        await server.stop()
        await client.close()


def main() -> None:
    settings = get_display_settings()
    setup_logging(settings.log_level)
    LOGGER.info(f"Following owner at {settings.owner_url}")

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
