"""Owner process: Twitch chat bot + operator API sharing one queue session."""

import asyncio
import logging

import uvicorn

from queuebot.api.app import create_app
from queuebot.core.config import QueueBotSettings, get_settings
from queuebot.core.logging import setup_logging
from queuebot.shared.queue_service import QueueService
from queuebot.shared.queue_store import QueueSession
from queuebot.shared.settings_store import SettingsStore
from queuebot.twitch.bot import QueueBot

LOGGER: logging.Logger = logging.getLogger("Bot")


def build_service(settings: QueueBotSettings) -> tuple[QueueService, SettingsStore]:
    """Load persisted settings and build the session's single writer."""
    store = SettingsStore(settings.settings_file)
    app_config = store.load()
    session = QueueSession(settings=app_config.queue_settings)
    return QueueService(session, settings_store=store), store


async def run(settings: QueueBotSettings) -> None:
    service, store = build_service(settings)

    api = create_app(service, enable_docs=settings.is_development)
    server = uvicorn.Server(
        uvicorn.Config(api, host=settings.api_host, port=settings.api_port, log_config=None)
    )
    api_task = asyncio.create_task(server.serve())
    LOGGER.info(f"Operator API on http://{settings.api_host}:{settings.api_port}")

    try:
        async with QueueBot(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            bot_id=settings.bot_id,
            owner_id=settings.owner_id,
            broadcaster_id=settings.broadcaster_id,
            queue_service=service,
            settings_store=store,
        ) as bot:
            await bot.start()
    finally:
        server.should_exit = True
        await api_task


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
