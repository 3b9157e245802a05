"""Core modules shared by the queue bot processes."""

from .config import (
    BOT_SCOPES,
    BROADCASTER_SCOPES,
    DATA_DIR,
    DisplayProcessSettings,
    QueueBotSettings,
    get_display_settings,
    get_settings,
)
from .logging import setup_logging

__all__ = [
    # Settings
    "QueueBotSettings",
    "DisplayProcessSettings",
    "get_settings",
    "get_display_settings",
    # Path Constants
    "DATA_DIR",
    # Scope Constants
    "BOT_SCOPES",
    "BROADCASTER_SCOPES",
    # Setup functions
    "setup_logging",
]
