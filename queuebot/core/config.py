"""Process configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
DATA_DIR = Path.cwd() / "data"
DEFAULT_SETTINGS_FILE = DATA_DIR / "config.json"

BOT_SCOPES = [
    "user:bot",  # Bot identifier
    "user:read:chat",  # Read chat messages
    "user:write:chat",  # Send chat messages
]

BROADCASTER_SCOPES = [
    "channel:bot",  # Allow bot to join channel
]

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _normalize_log_level(v: str) -> str:
    v_upper = v.upper()
    if v_upper not in VALID_LOG_LEVELS:
        logger.warning(f"Invalid log level '{v}', defaulting to INFO")
        return "INFO"
    return v_upper


class QueueBotSettings(BaseSettings):
    """Owner process settings: chat bot + operator API"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Twitch OAuth
    client_id: str = Field(..., description="Twitch OAuth Client ID")
    client_secret: str = Field(..., description="Twitch OAuth Client Secret")

    # Bot Configuration
    bot_id: str = Field(..., description="Bot User ID")
    owner_id: str = Field(..., description="Owner User ID")
    channel_id: str = Field(default="", description="Broadcaster User ID to join (defaults to owner)")

    # Settings document
    settings_file: Path = Field(
        default=DEFAULT_SETTINGS_FILE, description="JSON file holding queue settings"
    )

    # Operator API
    api_host: str = Field(default="127.0.0.1", description="Operator API host")
    api_port: int = Field(default=8000, description="Operator API port")

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        return _normalize_log_level(v)

    @property
    def broadcaster_id(self) -> str:
        return self.channel_id or self.owner_id

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


class DisplayProcessSettings(BaseSettings):
    """Display process settings: overlay server + owner connection"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    owner_url: str = Field(default="http://127.0.0.1:8000", description="Owner operator API URL")
    display_host: str = Field(default="127.0.0.1", description="Overlay server host")
    display_port: int = Field(default=8100, description="Overlay server port")
    poll_interval_ms: int = Field(default=1000, ge=100, description="Overlay page refresh")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        return _normalize_log_level(v)


@lru_cache
def get_settings() -> QueueBotSettings:
    """Get cached owner settings instance"""
    return QueueBotSettings()  # type: ignore[call-arg]


@lru_cache
def get_display_settings() -> DisplayProcessSettings:
    """Get cached display settings instance"""
    return DisplayProcessSettings()
