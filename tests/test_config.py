"""Environment configuration tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from queuebot.core.config import DisplayProcessSettings, QueueBotSettings

REQUIRED = {
    "CLIENT_ID": "cid",
    "CLIENT_SECRET": "secret",
    "BOT_ID": "100",
    "OWNER_ID": "200",
}


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch):
    for key, value in REQUIRED.items():
        monkeypatch.setenv(key, value)
    for key in ("CHANNEL_ID", "LOG_LEVEL", "API_PORT"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_owner_settings_defaults(env):
    settings = QueueBotSettings(_env_file=None)

    assert settings.api_port == 8000
    assert settings.broadcaster_id == "200"
    assert settings.log_level == "INFO"


def test_channel_id_overrides_owner(env):
    env.setenv("CHANNEL_ID", "300")
    assert QueueBotSettings(_env_file=None).broadcaster_id == "300"


def test_log_level_is_normalized(env):
    env.setenv("LOG_LEVEL", "debug")
    assert QueueBotSettings(_env_file=None).log_level == "DEBUG"


def test_invalid_log_level_falls_back_to_info(env):
    env.setenv("LOG_LEVEL", "chatty")
    assert QueueBotSettings(_env_file=None).log_level == "INFO"


def test_missing_credentials(monkeypatch):
    for key in REQUIRED:
        monkeypatch.delenv(key, raising=False)
    with pytest.raises(ValidationError):
        QueueBotSettings(_env_file=None)


def test_display_settings(monkeypatch):
    monkeypatch.setenv("OWNER_URL", "http://10.0.0.2:8000")
    monkeypatch.setenv("POLL_INTERVAL_MS", "50")
    with pytest.raises(ValidationError):
        DisplayProcessSettings(_env_file=None)

    monkeypatch.setenv("POLL_INTERVAL_MS", "500")
    settings = DisplayProcessSettings(_env_file=None)
    assert settings.owner_url == "http://10.0.0.2:8000"
    assert settings.display_port == 8100
