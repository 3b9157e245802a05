"""Settings document persistence tests."""

from __future__ import annotations

import json

import pytest

from queuebot.shared import QueueSettings, SettingsStore


def _write(store: SettingsStore, document) -> None:
    store.path.write_text(json.dumps(document), encoding="utf-8")


def test_missing_file_gives_defaults(settings_store):
    config = settings_store.load()

    assert config.queue_settings == QueueSettings()
    assert config.save_credentials is True
    assert config.twitch.tokens == {}


@pytest.mark.parametrize("content", ["{not json", "[]", '{"queue": {"settings": {"isOpen": 3}}}'])
def test_unreadable_file_gives_defaults(settings_store, content):
    settings_store.path.write_text(content, encoding="utf-8")
    assert settings_store.load().queue_settings == QueueSettings()


def test_load_partial_document(settings_store):
    _write(
        settings_store,
        {
            "twitch": {"channel": "somechannel"},
            "queue": {"settings": {"maxQueueSize": 10, "displaySettings": {"enabled": True}}},
        },
    )
    config = settings_store.load()

    assert config.twitch.channel == "somechannel"
    assert config.queue_settings.max_queue_size == 10
    assert config.queue_settings.display_settings.enabled is True
    assert config.queue_settings.display_settings.display_count == 5


def test_save_and_reload(settings_store):
    settings_store.save_queue_settings(QueueSettings().merged({"requireMessage": True}))

    reloaded = SettingsStore(settings_store.path).load()
    assert reloaded.queue_settings.require_message is True
    assert list(settings_store.path.parent.glob(".settings.json.*")) == []


def test_save_creates_parent_directory(tmp_path):
    store = SettingsStore(tmp_path / "nested" / "dir" / "settings.json")
    store.save()
    assert store.path.exists()


def test_save_token(settings_store):
    assert settings_store.save_token("123", "access", "refresh") is True

    reloaded = SettingsStore(settings_store.path).load()
    assert reloaded.twitch.tokens == {"123": {"accessToken": "access", "refreshToken": "refresh"}}


def test_tokens_stay_in_memory_when_credentials_not_saved(settings_store):
    _write(settings_store, {"queue": {"saveCredentials": False}})
    settings_store.load()

    assert settings_store.save_token("123", "access", "refresh") is False
    assert settings_store.config.twitch.tokens["123"]["accessToken"] == "access"
    stored = json.loads(settings_store.path.read_text(encoding="utf-8"))
    assert "twitch" not in stored


def test_update_twitch_credentials(settings_store):
    assert settings_store.update_twitch_credentials(channel="mychannel") is True
    assert SettingsStore(settings_store.path).load().twitch.channel == "mychannel"


def test_update_twitch_credentials_rejects_unknown_fields(settings_store):
    with pytest.raises(TypeError):
        settings_store.update_twitch_credentials(password="nope")


@pytest.mark.asyncio
async def test_async_save_writes_latest_settings(settings_store):
    await settings_store.save_queue_settings_async(QueueSettings().merged({"maxQueueSize": 7}))
    await settings_store.save_queue_settings_async(QueueSettings().merged({"maxQueueSize": 9}))

    assert SettingsStore(settings_store.path).load().queue_settings.max_queue_size == 9
