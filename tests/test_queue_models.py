"""Queue entry and settings model tests."""

from __future__ import annotations

import pytest
from conftest import T0

from queuebot.shared.models import DisplaySettings, QueueEntry, QueueSettings, SettingsError


def test_default_settings_document_uses_camel_case():
    doc = QueueSettings().to_document()

    assert doc["isOpen"] is True
    assert doc["requireMessage"] is False
    assert doc["maxQueueSize"] == 50
    assert doc["joinMessage"] == "{username} has joined the queue! Position: {position}"
    assert doc["displaySettings"] == {
        "enabled": False,
        "displayCount": 5,
        "showPosition": True,
        "showMessage": True,
        "showWaitTime": False,
        "backgroundOpacity": 0.7,
    }


def test_merge_keeps_unmentioned_fields():
    settings = QueueSettings().merged({"isOpen": False, "leaveMessage": "bye {username}"})

    assert settings.is_open is False
    assert settings.leave_message == "bye {username}"
    assert settings.join_message == QueueSettings().join_message


def test_merge_display_settings_one_level_deep():
    base = QueueSettings().merged({"displaySettings": {"displayCount": 3}})
    settings = base.merged({"displaySettings": {"enabled": True}})

    assert settings.display_settings.enabled is True
    assert settings.display_settings.display_count == 3
    assert settings.display_settings.show_message is True


def test_merge_does_not_mutate_original():
    original = QueueSettings()
    original.merged({"isOpen": False, "displaySettings": {"enabled": True}})

    assert original.is_open is True
    assert original.display_settings.enabled is False


def test_merge_ignores_unknown_keys():
    settings = QueueSettings().merged({"popoutSettings": {"enabled": True}, "bogus": 1})
    assert settings == QueueSettings()


@pytest.mark.parametrize(
    "partial",
    [
        {"isOpen": "yes"},
        {"maxQueueSize": True},
        {"maxQueueSize": "10"},
        {"joinMessage": 5},
        {"displaySettings": {"displayCount": 2.5}},
        {"displaySettings": {"backgroundOpacity": "0.5"}},
        {"displaySettings": []},
    ],
)
def test_merge_rejects_wrong_shapes(partial):
    with pytest.raises(SettingsError):
        QueueSettings().merged(partial)


def test_max_queue_size_may_be_cleared():
    assert QueueSettings().merged({"maxQueueSize": None}).max_queue_size is None


def test_int_opacity_is_stored_as_float():
    display = DisplaySettings().merged({"backgroundOpacity": 1})
    assert display.background_opacity == 1.0
    assert isinstance(display.background_opacity, float)


def test_from_document_fills_defaults():
    settings = QueueSettings.from_document({"requireMessage": True})

    assert settings.require_message is True
    assert settings.max_queue_size == 50


def test_entry_document_round_trip():
    entry = QueueEntry(username="Alice", joined_at=T0, message="hi")
    restored = QueueEntry.from_document(entry.to_document())

    assert restored == entry
    assert entry.to_document()["joinedAt"] == "2024-01-01T12:00:00+00:00"
    assert entry.to_document()["playingStartedAt"] is None


def test_entry_ids_are_unique():
    a = QueueEntry(username="a", joined_at=T0)
    b = QueueEntry(username="a", joined_at=T0)
    assert a.id != b.id
