"""Data models for queue entries and queue settings.

The document form (``to_document`` / ``from_document``) uses the camelCase
field names of the persisted settings file and the display snapshot payload.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """A settings value does not have the expected shape."""


def _new_entry_id() -> str:
    return uuid.uuid4().hex


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class QueueEntry:
    """Queue entry record."""

    username: str
    joined_at: datetime
    message: str | None = None
    is_playing: bool = False
    playing_started_at: datetime | None = None
    id: str = field(default_factory=_new_entry_id)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "message": self.message,
            "joinedAt": self.joined_at.isoformat(),
            "isPlaying": self.is_playing,
            "playingStartedAt": (
                self.playing_started_at.isoformat() if self.playing_started_at else None
            ),
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> QueueEntry:
        joined_at = _parse_timestamp(document["joinedAt"])
        if joined_at is None:
            raise SettingsError("joinedAt is required")
        return cls(
            id=str(document["id"]),
            username=str(document["username"]),
            message=document.get("message"),
            joined_at=joined_at,
            is_playing=bool(document.get("isPlaying", False)),
            playing_started_at=_parse_timestamp(document.get("playingStartedAt")),
        )


# document key -> (attribute, accepted types, nullable)
_FieldSpec = tuple[str, tuple[type, ...], bool]

_DISPLAY_FIELDS: dict[str, _FieldSpec] = {
    "enabled": ("enabled", (bool,), False),
    "displayCount": ("display_count", (int,), False),
    "showPosition": ("show_position", (bool,), False),
    "showMessage": ("show_message", (bool,), False),
    "showWaitTime": ("show_wait_time", (bool,), False),
    "backgroundOpacity": ("background_opacity", (int, float), False),
}

_SETTINGS_FIELDS: dict[str, _FieldSpec] = {
    "isOpen": ("is_open", (bool,), False),
    "requireMessage": ("require_message", (bool,), False),
    "joinMessage": ("join_message", (str,), False),
    "leaveMessage": ("leave_message", (str,), False),
    "queueFullMessage": ("queue_full_message", (str,), False),
    "queueClosedMessage": ("queue_closed_message", (str,), False),
    "alreadyInQueueMessage": ("already_in_queue_message", (str,), False),
    "notInQueueMessage": ("not_in_queue_message", (str,), False),
    "positionMessage": ("position_message", (str,), False),
    "requireMessageText": ("require_message_text", (str,), False),
    "maxQueueSize": ("max_queue_size", (int,), True),
}


def _merge_fields(
    fields: dict[str, _FieldSpec], partial: Mapping[str, Any], group: str
) -> dict[str, Any]:
    """Collect attribute changes from a document-keyed partial, checking value shapes."""
    changes: dict[str, Any] = {}
    for key, value in partial.items():
        known = fields.get(key)
        if known is None:
            logger.debug(f"Ignoring unknown {group} field '{key}'")
            continue

        attr, types, nullable = known
        if value is None and nullable:
            changes[attr] = None
            continue
        # bool is an int subclass; only accept it where bool is expected
        if isinstance(value, bool) and bool not in types:
            raise SettingsError(f"{key} must be {types[0].__name__}, got bool")
        if not isinstance(value, types):
            raise SettingsError(f"{key} must be {types[0].__name__}, got {type(value).__name__}")

        changes[attr] = float(value) if float in types else value
    return changes


@dataclass(frozen=True)
class DisplaySettings:
    """Overlay rendering toggles."""

    enabled: bool = False
    display_count: int = 5
    show_position: bool = True
    show_message: bool = True
    show_wait_time: bool = False
    background_opacity: float = 0.7

    def to_document(self) -> dict[str, Any]:
        return {key: getattr(self, attr) for key, (attr, _, _) in _DISPLAY_FIELDS.items()}

    def merged(self, partial: Mapping[str, Any]) -> DisplaySettings:
        return replace(self, **_merge_fields(_DISPLAY_FIELDS, partial, "displaySettings"))


@dataclass(frozen=True)
class QueueSettings:
    """Queue settings record.

    Templates may contain the placeholders ``{username}``, ``{position}``
    and ``{waitTime}``.
    """

    is_open: bool = True
    require_message: bool = False
    join_message: str = "{username} has joined the queue! Position: {position}"
    leave_message: str = "{username} has left the queue."
    queue_full_message: str = "The queue is currently full. Please try again later."
    queue_closed_message: str = "The queue is currently closed."
    already_in_queue_message: str = (
        "{username}, you are already in the queue at position {position}."
    )
    not_in_queue_message: str = "{username}, you are not in the queue."
    position_message: str = (
        "{username}, you are position {position} in the queue. Wait time: {waitTime} minutes."
    )
    require_message_text: str = (
        "{username}, please provide a message when joining the queue. "
        "Example: !join YourGameUsername"
    )
    max_queue_size: int | None = 50
    display_settings: DisplaySettings = field(default_factory=DisplaySettings)

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            key: getattr(self, attr) for key, (attr, _, _) in _SETTINGS_FIELDS.items()
        }
        document["displaySettings"] = self.display_settings.to_document()
        return document

    def merged(self, partial: Mapping[str, Any]) -> QueueSettings:
        """Return a copy with the given document fields replaced.

        ``displaySettings`` is merged one level deep, so a partial display
        update keeps the sibling display fields. Raises SettingsError when a
        value has the wrong type; unknown keys are ignored.
        """
        partial = dict(partial)
        display_partial = partial.pop("displaySettings", None)

        changes = _merge_fields(_SETTINGS_FIELDS, partial, "settings")
        if display_partial is not None:
            if not isinstance(display_partial, Mapping):
                raise SettingsError("displaySettings must be an object")
            changes["display_settings"] = self.display_settings.merged(display_partial)

        return replace(self, **changes)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> QueueSettings:
        """Build settings from a stored document; missing fields keep their defaults."""
        return cls().merged(document)
