"""JSON settings document: queue settings plus saved Twitch credentials.

Only settings persist. The live queue is rebuilt empty every session.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from queuebot.shared.models.queue import QueueSettings, SettingsError

logger = logging.getLogger(__name__)


@dataclass
class TwitchCredentials:
    """Chat account details and OAuth tokens keyed by Twitch user ID."""

    username: str = ""
    channel: str = ""
    tokens: dict[str, dict[str, str]] = field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        return {"username": self.username, "channel": self.channel, "tokens": self.tokens}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> TwitchCredentials:
        tokens = document.get("tokens") or {}
        return cls(
            username=str(document.get("username") or ""),
            channel=str(document.get("channel") or ""),
            tokens={
                str(user_id): {
                    "accessToken": str(pair.get("accessToken", "")),
                    "refreshToken": str(pair.get("refreshToken", "")),
                }
                for user_id, pair in tokens.items()
                if isinstance(pair, dict)
            },
        )


@dataclass
class AppConfig:
    twitch: TwitchCredentials = field(default_factory=TwitchCredentials)
    save_credentials: bool = True
    queue_settings: QueueSettings = field(default_factory=QueueSettings)

    def to_document(self) -> dict[str, Any]:
        return {
            "twitch": self.twitch.to_document(),
            "queue": {
                "saveCredentials": self.save_credentials,
                "settings": self.queue_settings.to_document(),
            },
        }


class SettingsStore:
    """Load/save of the settings document at ``path``.

    Load never fails: a missing file gives defaults, an unreadable one is
    logged and replaced by defaults.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.config = AppConfig()
        self._write_lock = asyncio.Lock()

    def load(self) -> AppConfig:
        if not self.path.exists():
            logger.info(f"No settings file at {self.path}, using defaults")
            self.config = AppConfig()
            return self.config

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
            self.config = self._parse(document)
            logger.info(f"Loaded settings from {self.path}")
        except (OSError, ValueError, TypeError, AttributeError) as e:
            # SettingsError and JSONDecodeError are ValueErrors
            logger.warning(f"Failed to load settings from {self.path}: {e}, using defaults")
            self.config = AppConfig()
        return self.config

    @staticmethod
    def _parse(document: Any) -> AppConfig:
        if not isinstance(document, dict):
            raise SettingsError("settings document must be an object")

        queue_doc = document.get("queue") or {}
        twitch_doc = document.get("twitch") or {}
        save_credentials = queue_doc.get("saveCredentials", True)
        if not isinstance(save_credentials, bool):
            raise SettingsError("saveCredentials must be bool")

        return AppConfig(
            twitch=TwitchCredentials.from_document(twitch_doc),
            save_credentials=save_credentials,
            queue_settings=QueueSettings.from_document(queue_doc.get("settings") or {}),
        )

    def dump(self) -> str:
        """Serialize the current document."""
        return json.dumps(self.config.to_document(), indent=2, ensure_ascii=False)

    def save(self, config: AppConfig | None = None) -> None:
        """Write the document atomically (temp file + replace)."""
        if config is not None:
            self.config = config
        self.write(self.dump())

    def write(self, data: str) -> None:
        """Atomically replace the file with an already serialized document.

        Does no reads of ``config``, so it may run in a worker thread.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved settings to {self.path}")

    def save_queue_settings(self, settings: QueueSettings) -> None:
        self.config.queue_settings = settings
        self.save()

    async def save_queue_settings_async(self, settings: QueueSettings) -> None:
        """Like save_queue_settings, with the file write moved off the event loop."""
        self.config.queue_settings = settings
        # Serialized writes, each dumping the newest config
        async with self._write_lock:
            await asyncio.to_thread(self.write, self.dump())

    def save_token(self, user_id: str, access_token: str, refresh_token: str) -> bool:
        """Store an OAuth token pair. Only written to disk when saveCredentials is on."""
        self.config.twitch.tokens[user_id] = {
            "accessToken": access_token,
            "refreshToken": refresh_token,
        }
        if not self.config.save_credentials:
            return False
        self.save()
        return True

    def update_twitch_credentials(self, **fields: str) -> bool:
        """Update username/channel. Only written to disk when saveCredentials is on."""
        for name, value in fields.items():
            if name not in ("username", "channel"):
                raise TypeError(f"Unknown credential field '{name}'")
            setattr(self.config.twitch, name, value)
        if not self.config.save_credentials:
            return False
        self.save()
        return True
