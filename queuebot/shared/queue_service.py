"""Queue service: the single writer of the session's queue and settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from queuebot.shared.chat_log import ChatLog
from queuebot.shared.commands import QueueCommand, parse_chat_command, process_command
from queuebot.shared.models.queue import QueueSettings
from queuebot.shared.queue_store import QueueSession
from queuebot.shared.settings_store import SettingsStore
from queuebot.shared.sync import QueueSnapshot, SnapshotBroadcaster

logger = logging.getLogger(__name__)


class QueueService:
    """Chat commands and operator actions against one session.

    Every change to the queue or settings publishes a fresh snapshot to the
    display sinks.
    """

    def __init__(
        self,
        session: QueueSession | None = None,
        *,
        broadcaster: SnapshotBroadcaster | None = None,
        settings_store: SettingsStore | None = None,
        chat_log: ChatLog | None = None,
    ) -> None:
        self.session = session or QueueSession()
        self.broadcaster = broadcaster or SnapshotBroadcaster()
        self.settings_store = settings_store
        # Operator-only history; not part of the display snapshot
        self.chat_log = chat_log if chat_log is not None else ChatLog()

    @property
    def settings(self) -> QueueSettings:
        return self.session.settings

    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(queue=tuple(self.session.store), settings=self.session.settings)

    def _changed(self) -> None:
        self.broadcaster.publish(self.snapshot())

    # ------------------------------------------------------------------
    # Chat commands
    # ------------------------------------------------------------------

    def process_command(self, command: QueueCommand, *, now: datetime | None = None) -> str:
        version = self.session.store.version
        response = process_command(self.session, command, now=now)
        if self.session.store.version != version:
            self._changed()
        return response

    def handle_chat(self, sender: str, text: str, *, now: datetime | None = None) -> str:
        """Run a raw chat line. Returns "" when the line is not a queue command."""
        command = parse_chat_command(sender, text)
        if command is None:
            return ""
        return self.process_command(command, now=now)

    # ------------------------------------------------------------------
    # Operator actions
    # ------------------------------------------------------------------

    def move(self, from_index: int, to_index: int) -> None:
        version = self.session.store.version
        self.session.store.move(from_index, to_index)
        if self.session.store.version != version:
            logger.info(f"Moved queue entry {from_index + 1} -> {to_index + 1}")
            self._changed()

    def set_playing(self, username: str, playing: bool) -> bool:
        if not self.session.store.set_playing(username, playing):
            return False
        logger.info(f"{username} marked as {'playing' if playing else 'waiting'}")
        self._changed()
        return True

    def remove(self, username: str) -> bool:
        if not self.session.store.remove(username):
            return False
        logger.info(f"Removed {username} from the queue")
        self._changed()
        return True

    def clear(self) -> int:
        cleared = self.session.store.clear()
        logger.info(f"Cleared queue ({cleared} entries)")
        self._changed()
        return cleared

    def update_settings(self, partial: Mapping[str, Any]) -> QueueSettings:
        """Merge a partial settings document, persist it and publish.

        Raises SettingsError for a wrongly shaped value. A failed save is
        logged; the in-memory change stays.
        """
        self.session.settings = self.session.settings.merged(partial)

        if self.settings_store is not None:
            try:
                self.settings_store.save_queue_settings(self.session.settings)
            except OSError as e:
                logger.error(f"Failed to save queue settings: {e}")

        self._changed()
        return self.session.settings

    async def update_settings_async(self, partial: Mapping[str, Any]) -> QueueSettings:
        """update_settings for the event loop: the file is written in a worker thread."""
        settings = self.session.settings = self.session.settings.merged(partial)
        self._changed()

        if self.settings_store is not None:
            try:
                await self.settings_store.save_queue_settings_async(settings)
            except OSError as e:
                logger.error(f"Failed to save queue settings: {e}")
        return settings

    # ------------------------------------------------------------------
    # Display sync
    # ------------------------------------------------------------------

    def request_snapshot(self) -> QueueSnapshot:
        """Pull trigger from a display: push the current state to all sinks and return it."""
        snapshot = self.snapshot()
        delivered = self.broadcaster.push(snapshot)
        logger.debug(f"Snapshot requested, pushed to {delivered} display sink(s)")
        return snapshot
