"""Shared test fixtures for queuebot tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from queuebot.shared import QueueService, QueueSession, SettingsStore
from queuebot.shared.commands import QueueCommand, process_command

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class RecordingSink:
    """Display sink that keeps everything it was sent."""

    def __init__(self, fail: bool = False) -> None:
        self.received = []
        self.fail = fail

    def send(self, snapshot) -> None:
        if self.fail:
            raise RuntimeError("display went away")
        self.received.append(snapshot)


@pytest.fixture
def session() -> QueueSession:
    return QueueSession()


@pytest.fixture
def run(session: QueueSession):
    """Run a command against the session fixture: run("join", "Alice", "hi")."""

    def _run(kind: str, username: str, message: str | None = None, *, now=T0) -> str:
        return process_command(session, QueueCommand(kind, username, message), now=now)

    return _run


@pytest.fixture
def settings_store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def service(settings_store: SettingsStore) -> QueueService:
    return QueueService(settings_store=settings_store)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
