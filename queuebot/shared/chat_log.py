"""Recent chat lines seen by the bot, for the operator surface."""

from __future__ import annotations

import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_CHAT_HISTORY = 200


@dataclass(frozen=True)
class ChatMessage:
    username: str
    message: str
    timestamp: datetime
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class ChatLog:
    """Bounded buffer of the latest chat lines; the oldest drop off first."""

    def __init__(self, maxlen: int = DEFAULT_CHAT_HISTORY) -> None:
        self._messages: deque[ChatMessage] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def latest_at(self) -> datetime | None:
        return self._messages[-1].timestamp if self._messages else None

    def add(self, username: str, message: str, *, now: datetime | None = None) -> ChatMessage:
        entry = ChatMessage(
            username=username, message=message, timestamp=now or datetime.now(timezone.utc)
        )
        self._messages.append(entry)
        return entry

    def messages(self) -> list[ChatMessage]:
        """Oldest first."""
        return list(self._messages)

    def clear(self) -> int:
        cleared = len(self._messages)
        self._messages.clear()
        return cleared
