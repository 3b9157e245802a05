"""In-memory queue store and the per-session owned state."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from queuebot.shared.models.queue import QueueEntry, QueueSettings

NOT_IN_QUEUE = -1


class QueueStore:
    """Ordered waitlist of entries.

    Username lookups are case-insensitive; the submitted casing is kept on the
    entry. The store does not enforce uniqueness or capacity, callers check
    ``find``/``position`` before ``insert``.
    """

    def __init__(self, entries: Iterable[QueueEntry] = ()) -> None:
        self._entries: list[QueueEntry] = list(entries)
        # Bumped on every mutation so owners can tell whether a call changed anything
        self.version = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueueEntry]:
        return iter(list(self._entries))

    def __contains__(self, username: object) -> bool:
        return isinstance(username, str) and self._index_of(username) is not None

    def _index_of(self, username: str) -> int | None:
        key = username.lower()
        return next(
            (i for i, e in enumerate(self._entries) if e.username.lower() == key),
            None,
        )

    def entries(self) -> list[QueueEntry]:
        """Entries in waitlist order."""
        return list(self._entries)

    def insert(self, entry: QueueEntry) -> None:
        """Append an entry at the last position."""
        self._entries.append(entry)
        self.version += 1

    def find(self, username: str) -> QueueEntry | None:
        index = self._index_of(username)
        return None if index is None else self._entries[index]

    def position(self, username: str) -> int:
        """1-based position, or NOT_IN_QUEUE."""
        index = self._index_of(username)
        return NOT_IN_QUEUE if index is None else index + 1

    def remove(self, username: str) -> bool:
        """Remove the entry for username. Returns True if one was removed."""
        index = self._index_of(username)
        if index is None:
            return False
        del self._entries[index]
        self.version += 1
        return True

    def move(self, from_index: int, to_index: int) -> None:
        """Move the entry at from_index so it ends up at to_index.

        Indices come from an already rendered operator list and are not
        range-checked.
        """
        if from_index == to_index:
            return
        entry = self._entries.pop(from_index)
        self._entries.insert(to_index, entry)
        self.version += 1

    def set_playing(self, username: str, playing: bool, *, now: datetime | None = None) -> bool:
        """Mark an entry as playing or not. Returns False if username is absent."""
        index = self._index_of(username)
        if index is None:
            return False

        started_at = (now or datetime.now(timezone.utc)) if playing else None
        self._entries[index] = replace(
            self._entries[index], is_playing=playing, playing_started_at=started_at
        )
        self.version += 1
        return True

    def clear(self) -> int:
        """Remove every entry. Returns the number of entries dropped."""
        cleared = len(self._entries)
        self._entries.clear()
        self.version += 1
        return cleared


@dataclass
class QueueSession:
    """State owned by the single writer: the live store plus current settings."""

    store: QueueStore = field(default_factory=QueueStore)
    settings: QueueSettings = field(default_factory=QueueSettings)
