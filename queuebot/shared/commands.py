"""Queue chat commands: !join, !leave, !pos

    !join [message]   Join the queue, optionally with a message
    !leave            Leave the queue
    !pos, !position   Show own position and wait time

Every command produces exactly one response string. Rejections such as a
closed or full queue are ordinary responses, not errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from queuebot.shared.models.queue import QueueEntry
from queuebot.shared.queue_store import QueueSession

logger = logging.getLogger(__name__)


class CommandKind(str, Enum):
    JOIN = "join"
    LEAVE = "leave"
    POS = "pos"


@dataclass(frozen=True)
class QueueCommand:
    kind: str | CommandKind
    username: str
    message: str | None = None


_CHAT_KEYWORDS: dict[str, CommandKind] = {
    "join": CommandKind.JOIN,
    "leave": CommandKind.LEAVE,
    "pos": CommandKind.POS,
    "position": CommandKind.POS,
}


def parse_chat_command(username: str, text: str) -> QueueCommand | None:
    """Turn a chat line into a queue command, or None if it is not one.

    The keyword is matched case-insensitively; the message keeps its casing.
    """
    if not text or not text.startswith("!"):
        return None

    parts = text[1:].split(maxsplit=1)
    if not parts:
        return None

    kind = _CHAT_KEYWORDS.get(parts[0].lower())
    if kind is None:
        return None

    message = parts[1] if kind is CommandKind.JOIN and len(parts) > 1 else None
    return QueueCommand(kind=kind.value, username=username, message=message)


def render_template(
    template: str,
    *,
    username: str | None = None,
    position: int | None = None,
    wait_time: int | None = None,
) -> str:
    """Replace response placeholders in a message template.

    Supported placeholders:
        {username}   Chatter name
        {position}   1-based queue position
        {waitTime}   Whole minutes since joining
    """
    if username is not None:
        template = template.replace("{username}", username)
    if position is not None:
        template = template.replace("{position}", str(position))
    if wait_time is not None:
        template = template.replace("{waitTime}", str(wait_time))
    return template


def _join(session: QueueSession, command: QueueCommand, now: datetime) -> str:
    settings = session.settings
    store = session.store

    if not settings.is_open:
        return settings.queue_closed_message

    # 0 is treated like an unset limit
    if settings.max_queue_size and len(store) >= settings.max_queue_size:
        return settings.queue_full_message

    existing = store.find(command.username)
    if existing is not None:
        return render_template(
            settings.already_in_queue_message,
            username=existing.username,
            position=store.position(existing.username),
        )

    message = (command.message or "").strip()
    if settings.require_message and not message:
        return render_template(settings.require_message_text, username=command.username)

    position = len(store) + 1
    store.insert(QueueEntry(username=command.username, message=message or None, joined_at=now))
    logger.info(f"{command.username} joined the queue at position {position}")

    return render_template(settings.join_message, username=command.username, position=position)


def _leave(session: QueueSession, command: QueueCommand, now: datetime) -> str:
    settings = session.settings

    if not session.store.remove(command.username):
        return render_template(settings.not_in_queue_message, username=command.username)

    logger.info(f"{command.username} left the queue")
    return render_template(settings.leave_message, username=command.username)


def _position(session: QueueSession, command: QueueCommand, now: datetime) -> str:
    settings = session.settings
    entry = session.store.find(command.username)

    if entry is None:
        return render_template(settings.not_in_queue_message, username=command.username)

    wait_time = max(0, int((now - entry.joined_at).total_seconds() // 60))
    return render_template(
        settings.position_message,
        username=command.username,
        position=session.store.position(command.username),
        wait_time=wait_time,
    )


_HANDLERS: dict[str, Callable[[QueueSession, QueueCommand, datetime], str]] = {
    CommandKind.JOIN.value: _join,
    CommandKind.LEAVE.value: _leave,
    CommandKind.POS.value: _position,
}


def process_command(
    session: QueueSession, command: QueueCommand, *, now: datetime | None = None
) -> str:
    """Apply a command to the session and return the chat response.

    Unknown command kinds return an empty string and change nothing.
    """
    kind = command.kind.value if isinstance(command.kind, CommandKind) else command.kind
    handler = _HANDLERS.get(kind)
    if handler is None:
        logger.debug(f"Ignoring unknown queue command '{command.kind}'")
        return ""
    return handler(session, command, now or datetime.now(timezone.utc))
