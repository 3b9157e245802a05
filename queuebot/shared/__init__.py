"""Queue engine shared by the owner and display processes."""

from .chat_log import ChatLog, ChatMessage
from .commands import CommandKind, QueueCommand, parse_chat_command, process_command, render_template
from .models import DisplaySettings, QueueEntry, QueueSettings, SettingsError
from .queue_service import QueueService
from .queue_store import NOT_IN_QUEUE, QueueSession, QueueStore
from .settings_store import AppConfig, SettingsStore, TwitchCredentials
from .sync import DisplayState, DisplayView, QueueSink, QueueSnapshot, SnapshotBroadcaster

__all__ = [
    "NOT_IN_QUEUE",
    "AppConfig",
    "ChatLog",
    "ChatMessage",
    "CommandKind",
    "DisplaySettings",
    "DisplayState",
    "DisplayView",
    "QueueCommand",
    "QueueEntry",
    "QueueService",
    "QueueSession",
    "QueueSettings",
    "QueueSink",
    "QueueSnapshot",
    "QueueStore",
    "SettingsError",
    "SettingsStore",
    "SnapshotBroadcaster",
    "TwitchCredentials",
    "parse_chat_command",
    "process_command",
    "render_template",
]
