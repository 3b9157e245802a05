"""Shared data models for the queue bot processes."""

from .queue import DisplaySettings, QueueEntry, QueueSettings, SettingsError

__all__ = [
    "DisplaySettings",
    "QueueEntry",
    "QueueSettings",
    "SettingsError",
]
