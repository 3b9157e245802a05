"""Chat-driven queue manager for Twitch streams."""

__version__ = "1.0.0"
