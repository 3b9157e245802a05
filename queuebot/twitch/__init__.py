"""Twitch chat connection for the queue owner process."""
