"""Operator control API served from the owner process."""

from .app import create_app

__all__ = ["create_app"]
