"""Core modules for the operator API."""

from .dependencies import get_queue_service

__all__ = ["get_queue_service"]
