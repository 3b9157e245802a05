"""API Routers package

Routers are organized by feature domain.
"""

from . import display_router, queue_router

__all__ = [
    "display_router",
    "queue_router",
]
