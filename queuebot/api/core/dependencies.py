"""Dependency injection utilities for FastAPI"""

import logging

from fastapi import HTTPException, Request

from queuebot.shared.queue_service import QueueService

logger = logging.getLogger(__name__)


# ============================================
# Service Dependencies
# ============================================


def get_queue_service(request: Request) -> QueueService:
    """Get the owner process's QueueService (set on app.state by create_app)."""
    service: QueueService | None = getattr(request.app.state, "queue_service", None)
    if service is None:
        logger.error("Queue service requested before the app was wired")
        raise HTTPException(status_code=503, detail="Queue service not ready")
    return service
