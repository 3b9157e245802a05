"""FastAPI application factory for the operator control surface"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from queuebot import __version__
from queuebot.api.routers import display_router, queue_router
from queuebot.shared.queue_service import QueueService

logger = logging.getLogger(__name__)

# Track server start time
_start_time: float = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    global _start_time
    _start_time = time.time()
    logger.info("Starting queue operator API")

    yield

    logger.info("Shutting down queue operator API")


def create_app(service: QueueService, *, enable_docs: bool = True) -> FastAPI:
    """Create and configure the FastAPI application around the owner's service."""
    app = FastAPI(
        title="Queue Bot API",
        description="Operator control surface and display sync for the chat queue",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if enable_docs else None,
        redoc_url="/redoc" if enable_docs else None,
    )
    app.state.queue_service = service

    # The overlay page is served by the display process on another port
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(queue_router.router)
    app.include_router(display_router.router)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint - minimal service info"""
        return {"service": "queuebot-api", "status": "running"}

    # Liveness probe
    @app.get("/health")
    async def health():
        """Liveness check"""
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - _start_time),
        }

    @app.get("/status")
    async def status():
        """Status endpoint: queue size and connected displays"""
        return {
            "service": "queuebot-api",
            "version": __version__,
            "uptime_seconds": int(time.time() - _start_time),
            "queue_size": len(service.session.store),
            "display_sinks": service.broadcaster.sink_count,
        }

    # Ping endpoint
    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
