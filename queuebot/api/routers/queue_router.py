"""Operator queue API routes."""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from queuebot.api.core.dependencies import get_queue_service
from queuebot.shared.models.queue import SettingsError
from queuebot.shared.queue_service import QueueService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/queue", tags=["queue"])


# ============================================
# Response / Request Models
# ============================================


class QueueEntryResponse(BaseModel):
    id: str
    username: str
    message: str | None
    joined_at: datetime
    is_playing: bool
    playing_started_at: datetime | None
    position: int


class QueueStateResponse(BaseModel):
    entries: list[QueueEntryResponse]
    total: int
    is_open: bool
    max_queue_size: int | None
    display_enabled: bool


class ClearResponse(QueueStateResponse):
    cleared_count: int


class ChatMessageResponse(BaseModel):
    id: str
    username: str
    message: str
    timestamp: datetime


class ChatFeedResponse(BaseModel):
    messages: list[ChatMessageResponse]
    total: int
    latest_at: datetime | None


class ChatClearResponse(BaseModel):
    cleared_count: int


class CommandRequest(BaseModel):
    username: str = Field(..., min_length=1)
    text: str


class CommandResponse(BaseModel):
    response: str


class MoveRequest(BaseModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class PlayingRequest(BaseModel):
    playing: bool


class DisplaySettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool | None = None
    display_count: int | None = Field(default=None, ge=1, le=50, alias="displayCount")
    show_position: bool | None = Field(default=None, alias="showPosition")
    show_message: bool | None = Field(default=None, alias="showMessage")
    show_wait_time: bool | None = Field(default=None, alias="showWaitTime")
    background_opacity: float | None = Field(default=None, ge=0, le=1, alias="backgroundOpacity")


class QueueSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool | None = Field(default=None, alias="isOpen")
    require_message: bool | None = Field(default=None, alias="requireMessage")
    join_message: str | None = Field(default=None, alias="joinMessage")
    leave_message: str | None = Field(default=None, alias="leaveMessage")
    queue_full_message: str | None = Field(default=None, alias="queueFullMessage")
    queue_closed_message: str | None = Field(default=None, alias="queueClosedMessage")
    already_in_queue_message: str | None = Field(default=None, alias="alreadyInQueueMessage")
    not_in_queue_message: str | None = Field(default=None, alias="notInQueueMessage")
    position_message: str | None = Field(default=None, alias="positionMessage")
    require_message_text: str | None = Field(default=None, alias="requireMessageText")
    # Explicit null clears the limit
    max_queue_size: int | None = Field(default=None, ge=1, alias="maxQueueSize")
    display_settings: DisplaySettingsUpdate | None = Field(default=None, alias="displaySettings")


# ============================================
# Helpers
# ============================================


def _build_state(service: QueueService) -> dict[str, Any]:
    entries = service.session.store.entries()
    settings = service.settings
    return {
        "entries": [
            QueueEntryResponse(
                id=e.id,
                username=e.username,
                message=e.message,
                joined_at=e.joined_at,
                is_playing=e.is_playing,
                playing_started_at=e.playing_started_at,
                position=i + 1,
            )
            for i, e in enumerate(entries)
        ],
        "total": len(entries),
        "is_open": settings.is_open,
        "max_queue_size": settings.max_queue_size,
        "display_enabled": settings.display_settings.enabled,
    }


# ============================================
# Queue State Endpoints
# ============================================


@router.get("/state", response_model=QueueStateResponse)
async def get_queue_state(
    service: QueueService = Depends(get_queue_service),
) -> QueueStateResponse:
    """Get the full queue in waitlist order."""
    return QueueStateResponse(**_build_state(service))


@router.post("/command", response_model=CommandResponse)
async def run_command(
    body: CommandRequest,
    service: QueueService = Depends(get_queue_service),
) -> CommandResponse:
    """Run a chat line as if the given user had typed it."""
    response = service.handle_chat(body.username, body.text)
    logger.info(f"Operator ran '{body.text}' as {body.username}")
    return CommandResponse(response=response)


@router.post("/move", response_model=QueueStateResponse)
async def move_entry(
    body: MoveRequest,
    service: QueueService = Depends(get_queue_service),
) -> QueueStateResponse:
    """Move an entry from one position to another (0-based indices)."""
    size = len(service.session.store)
    if body.from_index >= size or body.to_index >= size:
        raise HTTPException(status_code=400, detail="Index out of range")
    service.move(body.from_index, body.to_index)
    return QueueStateResponse(**_build_state(service))


@router.post("/entries/{username}/playing", response_model=QueueStateResponse)
async def set_playing(
    username: str,
    body: PlayingRequest,
    service: QueueService = Depends(get_queue_service),
) -> QueueStateResponse:
    """Mark an entry as playing / not playing."""
    if not service.set_playing(username, body.playing):
        raise HTTPException(status_code=404, detail="User not in queue")
    return QueueStateResponse(**_build_state(service))


@router.delete("/entries/{username}", response_model=QueueStateResponse)
async def remove_entry(
    username: str,
    service: QueueService = Depends(get_queue_service),
) -> QueueStateResponse:
    """Remove a specific user from the queue."""
    if not service.remove(username):
        raise HTTPException(status_code=404, detail="User not in queue")
    return QueueStateResponse(**_build_state(service))


@router.delete("/clear", response_model=ClearResponse)
async def clear_queue(
    service: QueueService = Depends(get_queue_service),
) -> ClearResponse:
    """Clear entire queue."""
    cleared = service.clear()
    return ClearResponse(**_build_state(service), cleared_count=cleared)


# ============================================
# Settings Endpoints
# ============================================


@router.get("/settings")
async def get_settings(
    service: QueueService = Depends(get_queue_service),
) -> dict[str, Any]:
    """Get queue settings as a settings document."""
    return service.settings.to_document()


@router.put("/settings")
async def update_settings(
    body: QueueSettingsUpdate,
    service: QueueService = Depends(get_queue_service),
) -> dict[str, Any]:
    """Update queue settings. Only provided fields change."""
    partial = body.model_dump(by_alias=True, exclude_unset=True)
    if not partial:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        settings = await service.update_settings_async(partial)
    except SettingsError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    logger.info(f"Queue settings updated: {', '.join(partial)}")
    return settings.to_document()


# ============================================
# Chat Feed Endpoints
# ============================================


@router.get("/chat", response_model=ChatFeedResponse)
async def get_chat(
    service: QueueService = Depends(get_queue_service),
) -> ChatFeedResponse:
    """Recent chat lines, oldest first."""
    log = service.chat_log
    return ChatFeedResponse(
        messages=[
            ChatMessageResponse(
                id=m.id, username=m.username, message=m.message, timestamp=m.timestamp
            )
            for m in log.messages()
        ],
        total=len(log),
        latest_at=log.latest_at,
    )


@router.delete("/chat", response_model=ChatClearResponse)
async def clear_chat(
    service: QueueService = Depends(get_queue_service),
) -> ChatClearResponse:
    """Clear the chat feed. The queue is not touched."""
    cleared = service.chat_log.clear()
    logger.info(f"Chat feed cleared ({cleared} messages)")
    return ChatClearResponse(cleared_count=cleared)
