"""WebSocket message schemas."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class WSMessageType(str, Enum):
    """WebSocket message types."""

    # Server -> Client messages
    CONNECTED = "connected"
    LIKE_UPDATED = "like_updated"
    PONG = "pong"

    # Client -> Server messages
    PING = "ping"


class WSMessage(BaseModel):
    """Base WebSocket message."""

    type: WSMessageType
    data: dict[str, Any] | None = None


class LikeUpdatedMessage(BaseModel):
    """Like updated message data."""

    photoId: str
    likesCount: int
    actorId: str
    liked: bool
