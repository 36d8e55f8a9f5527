"""WebSocket connection manager for real-time like updates."""

import asyncio
from typing import Any
from uuid import uuid4

from fastapi import WebSocket

from photoshare.core.logging import get_logger
from photoshare.schemas.websocket import LikeUpdatedMessage, WSMessageType

logger = get_logger(__name__)


class WebSocketManager:
    """
    Manages WebSocket connections for gallery clients.

    Every connected client receives every like update; clients filter by the
    photos they are displaying. Delivery is best-effort: a failed send drops
    the connection and is never retried.
    """

    def __init__(self) -> None:
        # client_id -> WebSocket
        self._connections: dict[str, WebSocket] = {}

        # Lock for thread-safe operations
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str | None = None) -> str:
        """
        Register a client connection.

        Returns:
            client_id: Unique identifier for this connection
        """
        await websocket.accept()
        client_id = str(uuid4())[:8]

        async with self._lock:
            self._connections[client_id] = websocket

        logger.info("Client connected", client_id=client_id, user_id=user_id)
        return client_id

    async def disconnect(self, client_id: str) -> None:
        """Forget a client connection."""
        async with self._lock:
            self._connections.pop(client_id, None)
        logger.info("Client disconnected", client_id=client_id)

    async def broadcast(self, message: dict[str, Any]) -> int:
        """
        Send a message to every connected client.

        Returns:
            Number of clients that received the message
        """
        async with self._lock:
            sent_count = 0

            for client_id, websocket in list(self._connections.items()):
                try:
                    await websocket.send_json(message)
                    sent_count += 1
                except Exception as e:
                    logger.error("Failed to send to client", client_id=client_id, error=str(e))
                    # Remove dead connection
                    del self._connections[client_id]

            return sent_count

    async def send_like_updated(
        self,
        photo_id: str,
        likes_count: int,
        actor_id: str,
        liked: bool,
    ) -> None:
        """Notify all clients that a photo's like count changed."""
        data = LikeUpdatedMessage(
            photoId=photo_id,
            likesCount=likes_count,
            actorId=actor_id,
            liked=liked,
        )
        await self.broadcast({"type": WSMessageType.LIKE_UPDATED.value, "data": data.model_dump()})

    def get_connection_count(self) -> int:
        """Get number of connected clients."""
        return len(self._connections)


# Global WebSocket manager instance
ws_manager = WebSocketManager()
