"""WebSocket endpoint for real-time like updates."""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from photoshare.api.deps import RequestSession
from photoshare.core.logging import get_logger
from photoshare.schemas import WSMessageType
from photoshare.services import ws_manager

logger = get_logger(__name__)

router = APIRouter()


@router.websocket("/likes")
async def likes_websocket(websocket: WebSocket):
    """
    Like-count feed for gallery clients.

    Clients receive:
    - connected: Sent once after the handshake
    - like_updated: A photo's like count changed

    Clients can send:
    - ping: Keep-alive
    """
    user_id = RequestSession(websocket.session).current_actor_id
    if user_id is None:
        await websocket.close(code=4401, reason="Unauthorized")
        return

    client_id = await ws_manager.connect(websocket, user_id)
    await websocket.send_json({
        "type": WSMessageType.CONNECTED.value,
        "data": {"clientId": client_id},
    })

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == WSMessageType.PING.value:
                await websocket.send_json({"type": WSMessageType.PONG.value})

    except WebSocketDisconnect:
        logger.info("Like feed client disconnected", client_id=client_id)
    except Exception as e:
        logger.error("Like feed WebSocket error", client_id=client_id, error=str(e))
    finally:
        await ws_manager.disconnect(client_id)
