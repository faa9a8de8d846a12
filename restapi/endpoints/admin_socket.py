"""Websocket endpoint for the admin broadcast channel."""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


@router.websocket("/ws/admin")
async def admin_socket(websocket: WebSocket):
    """Relay every ``admin_message`` to all connected clients as ``admin_broadcast``."""
    channel = websocket.app.state.admin_channel
    await channel.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Ignoring non JSON frame")
                continue
            await channel.handle(message)
    except WebSocketDisconnect:
        pass
    finally:
        channel.disconnect(websocket)
