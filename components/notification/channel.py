"""In-process fan-out of administrative messages to websocket clients."""

import logging
from typing import Any, List

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

logger = logging.getLogger(__name__)

ADMIN_MESSAGE = "admin_message"
ADMIN_BROADCAST = "admin_broadcast"


class AdminChannel:
    """Registry of connected clients.

    Delivery is best effort: a client that cannot be reached is dropped and
    the broadcast continues with the others.
    """

    def __init__(self) -> None:
        self.connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        self.connections.append(websocket)
        await websocket.accept()
        logger.info("Client connected, %d active", len(self.connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info("Client disconnected, %d active", len(self.connections))

    async def broadcast(self, data: Any) -> int:
        """Send ``admin_broadcast`` to every client; returns how many received it."""
        delivered = 0
        for websocket in list(self.connections):
            try:
                await websocket.send_json({"event": ADMIN_BROADCAST, "data": data})
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.warning("Dropping unreachable client: %s", exc)
                self.disconnect(websocket)
                continue
            delivered += 1
        return delivered

    async def handle(self, message: Any) -> None:
        """Dispatch one frame received from a client."""
        if not isinstance(message, dict) or message.get("event") != ADMIN_MESSAGE:
            logger.debug("Ignoring frame %r", message)
            return
        await self.broadcast(message.get("data"))
