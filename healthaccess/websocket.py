import logging
from typing import Any, Dict, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Open notification sockets, keyed by user id."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        # Registered before accepting so nothing published right after the handshake is missed
        if user_id not in self.active_connections:
            self.active_connections[user_id] = []
        self.active_connections[user_id].append(websocket)
        await websocket.accept()

    def disconnect(self, websocket: WebSocket, user_id: str):
        if user_id in self.active_connections:
            if websocket in self.active_connections[user_id]:
                self.active_connections[user_id].remove(websocket)
            if not self.active_connections[user_id]:
                del self.active_connections[user_id]

    async def send_to_user(self, message: Any, user_id: str) -> int:
        """Deliver to every socket of ``user_id``; dead sockets are dropped. Returns delivered count."""
        delivered = 0
        for connection in list(self.active_connections.get(user_id, [])):
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping websocket for user {user_id}: {e}")
                self.disconnect(connection, user_id)
        return delivered


# Global websocket manager instance
manager = ConnectionManager()
