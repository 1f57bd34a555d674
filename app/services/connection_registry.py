"""
app/services/connection_registry.py

Purpose: Live connection tracking

- One process-wide registry of WebSocket connections keyed by user id
- Mutated only on connect/disconnect
- Pushes real-time events (new messages, online users) to connected clients
"""

from typing import Dict, Set, List, Any, Optional

from fastapi import WebSocket

from app.core.logging import get_logger

logger = get_logger(__name__)


class ConnectionRegistry:
    """
    Tracks active WebSocket connections per user.
    Supports multiple connections per user (e.g., phone + web).
    """

    def __init__(self):
        self._active: Dict[str, Set[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket):
        await websocket.accept()
        self._active.setdefault(user_id, set()).add(websocket)
        logger.info(f"User connected ({len(self._active[user_id])} sockets)", extra={"user_id": user_id})

    def disconnect(self, user_id: str, websocket: WebSocket):
        conns = self._active.get(user_id)
        if not conns:
            return
        conns.discard(websocket)
        if not conns:
            self._active.pop(user_id, None)
        logger.info("User disconnected", extra={"user_id": user_id})

    def is_online(self, user_id: str) -> bool:
        return bool(self._active.get(user_id))

    def online_user_ids(self) -> List[str]:
        return list(self._active.keys())

    async def send_to_user(self, user_id: str, payload: Dict[str, Any]) -> int:
        """
        Sends to all connections of a user (multi-device).

        Returns:
            Number of sockets the payload reached
        """
        conns = self._active.get(user_id)
        if not conns:
            return 0

        delivered = 0
        dead: Set[WebSocket] = set()
        for ws in list(conns):
            try:
                await ws.send_json(payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping dead socket: {e}", extra={"user_id": user_id})
                dead.add(ws)

        for ws in dead:
            self.disconnect(user_id, ws)
        return delivered

    async def broadcast(self, payload: Dict[str, Any]):
        for user_id in self.online_user_ids():
            await self.send_to_user(user_id, payload)

    async def broadcast_online_users(self):
        await self.broadcast({"event": "getOnlineUsers", "data": self.online_user_ids()})

    def clear(self):
        self._active.clear()


# Global registry instance
_registry: Optional[ConnectionRegistry] = None


def get_connection_registry() -> ConnectionRegistry:
    """Get or create the global connection registry."""
    global _registry
    if _registry is None:
        _registry = ConnectionRegistry()
    return _registry
