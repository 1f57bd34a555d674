"""
app/api/ws.py

Purpose: Real-time channel

- Authenticates the socket with the session token
- Registers it in the connection registry
- Publishes the online-user list on every connect/disconnect
- New messages are pushed by the message service
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from app.services.auth_service import resolve_session
from app.services.connection_registry import get_connection_registry

logger = get_logger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def ws_chat(websocket: WebSocket):
    """
    Connect with:
      ws://<host>/ws?token=<JWT>

    Server events:
      {"event": "getOnlineUsers", "data": ["<userId>", ...]}
      {"event": "newMessage", "data": {...message...}}
    """
    token = websocket.query_params.get("token")
    try:
        user = await resolve_session(token)
    except AuthenticationError as e:
        logger.info(f"WebSocket rejected: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = str(user["_id"])
    registry = get_connection_registry()

    await registry.connect(user_id, websocket)
    await registry.broadcast_online_users()

    try:
        while True:
            # Clients only listen; incoming frames keep the socket alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        registry.disconnect(user_id, websocket)
        await registry.broadcast_online_users()
