"""
WebSocket Routes

Live dashboard endpoint. Connect with: ws://host/ws?token=<bearer token>

Close codes:
- 4001: no token supplied
- 4003: token invalid or expired
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
import jwt

from rbac.jwt import verify_token

logger = logging.getLogger(__name__)

websocket_router = APIRouter(tags=["WebSocket"])

CLOSE_NO_TOKEN = 4001
CLOSE_INVALID_TOKEN = 4003


@websocket_router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: Optional[str] = Query(None, description="Authentication token"),
):
    """
    Join the caller's organization room and stay there until disconnect.

    Incoming frames are ignored except the text frame `{"type": "ping"}`,
    which is answered with `{"event": "pong"}`. Binary frames are skipped.
    """
    # Accept first so the close code reaches the client
    await websocket.accept()

    if not token:
        await websocket.close(code=CLOSE_NO_TOKEN, reason="Unauthorized: No token provided")
        return

    try:
        claims = verify_token(token, websocket.app.state.settings)
    except jwt.InvalidTokenError as e:
        logger.info(f"[WS] Rejected connection: {e}")
        await websocket.close(code=CLOSE_INVALID_TOKEN, reason="Unauthorized: Invalid token")
        return

    connection_manager = websocket.app.state.connection_manager
    connection_manager.join(claims.org_id, websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break

            text = frame.get("text")
            if text is None:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"event": "pong"})

    except WebSocketDisconnect:
        pass
    finally:
        connection_manager.leave(claims.org_id, websocket)
