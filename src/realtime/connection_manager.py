"""
WebSocket Connection Manager

Tracks live dashboard connections in per-organization rooms and fans out
JSON messages to a room.
"""

import json
import logging
from typing import Any, Dict, Set

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Registry of open WebSocket connections keyed by organization.

    All mutation happens on the event loop thread, so no lock is held.
    Empty rooms are deleted as soon as their last connection leaves.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[WebSocket]] = {}

    def join(self, org_id: str, websocket: WebSocket) -> None:
        """Add a connection to an organization's room."""
        self._rooms.setdefault(org_id, set()).add(websocket)
        logger.info(f"[WS] Client connected to org room: {org_id}")

    def leave(self, org_id: str, websocket: WebSocket) -> None:
        """Remove a connection; safe to call for unknown connections."""
        room = self._rooms.get(org_id)
        if room is None:
            return

        room.discard(websocket)
        if not room:
            del self._rooms[org_id]
        logger.info(f"[WS] Client disconnected from org room: {org_id}")

    async def broadcast_to_org(
        self,
        org_id: str,
        event_name: str,
        payload: Dict[str, Any],
    ) -> int:
        """
        Send `{"event": event_name, "data": payload}` to every open socket
        in the organization's room.

        Closed or failing sockets are skipped and not retried.

        Returns:
            Number of sockets the message was delivered to.
        """
        room = self._rooms.get(org_id)
        if not room:
            return 0

        message = json.dumps({"event": event_name, "data": payload}, default=str)
        delivered = 0

        for websocket in list(room):
            if websocket.application_state != WebSocketState.CONNECTED:
                continue
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"[WS] Failed to send {event_name} to org {org_id}: {e}")

        logger.debug(f"[WS] Broadcast to org {org_id}: {event_name} ({delivered} clients)")
        return delivered

    def room_size(self, org_id: str) -> int:
        return len(self._rooms.get(org_id, ()))

    def get_stats(self) -> Dict[str, Any]:
        """Get connection statistics."""
        return {
            "total_connections": sum(len(room) for room in self._rooms.values()),
            "orgs_with_connections": len(self._rooms),
            "connections_by_org": {
                org_id: len(room) for org_id, room in self._rooms.items()
            },
        }
