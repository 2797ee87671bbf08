"""
Real-time dashboard updates over WebSockets.

Usage:
    from realtime import ConnectionManager, DashboardBroadcaster, websocket_router

    app.include_router(websocket_router)

    # Client connects with: ws://host/ws?token=<jwt>
    # and receives {"event": "dashboard.task_completed", "data": {...}}
"""

from .connection_manager import ConnectionManager
from .broadcaster import DashboardBroadcaster, DASHBOARD_EVENTS
from .websocket_routes import websocket_router, CLOSE_NO_TOKEN, CLOSE_INVALID_TOKEN

__all__ = [
    "ConnectionManager",
    "DashboardBroadcaster",
    "DASHBOARD_EVENTS",
    "websocket_router",
    "CLOSE_NO_TOKEN",
    "CLOSE_INVALID_TOKEN",
]
