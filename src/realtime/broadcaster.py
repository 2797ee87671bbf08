"""
Dashboard Broadcaster

Bridges domain events to the live dashboard channel.
"""

import logging
from typing import Dict

from domain.event_bus import EventBus
from domain.events import DomainEvent, EventName

from .connection_manager import ConnectionManager

logger = logging.getLogger(__name__)

# Domain event -> event name seen by dashboard clients
DASHBOARD_EVENTS: Dict[EventName, str] = {
    EventName.TASK_COMPLETED: "dashboard.task_completed",
    EventName.TASK_CREATED: "dashboard.task_created",
}


class DashboardBroadcaster:
    """Pushes task events to the owning organization's room."""

    def __init__(self, connection_manager: ConnectionManager):
        self._connections = connection_manager

    def register(self, event_bus: EventBus) -> None:
        """Subscribe to every event that has a dashboard counterpart."""
        for event_name in DASHBOARD_EVENTS:
            event_bus.subscribe(event_name, self.handle)

    async def handle(self, event: DomainEvent) -> None:
        dashboard_event = DASHBOARD_EVENTS.get(event.event_name)
        if dashboard_event is None:
            return

        await self._connections.broadcast_to_org(
            event.org_id,
            dashboard_event,
            event.to_payload(),
        )
