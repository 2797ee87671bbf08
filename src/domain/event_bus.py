"""
In-process Event Bus.

Decouples task mutations from their side effects (rescoring, on-chain
logging, live dashboard broadcast). One instance is built by the
application composition root and handed to the services that publish.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List

from .events import DomainEvent, EventName


logger = logging.getLogger(__name__)

DEFAULT_MAX_SUBSCRIBERS = 20

EventHandler = Callable[[DomainEvent], Any]


class EventBus:
    """
    Publish/subscribe dispatcher keyed by event name.

    Handlers for a name run sequentially in registration order within the
    publisher's control flow. Handlers may be plain callables or coroutine
    functions. Exceptions raised by a handler are not caught here: a
    subscriber that must not fail its publisher guards itself.
    """

    def __init__(self, max_subscribers: int = DEFAULT_MAX_SUBSCRIBERS):
        """
        Initialize event bus.

        Args:
            max_subscribers: Per-event subscriber count above which a leak
                warning is logged. Not a functional limit.
        """
        self._handlers: Dict[EventName, List[EventHandler]] = {}
        self._max_subscribers = max_subscribers

    def subscribe(self, event_name: EventName, handler: EventHandler) -> None:
        """
        Register a handler for future publishes of an event.

        Args:
            event_name: Event to subscribe to
            handler: Callable receiving the event; may be async
        """
        event_name = EventName(event_name)
        handlers = self._handlers.setdefault(event_name, [])
        handlers.append(handler)

        if len(handlers) > self._max_subscribers:
            logger.warning(
                f"[EventBus] {len(handlers)} subscribers registered for "
                f"'{event_name.value}' (max {self._max_subscribers}); possible leak"
            )
        else:
            logger.debug(f"[EventBus] Subscribed handler to {event_name.value}")

    async def publish(self, event: DomainEvent) -> None:
        """
        Deliver an event to every subscriber of its name.

        Each handler completes before the next one starts.

        Args:
            event: Event to publish
        """
        handlers = list(self._handlers.get(event.event_name, ()))
        logger.debug(
            f"[EventBus] Publishing {event.event_name.value} to {len(handlers)} handler(s)"
        )

        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result

    def subscriber_count(self, event_name: EventName) -> int:
        """Number of handlers registered for an event."""
        return len(self._handlers.get(EventName(event_name), ()))

    def clear(self) -> None:
        """Clear all subscriptions."""
        self._handlers.clear()
