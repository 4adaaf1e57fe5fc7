"""Event bus used by the session to notify observers of state changes.

Usage:
    bus = EventBus()

    async def on_appended(event):
        print(event.data["message"].content)

    bus.subscribe(TRANSCRIPT_APPENDED, on_appended)
    await bus.publish(TRANSCRIPT_APPENDED, {"message": message})
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)

BUFFER_CHANGED = "buffer.changed"
MODE_CHANGED = "mode.changed"
TRANSCRIPT_APPENDED = "transcript.appended"
EXIT_REQUESTED = "session.exit_requested"


@dataclass
class Event:
    """Event data container."""

    name: str
    data: dict[str, Any]
    source: str | None = None


class EventBus:
    """Publish/subscribe hub owned by a single chat session.

    Handlers may be plain functions or coroutine functions. A failing handler
    is logged and never interrupts the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable]] = {}

    def subscribe(self, event_name: str, handler: Callable) -> None:
        """Subscribe to an event.

        Args:
            event_name: Event to listen for (e.g., "buffer.changed")
            handler: Sync or async callable receiving the Event
        """
        self._subscribers.setdefault(event_name, []).append(handler)
        LOGGER.debug("Subscribed to event: %s", event_name)

    def unsubscribe(self, event_name: str, handler: Callable) -> None:
        """Unsubscribe from an event; unknown handlers are ignored."""
        if event_name in self._subscribers:
            try:
                self._subscribers[event_name].remove(handler)
                LOGGER.debug("Unsubscribed from event: %s", event_name)
            except ValueError:
                pass

    def subscriber_count(self, event_name: str) -> int:
        return len(self._subscribers.get(event_name, []))

    async def publish(
        self,
        event_name: str,
        data: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> None:
        """Publish an event to all subscribers, in subscription order."""
        event = Event(name=event_name, data=data or {}, source=source)
        handlers = list(self._subscribers.get(event_name, []))

        if not handlers:
            LOGGER.debug("No subscribers for event: %s", event_name)
            return

        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                LOGGER.error("Event handler failed for %s: %s", event_name, e)

    def clear(self, event_name: str | None = None) -> None:
        """Clear subscribers for one event, or all of them."""
        if event_name:
            self._subscribers.pop(event_name, None)
        else:
            self._subscribers.clear()
