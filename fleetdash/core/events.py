"""
Event Bus for fleetdash.

Stores and the notification center publish state changes here so a rendering
layer can redraw without the stores knowing anything about presentation.

Event types:
- store.items: A store replaced its list of resources
- store.loading: A store's loading flag changed
- store.edit: An edit buffer was opened or closed
- notification.changed: A notification moved to a new lifecycle state

Usage:
    bus = EventBus()

    async def on_items(event: ItemsChangedEvent) -> None:
        print(f"{event.kind} now has {event.count} rows")

    await bus.subscribe("store.items", on_items)
    await bus.subscribe("store.*", redraw_everything)

There is no module-level bus; each Dashboard owns one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[["Event"], Coroutine[Any, Any, None]]


@dataclass
class Event:
    """Base class for all events."""

    event_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for JSON serialization."""
        return {"type": self.event_type}


@dataclass
class ItemsChangedEvent(Event):
    """Fired after a store replaced its cached list."""

    event_type: str = field(default="store.items", init=False)
    kind: str = ""
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type, "kind": self.kind, "count": self.count}


@dataclass
class LoadingChangedEvent(Event):
    """Fired when a store starts or finishes loading."""

    event_type: str = field(default="store.loading", init=False)
    kind: str = ""
    loading: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_type, "kind": self.kind, "loading": self.loading}


@dataclass
class EditBufferEvent(Event):
    """Fired when an edit buffer opens (open=True) or closes (open=False)."""

    event_type: str = field(default="store.edit", init=False)
    kind: str = ""
    identity: str = ""
    open: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type,
            "kind": self.kind,
            "identity": self.identity,
            "open": self.open,
        }


@dataclass
class NotificationEvent(Event):
    """Fired on every notification lifecycle transition."""

    event_type: str = field(default="notification.changed", init=False)
    notification_id: int = 0
    message: str = ""
    severity: str = ""
    state: str = ""  # created, visible, dismissing, removed

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type,
            "notification_id": self.notification_id,
            "message": self.message,
            "severity": self.severity,
            "state": self.state,
        }


class EventBus:
    """
    Simple async pub/sub event bus.

    Supports:
    - Multiple handlers per event type
    - Wildcard subscriptions ("store.*" or "*")
    - Error isolation (one handler failing doesn't affect others)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[int]] = set()

    async def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type: Event type to subscribe to. Use ".*" suffix for wildcards.
            handler: Async function to call when event is published.
        """
        async with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            logger.debug("Subscribed to %s: %s", event_type, handler)

    async def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove a handler. Returns True if it was subscribed."""
        async with self._lock:
            handlers = self._handlers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)
                logger.debug("Unsubscribed from %s: %s", event_type, handler)
                return True
            return False

    def _matching(self, event_type: str) -> list[EventHandler]:
        matching: list[EventHandler] = list(self._handlers.get(event_type, ()))
        for pattern, handlers in self._handlers.items():
            if pattern == "*":
                matching.extend(handlers)
            elif pattern.endswith(".*") and event_type.startswith(pattern[:-1]):
                matching.extend(handlers)
        return matching

    async def publish(self, event: Event) -> int:
        """
        Publish an event to all subscribed handlers.

        Returns:
            Number of handlers that ran without raising.
        """
        async with self._lock:
            handlers = self._matching(event.event_type)

        # Call handlers outside of lock
        handlers_called = 0
        for handler in handlers:
            try:
                await handler(event)
                handlers_called += 1
            except Exception as e:
                logger.exception("Error in event handler for %s: %s", event.event_type, e)

        if handlers_called > 0:
            logger.debug("Published %s to %d handlers", event.event_type, handlers_called)

        return handlers_called

    def publish_sync(self, event: Event) -> None:
        """
        Schedule event publication from synchronous code (e.g. timer callbacks).
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Cannot publish event %s: no running event loop", event.event_type)
            return
        task = loop.create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def clear(self) -> None:
        """Remove all subscriptions."""
        async with self._lock:
            self._handlers.clear()
            logger.debug("Cleared all event subscriptions")
