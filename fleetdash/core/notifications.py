"""
Notification center for fleetdash.

Notifications are short-lived messages describing the outcome of a user
action ("Player updated successfully", "Failed to load servers", ...).

Lifecycle of a single notification:

    CREATED --(entry_delay)--> VISIBLE --(display_duration)--> DISMISSING
        --(exit_delay)--> REMOVED

`dismiss()` jumps straight to DISMISSING from any earlier state. Each
notification owns its own timer handles, so notifications never affect each
other's timing.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from fleetdash.core.events import NotificationEvent

if TYPE_CHECKING:
    from fleetdash.core.events import EventBus

logger = logging.getLogger(__name__)

# Defaults match the dashboard's toast animation
DEFAULT_ENTRY_DELAY_SECONDS = 0.1
DEFAULT_DISPLAY_SECONDS = 5.0
DEFAULT_EXIT_DELAY_SECONDS = 0.3


class Severity(Enum):
    """Severity of a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationState(Enum):
    """Lifecycle state of a notification."""

    CREATED = "created"
    VISIBLE = "visible"
    DISMISSING = "dismissing"
    REMOVED = "removed"


@dataclass(eq=False)
class Notification:
    """
    A single notification. Also serves as the handle returned by `notify()`.
    """

    id: int
    message: str
    severity: Severity
    created_at: float = field(default_factory=time.time)
    state: NotificationState = NotificationState.CREATED

    @property
    def active(self) -> bool:
        return self.state is not NotificationState.REMOVED


class NotificationCenter:
    """
    Queue of transient notifications with timed lifecycles.

    Must be used from within a running event loop; without one, notifications
    are recorded but stay CREATED until dismissed.
    """

    def __init__(
        self,
        entry_delay: float = DEFAULT_ENTRY_DELAY_SECONDS,
        display_duration: float = DEFAULT_DISPLAY_SECONDS,
        exit_delay: float = DEFAULT_EXIT_DELAY_SECONDS,
        events: EventBus | None = None,
    ) -> None:
        self.entry_delay = entry_delay
        self.display_duration = display_duration
        self.exit_delay = exit_delay
        self._events = events
        self._notifications: list[Notification] = []
        self._timers: dict[int, asyncio.TimerHandle] = {}
        self._ids = itertools.count(1)

    @property
    def notifications(self) -> list[Notification]:
        """Current notifications that have not been removed, oldest first."""
        return [n for n in self._notifications if n.active]

    def notify(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        """
        Add a notification and start its lifecycle timers.

        Returns:
            The notification, usable as a handle for `dismiss()`.
        """
        notification = Notification(id=next(self._ids), message=message, severity=severity)
        self._notifications.append(notification)
        logger.debug("Notification %d (%s): %s", notification.id, severity.value, message)
        self._publish(notification)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; notification %d will not expire", notification.id)
            return notification

        self._timers[notification.id] = loop.call_later(self.entry_delay, self._show, notification)
        return notification

    def dismiss(self, handle: Notification | int) -> None:
        """
        Start dismissing a notification now. No-op if it is already
        dismissing, removed or unknown.
        """
        notification = self._find(handle)
        if notification is None:
            return
        if notification.state in (NotificationState.DISMISSING, NotificationState.REMOVED):
            return
        self._begin_dismiss(notification)

    def clear(self) -> None:
        """Cancel all timers and drop every notification (used on shutdown)."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._notifications.clear()

    def _find(self, handle: Notification | int) -> Notification | None:
        notification_id = handle.id if isinstance(handle, Notification) else handle
        for notification in self._notifications:
            if notification.id == notification_id:
                return notification
        return None

    def _schedule(
        self,
        notification: Notification,
        delay: float,
        callback: Callable[[Notification], None],
    ) -> None:
        timer = self._timers.pop(notification.id, None)
        if timer is not None:
            timer.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Dismissed outside a loop: finish immediately
            callback(notification)
            return
        self._timers[notification.id] = loop.call_later(delay, callback, notification)

    def _show(self, notification: Notification) -> None:
        self._timers.pop(notification.id, None)
        self._transition(notification, NotificationState.VISIBLE)
        self._schedule(notification, self.display_duration, self._begin_dismiss)

    def _begin_dismiss(self, notification: Notification) -> None:
        self._transition(notification, NotificationState.DISMISSING)
        self._schedule(notification, self.exit_delay, self._remove)

    def _remove(self, notification: Notification) -> None:
        self._timers.pop(notification.id, None)
        self._transition(notification, NotificationState.REMOVED)
        if notification in self._notifications:
            self._notifications.remove(notification)

    def _transition(self, notification: Notification, state: NotificationState) -> None:
        notification.state = state
        logger.debug("Notification %d -> %s", notification.id, state.value)
        self._publish(notification)

    def _publish(self, notification: Notification) -> None:
        if self._events is None:
            return
        self._events.publish_sync(
            NotificationEvent(
                notification_id=notification.id,
                message=notification.message,
                severity=notification.severity.value,
                state=notification.state.value,
            )
        )

    def __len__(self) -> int:
        return len(self.notifications)

    def __bool__(self) -> bool:
        """A notification center is always truthy, even when empty."""
        return True
