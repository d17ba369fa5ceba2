"""
Resource Store - client-side mirror of one resource kind.

A ResourceStore holds the list of players (or servers) as last returned by
the backend, a loading flag, and at most one open edit buffer. It
orchestrates load/refresh/edit/save and reports outcomes through the
NotificationCenter.

Design decisions:
- One store per resource kind; stores share nothing with each other.
- Loads replace the whole list, never merge. Concurrent loads are not
  coalesced: whichever response resolves last wins.
- Saves never patch the cache; a successful save closes the buffer and
  reloads the list from the backend.
- Only TransportError is caught. Other exceptions propagate.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator

from fleetdash.core import EditStateError, TransportError
from fleetdash.core.events import EditBufferEvent, ItemsChangedEvent, LoadingChangedEvent
from fleetdash.core.notifications import Severity
from fleetdash.core.resources import EditBuffer, Resource, ResourceKind

if TYPE_CHECKING:
    from fleetdash.client.update_client import UpdateClient
    from fleetdash.core.events import Event, EventBus
    from fleetdash.core.notifications import NotificationCenter

logger = logging.getLogger(__name__)


class ResourceStore:
    """
    Cache, loading state and edit buffer for one resource kind.

    Usage:
        store = ResourceStore(PLAYERS, client, notifications)
        await store.load()
        store.begin_edit("a1b2-...")
        store.edit_buffer.add_label("env", "prod")
        await store.save()
    """

    def __init__(
        self,
        kind: ResourceKind,
        client: UpdateClient,
        notifications: NotificationCenter,
        events: EventBus | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            kind: Resource kind served by this store.
            client: Client used for list and update calls.
            notifications: Where outcome messages are posted.
            events: Optional bus for state change events.
        """
        self.kind = kind
        self._client = client
        self._notifications = notifications
        self._events = events

        self._items: list[Resource] = []
        self._loading = False
        self._edit_buffer: EditBuffer | None = None

    @property
    def items(self) -> list[Resource]:
        """Cached resources in server order (copy, safe to iterate)."""
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def edit_buffer(self) -> EditBuffer | None:
        return self._edit_buffer

    def get(self, identity: str) -> Resource | None:
        """Look up a cached resource by identity."""
        for resource in self._items:
            if resource.identity == identity:
                return resource
        return None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """
        Replace the cached list with the backend's current list.

        On transport failure the previous list is kept and an error
        notification is posted. `loading` is cleared in every case.
        """
        try:
            await self._set_loading(True)
            resources = await self._client.fetch_list(self.kind)
        except TransportError as e:
            logger.error("Error loading %s: %s", self.kind.name, e)
            self._notifications.notify(self.kind.load_failed_message, Severity.ERROR)
        else:
            self._items = resources
            logger.info("Loaded %d %s", len(resources), self.kind.name)
            await self._publish(ItemsChangedEvent(kind=self.kind.name, count=len(resources)))
        finally:
            await self._set_loading(False)

    async def refresh(self) -> None:
        """
        Reload the list and confirm the refresh.

        The info notification is posted whether or not the load succeeded,
        so a failed refresh shows both the error and the confirmation.
        """
        await self.load()
        self._notifications.notify(self.kind.refreshed_message, Severity.INFO)

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def begin_edit(self, identity: str) -> EditBuffer | None:
        """
        Open an edit buffer for a cached resource.

        Any previously open buffer is discarded. Unknown identities are
        ignored and leave the current buffer untouched.

        Returns:
            The new buffer, or None if the identity is not cached.
        """
        resource = self.get(identity)
        if resource is None:
            logger.debug("Ignoring edit of unknown %s %s", self.kind.singular, identity)
            return None

        self._edit_buffer = EditBuffer.from_resource(resource)
        self._publish_sync(EditBufferEvent(kind=self.kind.name, identity=identity, open=True))
        return self._edit_buffer

    def cancel_edit(self) -> None:
        """Close the edit buffer without saving."""
        if self._edit_buffer is None:
            return
        identity = self._edit_buffer.identity
        self._edit_buffer = None
        self._publish_sync(EditBufferEvent(kind=self.kind.name, identity=identity, open=False))

    async def save(self) -> bool:
        """
        Submit the open edit buffer.

        On success the buffer is closed and the list is reloaded. On any
        failure the buffer stays open so the user can correct and retry.

        Returns:
            True if the backend accepted the update.

        Raises:
            EditStateError: If no edit buffer is open.
        """
        buffer = self._edit_buffer
        if buffer is None:
            raise EditStateError(f"No {self.kind.singular} is being edited")

        update = buffer.to_update()
        try:
            result = await self._client.update(self.kind, buffer.identity, update)
        except TransportError as e:
            logger.error("Error updating %s %s: %s", self.kind.singular, buffer.identity, e)
            self._notifications.notify(self.kind.update_failed_message, Severity.ERROR)
            return False

        if not result.ok:
            logger.warning(
                "Update of %s %s rejected: %s",
                self.kind.singular,
                buffer.identity,
                result.error,
            )
            self._notifications.notify(result.error or "", Severity.ERROR)
            return False

        logger.info("Updated %s %s", self.kind.singular, buffer.identity)
        self._notifications.notify(self.kind.updated_message, Severity.SUCCESS)
        self.cancel_edit()
        await self.load()
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        await self._publish(LoadingChangedEvent(kind=self.kind.name, loading=loading))

    async def _publish(self, event: Event) -> None:
        if self._events is not None:
            await self._events.publish(event)

    def _publish_sync(self, event: Event) -> None:
        if self._events is not None:
            self._events.publish_sync(event)

    def __len__(self) -> int:
        """Return the number of cached resources."""
        return len(self._items)

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._items))

    def __contains__(self, identity: str) -> bool:
        return self.get(identity) is not None

    def __bool__(self) -> bool:
        """A store is always truthy, even when empty."""
        return True
