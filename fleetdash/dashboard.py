"""
fleetdash - Dashboard Module

This module contains the Dashboard class that wires the HTTP client, event
bus, notification center and one store per resource kind, and manages their
lifecycle.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from fleetdash.client.update_client import UpdateClient
from fleetdash.config import DashboardConfig, get_config
from fleetdash.core.events import EventBus
from fleetdash.core.notifications import NotificationCenter
from fleetdash.core.resources import PLAYERS, SERVERS, ResourceKind
from fleetdash.store.resource_store import ResourceStore

logger = logging.getLogger(__name__)


class Dashboard:
    """
    Administrative front end state for players and servers.

    Usage:
        async with Dashboard(config) as dashboard:
            for player in dashboard.players.items:
                print(player.display_name)

    Nothing here is global: two Dashboard instances never share state.
    """

    def __init__(
        self,
        config: DashboardConfig | None = None,
        *,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the Dashboard.

        Args:
            config: Configuration (defaults to the cached global config).
            http: Optional pre-built httpx client (e.g. with a test transport).
                A client passed in is not closed by `stop()`.
        """
        self.config = config or get_config()

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.config.backend.base_url,
            timeout=self.config.backend.timeout,
        )

        self.events = EventBus()
        timings = self.config.notifications
        self.notifications = NotificationCenter(
            entry_delay=timings.entry_delay,
            display_duration=timings.display_duration,
            exit_delay=timings.exit_delay,
            events=self.events,
        )
        self.client = UpdateClient(self.http)

        self.players = ResourceStore(PLAYERS, self.client, self.notifications, self.events)
        self.servers = ResourceStore(SERVERS, self.client, self.notifications, self.events)

    def store(self, kind: ResourceKind | str) -> ResourceStore:
        """Return the store for a kind (object or plural name)."""
        name = kind if isinstance(kind, str) else kind.name
        if name == PLAYERS.name:
            return self.players
        if name == SERVERS.name:
            return self.servers
        raise KeyError(f"Unknown resource kind: {name}")

    async def start(self) -> None:
        """Perform the initial load of both stores."""
        logger.info("Loading dashboard from %s", self.http.base_url)
        await self.players.load()
        await self.servers.load()

    async def stop(self) -> None:
        """Cancel pending notification timers and close the HTTP client."""
        self.notifications.clear()
        await self.events.clear()
        if self._owns_http:
            await self.http.aclose()
        logger.info("Dashboard stopped")

    async def __aenter__(self) -> Dashboard:
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
