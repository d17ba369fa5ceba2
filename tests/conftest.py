"""
Shared fixtures: an in-memory dev backend reachable through httpx.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from fleetdash.web.server import DevBackend, Metadata, MetadataRepository

PLAYER_UUID = "3f2b8c1e-0000-4000-8000-000000000001"


@pytest.fixture
def repository() -> MetadataRepository:
    """Repository with one player and two servers."""
    repo = MetadataRepository()
    repo.players[PLAYER_UUID] = Metadata(
        labels={"rank": "vip"},
        annotations={"player_name": "Steve", "online": "true"},
    )
    repo.servers["lobby-1"] = Metadata(
        labels={"region": "eu-west"},
        annotations={"status": "online", "current_players": "12"},
    )
    repo.servers["survival-2"] = Metadata(
        labels={},
        annotations={"status": "Offline"},
    )
    return repo


@pytest.fixture
def backend(repository: MetadataRepository) -> DevBackend:
    return DevBackend(repository)


@pytest.fixture
async def http(backend: DevBackend) -> AsyncClient:
    """Create an async HTTP client wired to the dev backend."""
    transport = ASGITransport(app=backend.app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
