"""
Development backend for fleetdash.

Serves the same HTTP surface as the real metadata backend from an in-memory
repository, so the dashboard can be exercised locally and in tests:

- GET  /api/players                 -> list of player view models
- GET  /api/servers                 -> list of server view models
- POST /api/players/{uuid}/update   -> apply labels/annotations
- POST /api/servers/{name}/update   -> apply labels/annotations

View model rules follow the real backend: a player's name comes from the
`player_name` annotation, its status from the `online` annotation; a
server's status and player count come from the `status` and
`current_players` annotations. Updates set each key, delete keys whose value
is empty, and create the resource if it does not exist yet.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

STATUSES = ("online", "offline", "starting", "stopping")
REGIONS = ("eu-west", "eu-central", "us-east", "ap-south")
GAMEMODES = ("lobby", "survival", "skywars", "bedwars")


@dataclass
class Metadata:
    """Labels and annotations stored for one resource."""

    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def apply(self, labels: dict[str, str], annotations: dict[str, str]) -> None:
        """Merge an update; empty values delete the key."""
        for target, changes in ((self.labels, labels), (self.annotations, annotations)):
            for key, value in changes.items():
                if value == "":
                    target.pop(key, None)
                else:
                    target[key] = value


class MetadataRepository:
    """In-memory players and servers, keyed by uuid and name."""

    def __init__(self) -> None:
        self.players: dict[str, Metadata] = {}
        self.servers: dict[str, Metadata] = {}

    def seed(
        self,
        players: int = 25,
        servers: int = 5,
        prefix: str = "local",
        seed: int | None = None,
    ) -> None:
        """Populate the repository with fake data."""
        rng = random.Random(seed)

        server_names: list[str] = []
        for i in range(servers):
            gamemode = GAMEMODES[i % len(GAMEMODES)]
            name = f"{prefix}-{gamemode}-{i + 1}"
            server_names.append(name)
            self.servers[name] = Metadata(
                labels={
                    "region": rng.choice(REGIONS),
                    "gamemode": gamemode,
                },
                annotations={
                    "status": rng.choice(STATUSES),
                    "current_players": "0",
                },
            )

        for i in range(players):
            player_uuid = str(uuid.UUID(int=rng.getrandbits(128), version=4))
            online = rng.random() < 0.6
            labels = {"rank": rng.choice(("default", "vip", "staff"))}
            if online and server_names:
                server = rng.choice(server_names)
                labels["server"] = server
                count = int(self.servers[server].annotations["current_players"])
                self.servers[server].annotations["current_players"] = str(count + 1)
            self.players[player_uuid] = Metadata(
                labels=labels,
                annotations={
                    "player_name": f"{prefix}_player{i + 1}",
                    "online": "true" if online else "false",
                },
            )

        logger.info("Seeded %d players and %d servers", players, servers)


def player_view(player_uuid: str, meta: Metadata) -> dict[str, Any]:
    status = "Online" if meta.annotations.get("online") == "true" else "Offline"
    return {
        "uuid": player_uuid,
        "name": meta.annotations.get("player_name", "Unknown"),
        "labels": dict(meta.labels),
        "annotations": dict(meta.annotations),
        "status": status,
    }


def server_view(name: str, meta: Metadata) -> dict[str, Any]:
    try:
        player_count = int(meta.annotations.get("current_players", "0"))
    except ValueError:
        player_count = 0
    return {
        "name": name,
        "labels": dict(meta.labels),
        "annotations": dict(meta.annotations),
        "status": meta.annotations.get("status", "Unknown"),
        "player_count": player_count,
    }


def _parse_update(body: Any) -> tuple[dict[str, str], dict[str, str]]:
    if not isinstance(body, dict):
        raise ValueError("request body must be a JSON object")
    parsed: list[dict[str, str]] = []
    for section in ("labels", "annotations"):
        value = body.get(section) or {}
        if not isinstance(value, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise ValueError(f"'{section}' must be a map of strings")
        parsed.append(value)
    return parsed[0], parsed[1]


class DevBackend:
    """
    FastAPI-based stand-in for the metadata backend.
    """

    def __init__(self, repository: MetadataRepository | None = None) -> None:
        self.repository = repository or MetadataRepository()

        self.app = FastAPI(
            title="fleetdash dev backend",
            description="In-memory player/server metadata backend",
            version="0.1.0",
        )
        self._register_routes()

    def _register_routes(self) -> None:
        """Register all routes with the FastAPI app."""
        repo = self.repository

        @self.app.get("/health")
        async def health_check() -> dict[str, str]:
            return {"status": "ok", "server": "fleetdash-dev"}

        @self.app.get("/api/players")
        async def list_players() -> list[dict[str, Any]]:
            return [player_view(key, meta) for key, meta in repo.players.items()]

        @self.app.get("/api/servers")
        async def list_servers() -> list[dict[str, Any]]:
            return [server_view(key, meta) for key, meta in repo.servers.items()]

        @self.app.post("/api/players/{player_uuid}/update")
        async def update_player(player_uuid: str, request: Request) -> JSONResponse:
            return await self._update(request, repo.players, player_uuid, "Player")

        @self.app.post("/api/servers/{name}/update")
        async def update_server(name: str, request: Request) -> JSONResponse:
            return await self._update(request, repo.servers, name, "Server")

    async def _update(
        self,
        request: Request,
        table: dict[str, Metadata],
        key: str,
        label: str,
    ) -> JSONResponse:
        try:
            labels, annotations = _parse_update(await request.json())
        except ValueError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

        table.setdefault(key, Metadata()).apply(labels, annotations)
        logger.info("%s %s updated", label, key)
        return JSONResponse(content={"message": f"{label} updated successfully"})

    async def serve(self, host: str = "127.0.0.1", port: int = 8080) -> None:
        """Run the backend until cancelled."""
        config = uvicorn.Config(self.app, host=host, port=port, log_level="warning")
        server = uvicorn.Server(config)
        logger.info("Dev backend listening on http://%s:%d", host, port)
        await server.serve()
