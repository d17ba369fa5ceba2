"""
HTTP client for the fleet metadata backend.

Wraps an `httpx.AsyncClient` and turns raw responses into Resources and
UpdateResults. Two kinds of failure are kept apart:

- Transport failures (connection refused, timeout, non-JSON body, wrong body
  shape) raise a TransportError subclass.
- Semantic failures (the backend answered with a JSON object carrying an
  `error` field) are returned as an UpdateResult with `error` set. The
  backend sends these with a 4xx/5xx status, so the status code alone does
  not decide which kind of failure occurred.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from fleetdash.core import DecodeError, NetworkError
from fleetdash.core.resources import MetadataUpdate, Resource, ResourceKind

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpdateResult:
    """Outcome of an update call that reached the backend."""

    error: str | None = None
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


class UpdateClient:
    """
    Performs the list and update calls for every resource kind.

    The httpx client is owned by the caller (normally the Dashboard), which
    configures base URL and timeouts.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def fetch_list(self, kind: ResourceKind) -> list[Resource]:
        """
        Fetch all resources of a kind, in server order.

        Raises:
            NetworkError: Transport failure or HTTP error status.
            DecodeError: Body is not a JSON array of resource objects.
        """
        try:
            response = await self._http.get(kind.list_path)
        except httpx.HTTPError as e:
            raise NetworkError(f"GET {kind.list_path} failed: {e}") from e

        if response.is_error:
            raise NetworkError(f"GET {kind.list_path} returned HTTP {response.status_code}")

        body = self._decode(response)
        # An empty list is serialized as null by the backend
        if body is None:
            return []
        if not isinstance(body, list):
            raise DecodeError(f"Expected a list of {kind.name}, got {type(body).__name__}")

        resources = [Resource.from_payload(kind, item) for item in body]
        logger.debug("Fetched %d %s", len(resources), kind.name)
        return resources

    async def update(
        self,
        kind: ResourceKind,
        identity: str,
        update: MetadataUpdate,
    ) -> UpdateResult:
        """
        Send a metadata update for one resource.

        Returns:
            UpdateResult; `error` carries the backend's message verbatim when
            the backend rejected the update.

        Raises:
            NetworkError: Transport failure, or HTTP error status without an
                `error` message in the body.
            DecodeError: Body is not a JSON object.
        """
        path = f"{kind.list_path}/{quote(identity, safe='')}/update"
        try:
            response = await self._http.post(path, json=update.to_payload())
        except httpx.HTTPError as e:
            raise NetworkError(f"POST {path} failed: {e}") from e

        body = self._decode(response)
        if not isinstance(body, dict):
            raise DecodeError(f"Expected an object from {path}, got {type(body).__name__}")

        error = body.get("error")
        if error:
            logger.debug("Backend rejected update of %s %s: %s", kind.singular, identity, error)
            return UpdateResult(error=str(error), body=body)

        if response.is_error:
            raise NetworkError(f"POST {path} returned HTTP {response.status_code}")

        return UpdateResult(body=body)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Malformed JSON from {response.request.url}: {e}") from e
