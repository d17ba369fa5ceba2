"""
Core domain package.

This package contains the resource administration logic which should be
independent of any UI layer (web, CLI, etc.): the key/value codec, status
classification, resource models, notifications and the event bus.

We intentionally keep exports minimal; consumers should usually import from the
specific module they need (e.g. `fleetdash.core.codec`).
"""

from __future__ import annotations

__all__: list[str] = [
    "DashboardError",
    "TransportError",
    "NetworkError",
    "DecodeError",
    "EditStateError",
]


class DashboardError(Exception):
    """Base class for fleetdash exceptions."""


class TransportError(DashboardError):
    """Raised when a request could not complete or its response is unusable."""


class NetworkError(TransportError):
    """Raised on connection/DNS/timeout failures or unexpected HTTP status codes."""


class DecodeError(TransportError):
    """Raised when a response body is not well-formed JSON of the expected shape."""


class EditStateError(DashboardError):
    """Raised when an edit operation is attempted without an open edit buffer."""
