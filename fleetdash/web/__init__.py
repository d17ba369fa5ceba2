"""
Web package for fleetdash.

Contains the in-memory development backend that serves the player/server
API consumed by the dashboard.
"""

from fleetdash.web.server import DevBackend, MetadataRepository

__all__ = [
    "DevBackend",
    "MetadataRepository",
]
