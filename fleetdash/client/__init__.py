"""
HTTP client layer for fleetdash.
"""

from fleetdash.client.update_client import UpdateClient, UpdateResult

__all__ = [
    "UpdateClient",
    "UpdateResult",
]
