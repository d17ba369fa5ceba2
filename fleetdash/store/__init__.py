"""
Client-side stores for fleetdash.

One ResourceStore instance exists per resource kind.
"""

from fleetdash.store.resource_store import ResourceStore

__all__ = [
    "ResourceStore",
]
