"""Status classification for player and server rows."""

from __future__ import annotations

from enum import Enum


class StatusCategory(Enum):
    """Display category of a resource status."""

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


def classify(status: str | None) -> StatusCategory:
    """
    Map a raw backend status string to a display category.

    Matching is case-insensitive. Anything other than "online"/"offline",
    including None and the empty string, is UNKNOWN.
    """
    if not status:
        return StatusCategory.UNKNOWN
    lowered = status.lower()
    if lowered == StatusCategory.ONLINE.value:
        return StatusCategory.ONLINE
    if lowered == StatusCategory.OFFLINE.value:
        return StatusCategory.OFFLINE
    return StatusCategory.UNKNOWN
