"""
Resource models for fleetdash.

Two resource kinds are administered: players (identified by `uuid`) and
servers (identified by `name`). Both carry a status string and two metadata
maps (labels, annotations). Any other field the backend sends is kept as an
opaque pass-through in `Resource.extra`.

Design decisions:
- A ResourceKind describes everything kind-specific (URL segment, identity
  field, user-facing wording, display-name folding) so a single store
  implementation serves both kinds.
- Resources are read-only snapshots of the backend; the client never
  originates one.
- EditBuffer holds copies of the metadata as ordered pairs, so editing never
  touches the cached list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fleetdash.core import DecodeError
from fleetdash.core.codec import KeyValuePair, to_map, to_pairs
from fleetdash.core.status import StatusCategory, classify


@dataclass(frozen=True, slots=True)
class ResourceKind:
    """
    Kind-specific behaviour of a resource type.

    Attributes:
        name: Plural name, also the URL segment ("players").
        singular: Singular name used in messages ("player").
        identity_field: Payload field holding the immutable identity.
        name_annotation: Annotation key the edited display name is folded
            into on save, or None if the kind has no editable name.
    """

    name: str
    singular: str
    identity_field: str
    name_annotation: str | None = None

    @property
    def has_display_name(self) -> bool:
        return self.name_annotation is not None

    @property
    def list_path(self) -> str:
        return f"/api/{self.name}"

    @property
    def load_failed_message(self) -> str:
        return f"Failed to load {self.name}"

    @property
    def update_failed_message(self) -> str:
        return f"Failed to update {self.singular}"

    @property
    def updated_message(self) -> str:
        return f"{self.singular.capitalize()} updated successfully"

    @property
    def refreshed_message(self) -> str:
        return f"{self.name.capitalize()} refreshed"


PLAYERS = ResourceKind(
    name="players",
    singular="player",
    identity_field="uuid",
    name_annotation="player_name",
)

SERVERS = ResourceKind(
    name="servers",
    singular="server",
    identity_field="name",
)

RESOURCE_KINDS: dict[str, ResourceKind] = {kind.name: kind for kind in (PLAYERS, SERVERS)}


def _string_map(value: Any, field_name: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"Field '{field_name}' must be an object, got {type(value).__name__}")
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass(frozen=True, slots=True)
class Resource:
    """A player or server as mirrored from the backend."""

    kind: ResourceKind
    identity: str
    name: str = ""
    status: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, kind: ResourceKind, payload: Any) -> Resource:
        """
        Build a Resource from one decoded JSON object.

        Raises:
            DecodeError: If the payload is not an object or lacks the identity.
        """
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected {kind.singular} object, got {type(payload).__name__}")

        identity = payload.get(kind.identity_field)
        if not isinstance(identity, str) or not identity:
            raise DecodeError(f"{kind.singular.capitalize()} is missing '{kind.identity_field}'")

        known = {kind.identity_field, "name", "status", "labels", "annotations"}
        name = payload.get("name")
        status = payload.get("status")

        return cls(
            kind=kind,
            identity=identity,
            name=name if isinstance(name, str) else "",
            status=status if isinstance(status, str) else "",
            labels=_string_map(payload.get("labels"), "labels"),
            annotations=_string_map(payload.get("annotations"), "annotations"),
            extra={k: v for k, v in payload.items() if k not in known},
        )

    def to_payload(self) -> dict[str, Any]:
        """Convert back to the backend's JSON shape."""
        result: dict[str, Any] = dict(self.extra)
        if self.name:
            result["name"] = self.name
        result[self.kind.identity_field] = self.identity
        result["status"] = self.status
        result["labels"] = dict(self.labels)
        result["annotations"] = dict(self.annotations)
        return result

    @property
    def display_name(self) -> str:
        if self.kind.has_display_name:
            return self.name or "Unknown"
        return self.name or self.identity

    @property
    def status_category(self) -> StatusCategory:
        return classify(self.status)


@dataclass(slots=True)
class MetadataUpdate:
    """Request body of an update call."""

    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, dict[str, str]]:
        return {"labels": dict(self.labels), "annotations": dict(self.annotations)}


@dataclass(slots=True)
class EditBuffer:
    """
    Working copy of one resource's metadata while it is being edited.

    The buffer never references the cached Resource's dicts; all pairs are
    fresh objects created by `to_pairs`.
    """

    kind: ResourceKind
    identity: str
    name: str = ""
    labels: list[KeyValuePair] = field(default_factory=list)
    annotations: list[KeyValuePair] = field(default_factory=list)

    @classmethod
    def from_resource(cls, resource: Resource) -> EditBuffer:
        return cls(
            kind=resource.kind,
            identity=resource.identity,
            name=resource.name if resource.kind.has_display_name else "",
            labels=to_pairs(resource.labels),
            annotations=to_pairs(resource.annotations),
        )

    def add_label(self, key: str = "", value: str = "") -> KeyValuePair:
        pair = KeyValuePair(key=key, value=value)
        self.labels.append(pair)
        return pair

    def add_annotation(self, key: str = "", value: str = "") -> KeyValuePair:
        pair = KeyValuePair(key=key, value=value)
        self.annotations.append(pair)
        return pair

    def remove_label(self, index: int) -> KeyValuePair:
        return self.labels.pop(index)

    def remove_annotation(self, index: int) -> KeyValuePair:
        return self.annotations.pop(index)

    def set_name(self, name: str) -> None:
        """Set the display name (only meaningful for kinds that have one)."""
        if not self.kind.has_display_name:
            raise ValueError(f"{self.kind.name} have no editable display name")
        self.name = name

    def to_update(self) -> MetadataUpdate:
        """
        Build the outgoing update from the buffer.

        A non-empty display name is folded into the annotations under the
        kind's name annotation key, overriding any row with that key.
        """
        labels = to_map(self.labels)
        annotations = to_map(self.annotations)
        if self.kind.name_annotation is not None and self.name:
            annotations[self.kind.name_annotation] = self.name
        return MetadataUpdate(labels=labels, annotations=annotations)
