"""
Tests for fleetdash.core.resources and fleetdash.core.status.

Tests cover:
- Status classification
- ResourceKind wording and paths
- Resource decoding from backend payloads
- EditBuffer seeding, editing and the pre-submit transform
"""

import pytest

from fleetdash.core import DecodeError
from fleetdash.core.codec import KeyValuePair
from fleetdash.core.resources import (
    PLAYERS,
    RESOURCE_KINDS,
    SERVERS,
    EditBuffer,
    MetadataUpdate,
    Resource,
)
from fleetdash.core.status import StatusCategory, classify

# =============================================================================
# Status Classification
# =============================================================================


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize("status", ["online", "Online", "ONLINE"])
    def test_online_any_case(self, status: str) -> None:
        assert classify(status) is StatusCategory.ONLINE

    @pytest.mark.parametrize("status", ["offline", "Offline", "OFFLINE"])
    def test_offline_any_case(self, status: str) -> None:
        assert classify(status) is StatusCategory.OFFLINE

    @pytest.mark.parametrize("status", [None, "", "starting", "Unknown", " online"])
    def test_everything_else_unknown(self, status: str | None) -> None:
        assert classify(status) is StatusCategory.UNKNOWN


# =============================================================================
# Resource Kinds
# =============================================================================


class TestResourceKind:
    """Tests for the PLAYERS and SERVERS kinds."""

    def test_registry(self) -> None:
        assert RESOURCE_KINDS == {"players": PLAYERS, "servers": SERVERS}

    def test_player_messages(self) -> None:
        assert PLAYERS.list_path == "/api/players"
        assert PLAYERS.load_failed_message == "Failed to load players"
        assert PLAYERS.update_failed_message == "Failed to update player"
        assert PLAYERS.updated_message == "Player updated successfully"
        assert PLAYERS.refreshed_message == "Players refreshed"

    def test_server_messages(self) -> None:
        assert SERVERS.list_path == "/api/servers"
        assert SERVERS.load_failed_message == "Failed to load servers"
        assert SERVERS.update_failed_message == "Failed to update server"
        assert SERVERS.updated_message == "Server updated successfully"
        assert SERVERS.refreshed_message == "Servers refreshed"

    def test_display_name_folding(self) -> None:
        assert PLAYERS.has_display_name
        assert PLAYERS.name_annotation == "player_name"
        assert not SERVERS.has_display_name


# =============================================================================
# Resource
# =============================================================================


class TestResource:
    """Tests for Resource.from_payload() and helpers."""

    def test_player_from_payload(self) -> None:
        player = Resource.from_payload(
            PLAYERS,
            {
                "uuid": "u-1",
                "name": "Steve",
                "status": "Online",
                "labels": {"rank": "vip"},
                "annotations": {"player_name": "Steve"},
            },
        )
        assert player.identity == "u-1"
        assert player.display_name == "Steve"
        assert player.status_category is StatusCategory.ONLINE
        assert player.labels == {"rank": "vip"}
        assert player.extra == {}

    def test_server_keeps_extra_fields(self) -> None:
        """Unknown fields such as player_count pass through untouched."""
        payload = {
            "name": "lobby-1",
            "status": "offline",
            "labels": None,
            "annotations": {"status": "offline"},
            "player_count": 7,
        }
        server = Resource.from_payload(SERVERS, payload)
        assert server.identity == "lobby-1"
        assert server.labels == {}
        assert server.extra == {"player_count": 7}
        assert server.display_name == "lobby-1"
        assert server.to_payload() == {
            "name": "lobby-1",
            "status": "offline",
            "labels": {},
            "annotations": {"status": "offline"},
            "player_count": 7,
        }

    def test_missing_name_displays_unknown(self) -> None:
        player = Resource.from_payload(PLAYERS, {"uuid": "u-2"})
        assert player.display_name == "Unknown"
        assert player.status_category is StatusCategory.UNKNOWN

    def test_missing_identity_rejected(self) -> None:
        with pytest.raises(DecodeError):
            Resource.from_payload(PLAYERS, {"name": "Steve"})

    def test_non_object_rejected(self) -> None:
        with pytest.raises(DecodeError):
            Resource.from_payload(SERVERS, ["lobby-1"])

    def test_bad_labels_rejected(self) -> None:
        with pytest.raises(DecodeError):
            Resource.from_payload(SERVERS, {"name": "lobby-1", "labels": ["a"]})


# =============================================================================
# EditBuffer
# =============================================================================


def _player(**overrides) -> Resource:
    payload = {
        "uuid": "u-1",
        "name": "Steve",
        "status": "Online",
        "labels": {"rank": "vip", "server": "lobby-1"},
        "annotations": {"online": "true"},
    }
    payload.update(overrides)
    return Resource.from_payload(PLAYERS, payload)


class TestEditBuffer:
    """Tests for EditBuffer."""

    def test_seeded_from_resource(self) -> None:
        buffer = EditBuffer.from_resource(_player())
        assert buffer.identity == "u-1"
        assert buffer.name == "Steve"
        assert buffer.labels == [KeyValuePair("rank", "vip"), KeyValuePair("server", "lobby-1")]
        assert buffer.annotations == [KeyValuePair("online", "true")]

    def test_buffer_is_a_copy(self) -> None:
        """Editing the buffer must never change the cached resource."""
        player = _player()
        buffer = EditBuffer.from_resource(player)
        buffer.labels[0].value = "staff"
        buffer.add_label("new", "x")
        buffer.remove_annotation(0)
        assert player.labels == {"rank": "vip", "server": "lobby-1"}
        assert player.annotations == {"online": "true"}

    def test_add_and_remove_rows(self) -> None:
        buffer = EditBuffer.from_resource(_player(labels={}, annotations={}))
        buffer.add_label()
        buffer.add_annotation("note", "hi")
        assert buffer.labels == [KeyValuePair("", "")]
        removed = buffer.remove_label(0)
        assert removed == KeyValuePair("", "")
        assert buffer.labels == []
        assert buffer.annotations == [KeyValuePair("note", "hi")]

    def test_player_name_folded_into_annotations(self) -> None:
        """A non-empty name ends up under player_name."""
        buffer = EditBuffer.from_resource(_player(annotations={}))
        buffer.name = "Steve"
        update = buffer.to_update()
        assert update.annotations == {"player_name": "Steve"}

    def test_name_overrides_player_name_row(self) -> None:
        buffer = EditBuffer.from_resource(_player(annotations={"player_name": "Old"}))
        buffer.set_name("New")
        assert buffer.to_update().annotations == {"player_name": "New"}

    def test_empty_name_not_folded(self) -> None:
        buffer = EditBuffer.from_resource(_player(annotations={}))
        buffer.set_name("")
        assert buffer.to_update().annotations == {}

    def test_server_has_no_name(self) -> None:
        server = Resource.from_payload(SERVERS, {"name": "lobby-1", "labels": {"a": "b"}})
        buffer = EditBuffer.from_resource(server)
        assert buffer.name == ""
        with pytest.raises(ValueError):
            buffer.set_name("x")
        assert buffer.to_update() == MetadataUpdate(labels={"a": "b"}, annotations={})

    def test_to_update_applies_codec_rules(self) -> None:
        buffer = EditBuffer.from_resource(_player(labels={}, annotations={}, name=""))
        buffer.add_label(" env ", "prod")
        buffer.add_label("env", "staging")
        buffer.add_label("  ", "dropped")
        update = buffer.to_update()
        assert update.labels == {"env": "staging"}
        assert update.to_payload() == {"labels": {"env": "staging"}, "annotations": {}}
