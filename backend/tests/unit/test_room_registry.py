"""Room registry lifecycle tests."""

from __future__ import annotations

from roomchat.rooms import membership
from roomchat.rooms.registry import CHAT_LOG_LIMIT
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import RoomMetadata
from roomchat.rooms.registry import RoomRegistry


def test_ensure_room_creates_empty_room_once() -> None:
    """Input: ensure_room twice -> Output: same empty room instance, stored once."""
    registry = RoomRegistry()

    first = registry.ensure_room("study1")
    second = registry.ensure_room("study1")

    assert first is second
    assert first.room_id == "study1"
    assert first.host is None
    assert first.players == {}
    assert list(first.chat) == []
    assert first.chat.maxlen == CHAT_LOG_LIMIT
    assert first.metadata is None
    assert len(registry) == 1


def test_get_and_delete_are_lookups_by_id() -> None:
    """Input: get/delete on missing and present ids -> Output: None and no-op for missing."""
    registry = RoomRegistry()
    assert registry.get_room("nope") is None
    registry.delete_room("nope")

    room = registry.ensure_room("a")
    assert registry.get_room("a") is room
    registry.delete_room("a")
    assert registry.get_room("a") is None
    assert "a" not in registry


def test_list_rooms_keeps_creation_order() -> None:
    """Input: rooms c, a, b created in order -> Output: listing in the same order."""
    registry = RoomRegistry()
    for room_id in ("c", "a", "b"):
        registry.ensure_room(room_id)

    assert [room_id for room_id, _ in registry.list_rooms()] == ["c", "a", "b"]


def test_discard_if_empty_only_removes_unoccupied_rooms() -> None:
    """Input: occupied then emptied room -> Output: kept while seated, removed when empty."""
    registry = RoomRegistry()
    room = registry.ensure_room("r1")
    room.players["c1"] = Participant(connection_id="c1", nickname="kim", role="player")

    assert registry.discard_if_empty("r1") is False
    assert "r1" in registry

    room.players.clear()
    room.host = Participant(connection_id="c2", nickname="lee", role="host")
    assert registry.discard_if_empty("r1") is False

    room.host = None
    assert registry.discard_if_empty("r1") is True
    assert "r1" not in registry
    assert registry.discard_if_empty("r1") is False


def test_participants_lists_host_before_players() -> None:
    """Input: two players then a host -> Output: host first, players in join order."""
    registry = RoomRegistry()
    room = registry.ensure_room("r")
    room.players["p1"] = Participant(connection_id="p1", nickname="one", role="player")
    room.players["p2"] = Participant(connection_id="p2", nickname="two", role="player")
    room.host = Participant(connection_id="h", nickname="tutor", role="host")
    room.metadata = RoomMetadata(id="r", title="R", max_members=4, created_at=1)

    assert [participant.connection_id for participant in room.participants()] == ["h", "p1", "p2"]


def test_room_emptiness_is_shared_by_registry_and_membership() -> None:
    """Input: host-only room, then vacated -> Output: registry and membership agree at each step."""
    registry = RoomRegistry()
    room = registry.ensure_room("r")
    room.host = Participant(connection_id="h", nickname="lee", role="host")

    assert room.is_empty() is membership.is_empty(room) is False
    assert registry.discard_if_empty("r") is False

    room.host = None
    assert room.is_empty() is membership.is_empty(room) is True
    assert registry.discard_if_empty("r") is True
