"""Admission rules for seating hosts and players in a room."""

from __future__ import annotations

from roomchat.rooms.registry import DEFAULT_MAX_PLAYERS
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import Role
from roomchat.rooms.registry import Room
from roomchat.rooms.registry import RoomFullError
from roomchat.rooms.registry import RoomHostTakenError


def effective_capacity(room: Room) -> int:
    """Player capacity from metadata, or the default when the room has none."""
    if room.metadata is None:
        return DEFAULT_MAX_PLAYERS
    return room.metadata.max_members


def can_join_as_host(room: Room, connection_id: str) -> bool:
    return room.host is None or room.host.connection_id == connection_id


def can_join_as_player(room: Room, connection_id: str | None = None) -> bool:
    """Players are capped by capacity; a connection already seated re-joins freely."""
    if connection_id is not None and connection_id in room.players:
        return True
    return len(room.players) < effective_capacity(room)


def admit(room: Room, participant: Participant) -> None:
    """Seat the participant or raise without touching the room."""
    if participant.role == "host":
        if not can_join_as_host(room, participant.connection_id):
            raise RoomHostTakenError(f"room_id={room.room_id} already has a host")
        room.host = participant
        return

    if not can_join_as_player(room, participant.connection_id):
        capacity = effective_capacity(room)
        raise RoomFullError(f"room_id={room.room_id} is full", capacity=capacity)
    room.players[participant.connection_id] = participant


def remove_participant(room: Room, connection_id: str, role: Role | None) -> None:
    """Unseat one connection; idempotent when it is not seated."""
    if role == "host":
        if room.host is not None and room.host.connection_id == connection_id:
            room.host = None
        return
    if role == "player":
        room.players.pop(connection_id, None)


def is_empty(room: Room) -> bool:
    return room.is_empty()
