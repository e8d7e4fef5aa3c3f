"""In-memory room domain models and registry."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from dataclasses import field
from typing import Literal

DEFAULT_MAX_PLAYERS = 6
MIN_MAX_PLAYERS = 2
MAX_MAX_PLAYERS = 12
CHAT_LOG_LIMIT = 500
SYSTEM_SENDER = "system"

Role = Literal["host", "player"]
SenderRole = Literal["host", "player", "system"]


class RoomError(Exception):
    """Base class for room-domain errors."""


class RoomHostTakenError(RoomError):
    """Raised when a second connection tries to take the host slot."""


class RoomFullError(RoomError):
    """Raised when a player joins a room at player capacity."""

    def __init__(self, message: str, *, capacity: int) -> None:
        super().__init__(message)
        self.capacity = capacity


@dataclass(frozen=True, slots=True)
class Participant:
    """One connected identity seated in one room."""

    connection_id: str
    nickname: str
    role: Role


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One chat line; immutable once appended."""

    id: str
    sender: str
    role: SenderRole
    text: str
    ts: int


@dataclass(slots=True)
class RoomMetadata:
    """Directory-facing description of a room."""

    id: str
    title: str
    max_members: int
    created_at: int
    study_start: str | None = None
    study_end: str | None = None
    note_required: bool = False
    is_private: bool = False


@dataclass(slots=True)
class Room:
    """Room aggregate state."""

    room_id: str
    host: Participant | None = None
    players: dict[str, Participant] = field(default_factory=dict)
    chat: deque[ChatMessage] = field(default_factory=lambda: deque(maxlen=CHAT_LOG_LIMIT))
    metadata: RoomMetadata | None = None

    def participants(self) -> list[Participant]:
        """Host first, then players in join order."""
        seated = [self.host] if self.host is not None else []
        seated.extend(self.players.values())
        return seated

    def is_empty(self) -> bool:
        return self.host is None and not self.players


class RoomRegistry:
    """In-memory registry owning every live room, keyed by room id."""

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def ensure_room(self, room_id: str) -> Room:
        """Return the room, creating an empty one on first use."""
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id)
            self._rooms[room_id] = room
        return room

    def get_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def delete_room(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)

    def list_rooms(self) -> list[tuple[str, Room]]:
        """Return (room_id, room) pairs in creation order."""
        return list(self._rooms.items())

    def discard_if_empty(self, room_id: str) -> bool:
        """Delete the room when nobody is seated; return True when it was removed."""
        room = self._rooms.get(room_id)
        if room is None or not room.is_empty():
            return False
        del self._rooms[room_id]
        return True


__all__ = [
    "CHAT_LOG_LIMIT",
    "ChatMessage",
    "DEFAULT_MAX_PLAYERS",
    "MAX_MAX_PLAYERS",
    "MIN_MAX_PLAYERS",
    "Participant",
    "Role",
    "Room",
    "RoomError",
    "RoomFullError",
    "RoomHostTakenError",
    "RoomMetadata",
    "RoomRegistry",
    "SYSTEM_SENDER",
    "SenderRole",
]
