"""Room domain package: registry, membership rules, chat log and directory."""

from roomchat.rooms.registry import CHAT_LOG_LIMIT
from roomchat.rooms.registry import DEFAULT_MAX_PLAYERS
from roomchat.rooms.registry import ChatMessage
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import Room
from roomchat.rooms.registry import RoomError
from roomchat.rooms.registry import RoomFullError
from roomchat.rooms.registry import RoomHostTakenError
from roomchat.rooms.registry import RoomMetadata
from roomchat.rooms.registry import RoomRegistry
from roomchat.rooms.models import CreateRoomRequest

__all__ = [
    "CHAT_LOG_LIMIT",
    "DEFAULT_MAX_PLAYERS",
    "ChatMessage",
    "CreateRoomRequest",
    "Participant",
    "Room",
    "RoomError",
    "RoomFullError",
    "RoomHostTakenError",
    "RoomMetadata",
    "RoomRegistry",
]
