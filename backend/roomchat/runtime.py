"""Process-wide runtime state shared by REST and WebSocket handlers."""

from __future__ import annotations

from roomchat.core.config import Settings
from roomchat.core.config import load_settings
from roomchat.llm.client import LlmClient
from roomchat.rooms.registry import RoomRegistry
from roomchat.ws.sessions import SessionEventRouter

settings = load_settings()
room_registry = RoomRegistry()
session_router = SessionEventRouter(room_registry)
llm_client = LlmClient(settings)


def startup() -> None:
    """Reload settings and start from an empty, volatile room store."""
    global settings, room_registry, session_router, llm_client
    settings = load_settings()
    room_registry = RoomRegistry()
    session_router = SessionEventRouter(room_registry)
    llm_client = LlmClient(settings)


__all__ = [
    "Settings",
    "llm_client",
    "room_registry",
    "session_router",
    "settings",
    "startup",
]
