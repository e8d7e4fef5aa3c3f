"""Bounded per-room chat history and message construction."""

from __future__ import annotations

from itertools import islice
import time
import uuid

from roomchat.rooms.registry import CHAT_LOG_LIMIT
from roomchat.rooms.registry import ChatMessage
from roomchat.rooms.registry import Room
from roomchat.rooms.registry import SYSTEM_SENDER
from roomchat.rooms.registry import SenderRole

DEFAULT_HISTORY_SIZE = 50
MAX_MESSAGE_LENGTH = 2000


def next_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


def append(room: Room, message: ChatMessage) -> None:
    """Append in order; the room's bounded deque drops the oldest past the limit."""
    room.chat.append(message)


def recent_history(room: Room, n: int = DEFAULT_HISTORY_SIZE) -> list[ChatMessage]:
    """Return the last `n` messages, oldest first."""
    if n <= 0:
        return []
    size = len(room.chat)
    return list(islice(room.chat, max(size - n, 0), size))


def chat_message(*, sender: str, role: SenderRole, text: str) -> ChatMessage:
    return ChatMessage(
        id=next_id(),
        sender=sender,
        role=role,
        text=text[:MAX_MESSAGE_LENGTH],
        ts=now_ms(),
    )


def system_message(text: str) -> ChatMessage:
    return chat_message(sender=SYSTEM_SENDER, role="system", text=text)


__all__ = [
    "CHAT_LOG_LIMIT",
    "DEFAULT_HISTORY_SIZE",
    "MAX_MESSAGE_LENGTH",
    "append",
    "chat_message",
    "next_id",
    "now_ms",
    "recent_history",
    "system_message",
]
