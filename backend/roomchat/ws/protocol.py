"""WebSocket wire protocol: envelope, event kinds and payload builders."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
import json
from typing import Any

from roomchat.api.room_views import chat_message_detail
from roomchat.api.room_views import participant_detail
from roomchat.rooms.registry import ChatMessage
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import Role

WS_PROTOCOL_VERSION = 1
PING_TEXT = "PING"


class ClientEvent(str, Enum):
    JOIN = "join"
    CHAT_SEND = "chat_send"
    TYPING = "typing"
    LEAVE = "leave"


class ServerEvent(str, Enum):
    JOINED = "joined"
    LEFT = "left"
    ERROR_MSG = "error_msg"
    PARTICIPANTS = "participants"
    CHAT_HISTORY = "chat_history"
    CHAT = "chat"
    TYPING_STATE = "typing_state"
    PONG = "PONG"


class ProtocolError(ValueError):
    """Raised when an inbound frame is not a well-formed client event."""


def ws_event(event_type: ServerEvent, payload: dict[str, Any]) -> dict[str, Any]:
    return {"v": WS_PROTOCOL_VERSION, "type": event_type.value, "payload": payload}


async def ws_send_event(websocket: Any, message: dict[str, Any]) -> None:
    if hasattr(websocket, "send_json"):
        await websocket.send_json(message)
        return
    if hasattr(websocket, "send_text"):
        await websocket.send_text(json.dumps(message))


def parse_client_message(raw: str) -> tuple[ClientEvent, dict[str, Any]]:
    """Decode `{"type": ..., "payload": {...}}`; a missing payload reads as `{}`."""
    try:
        message = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolError("invalid JSON") from exc
    if not isinstance(message, dict):
        raise ProtocolError("message must be a JSON object")

    try:
        event = ClientEvent(message.get("type"))
    except ValueError as exc:
        raise ProtocolError(f"unknown event type: {message.get('type')!r}") from exc

    payload = message.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ProtocolError("payload must be a JSON object")
    return event, payload


def joined_event(*, room_id: str, nickname: str, role: Role) -> dict[str, Any]:
    return ws_event(ServerEvent.JOINED, {"ok": True, "roomId": room_id, "nickname": nickname, "role": role})


def left_event() -> dict[str, Any]:
    return ws_event(ServerEvent.LEFT, {"ok": True})


def error_event(message: str) -> dict[str, Any]:
    return ws_event(ServerEvent.ERROR_MSG, {"message": message})


def participants_event(participants: Iterable[Participant]) -> dict[str, Any]:
    return ws_event(
        ServerEvent.PARTICIPANTS,
        {"participants": [participant_detail(participant) for participant in participants]},
    )


def chat_history_event(messages: Iterable[ChatMessage]) -> dict[str, Any]:
    return ws_event(ServerEvent.CHAT_HISTORY, {"items": [chat_message_detail(message) for message in messages]})


def chat_event(message: ChatMessage) -> dict[str, Any]:
    return ws_event(ServerEvent.CHAT, chat_message_detail(message))


def typing_state_event(*, nickname: str, typing: bool) -> dict[str, Any]:
    return ws_event(ServerEvent.TYPING_STATE, {"nickname": nickname, "typing": typing})


def pong_event() -> dict[str, Any]:
    return ws_event(ServerEvent.PONG, {})
