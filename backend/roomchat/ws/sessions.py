"""Per-connection session state and the room event router.

Every handler here is synchronous: it mutates the registry and enqueues the
resulting events on connection outboxes without awaiting. Handlers therefore
never interleave on the event loop, and each client's writer task replays its
outbox in exactly the order the state transitions happened.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from dataclasses import replace
import logging
from typing import Any
import uuid

from roomchat.core.text import as_text
from roomchat.core.text import normalize_label
from roomchat.rooms import chat_log
from roomchat.rooms import membership
from roomchat.rooms.registry import ChatMessage
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import Role
from roomchat.rooms.registry import Room
from roomchat.rooms.registry import RoomRegistry

from .protocol import ClientEvent
from .protocol import chat_event
from .protocol import chat_history_event
from .protocol import error_event
from .protocol import joined_event
from .protocol import left_event
from .protocol import participants_event
from .protocol import typing_state_event
from .protocol import ws_send_event

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "roomId and nickname are required."
HOST_TAKEN_MESSAGE = "This room already has a host."
ROOM_FULL_MESSAGE = "Player capacity is full (max {capacity})."
JOINED_SYSTEM_TEXT = "{nickname} has joined."
LEFT_SYSTEM_TEXT = "{nickname} has left."
OUTBOX_LIMIT = 1000
OVERFLOW_CLOSE_CODE = 1008


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Room binding of one live connection; replaced, never mutated."""

    room_id: str | None = None
    nickname: str | None = None
    role: Role | None = None


UNJOINED = SessionContext()


def normalize_role(value: Any) -> Role:
    """Only the exact string `host` selects the host role."""
    return "host" if value == "host" else "player"


class ClientConnection:
    """One accepted socket plus the ordered queue of events still to write to it."""

    def __init__(
        self,
        websocket: Any = None,
        connection_id: str | None = None,
        *,
        outbox_limit: int = OUTBOX_LIMIT,
    ) -> None:
        self.connection_id = connection_id or uuid.uuid4().hex
        self.websocket = websocket
        self.outbox: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=outbox_limit)
        self.closed = False
        self.overflowed = False

    def send(self, message: dict[str, Any]) -> None:
        if self.closed:
            return
        try:
            self.outbox.put_nowait(message)
        except asyncio.QueueFull:
            # A client this far behind is treated as gone.
            logger.warning("Connection %s outbox overflowed; dropping it", self.connection_id)
            self.closed = True
            self.overflowed = True

    def close(self) -> None:
        """Stop accepting events; the writer exits once the backlog is flushed."""
        if self.closed:
            return
        self.closed = True
        try:
            self.outbox.put_nowait(None)
        except asyncio.QueueFull:
            self.overflowed = True

    async def pump(self) -> None:
        """Write queued events to the socket until closed, overflowed or the socket fails."""
        while not self.overflowed:
            message = await self.outbox.get()
            if message is None:
                return
            try:
                await ws_send_event(self.websocket, message)
            except Exception as exc:
                logger.info("Dropping connection %s after send failure: %s", self.connection_id, exc)
                self.closed = True
                return
        await self._abort()

    async def _abort(self) -> None:
        if self.websocket is None:
            return
        try:
            await self.websocket.close(code=OVERFLOW_CLOSE_CODE)
        except Exception as exc:
            logger.info("Connection %s already gone while closing: %s", self.connection_id, exc)


class SessionEventRouter:
    """Binds connections to rooms and fans room state out to every member."""

    def __init__(self, registry: RoomRegistry) -> None:
        self.registry = registry
        self._connections: dict[str, ClientConnection] = {}
        self._contexts: dict[str, SessionContext] = {}
        self._groups: dict[str, set[str]] = {}

    def connect(self, connection: ClientConnection) -> None:
        self._connections[connection.connection_id] = connection
        self._contexts[connection.connection_id] = UNJOINED

    def context(self, connection_id: str) -> SessionContext:
        return self._contexts.get(connection_id, UNJOINED)

    def group(self, room_id: str) -> frozenset[str]:
        return frozenset(self._groups.get(room_id, ()))

    def dispatch(self, connection_id: str, event: ClientEvent, payload: dict[str, Any]) -> None:
        if event is ClientEvent.JOIN:
            self.join(
                connection_id,
                room_id=payload.get("roomId"),
                nickname=payload.get("nickname"),
                role=payload.get("role"),
            )
        elif event is ClientEvent.CHAT_SEND:
            self.chat_send(connection_id, room_id=payload.get("roomId"), text=payload.get("text"))
        elif event is ClientEvent.TYPING:
            self.typing(connection_id, room_id=payload.get("roomId"), typing=payload.get("typing"))
        elif event is ClientEvent.LEAVE:
            self.leave(connection_id)

    def join(self, connection_id: str, *, room_id: Any, nickname: Any, role: Any) -> None:
        resolved_room_id = normalize_label(room_id)
        resolved_nickname = normalize_label(nickname)
        resolved_role = normalize_role(role)
        if not resolved_room_id or not resolved_nickname:
            self._send(connection_id, error_event(MISSING_FIELDS_MESSAGE))
            return

        room = self.registry.ensure_room(resolved_room_id)
        rejection = self._admission_error(room, connection_id, resolved_role)
        if rejection is not None:
            self._send(connection_id, error_event(rejection))
            return

        previous = self.context(connection_id)
        if previous.room_id is not None and (previous.room_id, previous.role) != (resolved_room_id, resolved_role):
            # Moving rooms or switching role releases the old seat first.
            self._depart(connection_id, previous, discard_empty=previous.room_id != resolved_room_id)

        participant = Participant(connection_id=connection_id, nickname=resolved_nickname, role=resolved_role)
        membership.admit(room, participant)
        self._groups.setdefault(resolved_room_id, set()).add(connection_id)
        self._contexts[connection_id] = SessionContext(
            room_id=resolved_room_id,
            nickname=resolved_nickname,
            role=resolved_role,
        )
        logger.info("%s joined room %s as %s", resolved_nickname, resolved_room_id, resolved_role)

        self._broadcast_participants(resolved_room_id)
        self._post(resolved_room_id, chat_log.system_message(JOINED_SYSTEM_TEXT.format(nickname=resolved_nickname)))
        self._send(connection_id, chat_history_event(chat_log.recent_history(room)))
        self._send(
            connection_id,
            joined_event(room_id=resolved_room_id, nickname=resolved_nickname, role=resolved_role),
        )

    def chat_send(self, connection_id: str, *, room_id: Any = None, text: Any = None) -> None:
        context = self.context(connection_id)
        target_room_id = normalize_label(room_id) or context.room_id
        body = as_text(text)
        if not target_room_id or not context.nickname or not body.strip():
            return
        if self.registry.get_room(target_room_id) is None:
            return
        message = chat_log.chat_message(sender=context.nickname, role=context.role or "player", text=body)
        self._post(target_room_id, message)

    def typing(self, connection_id: str, *, room_id: Any = None, typing: Any = False) -> None:
        context = self.context(connection_id)
        target_room_id = normalize_label(room_id) or context.room_id
        if not target_room_id or not context.nickname:
            return
        self._broadcast(
            target_room_id,
            typing_state_event(nickname=context.nickname, typing=bool(typing)),
            exclude=connection_id,
        )

    def leave(self, connection_id: str) -> None:
        context = self.context(connection_id)
        if context.room_id is None:
            return
        if self._depart(connection_id, context):
            self._send(connection_id, left_event())

    def disconnect(self, connection_id: str) -> None:
        """Clean up after connection loss; nothing is sent to the lost connection."""
        context = self.context(connection_id)
        connection = self._connections.pop(connection_id, None)
        if connection is not None:
            connection.close()
        if context.room_id is not None:
            self._depart(connection_id, context)
        self._contexts.pop(connection_id, None)

    def _admission_error(self, room: Room, connection_id: str, role: Role) -> str | None:
        if role == "host" and not membership.can_join_as_host(room, connection_id):
            return HOST_TAKEN_MESSAGE
        if role == "player" and not membership.can_join_as_player(room, connection_id):
            return ROOM_FULL_MESSAGE.format(capacity=membership.effective_capacity(room))
        return None

    def _depart(self, connection_id: str, context: SessionContext, *, discard_empty: bool = True) -> bool:
        """Unseat the connection from its room and announce it; False when the room is gone."""
        room_id = context.room_id
        if room_id is None:
            return False
        self._detach(connection_id, room_id)
        if connection_id in self._contexts:
            self._contexts[connection_id] = replace(context, room_id=None)

        room = self.registry.get_room(room_id)
        if room is None:
            return False

        membership.remove_participant(room, connection_id, context.role)
        self._broadcast_participants(room_id)
        if context.nickname:
            self._post(room_id, chat_log.system_message(LEFT_SYSTEM_TEXT.format(nickname=context.nickname)))
        if discard_empty and self.registry.discard_if_empty(room_id):
            logger.info("Room %s is empty and was removed", room_id)
        logger.info("%s left room %s", context.nickname or connection_id, room_id)
        return True

    def _detach(self, connection_id: str, room_id: str) -> None:
        members = self._groups.get(room_id)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            self._groups.pop(room_id, None)

    def _post(self, room_id: str, message: ChatMessage) -> None:
        room = self.registry.get_room(room_id)
        if room is None:
            return
        chat_log.append(room, message)
        self._broadcast(room_id, chat_event(message))

    def _broadcast_participants(self, room_id: str) -> None:
        room = self.registry.get_room(room_id)
        if room is None:
            return
        self._broadcast(room_id, participants_event(room.participants()))

    def _broadcast(self, room_id: str, message: dict[str, Any], *, exclude: str | None = None) -> None:
        for member_id in list(self._groups.get(room_id, ())):
            if member_id == exclude:
                continue
            self._send(member_id, message)

    def _send(self, connection_id: str, message: dict[str, Any]) -> None:
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.send(message)
