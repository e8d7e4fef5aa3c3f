"""Room view builders used by REST and WS responses."""

from __future__ import annotations

from roomchat.rooms.membership import effective_capacity
from roomchat.rooms.registry import ChatMessage
from roomchat.rooms.registry import Participant
from roomchat.rooms.registry import Room
from roomchat.rooms.registry import RoomMetadata


def room_summary(room: Room) -> dict[str, object]:
    metadata = room.metadata
    return {
        "id": room.room_id,
        "title": (metadata.title if metadata else "") or room.room_id,
        "maxMembers": effective_capacity(room),
        "hostPresent": room.host is not None,
        "players": len(room.players),
        "createdAt": metadata.created_at if metadata else 0,
        "studyStart": metadata.study_start if metadata else None,
        "studyEnd": metadata.study_end if metadata else None,
        "noteRequired": bool(metadata and metadata.note_required),
        "isPrivate": bool(metadata and metadata.is_private),
    }


def room_metadata_detail(metadata: RoomMetadata) -> dict[str, object]:
    return {
        "id": metadata.id,
        "title": metadata.title,
        "maxMembers": metadata.max_members,
        "createdAt": metadata.created_at,
        "studyStart": metadata.study_start,
        "studyEnd": metadata.study_end,
        "noteRequired": metadata.note_required,
        "isPrivate": metadata.is_private,
    }


def participant_detail(participant: Participant) -> dict[str, object]:
    return {
        "connectionId": participant.connection_id,
        "nickname": participant.nickname,
        "role": participant.role,
    }


def chat_message_detail(message: ChatMessage) -> dict[str, object]:
    return {
        "id": message.id,
        "from": message.sender,
        "role": message.role,
        "text": message.text,
        "ts": message.ts,
    }
