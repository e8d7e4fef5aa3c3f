"""Room directory REST routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Body

import roomchat.runtime as runtime
from roomchat.api.room_views import room_metadata_detail
from roomchat.api.room_views import room_summary
from roomchat.rooms.directory import create_room
from roomchat.rooms.models import CreateRoomRequest

router = APIRouter()


@router.get("/api/rooms")
def list_rooms() -> dict[str, list[dict[str, object]]]:
    """Return a summary of every live room."""
    return {"items": [room_summary(room) for _, room in runtime.room_registry.list_rooms()]}


@router.post("/api/rooms", status_code=201)
def create_room_route(payload: CreateRoomRequest | None = Body(default=None)) -> dict[str, object]:
    """Register a new room with normalized metadata."""
    request = payload or CreateRoomRequest()
    metadata = create_room(
        runtime.room_registry,
        title=request.title,
        max_members=request.max_members,
        study_start=request.study_start,
        study_end=request.study_end,
        note_required=request.note_required,
        is_private=request.is_private,
    )
    return room_metadata_detail(metadata)
