"""Room directory: validated room creation on top of the registry."""

from __future__ import annotations

import logging
import math
import random
import string
from typing import Any

from roomchat.core.text import as_text
from roomchat.core.text import normalize_time_of_day
from roomchat.core.text import slugify
from roomchat.rooms.chat_log import now_ms
from roomchat.rooms.registry import DEFAULT_MAX_PLAYERS
from roomchat.rooms.registry import MAX_MAX_PLAYERS
from roomchat.rooms.registry import MIN_MAX_PLAYERS
from roomchat.rooms.registry import RoomMetadata
from roomchat.rooms.registry import RoomRegistry

logger = logging.getLogger(__name__)

DEFAULT_ROOM_TITLE = "New study room"
ROOM_ID_SUFFIX_LENGTH = 4
_ROOM_ID_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def coerce_max_members(value: Any) -> int:
    """Parse a loosely typed capacity, defaulting to 6 and clamping into [2, 12]."""
    if value is None or isinstance(value, bool):
        number = float(DEFAULT_MAX_PLAYERS)
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = float(DEFAULT_MAX_PLAYERS)
    else:
        text = as_text(value).strip()
        try:
            number = float(text) if text else float(DEFAULT_MAX_PLAYERS)
        except ValueError:
            number = float(DEFAULT_MAX_PLAYERS)

    if not math.isfinite(number):
        number = float(DEFAULT_MAX_PLAYERS)
    return min(MAX_MAX_PLAYERS, max(MIN_MAX_PLAYERS, math.floor(number)))


def _random_suffix() -> str:
    return "".join(random.choices(_ROOM_ID_SUFFIX_ALPHABET, k=ROOM_ID_SUFFIX_LENGTH))


def generate_room_id(registry: RoomRegistry, title: str) -> str:
    """`<slug>-<4 random chars>`, redrawn until no live room uses it."""
    base = slugify(title)
    room_id = f"{base}-{_random_suffix()}"
    while room_id in registry:
        room_id = f"{base}-{_random_suffix()}"
    return room_id


def create_room(
    registry: RoomRegistry,
    *,
    title: Any = None,
    max_members: Any = None,
    study_start: Any = None,
    study_end: Any = None,
    note_required: Any = False,
    is_private: Any = False,
) -> RoomMetadata:
    """Normalize the request, register a fresh room and attach its metadata."""
    resolved_title = as_text(title).strip() or DEFAULT_ROOM_TITLE
    room_id = generate_room_id(registry, resolved_title)
    metadata = RoomMetadata(
        id=room_id,
        title=resolved_title,
        max_members=coerce_max_members(max_members),
        created_at=now_ms(),
        study_start=normalize_time_of_day(study_start),
        study_end=normalize_time_of_day(study_end),
        note_required=bool(note_required),
        is_private=bool(is_private),
    )
    room = registry.ensure_room(room_id)
    room.metadata = metadata
    logger.info("Created room %s (%r, max %d players)", room_id, resolved_title, metadata.max_members)
    return metadata
