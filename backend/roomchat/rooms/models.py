"""Pydantic models for room APIs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class CreateRoomRequest(BaseModel):
    """POST /api/rooms request body; fields stay loose and are normalized by the directory."""

    model_config = ConfigDict(populate_by_name=True)

    title: Any = None
    max_members: Any = Field(default=None, alias="maxMembers")
    study_start: Any = Field(default=None, alias="studyStart")
    study_end: Any = Field(default=None, alias="studyEnd")
    note_required: Any = Field(default=False, alias="noteRequired")
    is_private: Any = Field(default=False, alias="isPrivate")

