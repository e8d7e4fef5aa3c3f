"""Pydantic models for the LLM relay API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LlmChatRequest(BaseModel):
    """POST /api/llm/chat request body; either field may carry the prompt."""

    message: Any = None
    messages: Any = None
