"""LLM relay REST route."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Body
from fastapi.responses import JSONResponse

import roomchat.runtime as runtime
from roomchat.llm.client import LlmError
from roomchat.llm.client import build_conversation
from roomchat.llm.models import LlmChatRequest

router = APIRouter()


@router.post("/api/llm/chat", response_model=None)
async def llm_chat(payload: LlmChatRequest | None = Body(default=None)) -> dict[str, str] | JSONResponse:
    """Forward one prompt or a whole conversation and return the model reply."""
    request = payload or LlmChatRequest()
    try:
        conversation = build_conversation(message=request.message, messages=request.messages)
        reply = await runtime.llm_client.complete(conversation)
    except LlmError as exc:
        return JSONResponse(status_code=exc.status_code, content=exc.body())
    return {"reply": reply}
