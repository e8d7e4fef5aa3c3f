"""Relay for an OpenAI-compatible chat completion endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from roomchat.core.config import Settings
from roomchat.core.text import as_text

logger = logging.getLogger(__name__)

MAX_UPSTREAM_DETAIL_LENGTH = 500
MAX_EXCEPTION_DETAIL_LENGTH = 200


class LlmError(Exception):
    """Base class for LLM relay failures; `body()` is the exact JSON returned to callers."""

    status_code = 500
    error = "llm_error"

    def __init__(self, *, message: str | None = None, detail: str | None = None) -> None:
        super().__init__(message or detail or self.error)
        self.message = message
        self.detail = detail

    def body(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.message is not None:
            payload["message"] = self.message
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


class LlmInputMissingError(LlmError):
    status_code = 400
    error = "message or messages is required"


class LlmCredentialMissingError(LlmError):
    status_code = 400
    error = "missing_openai_api_key"


class LlmUpstreamError(LlmError):
    error = "llm_request_failed"


class LlmEmptyResponseError(LlmError):
    error = "empty_response"


class LlmTransportError(LlmError):
    error = "llm_exception"


class LlmTimeoutError(LlmError):
    """Upstream did not answer in time; callers may retry."""

    status_code = 504
    error = "llm_timeout"


def build_conversation(*, message: Any = None, messages: Any = None) -> list[Any]:
    """Return the client-supplied `messages` list, or one user turn built from `message`."""
    text = as_text(message).strip() if message is not None else ""
    if isinstance(messages, list):
        return messages
    if not text:
        raise LlmInputMissingError()
    return [{"role": "user", "content": text}]


def extract_reply(data: Any) -> str:
    """Read `choices[0].message.content`, tolerating any missing level."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


class LlmClient:
    """Stateless relay; holds no room state and can be awaited alongside room traffic."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport

    def request_body(self, conversation: list[Any]) -> dict[str, Any]:
        return {
            "model": self._settings.roomchat_llm_model,
            "messages": [
                {"role": "system", "content": self._settings.roomchat_llm_system_prompt},
                *conversation,
            ],
            "temperature": self._settings.roomchat_llm_temperature,
            "max_tokens": self._settings.roomchat_llm_max_tokens,
        }

    async def complete(self, conversation: list[Any]) -> str:
        api_key = self._settings.openai_api_key
        if not api_key:
            raise LlmCredentialMissingError(message="Set OPENAI_API_KEY in the .env file.")

        url = f"{self._settings.roomchat_llm_base_url}/chat/completions"
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.roomchat_llm_timeout_seconds,
            ) as client:
                response = await client.post(
                    url,
                    json=self.request_body(conversation),
                    headers={"Authorization": f"Bearer {api_key}"},
                )
                if response.is_error:
                    logger.warning("LLM upstream answered %d", response.status_code)
                    raise LlmUpstreamError(detail=response.text[:MAX_UPSTREAM_DETAIL_LENGTH])
                data = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("LLM upstream timed out: %s", exc)
            raise LlmTimeoutError(detail=str(exc)[:MAX_EXCEPTION_DETAIL_LENGTH] or "upstream timeout") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("LLM relay failed: %s", exc)
            raise LlmTransportError(detail=str(exc)[:MAX_EXCEPTION_DETAIL_LENGTH]) from exc

        reply = extract_reply(data)
        if not reply:
            raise LlmEmptyResponseError()
        return reply
