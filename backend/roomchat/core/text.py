"""Text normalization helpers shared by the chat protocol and room directory."""

from __future__ import annotations

import unicodedata
from typing import Any

import regex

MAX_SLUG_LENGTH = 24
DEFAULT_SLUG = "room"
_WHITESPACE_RUN = regex.compile(r"\s+")
_NON_SLUG_CHARS = regex.compile(r"[^a-z0-9\-]")
_TIME_OF_DAY = regex.compile(r"^[0-9]{2}:[0-9]{2}$")


def as_text(value: Any) -> str:
    """Coerce a loosely typed client field to a string; missing/falsy values become ''."""
    if value is None or value is False:
        return ""
    return str(value)


def normalize_label(value: Any) -> str:
    """Trim and normalize a room id or nickname to NFC form."""
    return unicodedata.normalize("NFC", as_text(value).strip())


def slugify(title: str) -> str:
    """Lowercase, dash-join whitespace, keep [a-z0-9-] and cap at 24 chars."""
    slug = _WHITESPACE_RUN.sub("-", title.lower())
    slug = _NON_SLUG_CHARS.sub("", slug)
    return slug[:MAX_SLUG_LENGTH] or DEFAULT_SLUG


def normalize_time_of_day(value: Any) -> str | None:
    """Return a trimmed `HH:MM` string, or None when it does not match."""
    text = as_text(value).strip()
    if _TIME_OF_DAY.match(text) is None:
        return None
    return text
