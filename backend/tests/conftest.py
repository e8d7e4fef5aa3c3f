"""Shared fixtures for roomchat tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from roomchat.rooms.registry import RoomRegistry
from roomchat.ws.sessions import ClientConnection
from roomchat.ws.sessions import SessionEventRouter


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep developer `.env` files and API keys out of tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.delenv("ROOMCHAT_LLM_BASE_URL", raising=False)


@pytest.fixture
def registry() -> RoomRegistry:
    return RoomRegistry()


@pytest.fixture
def session_router(registry: RoomRegistry) -> SessionEventRouter:
    return SessionEventRouter(registry)


@pytest.fixture
def connect(session_router: SessionEventRouter) -> Callable[[str], ClientConnection]:
    """Register a socket-less connection whose outbox the test inspects."""

    def _connect(connection_id: str) -> ClientConnection:
        connection = ClientConnection(connection_id=connection_id)
        session_router.connect(connection)
        return connection

    return _connect


def _drain(connection: ClientConnection) -> list[dict[str, Any]]:
    events: list[dict[str, Any]] = []
    while True:
        try:
            message = connection.outbox.get_nowait()
        except asyncio.QueueEmpty:
            return events
        if message is not None:
            events.append(message)


@pytest.fixture
def drain_events() -> Callable[[ClientConnection], list[dict[str, Any]]]:
    """Pop every queued event from a connection outbox, oldest first."""
    return _drain
