"""Room directory and health REST contract tests."""

from __future__ import annotations

import importlib
import re

import pytest
from fastapi.testclient import TestClient


def _new_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("ROOMCHAT_LOG_LEVEL", "WARNING")

    import roomchat.main as app_main

    app_main = importlib.reload(app_main)
    return TestClient(app_main.app)


def test_health_reports_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True}


def test_list_rooms_starts_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        response = client.get("/api/rooms")

        assert response.status_code == 200
        assert response.json() == {"items": []}


def test_create_room_returns_normalized_metadata(monkeypatch: pytest.MonkeyPatch) -> None:
    """Input: camelCase body with loose types -> Output: 201 with normalized metadata."""
    with _new_client(monkeypatch) as client:
        response = client.post(
            "/api/rooms",
            json={
                "title": "  Algebra Night ",
                "maxMembers": "5",
                "studyStart": "19:00",
                "studyEnd": "7pm",
                "noteRequired": True,
                "isPrivate": 0,
            },
        )

        assert response.status_code == 201
        room = response.json()
        assert re.fullmatch(r"algebra-night-[a-z0-9]{4}", room["id"])
        assert room["title"] == "Algebra Night"
        assert room["maxMembers"] == 5
        assert room["studyStart"] == "19:00"
        assert room["studyEnd"] is None
        assert room["noteRequired"] is True
        assert room["isPrivate"] is False
        assert isinstance(room["createdAt"], int)

        listing = client.get("/api/rooms").json()["items"]
        assert listing == [
            {
                "id": room["id"],
                "title": "Algebra Night",
                "maxMembers": 5,
                "hostPresent": False,
                "players": 0,
                "createdAt": room["createdAt"],
                "studyStart": "19:00",
                "studyEnd": None,
                "noteRequired": True,
                "isPrivate": False,
            }
        ]


@pytest.mark.parametrize(
    ("max_members", "expected"),
    [
        (999, 12),
        (0, 2),
        ("abc", 6),
        (None, 6),
    ],
)
def test_create_room_clamps_max_members(monkeypatch: pytest.MonkeyPatch, max_members, expected: int) -> None:
    with _new_client(monkeypatch) as client:
        response = client.post("/api/rooms", json={"title": "Clamp", "maxMembers": max_members})

        assert response.status_code == 201
        assert response.json()["maxMembers"] == expected


def test_create_room_with_out_of_range_integer_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Input: maxMembers integer beyond float range -> Output: 201 with the default 6."""
    with _new_client(monkeypatch) as client:
        response = client.post(
            "/api/rooms",
            content='{"title": "Huge", "maxMembers": 1' + "0" * 400 + "}",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 201
        assert response.json()["maxMembers"] == 6


def test_create_room_without_body_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        response = client.post("/api/rooms")

        assert response.status_code == 201
        room = response.json()
        assert room["title"] == "New study room"
        assert room["maxMembers"] == 6
        assert room["noteRequired"] is False
        assert room["isPrivate"] is False


def test_listing_reflects_ws_occupancy_and_cleanup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Input: player joins then disconnects from a created room -> Output: count 1, then room gone."""
    with _new_client(monkeypatch) as client:
        room_id = client.post("/api/rooms", json={"title": "Live"}).json()["id"]

        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join", "payload": {"roomId": room_id, "nickname": "kim"}})
            while ws.receive_json()["type"] != "joined":
                pass

            summary = client.get("/api/rooms").json()["items"][0]
            assert summary["id"] == room_id
            assert summary["players"] == 1
            assert summary["hostPresent"] is False

        # The server finishes its disconnect cleanup asynchronously.
        for _ in range(50):
            if client.get("/api/rooms").json()["items"] == []:
                break
        assert client.get("/api/rooms").json() == {"items": []}


def test_unknown_route_uses_error_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"code": "HTTP_ERROR", "message": "Not Found", "detail": {}}


def test_malformed_json_uses_validation_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    with _new_client(monkeypatch) as client:
        response = client.post(
            "/api/rooms",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert isinstance(body["detail"]["errors"], list)
