"""WebSocket route handler for room sessions."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter
from fastapi import WebSocket
from fastapi import WebSocketDisconnect

import roomchat.runtime as runtime

from .protocol import PING_TEXT
from .protocol import ProtocolError
from .protocol import error_event
from .protocol import parse_client_message
from .protocol import pong_event
from .sessions import ClientConnection
from .sessions import SessionEventRouter

logger = logging.getLogger(__name__)

router = APIRouter()

BINARY_FRAME_MESSAGE = "invalid message: only text frames are accepted"


async def ws_message_loop(
    websocket: WebSocket,
    *,
    connection: ClientConnection,
    session_router: SessionEventRouter,
) -> None:
    """Feed inbound frames to the session router until the client goes away."""
    try:
        while True:
            try:
                message = await websocket.receive_text()
            except KeyError:
                # Starlette raises KeyError for a frame without a text part.
                connection.send(error_event(BINARY_FRAME_MESSAGE))
                continue
            if message == PING_TEXT:
                connection.send(pong_event())
                continue
            try:
                event, payload = parse_client_message(message)
            except ProtocolError as exc:
                connection.send(error_event(f"invalid message: {exc}"))
                continue
            session_router.dispatch(connection.connection_id, event, payload)
    except WebSocketDisconnect:
        return


@router.websocket("/ws")
async def ws_session(websocket: WebSocket) -> None:
    """Room channel: join/chat_send/typing/leave in, room events out."""
    await websocket.accept()
    session_router = runtime.session_router
    connection = ClientConnection(websocket)
    session_router.connect(connection)
    writer_task = asyncio.create_task(connection.pump())
    logger.info("Connection %s opened", connection.connection_id)
    try:
        await ws_message_loop(websocket, connection=connection, session_router=session_router)
    finally:
        session_router.disconnect(connection.connection_id)
        await writer_task
        logger.info("Connection %s closed", connection.connection_id)
