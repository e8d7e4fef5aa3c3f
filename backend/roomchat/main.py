"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

import roomchat.runtime as runtime
from roomchat.api.errors import handle_http_exception
from roomchat.api.errors import handle_validation_error
from roomchat.api.routers import health
from roomchat.api.routers import llm
from roomchat.api.routers import rooms
from roomchat.core.logging import setup_logging
from roomchat.ws import routers as ws_routers

setup_logging(runtime.settings.roomchat_log_level)
logger = logging.getLogger(__name__)


def startup() -> None:
    """Start each app lifetime with fresh settings and an empty room store."""
    runtime.startup()
    logger.info("roomchat started (env=%s)", runtime.settings.roomchat_app_env)


@asynccontextmanager
async def lifespan(_: FastAPI):
    startup()
    yield


app = FastAPI(title="roomchat", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime.settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(HTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)

app.include_router(health.router)
app.include_router(rooms.router)
app.include_router(llm.router)
app.include_router(ws_routers.router)


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "roomchat.main:app",
        host=runtime.settings.roomchat_app_host,
        port=runtime.settings.roomchat_app_port,
    )


__all__ = [
    "app",
    "lifespan",
    "run",
    "startup",
]
