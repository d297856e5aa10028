from __future__ import annotations

import asyncio
import logging
import logging.config
import os

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from boardtree.api.routers import api_router
from boardtree.config import settings
from boardtree.errors import BoardError, StoreError
from boardtree.integrations.redis import close_redis_sync
from boardtree.jobs.heartbeat import run_heartbeat_loop
from boardtree.services.notifier import LocalNotifier
from boardtree.websocket.manager import manager
from boardtree.websocket.redis_listener import start_board_event_listener


if os.path.exists("logging.conf"):
    logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
else:
    logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


app = FastAPI(title="Board Forest", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")

_background_tasks: set[asyncio.Task] = set()


@app.exception_handler(StoreError)
async def _store_error_handler(request: Request, exc: StoreError) -> ORJSONResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return ORJSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})


@app.exception_handler(BoardError)
async def _board_error_handler(request: Request, exc: BoardError) -> ORJSONResponse:
    return ORJSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    return ORJSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return ORJSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.on_event("startup")
async def _startup() -> None:
    if settings.REDIS_ENABLED:
        task = asyncio.create_task(start_board_event_listener())
    else:
        task = asyncio.create_task(
            run_heartbeat_loop(LocalNotifier(manager), settings.HEARTBEAT_INTERVAL_SECONDS)
        )
    _background_tasks.add(task)


@app.on_event("shutdown")
async def _shutdown() -> None:
    for task in _background_tasks:
        task.cancel()
    await asyncio.gather(*_background_tasks, return_exceptions=True)
    _background_tasks.clear()
    close_redis_sync()


@app.websocket("/ws/boards")
async def ws_boards(websocket: WebSocket) -> None:
    await websocket.accept()
    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.disconnect(websocket)
