from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from tasklens.core.logging.context import log_context

from .deps import get_session_registry

router = APIRouter()
logger = logging.getLogger("tasklens.api.ws")


@router.websocket("/ws")
async def task_channel(websocket: WebSocket, session: str | None = Query(default=None)) -> None:
    await websocket.accept()
    registry = get_session_registry()
    dispatcher = registry.get(session)

    with log_context(session_id=dispatcher.session_id):
        logger.info("client_connected")
        try:
            state = await run_in_threadpool(dispatcher.state_message)
            await websocket.send_json(state.to_wire())
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                # Text and binary frames carry the same JSON envelope.
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                registry.keep_alive(dispatcher)
                reply = await run_in_threadpool(dispatcher.handle, raw)
                await websocket.send_json(reply.to_wire())
        except WebSocketDisconnect:
            pass
        logger.info("client_disconnected")
