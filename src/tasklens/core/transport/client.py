from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from tasklens.core.config import reconnect_delay_s
from tasklens.core.dispatch.actions import Action
from tasklens.core.dispatch.envelope import ServerMessage
from tasklens.core.errors import ConnectionLostError
from tasklens.core.presentation.view import response_view
from tasklens.core.tasks.schemas import AgentResponse

CONNECTION_LOST_CONFIDENCE = 0.1
PARSE_ERROR_CONFIDENCE = 0.1

MessageHandler = Callable[[ServerMessage], Awaitable[None] | None]

logger = logging.getLogger("tasklens.transport.client")


def local_error(text: str, confidence: float, reason: str | None = None, state: dict[str, Any] | None = None) -> ServerMessage:
    response = AgentResponse(text=text, confidence=confidence, action="error", reason=reason)
    return ServerMessage(
        type="error",
        data=response.to_wire(),
        state=state or {},
        view={"response": response_view(response).model_dump(mode="json")},
    )


class TaskChannelClient:
    """Persistent WebSocket channel to the task server.

    ``run_forever`` keeps reconnecting after a fixed delay until ``close`` is
    called. Every inbound envelope, and every locally generated error
    envelope, is passed to ``on_message``.
    """

    def __init__(
        self,
        url: str,
        on_message: MessageHandler | None = None,
        reconnect_delay: float | None = None,
        connect: Callable[[str], Any] = websockets.connect,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.url = url
        self.on_message = on_message
        self.reconnect_delay = reconnect_delay_s() if reconnect_delay is None else max(0.0, reconnect_delay)
        self.status = "Disconnected"
        self.attempts = 0
        self.last_state: dict[str, Any] = {}
        self._connect = connect
        self._sleep = sleep
        self._ws: Any | None = None
        self._closed = False

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def run_forever(self) -> None:
        while not self._closed:
            self.attempts += 1
            try:
                async with self._connect(self.url) as ws:
                    self._ws = ws
                    self.status = "Connected"
                    logger.info("channel_connected", extra={"extra_fields": {"attempt": self.attempts}})
                    async for raw in ws:
                        await self._deliver(self._parse(raw))
            except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
                self.status = "Connection Error"
                logger.warning("channel_error", extra={"extra_fields": {"error": exc.__class__.__name__}})
            finally:
                self._ws = None

            if self._closed:
                break
            self.status = "Disconnected"
            logger.info("channel_reconnecting", extra={"extra_fields": {"delay_s": self.reconnect_delay}})
            await self._sleep(self.reconnect_delay)

        self.status = "Disconnected"

    async def send(self, input: str | int | dict[str, Any] | None, action: Action | str) -> bool:
        """Send one request. Returns False, after emitting a local error envelope, when offline."""
        try:
            await self._send_raw({"input": input, "action": Action(action).value})
        except ConnectionLostError:
            await self._deliver(
                local_error("Connection lost", CONNECTION_LOST_CONFIDENCE, "Reconnecting to the task server", self.last_state)
            )
            return False
        return True

    async def edit(self, task_id: int | str, new_text: str) -> bool:
        return await self.send(json.dumps({"taskId": task_id, "newText": new_text.strip()}), Action.EDIT_TASK)

    async def close(self) -> None:
        self._closed = True
        ws = self._ws
        if ws is not None:
            await ws.close()

    async def _send_raw(self, payload: dict[str, Any]) -> None:
        ws = self._ws
        if ws is None:
            raise ConnectionLostError("channel is not connected")
        try:
            await ws.send(json.dumps(payload))
        except WebSocketException as exc:
            raise ConnectionLostError("channel dropped while sending") from exc

    def _parse(self, raw: str | bytes) -> ServerMessage:
        try:
            message = ServerMessage.model_validate_json(raw)
        except ValidationError:
            logger.warning("channel_parse_error")
            return local_error("Message parsing error", PARSE_ERROR_CONFIDENCE, state=self.last_state)
        if message.state:
            self.last_state = message.state
        return message

    async def _deliver(self, message: ServerMessage) -> None:
        if self.on_message is None:
            return
        result = self.on_message(message)
        if inspect.isawaitable(result):
            await result
