from __future__ import annotations

import logging
import threading
import time
from typing import Any, assert_never

from tasklens.core.errors import InvalidEnvelopeError, UnknownActionError
from tasklens.core.logging.context import log_context
from tasklens.core.presentation.view import build_view
from tasklens.core.tasks.schemas import AgentResponse
from tasklens.core.tasks.store import INVALID_INPUT_CONFIDENCE, TaskStore, error_response

from .actions import Action
from .envelope import ClientRequest, ServerMessage, parse_request

UNKNOWN_ACTION_CONFIDENCE = 0.3

logger = logging.getLogger("tasklens.dispatch")


class Dispatcher:
    """Routes ``{input, action}`` requests onto a single ``TaskStore``.

    Operations on the store are processed one at a time; the lock covers both
    the mutation and the state snapshot sent back with the response.
    """

    def __init__(self, store: TaskStore | None = None, session_id: str | None = None) -> None:
        self.store = store or TaskStore()
        self.session_id = session_id
        self._lock = threading.Lock()

    def dispatch(self, request: ClientRequest) -> AgentResponse:
        store = self.store
        value = request.input
        action = request.action
        match action:
            case Action.CREATE_TASK:
                response = store.create_task(_as_text(value))
            case Action.BREAK_DOWN:
                response = store.break_down(value)
            case Action.MARK_COMPLETE:
                response = store.mark_complete(value)
            case Action.SELECT_TASK:
                response = store.select_task(value)
            case Action.GET_SUGGESTION:
                response = store.get_suggestion()
            case Action.EDIT_TASK:
                response = store.edit_task(value if isinstance(value, (str, dict)) else None)
            case Action.DELETE_TASK:
                response = store.delete_task(value)
            case Action.CLEAR_ALL:
                response = store.clear_all()
            case Action.RETRY:
                response = store.retry()
            case _:
                assert_never(action)
        return store.record(response)

    def handle(self, raw: str | bytes | dict[str, Any]) -> ServerMessage:
        try:
            request = parse_request(raw)
        except UnknownActionError as exc:
            logger.warning("unknown_action", extra={"extra_fields": {"action": str(exc.action)}})
            return self._reply(error_response("Unknown action", UNKNOWN_ACTION_CONFIDENCE, "Action is not supported"))
        except InvalidEnvelopeError as exc:
            logger.warning("invalid_envelope", extra={"extra_fields": {"error": str(exc)}})
            return self._reply(error_response("Invalid input", INVALID_INPUT_CONFIDENCE, "Message could not be parsed"))
        return self.submit(request)

    def submit(self, request: ClientRequest) -> ServerMessage:
        started_at = time.perf_counter()
        with self._lock, log_context(session_id=self.session_id, action=request.action.value):
            response = self.dispatch(request)
            message = self._message("error" if response.is_error else "response", response)
            logger.info(
                "action_processed",
                extra={
                    "extra_fields": {
                        "result": response.action,
                        "confidence": response.confidence,
                        "duration_ms": int((time.perf_counter() - started_at) * 1000),
                    }
                },
            )
        return message

    def state_message(self) -> ServerMessage:
        with self._lock:
            state = self.store.snapshot()
            view = build_view(state)
            return ServerMessage(type="state", data=state.to_wire(), state=state.to_wire(), view=view.model_dump(mode="json"))

    def _reply(self, response: AgentResponse) -> ServerMessage:
        with self._lock:
            self.store.record(response)
            return self._message("error", response)

    def _message(self, message_type: str, response: AgentResponse) -> ServerMessage:
        state = self.store.snapshot()
        view = build_view(state, response)
        return ServerMessage(
            type=message_type,
            data=response.to_wire(),
            state=state.to_wire(),
            view=view.model_dump(mode="json"),
        )


def _as_text(value: object) -> str:
    if value is None or isinstance(value, dict):
        return ""
    return str(value)
