from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response

from tasklens.core.dispatch.dispatcher import Dispatcher
from tasklens.core.errors import TaskNotFoundError

from .deps import SESSION_HEADER, get_dispatcher

router = APIRouter()


@router.get("/state")
def task_state(response: Response, dispatcher: Dispatcher = Depends(get_dispatcher)) -> dict[str, Any]:
    response.headers[SESSION_HEADER] = dispatcher.session_id or ""
    return dispatcher.state_message().to_wire()


@router.post("/actions")
def task_action(
    response: Response,
    payload: Any = Body(default=None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    response.headers[SESSION_HEADER] = dispatcher.session_id or ""
    return dispatcher.handle(payload if isinstance(payload, dict) else {"action": None}).to_wire()


@router.get("/{task_id}")
def task_detail(task_id: str, dispatcher: Dispatcher = Depends(get_dispatcher)) -> dict[str, Any]:
    try:
        task = dispatcher.store.get(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Task not found") from exc
    return task.model_dump()
