from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from tasklens.core.dispatch.actions import Action
from tasklens.core.tasks.schemas import AgentResponse, StoreState, Task

MAX_RESPONSE_CHARS = 120
MAX_REASON_CHARS = 80
MAX_CURRENT_TASK_CHARS = 30
REASON_LOW_THRESHOLD = 0.6
REASON_HIGH_THRESHOLD = 0.9

MeterColor = Literal["red", "amber", "green"]
StatusType = Literal["error", "warning", "success"]

_METER_HEX: dict[str, str] = {"red": "#e74c3c", "amber": "#f39c12", "green": "#27ae60"}


class ButtonView(BaseModel):
    label: str
    action: Action
    target: Literal["current", "none"] = "current"


class ResponseView(BaseModel):
    text: str
    char_count: int
    char_label: str
    at_limit: bool
    reason: str | None = None
    percent: int
    meter_color: MeterColor
    meter_hex: str
    status: StatusType
    buttons: list[ButtonView] = Field(default_factory=list)


class SubtaskView(BaseModel):
    text: str
    completed: bool


class TaskView(BaseModel):
    id: int
    text: str
    completed: bool
    suggested: bool
    current: bool
    css_class: str
    actions: list[Action] = Field(default_factory=list)
    subtasks: list[SubtaskView] = Field(default_factory=list)


class PageView(BaseModel):
    response: ResponseView | None = None
    tasks: list[TaskView] = Field(default_factory=list)
    summary: dict[str, str] = Field(default_factory=dict)


def truncate(text: str, limit: int) -> str:
    return text[:limit]


def percent(confidence: float) -> int:
    return round(confidence * 100)


def meter_color(confidence: float) -> MeterColor:
    if confidence < 0.3:
        return "red"
    if confidence < 0.7:
        return "amber"
    return "green"


def status_type(confidence: float) -> StatusType:
    if confidence < 0.3:
        return "error"
    if confidence < 0.7:
        return "warning"
    return "success"


def visible_reason(reason: str | None, confidence: float) -> str | None:
    if not reason:
        return None
    if confidence < REASON_LOW_THRESHOLD or confidence > REASON_HIGH_THRESHOLD:
        return truncate(reason, MAX_REASON_CHARS)
    return None


def buttons_for(action: str) -> list[ButtonView]:
    if action == "task_created":
        return [ButtonView(label="Break Down", action=Action.BREAK_DOWN)]
    if action == "task_selected":
        return [
            ButtonView(label="Break Down", action=Action.BREAK_DOWN),
            ButtonView(label="Complete", action=Action.MARK_COMPLETE),
        ]
    if action == "subtasks_generated":
        return [ButtonView(label="Mark Complete", action=Action.MARK_COMPLETE)]
    if action == "error":
        return [ButtonView(label="Retry", action=Action.RETRY, target="none")]
    return []


def response_view(response: AgentResponse) -> ResponseView:
    text = truncate(response.text, MAX_RESPONSE_CHARS)
    color = meter_color(response.confidence)
    return ResponseView(
        text=text,
        char_count=len(text),
        char_label=f"{len(text)}/{MAX_RESPONSE_CHARS} chars",
        at_limit=len(text) >= MAX_RESPONSE_CHARS,
        reason=visible_reason(response.reason, response.confidence),
        percent=percent(response.confidence),
        meter_color=color,
        meter_hex=_METER_HEX[color],
        status=status_type(response.confidence),
        buttons=buttons_for(response.action),
    )


def task_view(task: Task, current_id: int | None) -> TaskView:
    classes = ["task-item"]
    if task.completed:
        classes.append("completed")
    if task.suggested:
        classes.append("suggested")
    actions = [] if task.completed else [Action.BREAK_DOWN, Action.MARK_COMPLETE]
    actions.append(Action.DELETE_TASK)
    return TaskView(
        id=task.id,
        text=task.text,
        completed=task.completed,
        suggested=task.suggested,
        current=task.id == current_id,
        css_class=" ".join(classes),
        actions=actions,
        subtasks=[SubtaskView(text=subtask.text, completed=subtask.completed) for subtask in task.subtasks],
    )


def state_summary(state: StoreState) -> dict[str, str]:
    current = state.current_task
    return {
        "Total Tasks": str(len(state.tasks)),
        "Completed": str(sum(1 for task in state.tasks if task.completed)),
        "Current Task": f"{current.text[:MAX_CURRENT_TASK_CHARS]}..." if current is not None else "None",
        "Agent Confidence": f"{percent(state.confidence)}%",
        "Last Action": state.last_action or "None",
    }


def build_view(state: StoreState, response: AgentResponse | None = None) -> PageView:
    current_id = state.current_task.id if state.current_task is not None else None
    return PageView(
        response=response_view(response) if response is not None else None,
        tasks=[task_view(task, current_id) for task in state.tasks],
        summary=state_summary(state),
    )
