from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_TASK_TEXT = 100
MIN_TASK_TEXT = 3
DEFAULT_CONFIDENCE = 0.8


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Subtask(BaseModel):
    id: int
    text: str
    completed: bool = False


class Task(BaseModel):
    id: int
    text: str = Field(max_length=MAX_TASK_TEXT)
    subtasks: list[Subtask] = Field(default_factory=list)
    completed: bool = False
    suggested: bool = False
    flags: list[str] = Field(default_factory=list)
    created: str = Field(default_factory=now_iso)


class AgentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    confidence: float
    action: str
    reason: str | None = None
    task_id: int | None = Field(default=None, alias="taskId")
    subtasks: list[Subtask] | None = None

    @property
    def is_error(self) -> bool:
        return self.action == "error"

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class StoreState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tasks: list[Task] = Field(default_factory=list)
    current_task: Task | None = Field(default=None, alias="currentTask")
    confidence: float = DEFAULT_CONFIDENCE
    last_action: str | None = Field(default=None, alias="lastAction")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
