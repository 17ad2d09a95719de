from __future__ import annotations

import json
import logging
import random
import time
from collections.abc import Sequence
from typing import Any

from tasklens.core.errors import TaskNotFoundError
from tasklens.core.planning.breakdown import plan_breakdown
from tasklens.core.scoring.confidence import (
    FLAG_CONTRADICTORY,
    FLAG_MALFORMED,
    FLAG_OVERBROAD,
    FLAG_UNSAFE,
    score,
)

from .schemas import (
    DEFAULT_CONFIDENCE,
    MAX_TASK_TEXT,
    MIN_TASK_TEXT,
    AgentResponse,
    StoreState,
    Task,
)

logger = logging.getLogger("tasklens.tasks.store")

SUGGESTIONS: tuple[str, ...] = (
    "Review and prioritize pending tasks",
    "Schedule focused work blocks",
    "Update project documentation",
    "Plan next week activities",
    "Organize workspace and files",
    "Follow up on pending communications",
)

NOT_FOUND_CONFIDENCE = 0.1
TOO_SHORT_CONFIDENCE = 0.2
INVALID_INPUT_CONFIDENCE = 0.1
SUGGESTION_CONFIDENCE = 0.7
SELECT_CONFIDENCE = 0.7
COMPLETE_CONFIDENCE = 0.95
DELETE_CONFIDENCE = 0.9
EDIT_CONFIDENCE = 0.8
RETRY_CEILING = 0.9
RETRY_STEP = 0.1

_REJECTION_MESSAGES: tuple[tuple[str, str], ...] = (
    (FLAG_MALFORMED, "Invalid input format detected"),
    (FLAG_CONTRADICTORY, "Contradictory requirements - please clarify"),
    (FLAG_UNSAFE, "Request requires human oversight - cannot proceed autonomously"),
    (FLAG_OVERBROAD, "Scope too broad - please add constraints"),
)


def error_response(text: str, confidence: float, reason: str | None = None) -> AgentResponse:
    return AgentResponse(text=text, confidence=confidence, action="error", reason=reason)


def not_found_response() -> AgentResponse:
    return error_response("Task not found", NOT_FOUND_CONFIDENCE, "Invalid task ID")


def same_id(task_id: object, other: object) -> bool:
    if task_id is None or other is None:
        return False
    return str(task_id).strip() == str(other).strip()


class TaskStore:
    """In-memory task list for one session.

    The store never raises for user mistakes: every operation returns an
    ``AgentResponse`` and failed operations leave tasks, the current-task
    pointer and the confidence untouched. Callers serialize access.
    """

    def __init__(self, suggestions: Sequence[str] | None = None, rng: random.Random | None = None) -> None:
        self.tasks: list[Task] = []
        self.confidence = DEFAULT_CONFIDENCE
        self.last_action: str | None = None
        self._current_task_id: int | None = None
        self._last_id = 0
        self._suggestions = tuple(suggestions or SUGGESTIONS)
        self._rng = rng or random.Random()

    # ---- lookups ----

    @property
    def current_task(self) -> Task | None:
        if self._current_task_id is None:
            return None
        return self.find(self._current_task_id)

    def find(self, task_id: object) -> Task | None:
        for task in self.tasks:
            if same_id(task.id, task_id):
                return task
        return None

    def get(self, task_id: object) -> Task:
        task = self.find(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def snapshot(self) -> StoreState:
        current = self.current_task
        return StoreState(
            tasks=[task.model_copy(deep=True) for task in self.tasks],
            current_task=current.model_copy(deep=True) if current is not None else None,
            confidence=self.confidence,
            last_action=self.last_action,
        )

    def record(self, response: AgentResponse) -> AgentResponse:
        self.last_action = f"{response.action} ({round(response.confidence * 100)}%)"
        return response

    # ---- operations ----

    def create_task(self, text: str | None) -> AgentResponse:
        task_text = (text or "").strip()
        if len(task_text) < MIN_TASK_TEXT:
            return error_response("Task too short", TOO_SHORT_CONFIDENCE, "Insufficient task description")

        analysis = score(task_text)
        if analysis.rejected:
            for flag, message in _REJECTION_MESSAGES:
                if analysis.has_flag(flag):
                    logger.info("task_rejected", extra={"extra_fields": {"flag": flag}})
                    return error_response(message, analysis.confidence, analysis.reason)

        task = Task(id=self._new_id(), text=task_text[:MAX_TASK_TEXT], flags=list(analysis.flags))
        self.tasks.append(task)
        self._current_task_id = task.id
        self.confidence = analysis.confidence

        logger.info(
            "task_created",
            extra={"extra_fields": {"task_id": task.id, "confidence": analysis.confidence, "flags": list(analysis.flags)}},
        )
        return AgentResponse(
            text=f"Task created. {analysis.reason}",
            confidence=self.confidence,
            action="task_created",
            task_id=task.id,
            reason=analysis.reason,
        )

    def get_suggestion(self) -> AgentResponse:
        suggestion = self._rng.choice(self._suggestions)
        task = Task(id=self._new_id(), text=suggestion[:MAX_TASK_TEXT], suggested=True)
        self.tasks.append(task)
        self._current_task_id = task.id
        self.confidence = SUGGESTION_CONFIDENCE

        logger.info("suggestion_added", extra={"extra_fields": {"task_id": task.id}})
        return AgentResponse(
            text=f'Added: "{suggestion}"',
            confidence=self.confidence,
            action="task_created",
            task_id=task.id,
            reason="Suggested task - needs planning",
        )

    def mark_complete(self, task_id: object) -> AgentResponse:
        task = self.find(task_id)
        if task is None:
            return not_found_response()

        task.completed = True
        for subtask in task.subtasks:
            subtask.completed = True
        task.suggested = False
        self.confidence = COMPLETE_CONFIDENCE

        return AgentResponse(
            text=f'"{task.text[:40]}..." completed!',
            confidence=self.confidence,
            action="task_completed",
            task_id=task.id,
            reason="Task marked as complete",
        )

    def delete_task(self, task_id: object) -> AgentResponse:
        task = self.find(task_id)
        if task is None:
            return not_found_response()

        self.tasks.remove(task)
        if same_id(self._current_task_id, task.id):
            self._current_task_id = None
        self.confidence = DELETE_CONFIDENCE

        logger.info("task_deleted", extra={"extra_fields": {"task_id": task.id}})
        return AgentResponse(
            text=f'Deleted: "{task.text[:50]}..."',
            confidence=self.confidence,
            action="task_deleted",
            task_id=task.id,
        )

    def edit_task(self, payload: str | dict[str, Any] | None) -> AgentResponse:
        """Replace a task's text. ``payload`` is ``{"taskId", "newText"}``, optionally JSON encoded."""
        data = payload
        if isinstance(payload, str):
            try:
                data = json.loads(payload)
            except json.JSONDecodeError:
                data = None
        if not isinstance(data, dict):
            return error_response("Invalid input", INVALID_INPUT_CONFIDENCE, "Edit payload must carry taskId and newText")

        task = self.find(data.get("taskId"))
        if task is None:
            return not_found_response()

        new_text = str(data.get("newText") or "").strip()
        if len(new_text) < MIN_TASK_TEXT:
            return error_response("Task text too short", TOO_SHORT_CONFIDENCE, "Insufficient task description")

        task.text = new_text[:MAX_TASK_TEXT]
        self.confidence = EDIT_CONFIDENCE

        return AgentResponse(
            text=f'Updated: "{task.text}"',
            confidence=self.confidence,
            action="task_updated",
            task_id=task.id,
        )

    def break_down(self, task_id: object) -> AgentResponse:
        task = self.find(task_id)
        if task is None:
            return not_found_response()

        breakdown = plan_breakdown(task.text, suggested=task.suggested)
        task.subtasks = breakdown.subtasks
        task.suggested = False
        self._current_task_id = task.id
        self.confidence = breakdown.confidence

        logger.info(
            "subtasks_generated",
            extra={"extra_fields": {"task_id": task.id, "count": len(breakdown.subtasks), "confidence": breakdown.confidence}},
        )
        return AgentResponse(
            text=f"{len(breakdown.subtasks)} steps planned. {breakdown.reason}",
            confidence=self.confidence,
            action="subtasks_generated",
            task_id=task.id,
            subtasks=[subtask.model_copy() for subtask in breakdown.subtasks],
            reason=breakdown.reason,
        )

    def select_task(self, task_id: object) -> AgentResponse:
        task = self.find(task_id)
        if task is None:
            return not_found_response()

        self._current_task_id = task.id
        self.confidence = SELECT_CONFIDENCE

        return AgentResponse(
            text=f'Selected: "{task.text[:60]}..."',
            confidence=self.confidence,
            action="task_selected",
            task_id=task.id,
            reason="Task selected for review",
        )

    def clear_all(self) -> AgentResponse:
        removed = len(self.tasks)
        self.tasks = []
        self._current_task_id = None
        self.confidence = DEFAULT_CONFIDENCE

        logger.info("tasks_cleared", extra={"extra_fields": {"removed": removed}})
        return AgentResponse(text="All tasks cleared", confidence=self.confidence, action="tasks_cleared")

    def retry(self) -> AgentResponse:
        self.confidence = round(min(RETRY_CEILING, self.confidence + RETRY_STEP), 2)
        return AgentResponse(text="Ready to try again", confidence=self.confidence, action="retry")

    def _new_id(self) -> int:
        # Millisecond clock, bumped so ids stay unique within a burst.
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id
