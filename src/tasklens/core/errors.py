from __future__ import annotations


class TaskLensError(RuntimeError):
    """Base error for task list operations."""


class TaskNotFoundError(TaskLensError):
    def __init__(self, task_id: object) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


class InvalidEnvelopeError(TaskLensError):
    """Raised when an inbound message cannot be parsed into a request."""


class UnknownActionError(InvalidEnvelopeError):
    def __init__(self, action: object) -> None:
        super().__init__(f"unknown action: {action!r}")
        self.action = action


class ConnectionLostError(TaskLensError):
    """Raised when the task channel is not connected."""
