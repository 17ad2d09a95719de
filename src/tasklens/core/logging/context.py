from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
session_id_var: ContextVar[str | None] = ContextVar("session_id", default=None)
task_id_var: ContextVar[str | None] = ContextVar("task_id", default=None)
action_var: ContextVar[str | None] = ContextVar("action", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "correlation_id": correlation_id_var,
    "session_id": session_id_var,
    "task_id": task_id_var,
    "action": action_var,
}


def set_context(**kwargs: str | None) -> dict[str, Token[str | None]]:
    tokens: dict[str, Token[str | None]] = {}
    for key, value in kwargs.items():
        var = _CONTEXT_VARS.get(key)
        if var is None or value is None:
            continue
        tokens[key] = var.set(value)
    return tokens


def reset_context(tokens: dict[str, Token[str | None]]) -> None:
    for key, token in tokens.items():
        _CONTEXT_VARS[key].reset(token)


@contextmanager
def log_context(**kwargs: str | None) -> Iterator[None]:
    """Bind context fields onto every log line emitted inside the block.

    ``None`` values leave an outer binding in place, so nested blocks only
    override what they know.
    """
    tokens = set_context(**kwargs)
    try:
        yield
    finally:
        reset_context(tokens)


def get_log_context() -> dict[str, str]:
    values = {key: var.get() for key, var in _CONTEXT_VARS.items()}
    return {key: value for key, value in values.items() if value is not None}
