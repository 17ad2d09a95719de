from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    CREATE_TASK = "create_task"
    BREAK_DOWN = "break_down"
    MARK_COMPLETE = "mark_complete"
    SELECT_TASK = "select_task"
    GET_SUGGESTION = "get_suggestion"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"
    CLEAR_ALL = "clear_all"
    RETRY = "retry"

    @classmethod
    def names(cls) -> list[str]:
        return [member.value for member in cls]
