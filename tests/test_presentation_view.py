from __future__ import annotations

from tasklens.core.presentation.view import (
    build_view,
    buttons_for,
    meter_color,
    response_view,
    status_type,
    visible_reason,
)
from tasklens.core.tasks.schemas import AgentResponse
from tasklens.core.tasks.store import TaskStore


def test_long_response_text_is_cut_at_limit() -> None:
    view = response_view(AgentResponse(text="z" * 150, confidence=0.5, action="info"))

    assert view.text == "z" * 120
    assert view.char_count == 120
    assert view.char_label == "120/120 chars"
    assert view.at_limit is True


def test_short_response_reports_its_length() -> None:
    view = response_view(AgentResponse(text="Task created.", confidence=0.8, action="task_created"))

    assert view.char_label == "13/120 chars"
    assert view.at_limit is False
    assert view.percent == 80


def test_reason_only_shown_for_low_or_very_high_confidence() -> None:
    assert visible_reason("needs work", 0.5) == "needs work"
    assert visible_reason("fine", 0.7) is None
    assert visible_reason("done", 0.95) == "done"
    assert visible_reason(None, 0.2) is None
    assert visible_reason("r" * 100, 0.2) == "r" * 80


def test_meter_and_status_bands() -> None:
    assert (meter_color(0.2), status_type(0.2)) == ("red", "error")
    assert (meter_color(0.5), status_type(0.5)) == ("amber", "warning")
    assert (meter_color(0.7), status_type(0.7)) == ("green", "success")


def test_buttons_follow_last_action() -> None:
    assert [b.label for b in buttons_for("task_created")] == ["Break Down"]
    assert [b.label for b in buttons_for("task_selected")] == ["Break Down", "Complete"]
    assert [b.label for b in buttons_for("subtasks_generated")] == ["Mark Complete"]
    assert [b.label for b in buttons_for("error")] == ["Retry"]
    assert buttons_for("task_deleted") == []


def test_page_view_summarizes_store_state() -> None:
    store = TaskStore()
    task_id = store.create_task("Write the onboarding guide for new engineers").task_id
    store.create_task("Write the release notes")
    store.mark_complete(task_id)
    response = store.record(store.select_task(task_id))

    view = build_view(store.snapshot(), response)

    assert view.summary == {
        "Total Tasks": "2",
        "Completed": "1",
        "Current Task": "Write the onboarding guide for...",
        "Agent Confidence": "70%",
        "Last Action": "task_selected (70%)",
    }
    completed, open_task = view.tasks
    assert completed.current is True
    assert completed.css_class == "task-item completed"
    assert [action.value for action in completed.actions] == ["delete_task"]
    assert [action.value for action in open_task.actions] == ["break_down", "mark_complete", "delete_task"]
