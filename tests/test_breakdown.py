from __future__ import annotations

from tasklens.core.planning.breakdown import (
    breakdown_confidence,
    breakdown_reason,
    generate_subtasks,
    plan_breakdown,
)


def _texts(task_text: str) -> list[str]:
    return [subtask.text for subtask in generate_subtasks(task_text)]


def test_keyword_dispatch_picks_template() -> None:
    assert _texts("Research competitor pricing") == ["Define scope", "Gather sources", "Analyze data", "Write summary"]
    assert _texts("Build the marketing website") == ["Plan requirements", "Design solution", "Implement", "Test & deploy"]
    assert _texts("Prepare quarterly presentation") == ["Set agenda", "Prepare materials", "Schedule time", "Follow up"]
    assert _texts("Call the plumber") == ["Start task", "Make progress", "Review work", "Complete"]


def test_first_matching_template_wins() -> None:
    assert _texts("study the project history")[0] == "Plan requirements"


def test_subtasks_are_numbered_and_open() -> None:
    subtasks = generate_subtasks("anything at all")

    assert [subtask.id for subtask in subtasks] == [1, 2, 3, 4]
    assert not any(subtask.completed for subtask in subtasks)


def test_breakdown_confidence_applies_count_penalty_and_planning_bonus() -> None:
    text = "Research competitor pricing"

    assert breakdown_confidence(text, 4) == 0.4
    assert breakdown_confidence(text, 6) == 0.3
    assert breakdown_confidence(text, 3) == 0.5
    assert breakdown_confidence(text, 2) == 0.35


def test_breakdown_confidence_is_clamped() -> None:
    assert breakdown_confidence("Design and implement a REST API for the payment system using Python", 4) == 0.8
    assert breakdown_confidence("do something", 4) == 0.15


def test_suggested_tasks_get_planning_boost() -> None:
    plain = plan_breakdown("Update project documentation")
    boosted = plan_breakdown("Update project documentation", suggested=True)

    assert plain.confidence == 0.35
    assert boosted.confidence == 0.55
    assert boosted.reason == "Plan needs refinement"


def test_breakdown_reason_bands() -> None:
    assert breakdown_reason(0.6) == "Well-structured plan"
    assert breakdown_reason(0.4) == "Plan needs refinement"
    assert breakdown_reason(0.39) == "Complex task, uncertain steps"
