from __future__ import annotations

from dataclasses import dataclass

from tasklens.core.scoring.confidence import clamp, score
from tasklens.core.tasks.schemas import Subtask

BREAKDOWN_MIN_CONFIDENCE = 0.15
BREAKDOWN_MAX_CONFIDENCE = 0.8
PLANNING_BONUS = 0.1
SUGGESTED_PLANNING_BOOST = 0.2

_TEMPLATES: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("project", "build"), ("Plan requirements", "Design solution", "Implement", "Test & deploy")),
    (("research", "study"), ("Define scope", "Gather sources", "Analyze data", "Write summary")),
    (("meeting", "presentation"), ("Set agenda", "Prepare materials", "Schedule time", "Follow up")),
)
_FALLBACK_STEPS = ("Start task", "Make progress", "Review work", "Complete")


@dataclass(frozen=True)
class Breakdown:
    subtasks: list[Subtask]
    confidence: float
    reason: str


def subtask_texts(task_text: str) -> tuple[str, ...]:
    keywords = task_text.lower()
    for triggers, steps in _TEMPLATES:
        if any(trigger in keywords for trigger in triggers):
            return steps
    return _FALLBACK_STEPS


def generate_subtasks(task_text: str) -> list[Subtask]:
    return [Subtask(id=index, text=text) for index, text in enumerate(subtask_texts(task_text), start=1)]


def breakdown_confidence(task_text: str, subtask_count: int) -> float:
    confidence = score(task_text).confidence

    # More steps reveal more unknowns; very few steps are probably incomplete.
    if subtask_count >= 6:
        confidence -= 0.2
    elif subtask_count >= 4:
        confidence -= 0.1
    elif subtask_count <= 2:
        confidence -= 0.15

    confidence += PLANNING_BONUS
    return clamp(confidence, BREAKDOWN_MIN_CONFIDENCE, BREAKDOWN_MAX_CONFIDENCE)


def boost_for_suggested(confidence: float) -> float:
    return clamp(confidence + SUGGESTED_PLANNING_BOOST, BREAKDOWN_MIN_CONFIDENCE, BREAKDOWN_MAX_CONFIDENCE)


def breakdown_reason(confidence: float) -> str:
    if confidence >= 0.6:
        return "Well-structured plan"
    if confidence >= 0.4:
        return "Plan needs refinement"
    return "Complex task, uncertain steps"


def plan_breakdown(task_text: str, suggested: bool = False) -> Breakdown:
    subtasks = generate_subtasks(task_text)
    confidence = breakdown_confidence(task_text, len(subtasks))
    if suggested:
        confidence = boost_for_suggested(confidence)
    return Breakdown(subtasks=subtasks, confidence=confidence, reason=breakdown_reason(confidence))
