from __future__ import annotations

import re
from dataclasses import dataclass, field

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.85
BASE_CONFIDENCE = 0.2

MALFORMED_CONFIDENCE = 0.1
CONTRADICTORY_CONFIDENCE = 0.15
UNSAFE_CONFIDENCE = 0.1
OVERBROAD_CONFIDENCE = 0.2

FLAG_MALFORMED = "malformed"
FLAG_CONTRADICTORY = "contradictory"
FLAG_UNSAFE = "unsafe"
FLAG_OVERBROAD = "overbroad"
FLAG_VAGUE = "vague"
FLAG_COMPLEX = "complex"

HARD_REJECT_FLAGS = (FLAG_MALFORMED, FLAG_CONTRADICTORY, FLAG_UNSAFE, FLAG_OVERBROAD)

_FLAG_REASONS: tuple[tuple[str, str], ...] = (
    (FLAG_MALFORMED, "Invalid input format"),
    (FLAG_CONTRADICTORY, "Contradictory requirements"),
    (FLAG_UNSAFE, "Unsafe request - human oversight required"),
    (FLAG_OVERBROAD, "Scope too broad - needs constraints"),
    (FLAG_VAGUE, "Vague task - needs clarification"),
    (FLAG_COMPLEX, "Complex task - proceed cautiously"),
)

# Patterns run against lowercased text with ASCII word boundaries.
_EXCESSIVE_PUNCTUATION_RE = re.compile(r"[!?]{3,}|[.]{4,}|[#@$%^&*]{2,}", re.ASCII)
_ONLY_SYMBOLS_RE = re.compile(r"^[^a-zA-Z0-9\s]+$", re.ASCII)

_CONTRADICTION_RES = tuple(
    re.compile(pattern, re.ASCII)
    for pattern in (
        r"technical.*but.*no.*technical",
        r"presentation.*but.*no.*present",
        r"build.*but.*don't.*create",
        r"detailed.*but.*simple",
        r"complex.*but.*basic",
    )
)

_UNSAFE_RES = tuple(
    re.compile(pattern, re.ASCII)
    for pattern in (
        r"autonomous.*hiring.*without.*human",
        r"replace.*human.*decision",
        r"ignore.*rules|bypass.*constraint",
        r"full.*autonomy.*without.*oversight",
        r"make.*decisions.*without.*approval",
    )
)

_OVERBROAD_RES = tuple(
    re.compile(pattern, re.ASCII)
    for pattern in (
        r"solve.*all.*problems",
        r"everything.*automatically",
        r"complete.*solution.*for.*everything",
        r"build.*system.*that.*does.*everything",
        r"automate.*entire.*business",
    )
)

_VAGUE_TERMS_RE = re.compile(
    r"\b(something|stuff|things|maybe|probably|somehow|whatever|handle|deal with|work on)\b",
    re.ASCII,
)
_TOO_GENERIC_RE = re.compile(r"\b(do|make|create|build)\s+\w{1,4}\b", re.ASCII)

_ACTION_VERB_RE = re.compile(
    r"\b(design|build|create|develop|implement|analyze|research|write|plan|organize)\b",
    re.ASCII,
)
_TECHNICAL_TERM_RE = re.compile(
    r"\b(api|database|system|framework|algorithm|model|architecture|deployment|testing)\b",
    re.ASCII,
)
_CONTEXT_RE = re.compile(r"\b(for|using|with|in|on|project|application|website|mobile|web)\b", re.ASCII)
_OBJECTIVE_RE = re.compile(r"\b(to|will|should|must|need|goal|objective|target|result)\b", re.ASCII)
_COMPLEXITY_RE = re.compile(
    r"\b(complex|advanced|sophisticated|enterprise|scalable|distributed|machine learning|ai)\b",
    re.ASCII,
)


@dataclass(frozen=True)
class ConfidenceAnalysis:
    confidence: float
    flags: tuple[str, ...] = field(default_factory=tuple)
    reason: str = ""

    @property
    def rejected(self) -> bool:
        return any(flag in HARD_REJECT_FLAGS for flag in self.flags)

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags


def normalize(text: str) -> str:
    return text.lower().strip()


def is_malformed(text: str) -> bool:
    return bool(_EXCESSIVE_PUNCTUATION_RE.search(text) or _ONLY_SYMBOLS_RE.search(text) or len(text) < 2)


def is_contradictory(text: str) -> bool:
    return any(pattern.search(text) for pattern in _CONTRADICTION_RES)


def is_unsafe(text: str) -> bool:
    return any(pattern.search(text) for pattern in _UNSAFE_RES)


def is_overbroad(text: str) -> bool:
    return any(pattern.search(text) for pattern in _OVERBROAD_RES)


def is_vague(text: str) -> bool:
    return bool(_VAGUE_TERMS_RE.search(text) or _TOO_GENERIC_RE.search(text))


def word_count_bonus(text: str) -> float:
    words = len(text.split())
    if words >= 8:
        return 0.2
    if words >= 5:
        return 0.1
    if words >= 3:
        return 0.05
    return 0.0


def clamp(value: float, low: float, high: float) -> float:
    return round(max(low, min(high, value)), 2)


def confidence_reason(confidence: float, flags: tuple[str, ...] | list[str] = ()) -> str:
    for flag, reason in _FLAG_REASONS:
        if flag in flags:
            return reason

    if confidence >= 0.7:
        return "Clear, specific task"
    if confidence >= 0.5:
        return "Good detail, some clarity"
    if confidence >= 0.3:
        return "Basic info, needs more detail"
    return "Low confidence - needs refinement"


def _rejected(flag: str, confidence: float) -> ConfidenceAnalysis:
    flags = (flag,)
    return ConfidenceAnalysis(confidence=confidence, flags=flags, reason=confidence_reason(confidence, flags))


def score(text: str) -> ConfidenceAnalysis:
    """Score how actionable a task description looks.

    Hard rejects short-circuit with a fixed low confidence. Otherwise the
    score starts at ``BASE_CONFIDENCE`` and moves by additive adjustments
    before being clamped to ``[MIN_CONFIDENCE, MAX_CONFIDENCE]``.

    The clamped score is rounded to two decimals so additive float steps
    (0.2 + 0.1 ...) compare and display exactly. Clamping uses the raw sum;
    the reason bands read the rounded score.
    """
    normalized = normalize(text or "")

    if is_malformed(normalized):
        return _rejected(FLAG_MALFORMED, MALFORMED_CONFIDENCE)
    if is_contradictory(normalized):
        return _rejected(FLAG_CONTRADICTORY, CONTRADICTORY_CONFIDENCE)
    if is_unsafe(normalized):
        return _rejected(FLAG_UNSAFE, UNSAFE_CONFIDENCE)
    if is_overbroad(normalized):
        return _rejected(FLAG_OVERBROAD, OVERBROAD_CONFIDENCE)

    confidence = BASE_CONFIDENCE
    flags: list[str] = []

    if is_vague(normalized):
        flags.append(FLAG_VAGUE)
        confidence = max(MIN_CONFIDENCE, confidence - 0.3)

    confidence += word_count_bonus(normalized)

    if _ACTION_VERB_RE.search(normalized):
        confidence += 0.15
    if _TECHNICAL_TERM_RE.search(normalized):
        confidence += 0.2
    if _CONTEXT_RE.search(normalized):
        confidence += 0.1
    if _OBJECTIVE_RE.search(normalized):
        confidence += 0.1
    if _COMPLEXITY_RE.search(normalized):
        confidence -= 0.15
        flags.append(FLAG_COMPLEX)

    final = clamp(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE)
    return ConfidenceAnalysis(confidence=final, flags=tuple(flags), reason=confidence_reason(final, flags))
