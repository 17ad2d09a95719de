from .confidence import (
    FLAG_COMPLEX,
    FLAG_CONTRADICTORY,
    FLAG_MALFORMED,
    FLAG_OVERBROAD,
    FLAG_UNSAFE,
    FLAG_VAGUE,
    HARD_REJECT_FLAGS,
    ConfidenceAnalysis,
    confidence_reason,
    score,
)

__all__ = [
    "ConfidenceAnalysis",
    "score",
    "confidence_reason",
    "HARD_REJECT_FLAGS",
    "FLAG_MALFORMED",
    "FLAG_CONTRADICTORY",
    "FLAG_UNSAFE",
    "FLAG_OVERBROAD",
    "FLAG_VAGUE",
    "FLAG_COMPLEX",
]
