"""Score helpers for comparing and presenting analyses."""

from __future__ import annotations

from promptup.schemas.analysis import SCORE_FIELDS, PromptAnalysis

IMPROVEMENT_METRICS: tuple[str, ...] = (
    "clarity",
    "specificity",
    "effectiveness",
    "structure",
    "coherence",
    "readability",
)


def calculate_improvement_score(original: PromptAnalysis, upgraded: PromptAnalysis) -> float:
    """Mean per-metric gain from ``original`` to ``upgraded``, to one decimal."""
    deltas = [getattr(upgraded, m) - getattr(original, m) for m in IMPROVEMENT_METRICS]
    return round(sum(deltas) / len(deltas), 1)


def average_score(analysis: PromptAnalysis) -> float:
    return round(sum(getattr(analysis, f) for f in SCORE_FIELDS) / len(SCORE_FIELDS), 1)


def score_band(score: float) -> str:
    """Bucket a 1-10 score: high (8+), medium (6+), low (4+), else critical."""
    if score >= 8:
        return "high"
    if score >= 6:
        return "medium"
    if score >= 4:
        return "low"
    return "critical"


BAND_STYLES: dict[str, str] = {
    "high": "green",
    "medium": "yellow",
    "low": "dark_orange",
    "critical": "red",
}

PERFORMANCE_STYLES: dict[str, str] = {
    "excellent": "green",
    "good": "blue",
    "fair": "yellow",
    "poor": "red",
}

COMPLEXITY_STYLES: dict[str, str] = {
    "low": "green",
    "medium": "blue",
    "high": "yellow",
    "very-high": "red",
}
