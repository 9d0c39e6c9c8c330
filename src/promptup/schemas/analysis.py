"""Pydantic model for a prompt quality analysis.

Scores are bounded to 1-10 on every construction path, so a record built
from untrusted model output is always safe to display.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

Performance = Literal["poor", "fair", "good", "excellent"]
Complexity = Literal["low", "medium", "high", "very-high"]

PERFORMANCE_LEVELS: tuple[str, ...] = ("poor", "fair", "good", "excellent")
COMPLEXITY_LEVELS: tuple[str, ...] = ("low", "medium", "high", "very-high")

SCORE_FIELDS: tuple[str, ...] = (
    "clarity",
    "specificity",
    "effectiveness",
    "creativity",
    "structure",
    "coherence",
    "readability",
    "language_quality",
    "contextual_richness",
)

DEFAULT_SCORE = 5
SCORE_MIN = 1
SCORE_MAX = 10

PLACEHOLDER_STRENGTHS = ["Basic prompt structure"]
PLACEHOLDER_WEAKNESSES = ["Needs improvement"]
PLACEHOLDER_SUGGESTIONS = ["Add more specific instructions"]


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # Python ints are exact at any size; float() would overflow on huge ones.
    return isinstance(value, int) or math.isfinite(value)


def clamp_score(value: object) -> int:
    """Coerce any value into an integer score between 1 and 10."""
    if not _is_number(value):
        return DEFAULT_SCORE
    return max(SCORE_MIN, min(SCORE_MAX, round(value)))  # type: ignore[arg-type]


class PromptAnalysis(BaseModel):
    """Fixed-shape quality assessment of a prompt."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    clarity: int = DEFAULT_SCORE
    specificity: int = DEFAULT_SCORE
    effectiveness: int = DEFAULT_SCORE
    creativity: int = DEFAULT_SCORE
    structure: int = DEFAULT_SCORE
    coherence: int = DEFAULT_SCORE
    readability: int = DEFAULT_SCORE
    language_quality: int = DEFAULT_SCORE
    contextual_richness: int = DEFAULT_SCORE

    token_count: int = 0
    estimated_cost: float = 0.0

    strengths: list[str] = PLACEHOLDER_STRENGTHS
    weaknesses: list[str] = PLACEHOLDER_WEAKNESSES
    suggestions: list[str] = PLACEHOLDER_SUGGESTIONS

    estimated_performance: Performance = "fair"
    complexity: Complexity = "medium"

    @field_validator(*SCORE_FIELDS, mode="before")
    @classmethod
    def clamp_scores(cls, v: object) -> int:
        return clamp_score(v)

    @field_validator("token_count", mode="before")
    @classmethod
    def non_negative_tokens(cls, v: object) -> int:
        return max(0, int(v)) if _is_number(v) else 0

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def non_negative_cost(cls, v: object) -> float:
        if not _is_number(v):
            return 0.0
        try:
            return max(0.0, float(v))  # type: ignore[arg-type]
        except OverflowError:
            return 0.0

    @field_validator("estimated_performance", mode="before")
    @classmethod
    def known_performance(cls, v: object) -> str:
        return v if v in PERFORMANCE_LEVELS else "fair"  # type: ignore[return-value]

    @field_validator("complexity", mode="before")
    @classmethod
    def known_complexity(cls, v: object) -> str:
        return v if v in COMPLEXITY_LEVELS else "medium"  # type: ignore[return-value]

    @field_validator("strengths", "weaknesses", "suggestions", mode="before")
    @classmethod
    def string_lists(cls, v: object, info: ValidationInfo) -> list[str]:
        if isinstance(v, list) and all(isinstance(item, str) for item in v):
            return v
        return list(_PLACEHOLDERS[info.field_name])

    def scores(self) -> dict[str, int]:
        """Return the nine scores keyed by attribute name."""
        return {name: getattr(self, name) for name in SCORE_FIELDS}


_PLACEHOLDERS = {
    "strengths": PLACEHOLDER_STRENGTHS,
    "weaknesses": PLACEHOLDER_WEAKNESSES,
    "suggestions": PLACEHOLDER_SUGGESTIONS,
}
