"""Analysis normalizer — coerces untrusted model output into a PromptAnalysis.

Accepted shapes:
    TEXT    a string holding a JSON object somewhere inside it
    LEGACY  a mapping with a ``summary`` key and nested ``codeQuality`` /
            ``performance`` sections (older analysis responses)
    MODERN  any other mapping, read field by field

Nothing here raises: every failure path returns ``fallback_analysis()``.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Mapping
from typing import Any

from promptup.schemas.analysis import PromptAnalysis
from promptup.shared.tokens import estimate_cost, estimate_token_count

logger = logging.getLogger(__name__)


class ResponseShape(enum.Enum):
    TEXT = "text"
    MODERN = "modern"
    LEGACY = "legacy"


def detect_shape(response: Any) -> ResponseShape:
    """Classify a raw response. Raises ``TypeError`` for unsupported types."""
    if isinstance(response, str):
        return ResponseShape.TEXT
    if isinstance(response, Mapping):
        return ResponseShape.LEGACY if "summary" in response else ResponseShape.MODERN
    raise TypeError(f"Unsupported analysis response type: {type(response).__name__}")


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first balanced ``{...}`` object in ``text``.

    Braces inside JSON strings are ignored when matching. Raises
    ``ValueError`` if no object is found or it does not parse.
    """
    start = text.find("{")
    if start == -1:
        raise ValueError("No JSON object found in response")

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                obj = json.loads(text[start:pos + 1])
                if not isinstance(obj, dict):
                    raise ValueError("Response JSON is not an object")
                return obj

    raise ValueError("Unbalanced JSON object in response")


def fallback_analysis() -> PromptAnalysis:
    """The fixed record returned whenever a response cannot be normalized."""
    return PromptAnalysis(
        clarity=6,
        specificity=6,
        effectiveness=6,
        creativity=5,
        structure=6,
        coherence=6,
        readability=6,
        language_quality=6,
        contextual_richness=5,
        token_count=0,
        estimated_cost=0.0,
        strengths=["Basic prompt structure"],
        weaknesses=["Needs improvement", "Could be more specific"],
        suggestions=["Add more specific instructions", "Include examples", "Clarify expected output"],
        estimated_performance="fair",
        complexity="medium",
    )


def quick_analysis(prompt: str, model: str = "gpt-4o-mini") -> PromptAnalysis:
    """Placeholder analysis used when upgrading a prompt that was never analyzed."""
    tokens = estimate_token_count(prompt)
    return PromptAnalysis(
        clarity=6,
        specificity=5,
        effectiveness=6,
        creativity=5,
        structure=6,
        coherence=6,
        readability=7,
        language_quality=6,
        contextual_richness=5,
        token_count=tokens,
        estimated_cost=estimate_cost(tokens, model),
        strengths=["Basic prompt structure"],
        weaknesses=["Could be more specific", "Needs clearer instructions"],
        suggestions=["Add more context", "Specify desired output format", "Include examples"],
        estimated_performance="fair",
        complexity="medium",
    )


def _from_modern(data: Mapping[str, Any]) -> PromptAnalysis:
    # Known keys only, camelCase first then snake_case; the model validators
    # clamp and default each value.
    fields: dict[str, Any] = {}
    for name, alias in _MODERN_KEYS.items():
        if alias in data:
            fields[name] = data[alias]
        elif name in data:
            fields[name] = data[name]
    return PromptAnalysis.model_validate(fields)


def _legacy_score(section: Mapping[str, Any], key: str, default: int) -> Any:
    value = section.get(key)
    return value if value else default


def _legacy_list(section: Mapping[str, Any], key: str, placeholder: str) -> list[str]:
    value = section.get(key)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return [placeholder]


def _from_legacy(data: Mapping[str, Any]) -> PromptAnalysis:
    quality = data.get("codeQuality")
    quality = quality if isinstance(quality, Mapping) else {}
    performance = data.get("performance")
    performance = performance if isinstance(performance, Mapping) else {}
    summary = data.get("summary")

    return PromptAnalysis(
        clarity=_legacy_score(quality, "clarity", 7),
        specificity=_legacy_score(quality, "specificity", 6),
        effectiveness=_legacy_score(quality, "effectiveness", 7),
        creativity=6,
        structure=7,
        coherence=7,
        readability=7,
        language_quality=7,
        contextual_richness=6,
        token_count=estimate_token_count(summary if isinstance(summary, str) else ""),
        estimated_cost=0.0,
        strengths=_legacy_list(quality, "strengths", "Well-structured prompt"),
        weaknesses=_legacy_list(quality, "improvements", "Could be more specific"),
        suggestions=_legacy_list(performance, "optimizations", "Add more context"),
        estimated_performance="good",
        complexity="medium",
    )


def normalize_analysis(response: Any) -> PromptAnalysis:
    """Convert any model response into a well-formed PromptAnalysis."""
    try:
        shape = detect_shape(response)
        if shape is ResponseShape.TEXT:
            return _from_modern(extract_json_object(response))
        if shape is ResponseShape.LEGACY:
            return _from_legacy(response)
        return _from_modern(response)
    except Exception as exc:
        logger.warning("Could not normalize analysis response, using fallback: %s", exc)
        return fallback_analysis()


_MODERN_KEYS: dict[str, str] = {
    name: field.alias or name for name, field in PromptAnalysis.model_fields.items()
}
