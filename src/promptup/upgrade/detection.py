"""Best-effort parameter detection from a stored prompt's text and category.

Rules are keyword heuristics checked in a fixed order. Each field group
(purpose, complexity, tone, domain) is detected independently and the
first matching rule in a group wins, so a prompt mentioning both
"beginner" and "advanced" is treated as beginner. A prompt with no
complexity keyword is reset to intermediate. The result is only a
starting point for manual configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from promptup.schemas.prompt import PromptRecord


@dataclass(frozen=True)
class DetectionRule:
    """Apply ``params`` when any keyword occurs in the content or category."""

    group: str
    keywords: tuple[str, ...]
    params: dict[str, Any]
    category_keywords: tuple[str, ...] = ()
    name: str = field(default="", compare=False)

    def matches(self, content: str, category: str) -> bool:
        return any(k in content for k in self.keywords) or any(
            k in category for k in self.category_keywords
        )


PURPOSE_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(
        group="purpose",
        name="code generation",
        keywords=("generate code", "write code"),
        category_keywords=("generation",),
        params={
            "purpose": "code_generation",
            "include_examples": True,
            "add_error_handling": True,
            "domain": "software_development",
        },
    ),
    DetectionRule(
        group="purpose",
        name="debugging",
        keywords=("debug", "fix"),
        category_keywords=("debug",),
        params={
            "purpose": "debugging",
            "include_troubleshooting": True,
            "add_chain_of_thought": True,
            "domain": "software_development",
        },
    ),
    DetectionRule(
        group="purpose",
        name="review",
        keywords=("review", "analyze"),
        category_keywords=("review",),
        params={
            "purpose": "analysis",
            "include_reasoning": True,
            "add_multi_perspective": True,
        },
    ),
    DetectionRule(
        group="purpose",
        name="documentation",
        keywords=("document", "explain"),
        category_keywords=("document",),
        params={
            "purpose": "documentation",
            "enhance_readability": True,
            "include_examples": True,
            "enable_markdown": True,
        },
    ),
    DetectionRule(
        group="purpose",
        name="creative",
        keywords=("creative", "story", "write"),
        params={
            "purpose": "creative",
            "boost_creativity": True,
            "language_style": "creative",
        },
    ),
)

COMPLEXITY_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(
        group="complexity",
        name="beginner",
        keywords=("beginner", "basic", "simple"),
        params={
            "complexity_level": "beginner",
            "vocabulary_level": "simple",
            "target_audience": "beginner",
        },
    ),
    DetectionRule(
        group="complexity",
        name="advanced",
        keywords=("advanced", "expert", "complex"),
        params={
            "complexity_level": "advanced",
            "vocabulary_level": "advanced",
            "target_audience": "expert",
        },
    ),
)

TONE_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(group="tone", name="professional", keywords=("formal", "professional"),
                  params={"tone": "professional"}),
    DetectionRule(group="tone", name="friendly", keywords=("casual", "friendly"),
                  params={"tone": "friendly"}),
    DetectionRule(group="tone", name="technical", keywords=("technical",),
                  params={"tone": "technical"}),
)

RULE_GROUPS: tuple[tuple[DetectionRule, ...], ...] = (PURPOSE_RULES, COMPLEXITY_RULES, TONE_RULES)

# Applied when no rule in the group matches.
GROUP_FALLBACKS: dict[str, dict[str, Any]] = {
    "complexity": {
        "complexity_level": "intermediate",
        "vocabulary_level": "moderate",
        "target_audience": "intermediate",
    },
}

# Enabled for every detected prompt.
BASELINE_FLAGS: dict[str, Any] = {
    "improve_clarity": True,
    "enhance_specificity": True,
    "strengthen_structure": True,
}


def first_match(rules: tuple[DetectionRule, ...], content: str, category: str) -> DetectionRule | None:
    for rule in rules:
        if rule.matches(content, category):
            return rule
    return None


def detect_parameters(content: str, category: str = "", language: str | None = None) -> dict[str, Any]:
    """Return a partial UpgradeParameters mapping suggested by the prompt text.

    A group with no keyword match contributes its entry in
    ``GROUP_FALLBACKS``, or nothing, leaving the caller's current values
    in place.
    """
    content = content.lower()
    category = category.lower()

    detected: dict[str, Any] = {}
    for rules in RULE_GROUPS:
        rule = first_match(rules, content, category)
        if rule is not None:
            detected.update(rule.params)
        else:
            detected.update(GROUP_FALLBACKS.get(rules[0].group, {}))

    # Domain group: any specific programming language implies software work.
    if language and language != "General":
        detected["domain"] = "software_development"

    detected.update(BASELINE_FLAGS)
    return detected


def detect_for_prompt(record: PromptRecord) -> dict[str, Any]:
    return detect_parameters(record.content, record.category, record.language)
