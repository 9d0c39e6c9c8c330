"""Upgrade parameters — the closed configuration record for a prompt rewrite."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel

Purpose = Literal[
    "code_generation", "analysis", "documentation", "debugging", "creative",
    "general", "testing", "refactoring", "optimization", "explanation",
    "translation", "research", "planning", "review",
]
Tone = Literal[
    "professional", "casual", "technical", "friendly", "authoritative",
    "conversational", "formal", "encouraging", "direct", "diplomatic",
]
DetailLevel = Literal["concise", "detailed", "comprehensive", "minimal", "exhaustive"]
ComplexityLevel = Literal["beginner", "intermediate", "advanced", "expert", "mixed"]
Depth = Literal["surface", "moderate", "deep", "comprehensive"]
TargetAudience = Literal[
    "beginner", "intermediate", "expert", "mixed", "students",
    "professionals", "researchers", "general_public",
]
OutputFormat = Literal[
    "structured", "conversational", "bullet_points", "step_by_step",
    "narrative", "qa_format", "outline", "code_blocks", "mixed",
]
ResponseStyle = Literal["direct", "explanatory", "interactive", "tutorial", "reference"]
LanguageStyle = Literal["natural", "technical", "academic", "business", "creative"]
VocabularyLevel = Literal["simple", "moderate", "advanced", "specialized"]
Domain = Literal[
    "general", "software_development", "data_science", "web_development",
    "mobile_development", "devops", "ai_ml", "cybersecurity", "design",
    "business", "education", "research", "healthcare", "finance",
]

CHOICE_FIELDS: tuple[str, ...] = (
    "purpose",
    "tone",
    "detail_level",
    "complexity_level",
    "depth",
    "target_audience",
    "output_format",
    "response_style",
    "language_style",
    "vocabulary_level",
    "domain",
)

CONTENT_FLAGS: tuple[str, ...] = (
    "include_examples",
    "include_constraints",
    "include_context",
    "include_alternatives",
    "include_reasoning",
    "include_troubleshooting",
    "include_best_practices",
    "include_warnings",
    "include_resources",
    "include_validation",
)

QUALITY_FLAGS: tuple[str, ...] = (
    "improve_clarity",
    "enhance_specificity",
    "boost_creativity",
    "strengthen_structure",
    "add_error_handling",
    "improve_flow",
    "enhance_readability",
    "add_edge_cases",
    "improve_coherence",
    "add_context_awareness",
)

ADVANCED_FLAGS: tuple[str, ...] = (
    "add_chain_of_thought",
    "include_self_reflection",
    "add_multi_perspective",
    "include_verification_steps",
    "add_iterative_refinement",
    "include_fallback_strategies",
)

# Rendered as dedicated formatting blocks rather than directive lines.
FORMATTING_FLAGS: tuple[str, ...] = ("enable_markdown", "prevent_lists")

ALL_FLAGS: tuple[str, ...] = CONTENT_FLAGS + QUALITY_FLAGS + ADVANCED_FLAGS + FORMATTING_FLAGS

_TRUE_WORDS = {"1", "true", "yes", "on", "y"}
_FALSE_WORDS = {"0", "false", "no", "off", "n"}


class UpgradeParameters(BaseModel):
    """How a prompt rewrite should be phrased and structured.

    Boolean flags are independent: any combination, including all off,
    is a valid configuration.
    """

    # Primary purpose and communication style
    purpose: Purpose = "code_generation"
    tone: Tone = "professional"

    # Detail and depth
    detail_level: DetailLevel = "detailed"
    complexity_level: ComplexityLevel = "intermediate"
    depth: Depth = "moderate"

    # Audience and output structure
    target_audience: TargetAudience = "intermediate"
    output_format: OutputFormat = "structured"
    response_style: ResponseStyle = "explanatory"

    # Content enhancements
    include_examples: bool = True
    include_constraints: bool = True
    include_context: bool = True
    include_alternatives: bool = False
    include_reasoning: bool = True
    include_troubleshooting: bool = False
    include_best_practices: bool = True
    include_warnings: bool = False
    include_resources: bool = False
    include_validation: bool = False

    # Quality improvements
    improve_clarity: bool = True
    enhance_specificity: bool = True
    boost_creativity: bool = False
    strengthen_structure: bool = True
    add_error_handling: bool = False
    improve_flow: bool = True
    enhance_readability: bool = True
    add_edge_cases: bool = False
    improve_coherence: bool = True
    add_context_awareness: bool = False

    # Formatting
    enable_markdown: bool = False
    prevent_lists: bool = True

    # Advanced features
    add_chain_of_thought: bool = False
    include_self_reflection: bool = False
    add_multi_perspective: bool = False
    include_verification_steps: bool = False
    add_iterative_refinement: bool = False
    include_fallback_strategies: bool = False

    # Language and domain
    language_style: LanguageStyle = "natural"
    vocabulary_level: VocabularyLevel = "moderate"
    domain: Domain = "software_development"

    # Customization
    custom_instructions: str = ""
    priority_focus: list[str] = []
    avoid_patterns: list[str] = []

    def enabled_flags(self) -> frozenset[str]:
        """Return the names of every boolean flag that is switched on."""
        return frozenset(flag for flag in ALL_FLAGS if getattr(self, flag))

    def is_enabled(self, flag: str) -> bool:
        return flag in self.enabled_flags()

    def with_flags(self, enabled: Iterable[str]) -> UpgradeParameters:
        """Return a copy whose flags are exactly ``enabled`` (all others off)."""
        enabled = set(enabled)
        unknown = enabled - set(ALL_FLAGS)
        if unknown:
            raise ValueError(f"Unknown flag(s): {', '.join(sorted(unknown))}")
        return self.model_copy(update={flag: flag in enabled for flag in ALL_FLAGS}, deep=True)

    def merged(self, overrides: Mapping[str, Any]) -> UpgradeParameters:
        """Apply a partial mapping and re-validate the result."""
        return UpgradeParameters.model_validate({**self.model_dump(), **dict(overrides)})


def parse_assignment(assignment: str) -> tuple[str, Any]:
    """Parse a ``key=value`` CLI option into a typed parameter override.

    Flags accept yes/no style words, list fields accept comma-separated
    values and choice fields are passed through for model validation.
    """
    if "=" not in assignment:
        raise ValueError(f"Expected key=value, got {assignment!r}")
    key, _, raw = assignment.partition("=")
    key, raw = key.strip(), raw.strip()

    if key not in UpgradeParameters.model_fields:
        raise ValueError(f"Unknown parameter: {key}")

    if key in ALL_FLAGS:
        word = raw.lower()
        if word in _TRUE_WORDS:
            return key, True
        if word in _FALSE_WORDS:
            return key, False
        raise ValueError(f"Expected a boolean for {key}, got {raw!r}")

    if key in ("priority_focus", "avoid_patterns"):
        return key, [item.strip() for item in raw.split(",") if item.strip()]

    return key, raw
