"""Template registry — named parameter presets applied in one step."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from promptup.schemas.parameters import ALL_FLAGS, CHOICE_FIELDS, UpgradeParameters

logger = logging.getLogger(__name__)


def _preset(**fields: Any) -> UpgradeParameters:
    """Build a template: every flag off except the ones named, list prevention on."""
    base = {flag: False for flag in ALL_FLAGS}
    base["prevent_lists"] = True
    base.update(fields)
    return UpgradeParameters(**base)


UPGRADE_TEMPLATES: dict[str, UpgradeParameters] = {
    "Code Generation": _preset(
        purpose="code_generation",
        tone="technical",
        detail_level="detailed",
        complexity_level="intermediate",
        depth="moderate",
        target_audience="intermediate",
        output_format="code_blocks",
        response_style="tutorial",
        language_style="technical",
        vocabulary_level="moderate",
        domain="software_development",
        include_examples=True,
        include_constraints=True,
        include_best_practices=True,
        include_validation=True,
        add_error_handling=True,
        improve_clarity=True,
        enhance_specificity=True,
        strengthen_structure=True,
        enhance_readability=True,
    ),
    "Code Review": _preset(
        purpose="review",
        tone="professional",
        detail_level="comprehensive",
        complexity_level="advanced",
        depth="deep",
        target_audience="expert",
        output_format="structured",
        response_style="explanatory",
        language_style="technical",
        vocabulary_level="advanced",
        domain="software_development",
        include_reasoning=True,
        include_best_practices=True,
        include_alternatives=True,
        include_validation=True,
        include_warnings=True,
        add_multi_perspective=True,
        improve_clarity=True,
        enhance_specificity=True,
        add_edge_cases=True,
    ),
    "Documentation": _preset(
        purpose="documentation",
        tone="professional",
        detail_level="comprehensive",
        complexity_level="intermediate",
        depth="moderate",
        target_audience="mixed",
        output_format="structured",
        response_style="tutorial",
        language_style="natural",
        vocabulary_level="moderate",
        domain="general",
        include_examples=True,
        include_context=True,
        enhance_readability=True,
        strengthen_structure=True,
        improve_clarity=True,
        enhance_specificity=True,
        improve_flow=True,
        enable_markdown=True,
    ),
    "Creative Writing": _preset(
        purpose="creative",
        tone="friendly",
        detail_level="detailed",
        complexity_level="intermediate",
        depth="moderate",
        target_audience="general_public",
        output_format="narrative",
        response_style="interactive",
        language_style="creative",
        vocabulary_level="moderate",
        domain="general",
        include_alternatives=True,
        boost_creativity=True,
        improve_flow=True,
        enhance_readability=True,
        add_context_awareness=True,
        add_multi_perspective=True,
        include_self_reflection=True,
    ),
    "Debugging": _preset(
        purpose="debugging",
        tone="technical",
        detail_level="detailed",
        complexity_level="intermediate",
        depth="deep",
        target_audience="intermediate",
        output_format="step_by_step",
        response_style="tutorial",
        language_style="technical",
        vocabulary_level="moderate",
        domain="software_development",
        include_troubleshooting=True,
        include_validation=True,
        include_alternatives=True,
        add_error_handling=True,
        add_edge_cases=True,
        improve_clarity=True,
        enhance_specificity=True,
        add_chain_of_thought=True,
        include_verification_steps=True,
    ),
    "Analysis": _preset(
        purpose="analysis",
        tone="professional",
        detail_level="comprehensive",
        complexity_level="advanced",
        depth="deep",
        target_audience="expert",
        output_format="structured",
        response_style="explanatory",
        language_style="academic",
        vocabulary_level="advanced",
        domain="general",
        include_reasoning=True,
        include_alternatives=True,
        include_validation=True,
        improve_clarity=True,
        enhance_specificity=True,
        add_multi_perspective=True,
        add_chain_of_thought=True,
        include_verification_steps=True,
    ),
    "Research": _preset(
        purpose="research",
        tone="professional",
        detail_level="comprehensive",
        complexity_level="advanced",
        depth="comprehensive",
        target_audience="researchers",
        output_format="structured",
        response_style="reference",
        language_style="academic",
        vocabulary_level="specialized",
        domain="research",
        include_resources=True,
        include_validation=True,
        include_context=True,
        improve_clarity=True,
        enhance_specificity=True,
        strengthen_structure=True,
        enable_markdown=True,
        include_verification_steps=True,
    ),
    "Educational": _preset(
        purpose="explanation",
        tone="friendly",
        detail_level="detailed",
        complexity_level="beginner",
        depth="moderate",
        target_audience="students",
        output_format="step_by_step",
        response_style="tutorial",
        language_style="natural",
        vocabulary_level="simple",
        domain="education",
        include_examples=True,
        include_context=True,
        include_validation=True,
        enhance_readability=True,
        improve_clarity=True,
        improve_flow=True,
        strengthen_structure=True,
    ),
}

TEMPLATE_INSTRUCTIONS: dict[str, str] = {
    "Code Generation": (
        "Focus on generating clean, well-documented code with proper error handling, "
        "best practices, and comprehensive examples. Include input validation and edge "
        "case handling."
    ),
    "Code Review": (
        "Provide thorough analysis of code quality, security vulnerabilities, performance "
        "implications, maintainability issues, and adherence to best practices. Offer "
        "specific improvement suggestions."
    ),
    "Documentation": (
        "Create comprehensive, well-structured documentation with clear examples, proper "
        "formatting, and logical flow. Make it accessible to the target audience."
    ),
    "Creative Writing": (
        "Encourage creative thinking with multiple perspectives, innovative approaches, "
        "and rich contextual details. Foster imagination while maintaining coherence."
    ),
    "Debugging": (
        "Use systematic debugging methodology with step-by-step troubleshooting, root "
        "cause analysis, and verification steps. Include prevention strategies."
    ),
    "Analysis": (
        "Conduct thorough analysis with evidence-based reasoning, multiple perspectives, "
        "and validated conclusions. Support findings with clear logic."
    ),
    "Research": (
        "Provide comprehensive research guidance with proper methodology, resource "
        "identification, and validation techniques. Maintain academic rigor."
    ),
    "Educational": (
        "Create clear, engaging educational content with progressive difficulty, "
        "practical examples, and reinforcement opportunities. Ensure accessibility "
        "for learners."
    ),
}

# Fields a template carries; custom_instructions is never replaced.
_TEMPLATE_FIELDS = tuple(f for f in UpgradeParameters.model_fields if f != "custom_instructions")


def _append_guidance(existing: str, guidance: str) -> str:
    if not guidance or guidance in existing:
        return existing
    return f"{existing}\n\n{guidance}" if existing else guidance


class TemplateRegistry:
    """Built-in templates plus any user-registered ones."""

    def __init__(
        self,
        templates: Mapping[str, UpgradeParameters] | None = None,
        instructions: Mapping[str, str] | None = None,
    ) -> None:
        self._templates: dict[str, UpgradeParameters] = dict(
            UPGRADE_TEMPLATES if templates is None else templates
        )
        self._instructions: dict[str, str] = dict(
            TEMPLATE_INSTRUCTIONS if instructions is None else instructions
        )

    def names(self) -> list[str]:
        return list(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def get(self, name: str) -> UpgradeParameters:
        try:
            return self._templates[name]
        except KeyError:
            raise KeyError(f'Template "{name}" not found') from None

    def guidance(self, name: str) -> str:
        return self._instructions.get(name, "")

    def match(self, params: UpgradeParameters) -> str | None:
        """Return the first template sharing purpose, tone and detail level."""
        for name, template in self._templates.items():
            if (
                template.purpose == params.purpose
                and template.tone == params.tone
                and template.detail_level == params.detail_level
            ):
                return name
        return None

    def apply(self, current: UpgradeParameters, name: str) -> UpgradeParameters:
        """Replace every template field on ``current``.

        Existing custom instructions are kept; the template's guidance text,
        if any, is appended after them.
        """
        template = self.get(name)
        # model_dump copies list fields, so the result never aliases the template.
        update = template.model_dump(include=set(_TEMPLATE_FIELDS))
        update["custom_instructions"] = _append_guidance(
            current.custom_instructions, self.guidance(name)
        )
        logger.debug("Applied template %s", name)
        return current.model_copy(update=update, deep=True)

    def register(
        self,
        name: str,
        base: str,
        overrides: Mapping[str, Any] | None = None,
        guidance: str = "",
    ) -> UpgradeParameters:
        """Derive and store a new template from an existing one."""
        template = create_custom_template(base, overrides or {}, registry=self)
        self._templates[name] = template
        if guidance:
            self._instructions[name] = guidance
        return template


_DEFAULT_REGISTRY = TemplateRegistry()


def apply_template(current: UpgradeParameters, name: str) -> UpgradeParameters:
    return _DEFAULT_REGISTRY.apply(current, name)


def match_template(params: UpgradeParameters) -> str | None:
    return _DEFAULT_REGISTRY.match(params)


def create_custom_template(
    base: str,
    overrides: Mapping[str, Any],
    *,
    registry: TemplateRegistry | None = None,
) -> UpgradeParameters:
    """Return ``base`` with ``overrides`` applied (validated)."""
    return (registry or _DEFAULT_REGISTRY).get(base).merged(overrides)


def validate_template(template: Mapping[str, Any]) -> bool:
    """True when every enumerated choice field is present and not None."""
    return all(template.get(field) is not None for field in CHOICE_FIELDS)


def default_registry() -> TemplateRegistry:
    """The shared registry holding only the built-in templates."""
    return _DEFAULT_REGISTRY
