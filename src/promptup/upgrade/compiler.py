"""Prompt compiler — renders upgrade parameters into one LLM instruction string.

Every function here is pure: the same arguments always produce the same
text, and nothing is read from the clock, the environment or the network.
Enumerated fields are not re-validated; an out-of-vocabulary value is
rendered as-is.
"""

from __future__ import annotations

from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.parameters import UpgradeParameters
from promptup.shared.tokens import estimate_token_count
from promptup.upgrade import prompts
from promptup.upgrade.templates import TemplateRegistry, default_registry

# (flag, directive) pairs in render order. Adding an enhancement only needs a row here.
ENHANCEMENT_DIRECTIVES: tuple[tuple[str, str], ...] = (
    ("include_examples", "Include relevant, practical examples"),
    ("include_constraints", "Add clear constraints and limitations"),
    ("include_context", "Provide rich contextual information"),
    ("include_alternatives", "Suggest alternative approaches or solutions"),
    ("include_reasoning", "Include reasoning and explanation steps"),
    ("include_troubleshooting", "Add troubleshooting guidance and common issues"),
    ("include_best_practices", "Incorporate industry best practices"),
    ("include_warnings", "Include relevant warnings and cautions"),
    ("include_resources", "Add helpful resources and references"),
    ("include_validation", "Include validation and verification methods"),
    ("add_chain_of_thought", "Add chain-of-thought reasoning process"),
    ("add_multi_perspective", "Include multiple perspectives and viewpoints"),
    ("include_verification_steps", "Add verification and validation steps"),
    ("include_self_reflection", "Include self-reflection and metacognitive elements"),
    ("add_iterative_refinement", "Add iterative refinement suggestions"),
    ("include_fallback_strategies", "Include fallback strategies for edge cases"),
)

QUALITY_DIRECTIVES: tuple[tuple[str, str], ...] = (
    ("improve_clarity", "Significantly improve clarity and precision"),
    ("enhance_specificity", "Make instructions more specific and actionable"),
    ("boost_creativity", "Enhance creative potential and innovative thinking"),
    ("strengthen_structure", "Improve logical structure and organization"),
    ("enhance_readability", "Enhance readability and comprehension"),
    ("improve_coherence", "Improve overall coherence and flow"),
    ("add_error_handling", "Add comprehensive error handling"),
    ("improve_flow", "Improve logical flow and transitions"),
    ("add_edge_cases", "Consider and address edge cases"),
    ("add_context_awareness", "Enhance context awareness and situational understanding"),
)

# (label, field) rows of the specifications block.
SPECIFICATION_LABELS: tuple[tuple[str, str], ...] = (
    ("Primary Purpose", "purpose"),
    ("Target Audience", "target_audience"),
    ("Complexity Level", "complexity_level"),
    ("Communication Tone", "tone"),
    ("Detail Level", "detail_level"),
    ("Content Depth", "depth"),
    ("Output Format", "output_format"),
    ("Response Style", "response_style"),
    ("Domain Focus", "domain"),
    ("Language Style", "language_style"),
    ("Vocabulary Level", "vocabulary_level"),
)

# Scores echoed back so the rewrite knows where the original fell short.
_SCORE_LABELS: tuple[tuple[str, str], ...] = (
    ("Clarity", "clarity"),
    ("Specificity", "specificity"),
    ("Effectiveness", "effectiveness"),
    ("Structure", "structure"),
    ("Coherence", "coherence"),
    ("Readability", "readability"),
)

_BULLET = "• "


def humanize(value: str) -> str:
    """Turn an enum value like ``code_generation`` into ``code generation``."""
    return str(value).replace("_", " ")


def _bullets(lines: list[str]) -> str:
    return "\n".join(f"{_BULLET}{line}" for line in lines)


def _directives(params: UpgradeParameters, table: tuple[tuple[str, str], ...]) -> list[str]:
    enabled = params.enabled_flags()
    return [sentence for flag, sentence in table if flag in enabled]


def _labeled(label: str, body: str) -> str:
    return f"{label}:\n{body}"


def render_formatting_guidance(params: UpgradeParameters) -> str:
    """Markdown or plain-text guidance, consistent with the list-prevention setting."""
    if params.enable_markdown:
        rule = prompts.MARKDOWN_LISTS_FORBIDDEN if params.prevent_lists else prompts.MARKDOWN_LISTS_ALLOWED
        return prompts.MARKDOWN_GUIDANCE.format(list_rule=rule)
    rule = prompts.PLAIN_LISTS_FORBIDDEN if params.prevent_lists else prompts.PLAIN_LISTS_ALLOWED
    return prompts.PLAIN_TEXT_GUIDANCE.format(list_rule=rule)


def render_specifications(params: UpgradeParameters) -> str:
    rows = [f"- {label}: {humanize(getattr(params, field))}" for label, field in SPECIFICATION_LABELS]
    return _labeled("UPGRADE SPECIFICATIONS", "\n".join(rows))


def _template_guidance(params: UpgradeParameters, registry: TemplateRegistry) -> str:
    name = registry.match(params)
    if not name:
        return ""
    guidance = registry.guidance(name)
    # Guidance appended by template application is already in the custom block.
    if not guidance or guidance in params.custom_instructions:
        return ""
    return _labeled("TEMPLATE-SPECIFIC GUIDANCE", guidance)


def _final_instructions(params: UpgradeParameters) -> str:
    return prompts.FINAL_INSTRUCTIONS.format(
        formatting_sentence=prompts.MARKDOWN_SENTENCE if params.enable_markdown else prompts.PLAIN_SENTENCE,
        structure_sentence=(
            prompts.PROSE_STRUCTURE_SENTENCE if params.prevent_lists else prompts.FORMAT_STRUCTURE_SENTENCE
        ),
        extra_requirement=prompts.PROSE_REQUIREMENT if params.prevent_lists else "",
    )


def build_upgrade_prompt(
    original_prompt: str,
    analysis: PromptAnalysis,
    params: UpgradeParameters,
    *,
    registry: TemplateRegistry | None = None,
) -> str:
    """Render the full upgrade instruction for ``original_prompt``.

    The list-prevention block, when enabled, sits directly under the role
    preamble so context truncation never drops it. ``registry`` supplies
    template-specific guidance and defaults to the built-in templates.
    """
    sections: list[str] = [prompts.ROLE_PREAMBLE]

    if params.prevent_lists:
        sections.append(prompts.LIST_PREVENTION_BLOCK)

    sections.append(_labeled("ORIGINAL PROMPT TO UPGRADE", f'"{original_prompt}"'))

    scores = "\n".join(f"- {label}: {getattr(analysis, field)}/10" for label, field in _SCORE_LABELS)
    sections.append(_labeled("CURRENT ANALYSIS SCORES (Areas Needing Improvement)", scores))

    weaknesses = list(analysis.weaknesses) or [prompts.NO_WEAKNESSES]
    sections.append(_labeled("IDENTIFIED WEAKNESSES THAT MUST BE ADDRESSED", _bullets(weaknesses)))

    sections.append(render_specifications(params))

    guidance = _template_guidance(params, registry or default_registry())
    if guidance:
        sections.append(guidance)

    enhancements = _directives(params, ENHANCEMENT_DIRECTIVES) or [prompts.NO_ENHANCEMENTS]
    sections.append(_labeled("ENHANCEMENTS TO INCORPORATE", _bullets(enhancements)))

    quality = _directives(params, QUALITY_DIRECTIVES) or [prompts.NO_QUALITY_IMPROVEMENTS]
    sections.append(_labeled("QUALITY IMPROVEMENTS TO IMPLEMENT", _bullets(quality)))

    sections.append(render_formatting_guidance(params))

    if params.priority_focus:
        sections.append(_labeled("PRIORITY FOCUS AREAS", _bullets(list(params.priority_focus))))
    if params.avoid_patterns:
        sections.append(_labeled("PATTERNS TO AVOID", _bullets(list(params.avoid_patterns))))
    if params.custom_instructions:
        sections.append(_labeled("CUSTOM INSTRUCTIONS", params.custom_instructions))

    sections.append(_final_instructions(params))
    return "\n\n".join(sections) + "\n"


def build_analysis_prompt(prompt: str) -> str:
    """Render the request asking the model to score ``prompt`` as JSON."""
    return prompts.ANALYSIS_TEMPLATE.format(prompt=prompt, token_count=estimate_token_count(prompt))
