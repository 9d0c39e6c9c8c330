"""Tests for the prompt compiler."""

from __future__ import annotations

import pytest

from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.parameters import ALL_FLAGS, CHOICE_FIELDS, UpgradeParameters
from promptup.upgrade import prompts
from promptup.upgrade.compiler import (
    ENHANCEMENT_DIRECTIVES,
    QUALITY_DIRECTIVES,
    build_analysis_prompt,
    build_upgrade_prompt,
    humanize,
)
from promptup.upgrade.templates import TEMPLATE_INSTRUCTIONS, apply_template

DIRECTIVE_TABLE = ENHANCEMENT_DIRECTIVES + QUALITY_DIRECTIVES
ALL_SENTENCES = [sentence for _, sentence in DIRECTIVE_TABLE]

LIST_BAN = "Do NOT use numbered lists"


class TestDirectiveTables:
    def test_every_table_flag_is_a_parameter(self) -> None:
        for flag, _ in DIRECTIVE_TABLE:
            assert flag in ALL_FLAGS

    def test_sentences_are_unique(self) -> None:
        assert len(set(ALL_SENTENCES)) == len(ALL_SENTENCES)

    @pytest.mark.parametrize("flag,sentence", DIRECTIVE_TABLE)
    def test_single_flag_renders_only_its_sentence(
        self, flag: str, sentence: str, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        out = build_upgrade_prompt("do the thing", sample_analysis, all_off_params.with_flags({flag}))
        assert out.count(sentence) == 1
        for other in ALL_SENTENCES:
            if other != sentence:
                assert other not in out

    def test_all_flags_on_renders_every_sentence_in_table_order(self, sample_analysis: PromptAnalysis) -> None:
        params = UpgradeParameters().with_flags(ALL_FLAGS)
        out = build_upgrade_prompt("do the thing", sample_analysis, params)
        positions = [out.index(s) for s in ALL_SENTENCES]
        enhancement_positions = positions[: len(ENHANCEMENT_DIRECTIVES)]
        assert enhancement_positions == sorted(enhancement_positions)


class TestMinimalRendering:
    def test_all_flags_off(self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis) -> None:
        out = build_upgrade_prompt("summarise this report", sample_analysis, all_off_params)
        assert '"summarise this report"' in out
        for field in CHOICE_FIELDS:
            assert humanize(getattr(all_off_params, field)) in out
        for sentence in ALL_SENTENCES:
            assert sentence not in out
        assert prompts.NO_ENHANCEMENTS in out
        assert prompts.NO_QUALITY_IMPROVEMENTS in out
        assert "COMPREHENSIVE UPGRADE INSTRUCTIONS" in out

    def test_empty_optional_sections_omitted(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params)
        assert "PRIORITY FOCUS AREAS" not in out
        assert "PATTERNS TO AVOID" not in out
        assert "CUSTOM INSTRUCTIONS" not in out

    def test_empty_weaknesses_render_neutral_line(self, all_off_params: UpgradeParameters) -> None:
        analysis = PromptAnalysis(weaknesses=[])
        out = build_upgrade_prompt("x", analysis, all_off_params)
        assert prompts.NO_WEAKNESSES in out

    def test_sections_separated_by_blank_line(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params)
        assert out.startswith(prompts.ROLE_PREAMBLE + "\n\n")
        assert out.endswith("\n")
        assert "\n\n\n" not in out


class TestListPrevention:
    def test_block_present_near_top(self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis) -> None:
        params = all_off_params.with_flags({"prevent_lists"})
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert LIST_BAN in out
        assert "WRONG (DO NOT DO THIS)" in out
        assert "CORRECT (DO THIS INSTEAD)" in out
        assert out.index(LIST_BAN) < out.index("ORIGINAL PROMPT TO UPGRADE")

    def test_block_absent_when_disabled(self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params)
        assert LIST_BAN not in out
        assert "ABSOLUTELY NO LISTS" not in out
        assert prompts.PROSE_STRUCTURE_SENTENCE not in out

    def test_final_instructions_require_prose(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params.with_flags({"prevent_lists"}))
        assert prompts.PROSE_STRUCTURE_SENTENCE in out
        assert prompts.PROSE_REQUIREMENT.strip() in out


class TestMarkdownGuidance:
    def test_markdown_enabled(self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params.with_flags({"enable_markdown"}))
        assert "MARKDOWN FORMATTING REQUIREMENTS" in out
        assert prompts.MARKDOWN_LISTS_ALLOWED in out
        assert "Do NOT use any markdown syntax" not in out

    def test_markdown_disabled_forbids_syntax(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params)
        assert "Do NOT use any markdown syntax" in out
        assert "MARKDOWN FORMATTING REQUIREMENTS" not in out

    def test_markdown_with_list_prevention_does_not_contradict(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        params = all_off_params.with_flags({"enable_markdown", "prevent_lists"})
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert "headers" in out and "emphasis" in out
        assert prompts.MARKDOWN_LISTS_FORBIDDEN in out
        assert prompts.MARKDOWN_LISTS_ALLOWED not in out
        assert LIST_BAN in out


class TestFreeFormSections:
    def test_priority_and_avoid_preserve_order(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        params = all_off_params.model_copy(
            update={"priority_focus": ["Security", "Clarity"], "avoid_patterns": ["jargon", "passive voice"]}
        )
        out = build_upgrade_prompt("x", sample_analysis, params)
        priority = out.split("PRIORITY FOCUS AREAS:\n", 1)[1].split("\n\n", 1)[0]
        avoid = out.split("PATTERNS TO AVOID:\n", 1)[1].split("\n\n", 1)[0]
        assert priority == "• Security\n• Clarity"
        assert avoid == "• jargon\n• passive voice"
        assert out.index("PRIORITY FOCUS AREAS") < out.index("PATTERNS TO AVOID")

    def test_custom_instructions_verbatim(
        self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis
    ) -> None:
        text = "Answer in French.\nKeep it under 200 words."
        params = all_off_params.model_copy(update={"custom_instructions": text})
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert f"CUSTOM INSTRUCTIONS:\n{text}" in out

    def test_weaknesses_one_per_line(self, all_off_params: UpgradeParameters, sample_analysis: PromptAnalysis) -> None:
        out = build_upgrade_prompt("x", sample_analysis, all_off_params)
        assert "• too vague\n• missing output format" in out


class TestTemplateGuidance:
    def test_matching_template_adds_guidance(self, sample_analysis: PromptAnalysis) -> None:
        params = UpgradeParameters(purpose="debugging", tone="technical", detail_level="detailed")
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert "TEMPLATE-SPECIFIC GUIDANCE" in out
        assert TEMPLATE_INSTRUCTIONS["Debugging"] in out

    def test_guidance_not_duplicated_after_apply(self, sample_analysis: PromptAnalysis) -> None:
        params = apply_template(UpgradeParameters(), "Debugging")
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert out.count(TEMPLATE_INSTRUCTIONS["Debugging"]) == 1
        assert "TEMPLATE-SPECIFIC GUIDANCE" not in out


class TestDeterminism:
    def test_identical_calls_identical_output(self, sample_analysis: PromptAnalysis) -> None:
        params = apply_template(UpgradeParameters(), "Research")
        assert build_upgrade_prompt("p", sample_analysis, params) == build_upgrade_prompt("p", sample_analysis, params)

    def test_out_of_vocabulary_value_rendered_as_is(self, sample_analysis: PromptAnalysis) -> None:
        params = UpgradeParameters.model_construct(**{**UpgradeParameters().model_dump(), "tone": "sarcastic_ish"})
        out = build_upgrade_prompt("x", sample_analysis, params)
        assert "sarcastic ish" in out


def test_end_to_end_scenario(all_off_params: UpgradeParameters) -> None:
    analysis = PromptAnalysis(weaknesses=["too vague"])
    params = all_off_params.with_flags({"include_examples"}).model_copy(update={"purpose": "code_generation"})
    out = build_upgrade_prompt("write a function", analysis, params)
    assert "write a function" in out
    assert "too vague" in out
    assert "Include relevant, practical examples" in out
    assert "code generation" in out


def test_analysis_prompt_embeds_text_and_token_estimate() -> None:
    out = build_analysis_prompt("abcdefgh")
    assert '"abcdefgh"' in out
    assert '"tokenCount": 2' in out
    assert '"estimatedPerformance"' in out
