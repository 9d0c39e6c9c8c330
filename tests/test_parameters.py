"""Tests for the UpgradeParameters model and CLI assignment parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from promptup.schemas.parameters import (
    ADVANCED_FLAGS,
    ALL_FLAGS,
    CONTENT_FLAGS,
    FORMATTING_FLAGS,
    QUALITY_FLAGS,
    UpgradeParameters,
    parse_assignment,
)


class TestUpgradeParameters:
    def test_session_defaults(self) -> None:
        params = UpgradeParameters()
        assert params.purpose == "code_generation"
        assert params.tone == "professional"
        assert params.detail_level == "detailed"
        assert params.domain == "software_development"
        assert params.prevent_lists is True
        assert params.enable_markdown is False
        assert params.custom_instructions == ""
        assert params.priority_focus == []

    def test_default_enabled_flags(self) -> None:
        assert UpgradeParameters().enabled_flags() == {
            "include_examples",
            "include_constraints",
            "include_context",
            "include_reasoning",
            "include_best_practices",
            "improve_clarity",
            "enhance_specificity",
            "strengthen_structure",
            "improve_flow",
            "enhance_readability",
            "improve_coherence",
            "prevent_lists",
        }

    def test_flag_groups_cover_every_bool_field(self) -> None:
        bool_fields = {
            name for name, field in UpgradeParameters.model_fields.items() if field.annotation is bool
        }
        assert set(ALL_FLAGS) == bool_fields
        assert ALL_FLAGS == CONTENT_FLAGS + QUALITY_FLAGS + ADVANCED_FLAGS + FORMATTING_FLAGS
        assert len(set(ALL_FLAGS)) == len(ALL_FLAGS)

    def test_with_flags_sets_exactly(self) -> None:
        params = UpgradeParameters().with_flags({"add_chain_of_thought", "enable_markdown"})
        assert params.enabled_flags() == {"add_chain_of_thought", "enable_markdown"}
        assert params.is_enabled("enable_markdown")
        assert not params.is_enabled("prevent_lists")

    def test_with_flags_all_off_is_valid(self) -> None:
        assert UpgradeParameters().with_flags(()).enabled_flags() == frozenset()

    def test_with_flags_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown flag"):
            UpgradeParameters().with_flags({"make_it_pop"})

    def test_merged_validates(self) -> None:
        params = UpgradeParameters().merged({"tone": "friendly", "boost_creativity": True})
        assert params.tone == "friendly"
        assert params.boost_creativity is True
        with pytest.raises(ValidationError):
            UpgradeParameters().merged({"tone": "grumpy"})

    def test_merged_does_not_mutate(self) -> None:
        base = UpgradeParameters()
        base.merged({"priority_focus": ["Security"]})
        assert base.priority_focus == []

    def test_rejects_unknown_purpose(self) -> None:
        with pytest.raises(ValidationError):
            UpgradeParameters(purpose="world_domination")


class TestParseAssignment:
    @pytest.mark.parametrize("word,expected", [("yes", True), ("On", True), ("1", True), ("no", False), ("off", False)])
    def test_flag_words(self, word: str, expected: bool) -> None:
        assert parse_assignment(f"enable_markdown={word}") == ("enable_markdown", expected)

    def test_list_fields_split_on_commas(self) -> None:
        assert parse_assignment("priority_focus=Security, Clarity,") == ("priority_focus", ["Security", "Clarity"])

    def test_choice_passed_through(self) -> None:
        assert parse_assignment("tone = technical") == ("tone", "technical")

    def test_missing_equals(self) -> None:
        with pytest.raises(ValueError, match="key=value"):
            parse_assignment("tone")

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="Unknown parameter"):
            parse_assignment("colour=blue")

    def test_bad_bool(self) -> None:
        with pytest.raises(ValueError, match="boolean"):
            parse_assignment("prevent_lists=maybe")
