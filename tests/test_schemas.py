"""Tests for the analysis, history and prompt record schemas."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from promptup.schemas.analysis import SCORE_FIELDS, PromptAnalysis, clamp_score
from promptup.schemas.history import UpgradeHistory
from promptup.schemas.parameters import UpgradeParameters
from promptup.schemas.prompt import PromptRecord


class TestClampScore:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, 1), (1, 1), (10, 10), (11, 10), (5.4, 5), (-100, 1), ("7", 5), (None, 5), (False, 5), (float("inf"), 5), (10**400, 10), (-(10**400), 1)],
    )
    def test_values(self, value: object, expected: int) -> None:
        assert clamp_score(value) == expected


class TestPromptAnalysis:
    def test_defaults(self) -> None:
        a = PromptAnalysis()
        assert all(getattr(a, f) == 5 for f in SCORE_FIELDS)
        assert a.token_count == 0
        assert a.estimated_performance == "fair"
        assert a.complexity == "medium"
        assert a.strengths == ["Basic prompt structure"]

    def test_frozen(self) -> None:
        a = PromptAnalysis()
        with pytest.raises(ValidationError):
            a.clarity = 9

    def test_huge_integer_score_constructs(self) -> None:
        assert PromptAnalysis(clarity=10**400).clarity == 10

    def test_accepts_both_key_styles(self) -> None:
        assert PromptAnalysis(language_quality=8).language_quality == 8
        assert PromptAnalysis.model_validate({"languageQuality": 8}).language_quality == 8

    def test_dumps_camel_case(self) -> None:
        data = PromptAnalysis(contextual_richness=9).model_dump(by_alias=True)
        assert data["contextualRichness"] == 9
        assert "estimatedPerformance" in data
        assert "tokenCount" in data

    def test_scores_dict(self) -> None:
        scores = PromptAnalysis(clarity=2).scores()
        assert list(scores) == list(SCORE_FIELDS)
        assert scores["clarity"] == 2

    def test_placeholder_lists_not_shared(self) -> None:
        a = PromptAnalysis(strengths=None)
        b = PromptAnalysis(strengths=None)
        assert a.strengths == b.strengths
        assert a.strengths is not b.strengths


class TestUpgradeHistory:
    def test_round_trip_json_uses_camel_case(self) -> None:
        entry = UpgradeHistory(
            original_prompt="a",
            upgraded_prompt="b",
            parameters=UpgradeParameters(),
            analysis=PromptAnalysis(clarity=7),
        )
        raw = entry.model_dump_json(by_alias=True)
        data = json.loads(raw)
        assert data["originalPrompt"] == "a"
        assert data["analysis"]["clarity"] == 7
        assert UpgradeHistory.model_validate_json(raw) == entry

    def test_id_is_millisecond_timestamp(self) -> None:
        entry = UpgradeHistory(original_prompt="a", upgraded_prompt="b", parameters=UpgradeParameters())
        assert entry.id.isdigit()
        assert len(entry.id) >= 13
        assert entry.analysis is None
        assert entry.rating is None


class TestPromptRecord:
    def test_defaults(self) -> None:
        record = PromptRecord(title="t", content="c", user_id="u")
        assert record.category == "General"
        assert record.language == "General"
        assert record.version == 1
        assert record.tags == []
        assert record.created_at.tzinfo is not None

    def test_requires_user(self) -> None:
        with pytest.raises(ValidationError):
            PromptRecord(title="t", content="c")
