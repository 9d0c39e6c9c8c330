"""Tests for session storage and the prompt library."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from promptup.schemas.history import UpgradeHistory
from promptup.schemas.parameters import UpgradeParameters
from promptup.schemas.prompt import PromptRecord
from promptup.store.library import PromptLibrary
from promptup.store.session import SessionStore


def _entry(n: int) -> UpgradeHistory:
    return UpgradeHistory(
        id=str(n),
        original_prompt=f"prompt {n}",
        upgraded_prompt=f"upgraded {n}",
        parameters=UpgradeParameters(),
    )


class TestSessionStore:
    def test_missing_history_is_empty(self, session_store: SessionStore) -> None:
        assert session_store.load_history() == []

    def test_append_newest_first(self, session_store: SessionStore) -> None:
        session_store.append_history(_entry(1))
        history = session_store.append_history(_entry(2))
        assert [e.id for e in history] == ["2", "1"]
        assert [e.id for e in session_store.load_history()] == ["2", "1"]

    def test_append_caps_history(self, session_store: SessionStore) -> None:
        for n in range(5):
            session_store.append_history(_entry(n), limit=3)
        assert [e.id for e in session_store.load_history()] == ["4", "3", "2"]

    def test_default_cap_is_fifty(self, session_store: SessionStore) -> None:
        session_store.save_history([_entry(n) for n in range(50)])
        history = session_store.append_history(_entry(99))
        assert len(history) == 50
        assert history[0].id == "99"

    def test_history_file_uses_camel_case(self, session_store: SessionStore) -> None:
        session_store.append_history(_entry(1))
        data = json.loads(session_store.history_path.read_text())
        assert data[0]["originalPrompt"] == "prompt 1"
        assert session_store.history_path.parent.name == "tester"

    def test_corrupt_history_logs_and_loads_empty(
        self, session_store: SessionStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        session_store.user_dir.mkdir(parents=True)
        session_store.history_path.write_text("{not json")
        with caplog.at_level(logging.ERROR, logger="promptup.store.session"):
            assert session_store.load_history() == []
        assert "Error loading upgrade history" in caplog.text

    def test_clear(self, session_store: SessionStore) -> None:
        session_store.append_history(_entry(1))
        session_store.clear_history()
        assert session_store.load_history() == []
        session_store.clear_history()

    def test_export(self, session_store: SessionStore, tmp_path: Path) -> None:
        session_store.append_history(_entry(1))
        out = session_store.export_history(tmp_path / "export.json")
        assert json.loads(out.read_text())[0]["upgradedPrompt"] == "upgraded 1"

    def test_api_key_round_trip(self, session_store: SessionStore) -> None:
        assert session_store.load_api_key() == ""
        session_store.save_api_key("  sk-test  \n")
        assert session_store.load_api_key() == "sk-test"

    def test_users_are_isolated(self, tmp_path: Path) -> None:
        SessionStore(tmp_path, "alice").append_history(_entry(1))
        assert SessionStore(tmp_path, "bob").load_history() == []


class _Clock:
    """Returns the same instant every time."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def library(tmp_path: Path) -> PromptLibrary:
    return PromptLibrary(tmp_path / "library.json", clock=_Clock())


def _record(title: str, user: str = "tester", **kw) -> PromptRecord:
    return PromptRecord(title=title, content=f"{title} body", user_id=user, **kw)


class TestPromptLibrary:
    def test_create_and_get_round_trip(self, library: PromptLibrary) -> None:
        rec = _record("Sorter", tags=["py", "algo"], category="Code Generation", is_favorite=True)
        prompt_id = library.create_prompt(rec)
        stored = library.get_prompt(prompt_id)
        assert stored.id == prompt_id
        assert stored.title == "Sorter"
        assert stored.content == "Sorter body"
        assert stored.tags == ["py", "algo"]
        assert stored.category == "Code Generation"
        assert stored.is_favorite is True
        assert stored.version == 1
        assert stored.usage_count == 0

    def test_update_refreshes_timestamp(self, library: PromptLibrary) -> None:
        prompt_id = library.create_prompt(_record("A"))
        before = library.get_prompt(prompt_id).updated_at
        updated = library.update_prompt(prompt_id, {"title": "A2", "id": "hijack"})
        assert updated.title == "A2"
        assert updated.id == prompt_id
        assert updated.updated_at > before

    def test_user_prompts_most_recent_first(self, library: PromptLibrary) -> None:
        first = library.create_prompt(_record("first"))
        second = library.create_prompt(_record("second"))
        library.create_prompt(_record("other", user="someone"))
        assert [r.id for r in library.get_user_prompts("tester")] == [second, first]

        library.update_prompt(first, {"description": "touched"})
        assert [r.id for r in library.get_user_prompts("tester")] == [first, second]

    def test_public_prompts(self, library: PromptLibrary) -> None:
        library.create_prompt(_record("private"))
        library.create_prompt(_record("shared", user="someone", is_public=True))
        assert [r.title for r in library.get_public_prompts()] == ["shared"]

    def test_delete(self, library: PromptLibrary) -> None:
        prompt_id = library.create_prompt(_record("gone"))
        library.delete_prompt(prompt_id)
        with pytest.raises(KeyError):
            library.get_prompt(prompt_id)

    @pytest.mark.parametrize("op", ["get", "update", "delete"])
    def test_unknown_id_raises_key_error(self, library: PromptLibrary, op: str) -> None:
        with pytest.raises(KeyError, match="Prompt not found"):
            if op == "get":
                library.get_prompt("nope")
            elif op == "update":
                library.update_prompt("nope", {"title": "x"})
            else:
                library.delete_prompt("nope")

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "lib.json"
        prompt_id = PromptLibrary(path).create_prompt(_record("kept"))
        assert PromptLibrary(path).get_prompt(prompt_id).title == "kept"
