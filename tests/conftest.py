"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.config import AppConfig
from promptup.schemas.parameters import UpgradeParameters
from promptup.shared.llm_client import CompletionClient
from promptup.store.session import SessionStore


def make_text_response(text: str | None, *, prompt_tokens: int = 10, completion_tokens: int = 5):
    """Create a mock OpenAI chat completion carrying ``text``."""
    message = SimpleNamespace(content=text)
    choice = SimpleNamespace(message=message)
    usage = SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
    return SimpleNamespace(choices=[choice], usage=usage)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "promptup.yml"
    cfg.write_text(
        """\
user_id: tester
data_dir: "{data}"
max_history: 3
""".format(data=str(tmp_path / "data"))
    )
    return cfg


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(user_id="tester", data_dir=str(tmp_path / "data"), max_history=3)


@pytest.fixture
def session_store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "data", "tester")


@pytest.fixture
def mock_completion_client() -> CompletionClient:
    """Return a CompletionClient with a mocked OpenAI SDK underneath."""
    client = CompletionClient.__new__(CompletionClient)
    client._client = AsyncMock()
    client.model = "gpt-4o-mini"
    return client


@pytest.fixture
def all_off_params() -> UpgradeParameters:
    """Default choices with every flag switched off."""
    return UpgradeParameters().with_flags(())


@pytest.fixture
def sample_analysis() -> PromptAnalysis:
    return PromptAnalysis(
        clarity=4,
        specificity=3,
        effectiveness=5,
        weaknesses=["too vague", "missing output format"],
        estimated_performance="fair",
    )
