"""Upgrade history entries — one original/upgraded prompt pair per entry."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.parameters import UpgradeParameters


def _now_millis() -> str:
    return str(int(time.time() * 1000))


class UpgradeHistory(BaseModel):
    """A saved upgrade: both prompts plus the parameters and analysis used."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=_now_millis)
    original_prompt: str
    upgraded_prompt: str
    parameters: UpgradeParameters
    analysis: PromptAnalysis | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    rating: int | None = None  # 1-5, set by the user after the fact
    notes: str = ""
