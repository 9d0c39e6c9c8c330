"""JSON-file prompt library — stores prompt records keyed by id."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from promptup.schemas.prompt import PromptRecord

logger = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(dict[str, PromptRecord])

# Fields a caller may not overwrite through update_prompt.
_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PromptLibrary:
    """Document store for prompt records.

    Field values round-trip verbatim. ``updated_at`` is set on every write
    and never moves backwards, so it can be used for ordering.
    """

    def __init__(self, path: str | Path, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.path = Path(path)
        self._clock = clock

    def _load(self) -> dict[str, PromptRecord]:
        if not self.path.exists():
            return {}
        return _RECORDS_ADAPTER.validate_json(self.path.read_text())

    def _save(self, records: dict[str, PromptRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_RECORDS_ADAPTER.dump_json(records, indent=2))

    def _stamp(self, records: dict[str, PromptRecord]) -> datetime:
        now = self._clock()
        latest = max((r.updated_at for r in records.values()), default=None)
        if latest is not None and now <= latest:
            now = latest + timedelta(microseconds=1)
        return now

    def create_prompt(self, record: PromptRecord) -> str:
        """Store a new record and return its generated id."""
        records = self._load()
        prompt_id = uuid.uuid4().hex
        now = self._stamp(records)
        records[prompt_id] = record.model_copy(
            update={
                "id": prompt_id,
                "created_at": now,
                "updated_at": now,
                "usage_count": 0,
                "version": 1,
            }
        )
        self._save(records)
        logger.debug("Created prompt %s (%s)", prompt_id, record.title)
        return prompt_id

    def update_prompt(self, prompt_id: str, updates: Mapping[str, Any]) -> PromptRecord:
        records = self._load()
        current = self._get(records, prompt_id)
        changes = {k: v for k, v in updates.items() if k not in _PROTECTED_FIELDS}
        data = {**current.model_dump(), **changes, "updated_at": self._stamp(records)}
        records[prompt_id] = PromptRecord.model_validate(data)
        self._save(records)
        logger.debug("Updated prompt %s", prompt_id)
        return records[prompt_id]

    def delete_prompt(self, prompt_id: str) -> None:
        records = self._load()
        self._get(records, prompt_id)
        del records[prompt_id]
        self._save(records)
        logger.debug("Deleted prompt %s", prompt_id)

    def get_prompt(self, prompt_id: str) -> PromptRecord:
        return self._get(self._load(), prompt_id)

    def get_user_prompts(self, user_id: str) -> list[PromptRecord]:
        """The user's prompts, most recently updated first."""
        records = [r for r in self._load().values() if r.user_id == user_id]
        return sorted(records, key=lambda r: r.updated_at, reverse=True)

    def get_public_prompts(self) -> list[PromptRecord]:
        records = [r for r in self._load().values() if r.is_public]
        return sorted(records, key=lambda r: r.updated_at, reverse=True)

    @staticmethod
    def _get(records: dict[str, PromptRecord], prompt_id: str) -> PromptRecord:
        try:
            return records[prompt_id]
        except KeyError:
            raise KeyError(f"Prompt not found: {prompt_id}") from None
