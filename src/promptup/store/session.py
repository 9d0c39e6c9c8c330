"""Per-user session storage: upgrade history and the API credential.

Files live under ``<root>/<user_id>/``. Writes are plain read-modify-write
with no locking; a session is owned by a single process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from promptup.schemas.history import UpgradeHistory

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50

_HISTORY_ADAPTER = TypeAdapter(list[UpgradeHistory])


class SessionStore:
    """Local storage for one user's history and credential."""

    def __init__(self, root: str | Path, user_id: str) -> None:
        self.root = Path(root)
        self.user_id = user_id

    @property
    def user_dir(self) -> Path:
        return self.root / self.user_id

    @property
    def history_path(self) -> Path:
        return self.user_dir / "upgrade_history.json"

    @property
    def api_key_path(self) -> Path:
        return self.user_dir / "api_key"

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def load_history(self) -> list[UpgradeHistory]:
        """Return saved entries, newest first. An unreadable file loads as empty."""
        if not self.history_path.exists():
            return []
        try:
            return _HISTORY_ADAPTER.validate_json(self.history_path.read_text())
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Error loading upgrade history from %s: %s", self.history_path, exc)
            return []

    def save_history(self, entries: list[UpgradeHistory]) -> None:
        self.user_dir.mkdir(parents=True, exist_ok=True)
        self.history_path.write_bytes(_HISTORY_ADAPTER.dump_json(entries, by_alias=True, indent=2))
        logger.debug("Saved %d history entries to %s", len(entries), self.history_path)

    def append_history(
        self,
        entry: UpgradeHistory,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[UpgradeHistory]:
        """Prepend ``entry`` and keep only the ``limit`` most recent entries."""
        history = [entry, *self.load_history()][:limit]
        self.save_history(history)
        return history

    def clear_history(self) -> None:
        self.history_path.unlink(missing_ok=True)

    def export_history(self, path: str | Path) -> Path:
        """Write the history as pretty-printed JSON to ``path``."""
        path = Path(path)
        entries = self.load_history()
        data = json.loads(_HISTORY_ADAPTER.dump_json(entries, by_alias=True))
        path.write_text(json.dumps(data, indent=2))
        return path

    # ------------------------------------------------------------------
    # Credential
    # ------------------------------------------------------------------

    def load_api_key(self) -> str:
        if not self.api_key_path.exists():
            return ""
        return self.api_key_path.read_text().strip()

    def save_api_key(self, api_key: str) -> None:
        self.user_dir.mkdir(parents=True, exist_ok=True)
        self.api_key_path.write_text(api_key.strip())
