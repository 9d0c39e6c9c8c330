"""PromptUpgrader — owns the session state and drives analyze/upgrade calls.

The compiler and normalizer are pure; this class is the only place that
talks to the completion client and the session store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.config import AppConfig
from promptup.schemas.history import UpgradeHistory
from promptup.schemas.parameters import UpgradeParameters
from promptup.schemas.prompt import PromptRecord
from promptup.shared.llm_client import CompletionClient, DryRunClient
from promptup.shared.tokens import estimate_cost, estimate_token_count
from promptup.store.session import SessionStore
from promptup.upgrade.compiler import build_analysis_prompt, build_upgrade_prompt
from promptup.upgrade.detection import detect_for_prompt
from promptup.upgrade.normalizer import normalize_analysis, quick_analysis
from promptup.upgrade.prompts import ANALYSIS_SYSTEM_PROMPT, UPGRADE_SYSTEM_PROMPT
from promptup.upgrade.templates import TemplateRegistry

logger = logging.getLogger(__name__)

ENHANCED_TAGS = ("enhanced", "upgraded")


def build_registry(config: AppConfig) -> TemplateRegistry:
    """Built-in templates plus the custom templates declared in config."""
    registry = TemplateRegistry()
    for name, tpl in config.custom_templates.items():
        registry.register(name, tpl.base, tpl.overrides, tpl.guidance)
    return registry


class PromptUpgrader:
    """One user's upgrade session.

    Holds the current parameters, the most recent analysis and the upgrade
    history. Calls are awaited one at a time; a failed call raises and
    leaves every attribute as it was.
    """

    def __init__(
        self,
        client: CompletionClient | DryRunClient,
        *,
        config: AppConfig,
        session: SessionStore | None = None,
        registry: TemplateRegistry | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.session = session
        self.registry = registry or build_registry(config)
        self.params: UpgradeParameters = config.initial_parameters()
        self.analysis: PromptAnalysis | None = None
        self.selected_prompt: PromptRecord | None = None
        self.history: list[UpgradeHistory] = session.load_history() if session else []
        self._analyzed_text: str | None = None

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def update_params(self, **changes: Any) -> UpgradeParameters:
        self.params = self.params.merged(changes)
        return self.params

    def set_custom_instructions(self, text: str) -> UpgradeParameters:
        return self.update_params(custom_instructions=text)

    def apply_template(self, name: str) -> UpgradeParameters:
        """Apply a named template, keeping any custom instructions."""
        self.params = self.registry.apply(self.params, name)
        return self.params

    def select_prompt(self, record: PromptRecord) -> UpgradeParameters:
        """Make ``record`` the working prompt and pre-fill detected parameters."""
        detected = detect_for_prompt(record)
        logger.debug("Detected parameters for %r: %s", record.title, sorted(detected))
        self.params = self.params.merged(detected)
        self.selected_prompt = record
        self.analysis = None
        self._analyzed_text = None
        return self.params

    # ------------------------------------------------------------------
    # Completion calls
    # ------------------------------------------------------------------

    def estimate_analysis(self, text: str) -> tuple[int, float]:
        """Token count and cost of analysing ``text``, shown before confirming."""
        tokens = estimate_token_count(text)
        return tokens, estimate_cost(tokens, self.config.model)

    async def analyze(self, text: str) -> PromptAnalysis:
        if not text.strip():
            raise ValueError("Please enter a prompt to analyze")

        raw = await self.client.complete(
            system=ANALYSIS_SYSTEM_PROMPT,
            user_message=build_analysis_prompt(text),
            json_mode=True,
            temperature=0.1,
        )
        analysis = normalize_analysis(raw)
        self.analysis = analysis
        self._analyzed_text = text
        logger.info("Analysis complete: %s performance", analysis.estimated_performance)
        return analysis

    async def upgrade(self, text: str, analysis: PromptAnalysis | None = None) -> UpgradeHistory:
        """Rewrite ``text`` with the current parameters and record it in history.

        Uses ``analysis`` if given, the last analysis of the same text
        otherwise, and finally a placeholder analysis.
        """
        if not text.strip():
            raise ValueError("Please enter a prompt to upgrade")

        if analysis is None:
            if self.analysis is not None and self._analyzed_text == text:
                analysis = self.analysis
            else:
                analysis = quick_analysis(text, self.config.model)

        params = self.params.model_copy(deep=True)
        upgraded = await self.client.complete(
            system=UPGRADE_SYSTEM_PROMPT,
            user_message=build_upgrade_prompt(text, analysis, params, registry=self.registry),
            temperature=0.7,
        )

        entry = UpgradeHistory(
            original_prompt=text,
            upgraded_prompt=upgraded.strip(),
            parameters=params,
            analysis=analysis,
        )
        self._record(entry)
        logger.info("Upgrade complete (%d → %d chars)", len(text), len(entry.upgraded_prompt))
        return entry

    def _record(self, entry: UpgradeHistory) -> None:
        limit = self.config.max_history
        if self.session is not None:
            self.history = self.session.append_history(entry, limit=limit)
        else:
            self.history = [entry, *self.history][:limit]

    # ------------------------------------------------------------------
    # History and saving
    # ------------------------------------------------------------------

    def load_history_entry(self, entry: UpgradeHistory) -> tuple[str, str]:
        """Restore the parameters and analysis of a past upgrade.

        Returns the (original, upgraded) prompt pair for display.
        """
        self.params = entry.parameters.model_copy(deep=True)
        self.analysis = entry.analysis
        self._analyzed_text = entry.original_prompt if entry.analysis else None
        return entry.original_prompt, entry.upgraded_prompt

    def build_save_record(
        self,
        entry: UpgradeHistory,
        *,
        title: str = "",
        description: str = "",
        category: str = "",
        tags: Iterable[str] = (),
        language: str = "",
        is_public: bool = False,
    ) -> PromptRecord:
        """Library record for an upgraded prompt.

        When a stored prompt is selected the record derives from it: its
        title gains an "(Enhanced)" suffix and ``parent_id`` points back to
        it. Explicit arguments win over the selected prompt's values.
        """
        source = self.selected_prompt
        if not title:
            title = f"{source.title} (Enhanced)" if source else "Upgraded Prompt"

        merged_tags = list(source.tags if source else [])
        for tag in [*tags, *ENHANCED_TAGS]:
            if tag not in merged_tags:
                merged_tags.append(tag)

        metadata = {
            **(source.metadata if source else {}),
            "enhanced": True,
            "originalLength": len(entry.original_prompt),
            "enhancedLength": len(entry.upgraded_prompt),
            "enhancementDate": datetime.now(timezone.utc).isoformat(),
            "enhancementParams": entry.parameters.model_dump(),
        }

        return PromptRecord(
            title=title,
            content=entry.upgraded_prompt,
            description=description or (source.description if source else ""),
            category=category or (source.category if source else "General"),
            tags=merged_tags,
            user_id=self.config.user_id,
            user_display_name=self.config.user_display_name,
            is_public=is_public,
            language=language or (source.language if source else "General"),
            parent_id=source.id if source else "",
            metadata=metadata,
        )
