"""Markdown builders for an analysis and for the upgrade history."""

from __future__ import annotations

from promptup.schemas.analysis import SCORE_FIELDS, PromptAnalysis
from promptup.schemas.history import UpgradeHistory
from promptup.upgrade.compiler import humanize
from promptup.upgrade.scoring import average_score, score_band

_BAND_ICONS = {"high": "🟢", "medium": "🟡", "low": "🟠", "critical": "🔴"}


def render_analysis_markdown(analysis: PromptAnalysis, *, title: str = "Prompt Analysis") -> str:
    """Render a PromptAnalysis into a Markdown string."""
    sections: list[str] = []

    sections.append(f"# {title}\n")
    overall = average_score(analysis)
    sections.append(
        f"**Overall:** {overall}/10 | **Performance:** {analysis.estimated_performance} | "
        f"**Complexity:** {analysis.complexity}\n"
    )
    sections.append(
        f"*Estimated {analysis.token_count} tokens, ${analysis.estimated_cost:.4f}*\n"
    )

    sections.append("## Scores\n")
    sections.append("| Dimension | Score | Band |")
    sections.append("|-----------|-------|------|")
    for field, value in analysis.scores().items():
        band = score_band(value)
        sections.append(f"| {humanize(field).title()} | {value}/10 | {_BAND_ICONS[band]} {band} |")
    sections.append("")

    for heading, items in (
        ("Strengths", analysis.strengths),
        ("Weaknesses", analysis.weaknesses),
        ("Suggestions", analysis.suggestions),
    ):
        if items:
            sections.append(f"## {heading}\n")
            for item in items:
                sections.append(f"- {item}")
            sections.append("")

    return "\n".join(sections)


def render_history_markdown(entries: list[UpgradeHistory]) -> str:
    """Render upgrade history entries, newest first, into one Markdown document."""
    sections: list[str] = ["# Upgrade History\n"]
    if not entries:
        sections.append("*No upgrades recorded yet.*\n")
        return "\n".join(sections)

    for entry in entries:
        sections.append(f"## {entry.timestamp:%Y-%m-%d %H:%M} (`{entry.id}`)\n")
        params = entry.parameters
        sections.append(
            f"**Purpose:** {humanize(params.purpose)} | **Tone:** {params.tone} | "
            f"**Audience:** {humanize(params.target_audience)}\n"
        )
        if entry.analysis:
            scores = ", ".join(
                f"{humanize(f)} {getattr(entry.analysis, f)}" for f in SCORE_FIELDS[:3]
            )
            sections.append(f"*Analysis: {scores}*\n")
        if entry.rating:
            sections.append(f"**Rating:** {'★' * entry.rating}\n")

        sections.append("### Original\n")
        sections.append(f"```text\n{entry.original_prompt}\n```\n")
        sections.append("### Upgraded\n")
        sections.append(f"```text\n{entry.upgraded_prompt}\n```\n")
        if entry.notes:
            sections.append(f"> {entry.notes}\n")

    return "\n".join(sections)
