"""Static HTML dashboard — renders the upgrade history to a self-contained page."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from promptup.schemas.history import UpgradeHistory
from promptup.upgrade.compiler import humanize
from promptup.upgrade.scoring import average_score, score_band

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# CSS colour per score band.
_BAND_COLORS = {
    "high": "#2e7d32",
    "medium": "#b58900",
    "low": "#d9730d",
    "critical": "#c62828",
}


def _entry_view(entry: UpgradeHistory) -> dict:
    params = entry.parameters
    view = {
        "id": entry.id,
        "timestamp": entry.timestamp.strftime("%Y-%m-%d %H:%M"),
        "original": entry.original_prompt,
        "upgraded": entry.upgraded_prompt,
        "purpose": humanize(params.purpose),
        "tone": params.tone,
        "audience": humanize(params.target_audience),
        "flags": [humanize(f) for f in sorted(params.enabled_flags())],
        "rating": entry.rating,
        "notes": entry.notes,
        "analysis": None,
    }
    if entry.analysis:
        overall = average_score(entry.analysis)
        band = score_band(overall)
        view["analysis"] = {
            "overall": overall,
            "band": band,
            "color": _BAND_COLORS[band],
            "scores": {humanize(k): v for k, v in entry.analysis.scores().items()},
            "weaknesses": entry.analysis.weaknesses,
            "performance": entry.analysis.estimated_performance,
        }
    return view


def render_history_dashboard(entries: list[UpgradeHistory], *, user_id: str = "") -> str:
    """Render upgrade history entries into a self-contained HTML dashboard."""
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("history.html.j2")

    return template.render(
        user_id=user_id,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        entries=[_entry_view(e) for e in entries],
    )
