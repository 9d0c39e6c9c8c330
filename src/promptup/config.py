"""YAML config loader — reads promptup.yml into AppConfig."""

from pathlib import Path

import yaml

from promptup.schemas.config import AppConfig

DEFAULT_CONFIG_NAME = "promptup.yml"


def load_config(path: str | Path) -> AppConfig:
    """Load and validate a config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # Sections with every entry commented out load as None; normalize to empty.
    for key in ("defaults", "custom_templates"):
        if key in raw and raw[key] is None:
            raw[key] = {}
    defaults = raw.get("defaults")
    if isinstance(defaults, dict):
        for key in ("priority_focus", "avoid_patterns"):
            if key in defaults:
                if defaults[key] is None:
                    defaults[key] = []
                elif isinstance(defaults[key], list):
                    defaults[key] = [item for item in defaults[key] if item]

    return AppConfig(**raw)


def resolve_config(path: str | Path | None) -> AppConfig:
    """Load ``path`` if given, else ./promptup.yml if present, else defaults."""
    if path is not None:
        return load_config(path)
    local = Path(DEFAULT_CONFIG_NAME)
    if local.exists():
        return load_config(local)
    return AppConfig()
