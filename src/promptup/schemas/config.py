"""Configuration schema — validates promptup.yml."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from promptup.schemas.parameters import UpgradeParameters


class CustomTemplate(BaseModel):
    """A user-defined template derived from one of the built-in templates."""

    base: str
    overrides: dict[str, Any] = {}
    guidance: str = ""


class AppConfig(BaseModel):
    """Top-level configuration loaded from promptup.yml.

    Every field has a default, so running without a config file is the
    same as loading an empty one.
    """

    # Identity used to key history, credentials and library queries
    user_id: str = "local"
    user_display_name: str = ""

    # Model used for analysis/upgrade calls and for cost estimates
    model: str = "gpt-4o-mini"

    # Where session files and the prompt library live
    data_dir: str = "~/.promptup"

    max_history: int = Field(default=50, ge=1)

    # Ask before spending tokens on an analysis
    confirm_costs: bool = True

    # Partial UpgradeParameters applied on top of the session defaults
    defaults: dict[str, Any] = {}

    custom_templates: dict[str, CustomTemplate] = {}

    @field_validator("defaults")
    @classmethod
    def check_defaults(cls, v: dict[str, Any]) -> dict[str, Any]:
        unknown = set(v) - set(UpgradeParameters.model_fields)
        if unknown:
            raise ValueError(f"Unknown parameter(s) in defaults: {', '.join(sorted(unknown))}")
        UpgradeParameters.model_validate(v)
        return v

    @model_validator(mode="after")
    def check_custom_template_bases(self) -> "AppConfig":
        from promptup.upgrade.templates import UPGRADE_TEMPLATES

        for name, tpl in self.custom_templates.items():
            if tpl.base not in UPGRADE_TEMPLATES:
                raise ValueError(
                    f"Custom template {name!r} has unknown base template {tpl.base!r}"
                )
        return self

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    def initial_parameters(self) -> UpgradeParameters:
        """Session defaults with the configured overrides applied."""
        return UpgradeParameters().merged(self.defaults)
