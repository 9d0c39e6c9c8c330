"""Stored prompt records and the vocabularies used to describe them."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

CATEGORIES: tuple[str, ...] = (
    "Code Generation", "Code Review", "Documentation", "Debugging", "Testing",
    "Refactoring", "Architecture", "Database", "API Design", "Security",
    "Performance", "DevOps", "General", "Creative", "Analysis", "Translation",
    "Research", "Planning", "Education", "Business", "Other",
)

LANGUAGES: tuple[str, ...] = (
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Go", "Rust",
    "PHP", "Ruby", "Swift", "Kotlin", "HTML", "CSS", "SQL", "Shell", "General",
)

PRIORITY_FOCUSES: tuple[str, ...] = (
    "Accuracy", "Clarity", "Completeness", "Creativity", "Efficiency",
    "Error Handling", "Examples", "Explanation", "Flexibility", "Performance",
    "Readability", "Reliability", "Scalability", "Security", "Usability",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PromptRecord(BaseModel):
    """A prompt saved in the user's library."""

    id: str = ""
    title: str
    content: str
    description: str = ""
    category: str = "General"
    tags: list[str] = []
    user_id: str
    user_display_name: str = ""
    is_public: bool = False
    is_favorite: bool = False
    language: str = "General"
    usage_count: int = 0
    version: int = 1
    parent_id: str = ""  # id of the prompt this one was derived from
    metadata: dict[str, Any] = {}
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
