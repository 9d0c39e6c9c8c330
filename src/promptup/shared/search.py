"""Find-and-highlight over a text buffer with wrap-around match navigation."""

from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field

from rich.text import Text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchMatch:
    """A single match: character offsets plus the line it starts on (0-based)."""

    index: int
    start: int
    end: int
    line_number: int
    line_start: int


def _line_starts(content: str) -> list[int]:
    starts = [0]
    for m in re.finditer("\n", content):
        starts.append(m.end())
    return starts


def find_matches(
    content: str,
    term: str,
    *,
    case_sensitive: bool = False,
    whole_word: bool = False,
) -> list[SearchMatch]:
    """Return every match of ``term`` (a regular expression) in ``content``.

    An empty term, empty content or an invalid pattern yields no matches.
    Zero-length matches are skipped.
    """
    if not term or not content:
        return []

    pattern = rf"\b(?:{term})\b" if whole_word else term
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        regex = re.compile(pattern, flags)
    except re.error as exc:
        logger.debug("Invalid search pattern %r: %s", term, exc)
        return []

    starts = _line_starts(content)
    matches: list[SearchMatch] = []
    for m in regex.finditer(content):
        if m.start() == m.end():
            continue
        line = bisect.bisect_right(starts, m.start()) - 1
        matches.append(SearchMatch(
            index=len(matches),
            start=m.start(),
            end=m.end(),
            line_number=line,
            line_start=starts[line],
        ))
    return matches


@dataclass
class SearchSession:
    """Search state over one buffer: the matches and which one is current."""

    content: str
    term: str = ""
    case_sensitive: bool = False
    whole_word: bool = False
    matches: list[SearchMatch] = field(default_factory=list)
    current: int = 0

    def __post_init__(self) -> None:
        self.search(self.term)

    def search(self, term: str) -> list[SearchMatch]:
        """Run a new search and move back to the first match."""
        self.term = term
        self.matches = find_matches(
            self.content,
            term,
            case_sensitive=self.case_sensitive,
            whole_word=self.whole_word,
        )
        self.current = 0
        return self.matches

    @property
    def current_match(self) -> SearchMatch | None:
        return self.matches[self.current] if self.matches else None

    def next(self) -> SearchMatch | None:
        if self.matches:
            self.current = (self.current + 1) % len(self.matches)
        return self.current_match

    def previous(self) -> SearchMatch | None:
        if self.matches:
            self.current = (self.current - 1) % len(self.matches)
        return self.current_match

    def reset(self) -> None:
        self.term = ""
        self.matches = []
        self.current = 0

    def status(self) -> str:
        """Return an ``"n of m"`` counter, or ``"No results"``."""
        if not self.matches:
            return "No results"
        return f"{self.current + 1} of {len(self.matches)}"

    def highlight(self, style: str = "black on yellow", current_style: str = "bold black on orange1") -> Text:
        """Render the buffer with every match styled and the current one emphasised."""
        text = Text(self.content)
        for match in self.matches:
            text.stylize(current_style if match.index == self.current else style, match.start, match.end)
        return text
