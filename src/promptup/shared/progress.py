"""Rich console and spinner shown while a completion request is in flight."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class StepProgress:
    """Spinner for a single awaited step (analyze, upgrade)."""

    def __init__(self, label: str, *, out: Console | None = None) -> None:
        self.label = label
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=out or console,
            transient=True,
        )

    def __enter__(self) -> "StepProgress":
        self._progress.__enter__()
        self._progress.add_task(f"[cyan]{self.label}[/]", total=None)
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)
