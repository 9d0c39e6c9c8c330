"""Typer CLI — ``promptup analyze``, ``promptup upgrade`` and friends."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from openai import OpenAIError
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from promptup.config import resolve_config
from promptup.schemas.analysis import PromptAnalysis
from promptup.schemas.config import AppConfig
from promptup.schemas.parameters import parse_assignment
from promptup.schemas.prompt import CATEGORIES, PromptRecord
from promptup.store.library import PromptLibrary
from promptup.store.session import SessionStore
from promptup.upgrade.compiler import humanize
from promptup.upgrade.scoring import (
    BAND_STYLES,
    COMPLEXITY_STYLES,
    PERFORMANCE_STYLES,
    average_score,
    score_band,
)
from promptup.upgrader import PromptUpgrader, build_registry

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="promptup",
    help="Prompt Upgrader — analyze prompts and rewrite them with configurable parameters.",
    no_args_is_help=True,
)
history_app = typer.Typer(help="Inspect and export the upgrade history.", no_args_is_help=True)
library_app = typer.Typer(help="Manage the local prompt library.", no_args_is_help=True)
app.add_typer(history_app, name="history")
app.add_typer(library_app, name="library")

console = Console()

_CONFIG_HELP = "Path to promptup.yml (defaults to ./promptup.yml if present)"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_config(path: Path | None) -> AppConfig:
    try:
        return resolve_config(path)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _session(cfg: AppConfig) -> SessionStore:
    return SessionStore(cfg.data_path, cfg.user_id)


def _library(cfg: AppConfig) -> PromptLibrary:
    return PromptLibrary(cfg.data_path / "library.json")


def _make_client(cfg: AppConfig, session: SessionStore, *, dry_run: bool, api_key: str | None):
    if dry_run:
        from promptup.shared.llm_client import DryRunClient

        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")
        return DryRunClient(model=cfg.model)

    from promptup.shared.llm_client import CompletionClient

    key = api_key or os.environ.get("OPENAI_API_KEY") or session.load_api_key()
    if not key:
        console.print(
            "[red]No API key configured.[/] Pass --api-key, set OPENAI_API_KEY "
            "or run [bold]promptup set-key[/]."
        )
        raise typer.Exit(code=1)
    return CompletionClient(api_key=key, model=cfg.model)


def _read_prompt(text: str | None, file: Path | None) -> str:
    if file is not None:
        if not file.exists():
            console.print(f"[red]File not found:[/] {file}")
            raise typer.Exit(code=1)
        return file.read_text()
    return text or ""


def _confirm_cost(upgrader: PromptUpgrader, text: str, *, yes: bool) -> None:
    if yes or not upgrader.config.confirm_costs:
        return
    tokens, cost = upgrader.estimate_analysis(text)
    try:
        proceed = Confirm.ask(
            f"Analyze ~{tokens} tokens (≈${cost:.4f} with {upgrader.config.model})?",
            default=True,
        )
    except EOFError:
        proceed = False
    if not proceed:
        console.print("[red]Aborted.[/]")
        raise typer.Exit(code=1)


def _print_analysis(analysis: PromptAnalysis) -> None:
    table = Table(title="Prompt Analysis", show_header=True, header_style="bold")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    for field, value in analysis.scores().items():
        style = BAND_STYLES[score_band(value)]
        table.add_row(humanize(field).title(), f"[{style}]{value}/10[/]")
    console.print(table)

    perf_style = PERFORMANCE_STYLES[analysis.estimated_performance]
    cx_style = COMPLEXITY_STYLES[analysis.complexity]
    console.print(
        f"  Overall: [bold]{average_score(analysis)}[/]/10  |  "
        f"Performance: [{perf_style}]{analysis.estimated_performance}[/]  |  "
        f"Complexity: [{cx_style}]{analysis.complexity}[/]  |  "
        f"Tokens: {analysis.token_count}"
    )
    for heading, items, style in (
        ("Strengths", analysis.strengths, "green"),
        ("Weaknesses", analysis.weaknesses, "red"),
        ("Suggestions", analysis.suggestions, "cyan"),
    ):
        console.print(f"\n[bold {style}]{heading}[/]")
        for item in items:
            console.print(f"  - {item}")


# ----------------------------------------------------------------------
# Top-level commands
# ----------------------------------------------------------------------


@app.command()
def validate(
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file."""
    _setup_logging(verbose)
    cfg = _load_config(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  User:         {cfg.user_id}")
    console.print(f"  Model:        {cfg.model}")
    console.print(f"  Data dir:     {cfg.data_path}")
    console.print(f"  Max history:  {cfg.max_history}")
    console.print(f"  Confirm cost: {cfg.confirm_costs}")
    if cfg.defaults:
        console.print(f"  Defaults:     {len(cfg.defaults)}")
        for key, value in cfg.defaults.items():
            console.print(f"    - {key} = {value}")
    if cfg.custom_templates:
        console.print(f"  Custom templates: {len(cfg.custom_templates)}")
        for name, tpl in cfg.custom_templates.items():
            console.print(f"    - {name} (based on {tpl.base})")


@app.command("set-key")
def set_key(
    api_key: str = typer.Option(..., "--api-key", prompt=True, hide_input=True),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Store the OpenAI API key in the local session directory."""
    cfg = _load_config(config)
    session = _session(cfg)
    session.save_api_key(api_key)
    console.print(f"[green]API key saved to:[/] {session.api_key_path}")


@app.command()
def analyze(
    text: str = typer.Argument(None, help="Prompt text (or use --file)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
    api_key: str = typer.Option(None, "--api-key", help="OpenAI API key (overrides env and stored key)."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the cost confirmation."),
    output: Path = typer.Option(None, "--output", "-o", help="Also write the analysis as Markdown."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned responses (no API calls)."),
) -> None:
    """Score a prompt across the nine quality dimensions."""
    _setup_logging(verbose)
    cfg = _load_config(config)
    prompt = _read_prompt(text, file)
    if not prompt.strip():
        console.print("[red]Please enter a prompt to analyze.[/]")
        raise typer.Exit(code=1)

    session = _session(cfg)
    upgrader = PromptUpgrader(_make_client(cfg, session, dry_run=dry_run, api_key=api_key), config=cfg, session=session)
    _confirm_cost(upgrader, prompt, yes=yes)

    try:
        analysis = asyncio.run(_run_analysis(upgrader, prompt))
    except (OpenAIError, RuntimeError) as exc:
        console.print(f"[red]Analysis failed:[/] {exc}")
        raise typer.Exit(code=1)

    _print_analysis(analysis)
    if output:
        from promptup.output.markdown import render_analysis_markdown

        output.write_text(render_analysis_markdown(analysis))
        console.print(f"\n[green]Markdown analysis written to:[/] {output}")


async def _run_analysis(upgrader: PromptUpgrader, prompt: str) -> PromptAnalysis:
    from promptup.shared.progress import StepProgress

    with StepProgress("Analyzing prompt", out=console):
        return await upgrader.analyze(prompt)


@app.command()
def upgrade(
    text: str = typer.Argument(None, help="Prompt text (or use --file / --prompt-id)."),
    file: Path = typer.Option(None, "--file", "-f", help="Read the prompt from a file."),
    prompt_id: str = typer.Option(None, "--prompt-id", help="Upgrade a prompt from the library."),
    template: str = typer.Option(None, "--template", "-t", help="Apply a named template first."),
    set_: list[str] = typer.Option(None, "--set", "-s", help="Override a parameter (key=value, repeatable)."),
    focus: list[str] = typer.Option(None, "--focus", help="Priority focus area (repeatable)."),
    avoid: list[str] = typer.Option(None, "--avoid", help="Pattern to avoid (repeatable)."),
    instructions: str = typer.Option(None, "--instructions", "-i", help="Custom instructions."),
    run_analysis: bool = typer.Option(False, "--analyze", help="Run a full analysis before upgrading."),
    save: bool = typer.Option(False, "--save", help="Save the upgraded prompt to the library."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the upgraded prompt to a file."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
    api_key: str = typer.Option(None, "--api-key", help="OpenAI API key (overrides env and stored key)."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the cost confirmation."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned responses (no API calls)."),
) -> None:
    """Rewrite a prompt according to the current upgrade parameters.

    Examples:

        promptup upgrade "write a function" --template Debugging

        promptup upgrade --file prompt.txt --set tone=friendly --set enable_markdown=yes

        promptup upgrade --prompt-id 3f2a... --analyze --save
    """
    _setup_logging(verbose)
    cfg = _load_config(config)
    session = _session(cfg)
    upgrader = PromptUpgrader(_make_client(cfg, session, dry_run=dry_run, api_key=api_key), config=cfg, session=session)

    try:
        if prompt_id:
            record = _library(cfg).get_prompt(prompt_id)
            upgrader.select_prompt(record)
            console.print(f"[dim]Selected library prompt:[/] {record.title}")
            if not text and file is None:
                text = record.content
        prompt = _read_prompt(text, file)

        # Instructions first so template guidance is appended after them.
        if instructions:
            upgrader.set_custom_instructions(instructions)
        if template:
            upgrader.apply_template(template)
        overrides = dict(parse_assignment(a) for a in set_ or [])
        if focus:
            overrides["priority_focus"] = list(focus)
        if avoid:
            overrides["avoid_patterns"] = list(avoid)
        if overrides:
            upgrader.update_params(**overrides)
    except (KeyError, ValueError) as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1)

    if not prompt.strip():
        console.print("[red]Please enter a prompt to upgrade.[/]")
        raise typer.Exit(code=1)

    if run_analysis:
        _confirm_cost(upgrader, prompt, yes=yes)

    try:
        entry = asyncio.run(_run_upgrade(upgrader, prompt, run_analysis=run_analysis))
    except (OpenAIError, RuntimeError) as exc:
        console.print(f"[red]Upgrade failed:[/] {exc}")
        raise typer.Exit(code=1)

    console.print(Panel(entry.upgraded_prompt, title="Upgraded Prompt", border_style="green"))
    console.print(f"[dim]Saved to history as {entry.id}[/]")

    if output:
        output.write_text(entry.upgraded_prompt)
        console.print(f"[green]Upgraded prompt written to:[/] {output}")
    if save:
        record = upgrader.build_save_record(entry)
        new_id = _library(cfg).create_prompt(record)
        console.print(f"[green]Saved to library:[/] {record.title} ({new_id})")


async def _run_upgrade(upgrader: PromptUpgrader, prompt: str, *, run_analysis: bool):
    from promptup.shared.progress import StepProgress

    analysis = None
    if run_analysis:
        with StepProgress("Analyzing prompt", out=console):
            analysis = await upgrader.analyze(prompt)
        _print_analysis(analysis)
    with StepProgress("Upgrading prompt", out=console):
        return await upgrader.upgrade(prompt, analysis)


@app.command()
def templates(
    show: str = typer.Option(None, "--show", help="Show the full settings of one template."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List the built-in and configured upgrade templates."""
    cfg = _load_config(config)
    registry = build_registry(cfg)

    if show:
        try:
            tpl = registry.get(show)
        except KeyError as exc:
            console.print(f"[red]Error:[/] {exc.args[0]}")
            raise typer.Exit(code=1)
        console.print(f"[bold cyan]{show}[/]\n")
        for field in ("purpose", "tone", "detail_level", "target_audience", "output_format", "domain"):
            console.print(f"  {humanize(field)}: {humanize(getattr(tpl, field))}")
        console.print(f"\n  Flags: {', '.join(sorted(tpl.enabled_flags()))}")
        if guidance := registry.guidance(show):
            console.print(f"\n  [dim]{guidance}[/]")
        return

    table = Table(title="Upgrade Templates")
    table.add_column("Name", style="bold")
    table.add_column("Purpose")
    table.add_column("Tone")
    table.add_column("Detail")
    table.add_column("Flags", justify="right")
    for name in registry.names():
        tpl = registry.get(name)
        table.add_row(name, humanize(tpl.purpose), tpl.tone, tpl.detail_level, str(len(tpl.enabled_flags())))
    console.print(table)


@app.command()
def detect(
    text: str = typer.Argument(None, help="Prompt text (or use --prompt-id)."),
    prompt_id: str = typer.Option(None, "--prompt-id", help="Detect for a library prompt."),
    category: str = typer.Option("", "--category", help="Prompt category."),
    language: str = typer.Option(None, "--language", help="Programming language."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Suggest upgrade parameters from a prompt's text and category."""
    from promptup.upgrade.detection import detect_for_prompt, detect_parameters

    if prompt_id:
        cfg = _load_config(config)
        try:
            detected = detect_for_prompt(_library(cfg).get_prompt(prompt_id))
        except KeyError as exc:
            console.print(f"[red]Error:[/] {exc.args[0]}")
            raise typer.Exit(code=1)
    else:
        detected = detect_parameters(text or "", category, language)

    table = Table(title="Detected Parameters")
    table.add_column("Parameter")
    table.add_column("Value")
    for key, value in detected.items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def search(
    term: str = typer.Argument(..., help="Search term (regular expression)."),
    file: Path = typer.Option(None, "--file", "-f", help="Search a file."),
    prompt_id: str = typer.Option(None, "--prompt-id", help="Search a library prompt."),
    case_sensitive: bool = typer.Option(False, "--case-sensitive"),
    whole_word: bool = typer.Option(False, "--whole-word"),
    match: int = typer.Option(1, "--match", "-m", help="Which match to emphasise (1-based, wraps)."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Find and highlight every match of TERM in a prompt."""
    from promptup.shared.search import SearchSession

    if prompt_id:
        cfg = _load_config(config)
        try:
            content = _library(cfg).get_prompt(prompt_id).content
        except KeyError as exc:
            console.print(f"[red]Error:[/] {exc.args[0]}")
            raise typer.Exit(code=1)
    elif file is not None:
        content = _read_prompt(None, file)
    else:
        console.print("[red]Pass --file or --prompt-id to search.[/]")
        raise typer.Exit(code=1)

    session = SearchSession(content, case_sensitive=case_sensitive, whole_word=whole_word)
    session.search(term)
    for _ in range(max(match, 1) - 1):
        session.next()

    console.print(f"[bold]{session.status()}[/]\n")
    if session.matches:
        console.print(session.highlight())
        current = session.current_match
        line = content.splitlines()[current.line_number] if current else ""
        console.print(f"\n[dim]Line {current.line_number + 1}:[/] {line.strip()}")


# ----------------------------------------------------------------------
# history
# ----------------------------------------------------------------------


@history_app.command("list")
def history_list(
    limit: int = typer.Option(20, "--limit", "-n"),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List recent upgrades, newest first."""
    cfg = _load_config(config)
    entries = _session(cfg).load_history()[:limit]
    if not entries:
        console.print("[dim]No upgrades recorded yet.[/]")
        return

    table = Table(title="Upgrade History")
    table.add_column("ID", style="dim")
    table.add_column("When")
    table.add_column("Purpose")
    table.add_column("Original")
    for e in entries:
        preview = e.original_prompt.strip().replace("\n", " ")
        table.add_row(e.id, f"{e.timestamp:%Y-%m-%d %H:%M}", humanize(e.parameters.purpose), preview[:60])
    console.print(table)


@history_app.command("show")
def history_show(
    entry_id: str = typer.Argument(..., help="History entry ID."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Show one upgrade with both prompts."""
    cfg = _load_config(config)
    entry = next((e for e in _session(cfg).load_history() if e.id == entry_id), None)
    if entry is None:
        console.print(f"[red]No history entry with ID {entry_id}[/]")
        raise typer.Exit(code=1)

    console.print(Panel(entry.original_prompt, title="Original", border_style="blue"))
    console.print(Panel(entry.upgraded_prompt, title="Upgraded", border_style="green"))
    if entry.analysis:
        _print_analysis(entry.analysis)


@history_app.command("clear")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y"),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Delete the saved upgrade history."""
    cfg = _load_config(config)
    if not yes:
        try:
            proceed = Confirm.ask("[yellow]Delete all upgrade history?[/]", default=False)
        except EOFError:
            proceed = False
        if not proceed:
            console.print("[red]Aborted.[/]")
            raise typer.Exit(code=1)
    _session(cfg).clear_history()
    console.print("[green]History cleared.[/]")


@history_app.command("export")
def history_export(
    output: Path = typer.Option(..., "--output", "-o", help="Destination file."),
    fmt: str = typer.Option("json", "--format", help="json, md or html."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Export the upgrade history as JSON, Markdown or an HTML dashboard."""
    cfg = _load_config(config)
    session = _session(cfg)

    if fmt == "json":
        session.export_history(output)
    elif fmt == "md":
        from promptup.output.markdown import render_history_markdown

        output.write_text(render_history_markdown(session.load_history()))
    elif fmt == "html":
        from promptup.output.dashboard import render_history_dashboard

        output.write_text(render_history_dashboard(session.load_history(), user_id=cfg.user_id))
    else:
        console.print(f"[red]Unknown format:[/] {fmt} (expected json, md or html)")
        raise typer.Exit(code=1)
    console.print(f"[green]History written to:[/] {output}")


# ----------------------------------------------------------------------
# library
# ----------------------------------------------------------------------


@library_app.command("add")
def library_add(
    title: str = typer.Option(..., "--title"),
    text: str = typer.Argument(None, help="Prompt text (or use --file)."),
    file: Path = typer.Option(None, "--file", "-f"),
    description: str = typer.Option("", "--description"),
    category: str = typer.Option("General", "--category"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags."),
    language: str = typer.Option("General", "--language"),
    public: bool = typer.Option(False, "--public"),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Add a prompt to the library."""
    cfg = _load_config(config)
    content = _read_prompt(text, file)
    if not content.strip():
        console.print("[red]Prompt content is empty.[/]")
        raise typer.Exit(code=1)
    if category not in CATEGORIES:
        console.print(f"[yellow]Warning:[/] unknown category {category!r}")

    record = PromptRecord(
        title=title,
        content=content,
        description=description,
        category=category,
        tags=[t.strip() for t in tags.split(",") if t.strip()],
        user_id=cfg.user_id,
        user_display_name=cfg.user_display_name,
        is_public=public,
        language=language,
    )
    new_id = _library(cfg).create_prompt(record)
    console.print(f"[green]Added:[/] {title} ({new_id})")


@library_app.command("list")
def library_list(
    public: bool = typer.Option(False, "--public", help="List public prompts from every user."),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """List prompts, most recently updated first."""
    cfg = _load_config(config)
    library = _library(cfg)
    records = library.get_public_prompts() if public else library.get_user_prompts(cfg.user_id)
    if not records:
        console.print("[dim]No prompts found.[/]")
        return

    table = Table(title="Public Prompts" if public else "My Prompts")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Tags")
    table.add_column("Updated")
    for r in records:
        table.add_row(r.id, r.title, r.category, ", ".join(r.tags), f"{r.updated_at:%Y-%m-%d %H:%M}")
    console.print(table)


@library_app.command("show")
def library_show(
    prompt_id: str = typer.Argument(...),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Show a library prompt."""
    cfg = _load_config(config)
    try:
        record = _library(cfg).get_prompt(prompt_id)
    except KeyError as exc:
        console.print(f"[red]Error:[/] {exc.args[0]}")
        raise typer.Exit(code=1)

    console.print(f"[bold cyan]{record.title}[/]  [dim]{record.category} · {record.language} · v{record.version}[/]")
    if record.description:
        console.print(record.description)
    if record.tags:
        console.print(f"Tags: {', '.join(record.tags)}")
    console.print(Panel(record.content, border_style="blue"))


@library_app.command("delete")
def library_delete(
    prompt_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y"),
    config: Path = typer.Option(None, "--config", "-c", help=_CONFIG_HELP),
) -> None:
    """Delete a library prompt."""
    cfg = _load_config(config)
    library = _library(cfg)
    try:
        record = library.get_prompt(prompt_id)
        if not yes:
            try:
                proceed = Confirm.ask(f"[yellow]Delete {record.title!r}?[/]", default=False)
            except EOFError:
                proceed = False
            if not proceed:
                console.print("[red]Aborted.[/]")
                raise typer.Exit(code=1)
        library.delete_prompt(prompt_id)
    except KeyError as exc:
        console.print(f"[red]Error:[/] {exc.args[0]}")
        raise typer.Exit(code=1)
    console.print(f"[green]Deleted:[/] {record.title}")
