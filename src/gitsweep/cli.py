"""gitsweep CLI — Typer application with scan, uncommitted, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitsweep import __version__

app = typer.Typer(
    name="gitsweep",
    help="Find secrets leaked into git history and uncommitted changes.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_FORMATS = ("terminal", "json")


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_repo_root(repo: Optional[str]) -> Path:
    """Find the git repo root, exit 2 on failure."""
    from gitsweep.git.adapter import RepositoryAccessError, get_repo_root

    try:
        return get_repo_root(Path(repo) if repo else None)
    except RepositoryAccessError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load_config(repo_root: Path, config: Optional[str]):
    """Load --config, the repo's own config, or the built-in rules; exit 2 on failure."""
    from gitsweep.config.loader import ConfigError, default_config, find_config_file, load_config

    try:
        path = find_config_file(repo_root, config)
        if path is None:
            logging.getLogger(__name__).info("no config found, using default rules")
            return default_config()
        logging.getLogger(__name__).info("using config %s", path)
        return load_config(path)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _check_format(format: str) -> None:
    if format not in _FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)


def _report(leaks, *, format: str, output: Optional[str], redact: bool, verbose: bool) -> None:
    """Render *leaks*, optionally write a JSON report, and exit with 1 if any were found."""
    from gitsweep.output import json_report, terminal

    report_text: Optional[str] = None
    if format == "terminal":
        terminal.render(leaks, redact_full=redact, console=console)
    else:
        report_text = json_report.render(leaks, redact=redact)
        print(report_text)

    if output:
        report_text = report_text or json_report.render(leaks, redact=redact)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=1 if leaks else 0)


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    repo: Optional[str] = typer.Argument(None, help="Path to the repository (default: current directory)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a gitsweep config file"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Only scan this branch"),
    commit_from: Optional[str] = typer.Option(None, "--from", help="Walk history starting at this commit"),
    since: Optional[str] = typer.Option(None, "--since", help="Only commits after this date/timestamp"),
    until: Optional[str] = typer.Option(None, "--until", help="Only commits before this date/timestamp"),
    commits: Optional[str] = typer.Option(None, "--commits", help="Comma separated commits to scan ('latest' = HEAD)"),
    commits_file: Optional[str] = typer.Option(None, "--commits-file", help="File listing commits to scan, one per line"),
    depth: int = typer.Option(0, "--depth", help="Stop after this many commits (0 = all)"),
    threads: int = typer.Option(0, "--threads", help="Worker threads (0 = serial)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Time budget in seconds"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    redact: bool = typer.Option(False, "--redact", help="Hide secrets in the report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Scan the repository's commit history for leaked secrets."""
    from gitsweep.git.adapter import RepositoryAccessError
    from gitsweep.scanner.history import scan_history
    from gitsweep.scanner.options import ScanError, ScanOptions, apply_env_overrides

    _configure_logging(verbose, debug)
    _check_format(format)
    repo_root = _resolve_repo_root(repo)
    cfg = _load_config(repo_root, config)

    options = ScanOptions(
        branch=branch,
        commit_from=commit_from,
        commit_since=since,
        commit_until=until,
        commits=_split_commits(commits),
        commits_file=commits_file,
        depth=depth,
        threads=threads,
        timeout=timeout,
    )
    apply_env_overrides(options)

    try:
        leaks = scan_history(repo_root, cfg, options)
    except (RepositoryAccessError, ScanError) as exc:
        console.print(f"[bold red]Scan error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    _report(leaks, format=format, output=output, redact=redact, verbose=verbose)


def _split_commits(commits: Optional[str]) -> List[str]:
    if not commits:
        return []
    return [c.strip() for c in commits.split(",") if c.strip()]


# ── uncommitted ───────────────────────────────────────────────────────────────


@app.command()
def uncommitted(
    repo: Optional[str] = typer.Argument(None, help="Path to the repository (default: current directory)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a gitsweep config file"),
    threads: int = typer.Option(0, "--threads", help="Worker threads (0 = serial)"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    redact: bool = typer.Option(False, "--redact", help="Hide secrets in the report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Scan staged and unstaged changes for leaked secrets."""
    from gitsweep.git.adapter import RepositoryAccessError
    from gitsweep.scanner.options import ScanOptions, apply_env_overrides
    from gitsweep.scanner.worktree import scan_working_tree

    _configure_logging(verbose, debug)
    _check_format(format)
    repo_root = _resolve_repo_root(repo)
    cfg = _load_config(repo_root, config)

    options = ScanOptions(threads=threads)
    apply_env_overrides(options)

    try:
        leaks = scan_working_tree(repo_root, cfg, options)
    except RepositoryAccessError as exc:
        console.print(f"[bold red]Scan error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    _report(leaks, format=format, output=output, redact=redact, verbose=verbose)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    full: bool = typer.Option(False, "--full", help="Write the complete built-in rule-set instead of extending it"),
) -> None:
    """Generate a starter .gitsweep.toml in the repo root."""
    from gitsweep.config.defaults import DEFAULT_TOML, STARTER_TOML

    repo_root = _resolve_repo_root(None)
    config_path = repo_root / ".gitsweep.toml"

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  .gitsweep.toml already exists at {config_path}")
        raise typer.Exit(code=1)

    template = DEFAULT_TOML if full else STARTER_TOML
    config_path.write_text(template, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitsweep {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitsweep — find secrets leaked into git history."""
