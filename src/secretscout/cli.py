"""secretscout CLI: Typer application with scan-git, scan-path and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from secretscout import __version__

app = typer.Typer(
    name="secretscout",
    help="Find secrets committed to git history and directory trees.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

# Shared options
_CONFIG = typer.Option(None, "--config", "-c", help="Path to .secretscout.toml")
_FORMAT = typer.Option(None, "--format", "-f", help="Output format: terminal | json | csv")
_OUTPUT = typer.Option(None, "--output", "-o", help="Write report to file")
_THREADS = typer.Option(None, "--threads", "-t", help="Worker threads (-1 = one per CPU)")
_CONFIDENCE = typer.Option(None, "--confidence-level", help="Minimum signature confidence (1-5)")
_SIGNATURES = typer.Option(None, "--signatures", help="Signature bundle (YAML)")
_SCAN_TESTS = typer.Option(False, "--scan-tests", help="Also scan test files")
_HIDE = typer.Option(False, "--hide-secrets", help="Do not store or print matched content")
_MAX_SIZE = typer.Option(None, "--max-file-size", help="Skip files larger than this many MB")
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Verbose output")
_DEBUG = typer.Option(False, "--debug", help="Debug output")


def _prepare(
    scan_type: str,
    config: Optional[str],
    format: Optional[str],
    threads: Optional[int],
    confidence_level: Optional[int],
    signatures: Optional[str],
    scan_tests: bool,
    hide_secrets: bool,
    max_file_size: Optional[int],
    verbose: bool,
    debug: bool,
    commit_depth: Optional[int] = None,
    expand_orgs: bool = False,
):
    """Load config, apply CLI overrides, and open a session. Exits 2 on config errors."""
    from secretscout.config.loader import ConfigError, load_config, validate
    from secretscout.log import setup_logging
    from secretscout.session.session import Session
    from secretscout.signatures.loader import SignatureError

    logger = setup_logging(verbose=verbose, debug=debug, console=console)

    # --- Load config ---
    try:
        cfg = load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    cfg.scan.scan_type = scan_type  # type: ignore[assignment]
    if format:
        cfg.output.format = format  # type: ignore[assignment]
    if threads is not None:
        cfg.scan.threads = threads
    if confidence_level is not None:
        cfg.scan.confidence_level = confidence_level
    if signatures:
        cfg.signatures.file = signatures
    if max_file_size is not None:
        cfg.scan.max_file_size_mb = max_file_size
    if commit_depth is not None:
        cfg.scan.commit_depth = commit_depth
    cfg.scan.scan_tests = cfg.scan.scan_tests or scan_tests
    cfg.scan.hide_secrets = cfg.scan.hide_secrets or hide_secrets
    cfg.scan.expand_orgs = cfg.scan.expand_orgs or expand_orgs

    try:
        validate(cfg)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- Load signatures ---
    try:
        session = Session.create(cfg, logger=logger)
    except SignatureError as exc:
        console.print(f"[bold red]Signature error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if verbose or debug:
        console.print(f"[dim]Signatures loaded: {len(session.signatures)} "
                      f"(+{len(session.signatures.suppressors)} suppressors), "
                      f"version {session.signatures.version or 'unknown'}[/dim]")
        console.print(f"[dim]Workers: {cfg.scan.worker_count}[/dim]")
    return session


def _report(session, output: Optional[str], verbose: bool) -> None:
    from secretscout.output import csv_report, json_report, terminal

    cfg = session.config
    findings = session.state.sorted_findings()
    stats = session.state.snapshot()

    report_text: Optional[str] = None
    if cfg.output.format == "terminal":
        terminal.render(
            findings,
            stats,
            show_summary=cfg.output.show_summary,
            signatures_version=session.signatures.version,
            app_version=session.app_version,
            console=console,
        )
    elif cfg.output.format == "json":
        report_text = json_report.render(findings, stats)
        print(report_text)
    elif cfg.output.format == "csv":
        report_text = csv_report.render(findings)
        print(report_text, end="")

    # --- Write to file ---
    if output:
        if report_text is None:
            # terminal output requested together with a file: write JSON
            report_text = json_report.render(findings, stats)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")


# ── scan-git ──────────────────────────────────────────────────────────────────


@app.command("scan-git")
def scan_git(
    paths: List[str] = typer.Argument(..., help="Directories holding one or more git checkouts"),
    repo: Optional[List[str]] = typer.Option(None, "--repo", "-r", help="Only scan repositories with this name (repeatable)"),
    commit_depth: Optional[int] = typer.Option(None, "--commit-depth", help="Commits to walk per repository (-1 = all)"),
    config: Optional[str] = _CONFIG,
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    threads: Optional[int] = _THREADS,
    confidence_level: Optional[int] = _CONFIDENCE,
    signatures: Optional[str] = _SIGNATURES,
    scan_tests: bool = _SCAN_TESTS,
    hide_secrets: bool = _HIDE,
    max_file_size: Optional[int] = _MAX_SIZE,
    verbose: bool = _VERBOSE,
    debug: bool = _DEBUG,
) -> None:
    """Scan the full history of local git repositories."""
    from secretscout.core.analysis import RepositoryAnalyzer
    from secretscout.core.gathering import RepositoryGatherer, gather_targets
    from secretscout.providers.localgit import LocalGitProvider

    session = _prepare(
        "local-git", config, format, threads, confidence_level, signatures,
        scan_tests, hide_secrets, max_file_size, verbose, debug,
        commit_depth=commit_depth,
    )
    provider = LocalGitProvider()

    gather_targets(session, provider, paths, expand_orgs=session.config.scan.expand_orgs)
    RepositoryGatherer(session, provider, repo_filter=repo).run()
    RepositoryAnalyzer(session).run()
    session.finish()

    _report(session, output, verbose)
    raise typer.Exit(code=0)


# ── scan-path ─────────────────────────────────────────────────────────────────


@app.command("scan-path")
def scan_path(
    paths: List[str] = typer.Argument(..., help="Files or directories to scan"),
    config: Optional[str] = _CONFIG,
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    threads: Optional[int] = _THREADS,
    confidence_level: Optional[int] = _CONFIDENCE,
    signatures: Optional[str] = _SIGNATURES,
    scan_tests: bool = _SCAN_TESTS,
    hide_secrets: bool = _HIDE,
    max_file_size: Optional[int] = _MAX_SIZE,
    verbose: bool = _VERBOSE,
    debug: bool = _DEBUG,
) -> None:
    """Scan files as they are on disk, without git history."""
    from secretscout.core.localpath import LocalPathScanner

    session = _prepare(
        "local-path", config, format, threads, confidence_level, signatures,
        scan_tests, hide_secrets, max_file_size, verbose, debug,
    )
    LocalPathScanner(session).run(paths)
    session.finish()

    _report(session, output, verbose)
    raise typer.Exit(code=0)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .secretscout.toml in the current directory."""
    from secretscout.config.defaults import DEFAULT_TOML
    from secretscout.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"secretscout {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """secretscout: find secrets committed to git history and directory trees."""
