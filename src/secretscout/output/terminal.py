"""Rich terminal reporter: findings table and scan summary."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from secretscout.findings.models import Finding
from secretscout.findings.redactor import redact
from secretscout.session.state import Stats


def render(
    findings: List[Finding],
    stats: Stats,
    *,
    show_summary: bool = True,
    signatures_version: str = "",
    app_version: str = "",
    console: Optional[Console] = None,
) -> None:
    """Print scan results to the terminal using Rich."""
    console = console or Console(stderr=True)

    console.print()
    if not findings:
        console.print("[bold green]No secrets found.[/bold green]")
    else:
        table = Table(
            title="Findings",
            show_lines=True,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Signature", style="cyan", min_width=14)
        table.add_column("Repository", style="blue")
        table.add_column("File", style="magenta")
        table.add_column("Line", justify="right", style="green")
        table.add_column("Commit", style="dim", width=10)
        table.add_column("Match", min_width=12)

        for f in findings:
            table.add_row(
                f"{escape(f.signature_id)}\n[dim]{escape(f.description)}[/dim]",
                escape(f.repository_name) or "-",
                escape(f.file_path),
                f.line_number if f.line_number != "0" else "-",
                f.commit_hash[:8] or "-",
                escape(redact(f.content)),
            )
        console.print(table)

    if show_summary:
        _print_summary(console, stats, signatures_version, app_version)


def _print_summary(console: Console, stats: Stats, signatures_version: str, app_version: str) -> None:
    console.print()
    console.print("[bold]Findings[/bold]")
    console.print(f"  [dim]Total:[/dim]              {stats.findings_total}")
    console.print(f"  [dim]Rejected matches:[/dim]   {stats.matches_rejected}")
    console.print("[bold]Files[/bold]")
    console.print(f"  [dim]Total:[/dim]              {stats.files_total}")
    console.print(f"  [dim]Scanned:[/dim]            {stats.files_scanned}")
    console.print(f"  [dim]Ignored:[/dim]            {stats.files_ignored}")
    console.print(f"  [dim]Dirty:[/dim]              {stats.files_dirty}")
    console.print("[bold]SCM[/bold]")
    console.print(f"  [dim]Targets:[/dim]            {stats.targets}")
    console.print(f"  [dim]Repos found:[/dim]        {stats.repositories_found}")
    console.print(f"  [dim]Repos cloned:[/dim]       {stats.repositories_cloned}")
    console.print(f"  [dim]Repos empty:[/dim]        {stats.repositories_empty}")
    console.print(f"  [dim]Repos failed:[/dim]       {stats.repositories_failed}")
    console.print(f"  [dim]Repos scanned:[/dim]      {stats.repositories_scanned}")
    console.print(f"  [dim]Commits scanned:[/dim]    {stats.commits_scanned}")
    console.print(f"  [dim]Commits dirty:[/dim]      {stats.commits_dirty}")
    console.print("[bold]General[/bold]")
    console.print(f"  [dim]App version:[/dim]        {app_version or '-'}")
    console.print(f"  [dim]Signatures:[/dim]         {signatures_version or '-'}")
    console.print(f"  [dim]Status:[/dim]             {stats.status.value}")
    console.print(f"  [dim]Elapsed:[/dim]            {stats.elapsed_seconds:.1f}s")
