"""Rich terminal reporter."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitsweep.findings.models import Leak
from gitsweep.findings.redactor import redact


def render(leaks: Sequence[Leak], *, redact_full: bool = False, console: Console | None = None) -> None:
    """Print leaks to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not leaks:
        console.print()
        console.print("[bold green]✅ No leaks found.[/bold green]")
        return

    console.print()
    table = Table(
        title="gitsweep leaks",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Rule", style="cyan", min_width=20)
    table.add_column("Commit", style="yellow")
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Offender", min_width=15)
    table.add_column("Tags", style="dim")

    for leak in leaks:
        offender = leak.offender if leak.is_file_match else redact(leak.offender, full=redact_full)
        table.add_row(
            leak.rule,
            leak.commit[:8] or "staged",
            escape(leak.file),
            "-" if leak.is_file_match else str(leak.line_number),
            escape(offender),
            leak.tags,
        )

    console.print(table)
    console.print()
    console.print(f"[bold red]❌ {len(leaks)} leak(s) found.[/bold red]")
