"""Rich terminal reporter — per-file actions table and run summary."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from theymer.output.models import Action, Decision, RenderReport

_DECISION_STYLE = {
    Decision.WRITE: "bold black on green",
    Decision.FORCE_WRITE: "bold white on dark_orange",
    Decision.SKIP: "dim",
    Decision.CONFLICT: "bold white on red",
}


def _decision_pill(action: Action) -> Text:
    style = _DECISION_STYLE.get(action.decision, "")
    return Text(f" {action.label.upper()} ", style=style)


def _display_path(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return str(path)


def render(
    report: RenderReport,
    *,
    root: Optional[Path] = None,
    show_skipped: bool = False,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print a render report to the terminal using Rich."""
    console = console or Console(stderr=True)

    rows = [a for a in report.actions if show_skipped or a.decision is not Decision.SKIP]
    if rows:
        console.print()
        table = Table(
            title="theymer (dry run)" if report.dry_run else "theymer",
            show_lines=False,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Action", justify="center", width=14)
        table.add_column("File", style="magenta")
        table.add_column("Theme", style="cyan")
        table.add_column("Scheme", style="cyan")
        table.add_column("Template", style="green")

        for action in rows:
            table.add_row(
                _decision_pill(action),
                _display_path(action.path, root),
                action.theme,
                action.scheme,
                action.template,
            )
        console.print(table)
    elif not report.actions:
        console.print("[dim]No templates to render.[/dim]")
    else:
        console.print("[bold green]✅ Everything is up to date.[/bold green]")

    if show_summary:
        _print_summary(console, report)

    if report.has_conflicts:
        console.print()
        console.print(
            f"[bold yellow]⚠️  {len(report.conflicts)} file(s) were edited by hand and "
            "left alone. Use --force to overwrite.[/bold yellow]"
        )


def _print_summary(console: Console, report: RenderReport) -> None:
    written_label = "Would write:" if report.dry_run else "Written:"
    written = report.planned_writes if report.dry_run else report.written
    console.print()
    console.print(f"[dim]Files:[/dim]        {len(report.actions)}")
    console.print(f"[dim]{written_label:<13}[/dim]{len(written)}")
    console.print(f"[dim]Up to date:[/dim]   {len(report.skipped)}")
    console.print(f"[dim]Conflicts:[/dim]    {len(report.conflicts)}")
    console.print(f"[dim]Duration:[/dim]     {report.duration_ms:.0f}ms")
