"""theymer CLI — Typer application with render, status, and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

from theymer import __version__
from theymer.errors import TheymerError
from theymer.output.models import RenderReport, WriteMode

app = typer.Typer(
    name="theymer",
    help="Generate theme files from templates without clobbering hand edits.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _fail(exc: TheymerError) -> NoReturn:
    console.print(f"[bold red]{exc.kind.capitalize()} error:[/bold red] {exc}")
    raise typer.Exit(code=2) from exc


def _run(*, write_mode: WriteMode, dry_run: bool) -> tuple[RenderReport, Path]:
    from theymer.config.loader import load_config
    from theymer.render.session import render_all
    from theymer.themes.loader import load_all

    try:
        cfg = load_config()
        themes = load_all(cfg)
        report = render_all(themes, cfg, write_mode=write_mode, dry_run=dry_run)
    except TheymerError as exc:
        _fail(exc)
    return report, cfg.root


def _emit(report: RenderReport, root: Path, format: str, show_skipped: bool) -> None:
    from theymer.output import json_report, terminal

    if format == "json":
        print(json_report.render(report, root=root))
    else:
        terminal.render(report, root=root, show_skipped=show_skipped, console=console)


def _check_format(format: str) -> None:
    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)


# ── render ────────────────────────────────────────────────────────────────────


@app.command()
def render(
    force: bool = typer.Option(False, "--force", help="Overwrite files edited by hand"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be written without writing"),
    format: str = typer.Option("terminal", "--format", "-f", help="Report format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    all_files: bool = typer.Option(False, "--all", "-a", help="List up-to-date files too"),
) -> None:
    """Render every template for every theme and scheme."""
    from theymer.log import configure_logging

    _check_format(format)
    configure_logging(verbose=verbose, console=console)

    report, root = _run(write_mode=WriteMode.FORCE if force else WriteMode.NORMAL, dry_run=dry_run)
    _emit(report, root, format, all_files)

    if report.has_conflicts:
        raise typer.Exit(code=1)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    format: str = typer.Option("terminal", "--format", "-f", help="Report format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show what a render would do, without touching any file."""
    from theymer.log import configure_logging

    _check_format(format)
    configure_logging(verbose=verbose, console=console)

    report, root = _run(write_mode=WriteMode.NORMAL, dry_run=True)
    _emit(report, root, format, True)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    polytheme: bool = typer.Option(False, "--polytheme", help="Start a multi-theme project"),
) -> None:
    """Generate a starter theymer.toml in the current directory."""
    from theymer.config.defaults import DEFAULT_TOML, FILENAME, POLYTHEME_TOML

    config_path = Path.cwd() / FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(POLYTHEME_TOML if polytheme else DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"theymer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """theymer — keep generated theme files in sync with their templates."""
