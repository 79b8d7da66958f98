"""httprecorder CLI - inspect and maintain HTTP archives."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from httprecorder.config import get_archive_dir
from httprecorder.errors import HttpRecorderError
from httprecorder.modules.anonymize import RulesAnonymizer
from httprecorder.modules.archive import (
    archive_to_interaction,
    dumps_archive,
    interaction_to_archive,
    loads_archive,
)
from httprecorder.modules.recorder import ExecutionMode, RecorderConfig, RecorderTransport
from httprecorder.modules.repository import write_atomic
from httprecorder.utils.async_utils import safe_async_run

app = typer.Typer(
    name="httprecorder",
    help="Record and replay HTTP interactions",
    no_args_is_help=True,
)
console = Console()


def _read_archive(path: Path):
    if not path.is_file():
        console.print(f"[red]Archive not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return loads_archive(path.read_text(encoding="utf-8"))
    except HttpRecorderError as exc:
        console.print(f"[red]Invalid archive: {exc}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the installed httprecorder version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as pkg_version

    try:
        current_version = pkg_version("httprecorder")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"httprecorder {current_version}")


@app.command()
def inspect(path: Path = typer.Argument(..., help="HAR file to inspect")) -> None:
    """List the entries of an archive."""
    archive = _read_archive(path)

    table = Table(title=f"{path.name} ({len(archive.entries)} entries)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Method", style="cyan")
    table.add_column("URL")
    table.add_column("Status", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Time (ms)", justify="right")
    for index, entry in enumerate(archive.entries, 1):
        status = entry.response.status
        style = "green" if status < 400 else "red"
        table.add_row(
            str(index),
            entry.request.method,
            entry.request.url,
            f"[{style}]{status}[/{style}]",
            str(entry.response.content.size),
            f"{entry.time:.1f}",
        )
    console.print(table)


@app.command()
def anonymize(
    path: Path = typer.Argument(..., help="HAR file to anonymize"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead"),
) -> None:
    """Apply the default anonymization rules to an existing archive."""
    archive = _read_archive(path)
    try:
        interaction = archive_to_interaction(path.stem, archive)
    except HttpRecorderError as exc:
        console.print(f"[red]Invalid archive: {exc}[/red]")
        raise typer.Exit(1)

    anonymized = safe_async_run(RulesAnonymizer.default().anonymize(interaction))
    target = output or path
    write_atomic(target, dumps_archive(interaction_to_archive(anonymized, archive.log.creator)))
    console.print(f"[green]Anonymized {len(anonymized)} entries:[/green] {target}")


@app.command()
def mode(
    name: str = typer.Argument(..., help="Interaction name"),
    archive_dir: Path | None = typer.Option(None, "--archive-dir", help="Archive root"),
    requested: ExecutionMode = typer.Option(ExecutionMode.AUTO, "--mode", help="Configured mode"),
) -> None:
    """Show which mode a recorder for NAME would resolve to."""
    config = RecorderConfig(
        interaction_name=name, mode=requested, archive_dir=archive_dir or get_archive_dir()
    )
    recorder = RecorderTransport(config)
    resolved = safe_async_run(recorder.resolve_mode())
    console.print(f"{name}: [bold]{resolved.value}[/bold]")


def main():
    """Entry point for the CLI."""
    app()
