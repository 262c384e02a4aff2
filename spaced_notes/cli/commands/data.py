"""
Data Commands.

Backup export/import, full reset and document statistics.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from spaced_notes.cli.context import (
    console,
    effective_today,
    get_backup_service,
    get_clock_service,
    get_note_service,
    get_store,
    reporting_errors,
)

app = typer.Typer(help="Backup and data management commands")

RESET_CONFIRMATION = "RESET"


@app.command("export")
def export_data(
    path: Optional[Path] = typer.Argument(None, help="Output file (default: spaced-notes-backup-YYYY-MM-DD.json)"),
) -> None:
    """
    Export all notes and reviews to a JSON file.

    Examples:
        cli.py data export
        cli.py data export backups/notes.json
    """
    with reporting_errors():
        store = get_store()
        service = get_backup_service(store)
        target = path or service.default_export_path(Path.cwd(), effective_today(store))
        written = service.write_export(target)

    console.print(f"[green]Exported to[/green] {escape(str(written))}", soft_wrap=True)


@app.command("import")
def import_data(
    path: Path = typer.Argument(..., help="JSON file produced by export"),
) -> None:
    """
    Replace all data with the contents of an export file.

    Nothing is changed if the file is not a valid export.
    """
    if not path.exists():
        console.print(f"[red]Error: file not found: {escape(str(path))}[/red]")
        raise typer.Exit(1)

    with reporting_errors():
        imported = get_backup_service().import_file(path)

    if not imported:
        console.print("[red]Import failed: the file is not a valid backup. Existing data was kept.[/red]")
        raise typer.Exit(1)

    console.print("[green]Import completed[/green]")


@app.command()
def reset(
    confirm: str = typer.Option(..., "--confirm", help=f"Type {RESET_CONFIRMATION} to confirm"),
) -> None:
    """
    Delete all notes, reviews, reminder settings and the debug date.
    """
    if confirm != RESET_CONFIRMATION:
        console.print(f"[red]Error: pass --confirm {RESET_CONFIRMATION} to delete everything[/red]")
        raise typer.Exit(1)

    with reporting_errors():
        get_clock_service().reset_all_data()

    console.print("[yellow]All data deleted[/yellow]")


@app.command()
def stats() -> None:
    """
    Show counts of notes and reviews.
    """
    with reporting_errors():
        counts = get_note_service().stats()

    table = Table(title="Statistics", show_header=True)
    table.add_column("Item", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Notes", str(counts["notes"]))
    table.add_row("Archived notes", str(counts["archived_notes"]))
    table.add_row("Reviews", str(counts["repetitions"]))
    table.add_row("Pending", str(counts["pending"]))
    table.add_row("Done", str(counts["done"]))

    console.print(table)
