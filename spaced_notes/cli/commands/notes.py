"""
Note Commands.

Create, inspect, edit, archive and reschedule notes.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spaced_notes.cli.context import (
    console,
    effective_today,
    get_note_service,
    get_store,
    reporting_errors,
)
from spaced_notes.core.config import get_app_config
from spaced_notes.core.concurrency import shutdown_pools
from spaced_notes.core.dates import calendar_day, format_relative_past
from spaced_notes.core.exceptions import ValidationError
from spaced_notes.schemas.note import Attachment, Repetition
from spaced_notes.services.attachments import read_attachment

app = typer.Typer(help="Note management commands")


async def _read_attachment(path: Path, max_bytes: int) -> Attachment:
    try:
        return await read_attachment(path, max_bytes=max_bytes)
    finally:
        await shutdown_pools()


def _load_attachment(path: Path) -> Attachment:
    """Read a file as an attachment, or exit with an error."""
    max_bytes = get_app_config().scheduling.max_attachment_bytes
    try:
        return asyncio.run(_read_attachment(path, max_bytes))
    except FileNotFoundError:
        console.print(f"[red]Error: file not found: {escape(str(path))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Error: {e.message} ({e.details.get('error_key')})[/red]")
        raise typer.Exit(1)


def _schedule_table(repetitions: list[Repetition]) -> Table:
    table = Table(show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Due")
    table.add_column("Status")
    table.add_column("Reviewed")
    table.add_column("ID", style="dim", no_wrap=True)

    for repetition in repetitions:
        status = "[green]done[/green]" if repetition.is_done else "[yellow]pending[/yellow]"
        reviewed = repetition.reviewed_at.strftime("%Y-%m-%d %H:%M") if repetition.reviewed_at else "-"
        table.add_row(
            str(repetition.index),
            calendar_day(repetition.due_date).isoformat(),
            status,
            reviewed,
            repetition.id,
        )
    return table


@app.command()
def add(
    title: str = typer.Argument(..., help="Note title"),
    attach: Optional[Path] = typer.Option(None, "--attach", "-a", help="Image or PDF to attach"),
) -> None:
    """
    Create a note and schedule its six reviews.

    Examples:
        cli.py notes add "Mitosis"
        cli.py notes add "Krebs cycle" --attach krebs.png
    """
    attachment = _load_attachment(attach) if attach else None

    with reporting_errors():
        service = get_note_service()
        note = service.create_note_with_optional_attachment(title, attachment)
        repetitions = service.repetitions_for_note(note.id)

    console.print(f"[green]Created note[/green] {escape(note.title)}")
    console.print(f"ID: {note.id}", soft_wrap=True)
    console.print(_schedule_table(repetitions))


@app.command("list")
def list_notes(
    show_all: bool = typer.Option(False, "--all", help="Include archived notes"),
) -> None:
    """
    List notes, newest first.
    """
    with reporting_errors():
        store = get_store()
        notes = get_note_service(store).list_notes(include_archived=show_all)
        today = effective_today(store)

    if not notes:
        console.print("[dim]No notes[/dim]")
        return

    table = Table(title="Notes", show_header=True)
    table.add_column("Title", style="cyan")
    table.add_column("Created")
    table.add_column("Attachment")
    table.add_column("Archived")
    table.add_column("ID", style="dim", no_wrap=True)

    for note in notes:
        table.add_row(
            escape(note.title),
            format_relative_past(note.created_at, today),
            escape(note.attachment.name) if note.attachment else "-",
            "yes" if note.archived else "",
            note.id,
        )

    console.print(table)


@app.command()
def show(
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """
    Show a note and its review schedule.
    """
    with reporting_errors():
        service = get_note_service()
        note = service.get_note(note_id)
        repetitions = service.repetitions_for_note(note_id)

    details = [
        f"[bold]{escape(note.title)}[/bold]",
        f"Created: {note.created_at.strftime('%Y-%m-%d %H:%M')}",
    ]
    if note.attachment:
        details.append(
            f"Attachment: {escape(note.attachment.name)} "
            f"({note.attachment.type.value}, {note.attachment.size_bytes} bytes)"
        )
    if note.archived:
        details.append("[dim]Archived[/dim]")

    console.print(Panel("\n".join(details), title="Note"))
    console.print(_schedule_table(repetitions))


@app.command()
def rename(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: str = typer.Argument(..., help="New title"),
) -> None:
    """
    Change the title of a note.
    """
    with reporting_errors():
        service = get_note_service()
        service.get_note(note_id)
        service.update_note_title(note_id, title)

    console.print(f"[green]Renamed to[/green] {escape(title.strip())}")


@app.command()
def attach(
    note_id: str = typer.Argument(..., help="Note ID"),
    path: Path = typer.Argument(..., help="Image or PDF to attach"),
) -> None:
    """
    Attach a file to a note, replacing any previous attachment.
    """
    with reporting_errors():
        get_note_service().get_note(note_id)

    attachment = _load_attachment(path)

    with reporting_errors():
        get_note_service().update_note_attachment(note_id, attachment)

    console.print(f"[green]Attached[/green] {escape(attachment.name)}")


@app.command()
def detach(
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """
    Remove the attachment of a note.
    """
    with reporting_errors():
        service = get_note_service()
        service.get_note(note_id)
        service.update_note_attachment(note_id, None)

    console.print("[green]Attachment removed[/green]")


@app.command()
def archive(
    note_id: str = typer.Argument(..., help="Note ID"),
) -> None:
    """
    Archive a note.

    Upcoming and overdue reviews are deleted; completed past reviews are kept.
    """
    with reporting_errors():
        store = get_store()
        service = get_note_service(store)
        note = service.get_note(note_id)
        service.archive_note_and_clean(note_id, effective_today(store))

    console.print(f"[green]Archived[/green] {escape(note.title)}")


@app.command()
def move(
    note_id: str = typer.Argument(..., help="Note ID"),
    index: int = typer.Argument(..., help="Review number to move (1-6)"),
    new_date: str = typer.Argument(..., help="New date, YYYY-MM-DD"),
) -> None:
    """
    Move a review to another date. Later pending reviews follow it.

    Examples:
        cli.py notes move note_3f2a... 2 2024-01-10
    """
    with reporting_errors():
        service = get_note_service()
        service.get_note(note_id)
        service.reschedule_from_repetition(note_id, index, new_date)
        repetitions = service.repetitions_for_note(note_id)

    console.print("[green]Rescheduled[/green]")
    console.print(_schedule_table(repetitions))
