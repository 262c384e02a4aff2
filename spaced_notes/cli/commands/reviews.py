"""
Review Commands.

Day view, overdue view, review state changes and the daily reminder.
"""

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from spaced_notes.cli.context import (
    console,
    effective_today,
    get_celebration_service,
    get_note_service,
    get_reminder_service,
    get_store,
    parse_day,
    reporting_errors,
)
from spaced_notes.core.dates import calendar_day, format_relative_past, local_now
from spaced_notes.core.exceptions import NotFoundError
from spaced_notes.schemas.note import ScheduledReview

app = typer.Typer(help="Review commands")


def _review_table(title: str, items: list[ScheduledReview]) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Note", style="cyan")
    table.add_column("#", justify="right")
    table.add_column("Due")
    table.add_column("Status")
    table.add_column("ID", style="dim", no_wrap=True)

    for item in items:
        repetition = item.repetition
        status = "[green]done[/green]" if repetition.is_done else "[yellow]pending[/yellow]"
        table.add_row(
            escape(item.note.title),
            str(repetition.index),
            calendar_day(repetition.due_date).isoformat(),
            status,
            repetition.id,
        )
    return table


@app.command()
def today(
    day: Optional[str] = typer.Option(None, "--date", help="Show another day, YYYY-MM-DD"),
) -> None:
    """
    Show the reviews due on a day (today by default).
    """
    with reporting_errors():
        store = get_store()
        current = effective_today(store)
        shown_day = parse_day(day) if day else current
        items = get_note_service(store).repetitions_for_day(shown_day, current)
        celebrate = get_celebration_service(store).celebrate_if_complete(items, shown_day)

    if not items:
        console.print(f"[dim]Nothing to review on {shown_day.isoformat()}[/dim]")
        return

    console.print(_review_table(f"Reviews for {shown_day.isoformat()}", items))
    if celebrate:
        console.print("[bold green]All reviews done for the day. Well done![/bold green]")


@app.command()
def overdue() -> None:
    """
    Show pending reviews from previous days, most recent first.
    """
    with reporting_errors():
        store = get_store()
        current = effective_today(store)
        items = get_note_service(store).overdue_repetitions(current)

    if not items:
        console.print("[green]No overdue reviews[/green]")
        return

    console.print(_review_table("Overdue reviews", items))
    oldest = items[-1].repetition.due_date
    console.print(f"[dim]Oldest: {format_relative_past(oldest, current)}[/dim]")


@app.command()
def toggle(
    repetition_id: str = typer.Argument(..., help="Repetition ID"),
) -> None:
    """
    Mark a review done, or back to pending if it was done.
    """
    with reporting_errors():
        store = get_store()
        service = get_note_service(store)
        updated = service.toggle_reviewed(repetition_id, now=local_now())
        if updated is None:
            raise NotFoundError(f"Repetition {repetition_id} not found")

        current = effective_today(store)
        due_day = calendar_day(updated.due_date)
        items = service.repetitions_for_day(due_day, current)
        celebrate = get_celebration_service(store).celebrate_if_complete(items, due_day)

    console.print(f"Review {updated.index} is now [bold]{updated.status.value}[/bold]")
    if celebrate:
        console.print("[bold green]All reviews done for the day. Well done![/bold green]")


@app.command()
def done(
    repetition_id: str = typer.Argument(..., help="Repetition ID"),
) -> None:
    """
    Mark an overdue review done. A review already done stays done.
    """
    with reporting_errors():
        updated = get_note_service().mark_overdue_reviewed(repetition_id, now=local_now())
        if updated is None:
            raise NotFoundError(f"Repetition {repetition_id} not found")

    console.print(f"Review {updated.index} is [bold]{updated.status.value}[/bold]")


@app.command()
def delete(
    repetition_id: str = typer.Argument(..., help="Repetition ID"),
) -> None:
    """
    Delete a single review.
    """
    with reporting_errors():
        get_note_service().delete_repetition(repetition_id)

    console.print("[green]Review deleted[/green]")


@app.command()
def remind(
    enable: Optional[bool] = typer.Option(None, "--enable/--disable", help="Turn the daily reminder on or off"),
    at: Optional[str] = typer.Option(None, "--at", help="Reminder time, HH:MM"),
) -> None:
    """
    Configure the daily reminder, or check whether it is due now.

    Examples:
        cli.py reviews remind --enable --at 20:00
        cli.py reviews remind
    """
    with reporting_errors():
        store = get_store()
        service = get_reminder_service(store)

        if enable is not None or at is not None:
            hour = minute = None
            if at is not None:
                try:
                    hour_text, minute_text = at.split(":")
                    hour, minute = int(hour_text), int(minute_text)
                except ValueError:
                    console.print(f"[red]Error: invalid time: {escape(at)}[/red]")
                    raise typer.Exit(1)
                if not (0 <= hour <= 23 and 0 <= minute <= 59):
                    console.print(f"[red]Error: invalid time: {escape(at)}[/red]")
                    raise typer.Exit(1)

            settings = service.configure(enabled=enable, hour=hour, minute=minute)
            state = "enabled" if settings.enabled else "disabled"
            console.print(f"Reminder {state} at {settings.hour:02d}:{settings.minute:02d}")
            return

        now = local_now()
        current = effective_today(store)
        message = service.due_reminder(now, today=current)
        if message is None:
            console.print("[dim]No reminder due[/dim]")
            return

        service.mark_sent(now)

    console.print(f"[bold]{message}[/bold]")
