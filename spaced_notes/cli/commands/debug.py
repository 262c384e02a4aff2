"""
Debug Commands.

Pretend today is another day, to see how the schedule plays out.
"""

import typer

from spaced_notes.cli.context import console, get_clock_service, parse_day, reporting_errors
from spaced_notes.core.dates import local_now

app = typer.Typer(help="Debug commands (fake today)")


@app.command()
def today() -> None:
    """
    Show the date the application uses as today.
    """
    with reporting_errors():
        clock = get_clock_service()
        fake = clock.fake_today()

    if fake is None:
        console.print(f"Today: {local_now().date().isoformat()}")
    else:
        console.print(f"Today: {fake.isoformat()} [yellow](fake)[/yellow]")


@app.command("set-today")
def set_today(
    day: str = typer.Argument(..., help="Date to use as today, YYYY-MM-DD"),
) -> None:
    """
    Use another date as today.
    """
    with reporting_errors():
        fake = get_clock_service().set_fake_today(parse_day(day))

    console.print(f"Today is now {fake.isoformat()} [yellow](fake)[/yellow]")


@app.command("clear-today")
def clear_today() -> None:
    """
    Go back to the real date.
    """
    with reporting_errors():
        get_clock_service().clear_fake_today()

    console.print(f"Today is {local_now().date().isoformat()}")
