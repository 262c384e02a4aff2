#!/usr/bin/env python3
"""
Spaced Notes CLI.

Primary entry point. Every note gets six reviews spread over six months;
these commands add notes, show what is due and record reviews.

Usage:
    python cli.py --help                         # Show help

    # Notes
    python cli.py notes add "Mitosis"            # Create note + schedule
    python cli.py notes add "Cell" -a cell.png   # With an attachment
    python cli.py notes list --all               # Include archived notes
    python cli.py notes move ID 2 2024-01-10     # Move review 2, later ones follow

    # Reviews
    python cli.py reviews today                  # Reviews due today
    python cli.py reviews overdue                # Missed reviews
    python cli.py reviews toggle REP_ID          # Mark done / undo

    # Data
    python cli.py data export                    # Write a JSON backup
    python cli.py data import backup.json        # Restore a JSON backup

    # Debug
    python cli.py debug set-today 2024-02-01     # Pretend it is another day

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from spaced_notes.cli.commands import data_app, debug_app, notes_app, reviews_app
from spaced_notes.core.config import find_project_root
from spaced_notes.core.logging import setup_logging

# Create main app
app = typer.Typer(
    name="spaced-notes",
    help="Spaced Notes CLI - spaced-repetition planner for your notes.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(notes_app, name="notes")
app.add_typer(reviews_app, name="reviews")
app.add_typer(data_app, name="data")
app.add_typer(debug_app, name="debug")


def _validate_project_root() -> None:
    """Validate that we're running inside the project."""
    try:
        find_project_root()
    except RuntimeError:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Spaced Notes CLI.

    Notes are reviewed 1, 7, 15, 30, 90 and 180 days after they are created.
    """
    _validate_project_root()

    # Configure logging based on flags; logging.yaml otherwise
    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging()

    structlog.contextvars.bind_contextvars(source="cli")


if __name__ == "__main__":
    app()
