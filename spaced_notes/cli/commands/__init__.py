"""
CLI Commands.

Organized by domain/feature area.
"""

from spaced_notes.cli.commands.data import app as data_app
from spaced_notes.cli.commands.debug import app as debug_app
from spaced_notes.cli.commands.notes import app as notes_app
from spaced_notes.cli.commands.reviews import app as reviews_app

__all__ = [
    "data_app",
    "debug_app",
    "notes_app",
    "reviews_app",
]
