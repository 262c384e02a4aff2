"""
CLI Client Module.

Command-line client built with Typer and Rich.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in spaced_notes.services
- Services are built per command from the configured data directory

Usage:
    python cli.py --help
    python cli.py notes add "Mitosis"
    python cli.py reviews today
"""
