"""
Spaced Notes.

Local spaced-repetition planner: every note gets six reviews on a fixed
interval curve (1, 7, 15, 30, 90, 180 days).

- core/: Configuration, logging, exceptions, dates, thread pool
- schemas/: Pydantic models of the persisted document
- repositories/: Key-value store port and the document repository
- services/: Scheduling, rescheduling, archiving, backup and reminders
- cli/: Command-line client (Typer + Rich)
"""
