"""
Integration Test Fixtures.

Fixtures for integration tests - the CLI runs against a real file store in
a temporary data directory.
"""

import json
import logging

import pytest
import structlog

from spaced_notes.core.config import get_app_config, get_settings


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """
    Point SPACED_NOTES_DATA_DIR at a temporary directory.

    Usage:
        def test_add(data_dir):
            runner.invoke(app, ["notes", "add", "Mitosis"])
            assert (data_dir / "spaced-notes-db.json").exists()
    """
    directory = tmp_path / "data"
    monkeypatch.setenv("SPACED_NOTES_DATA_DIR", str(directory))
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield directory
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    """The CLI callback configures logging; undo it after each test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def read_document(data_dir):
    """Return the stored document as parsed JSON."""

    def _read() -> dict:
        return json.loads((data_dir / "spaced-notes-db.json").read_text(encoding="utf-8"))

    return _read
