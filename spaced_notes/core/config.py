"""
Configuration Management.

Loads environment overrides from config/.env and settings from
config/settings/*.yaml. No hardcoded paths or keys in code; all
configuration comes from these sources.

Environment (.env or process environment, prefix SPACED_NOTES_):
    SPACED_NOTES_DATA_DIR - overrides storage.data_dir

Settings (YAML):
    application.yaml   - App identity
    storage.yaml       - Data directory and storage keys
    scheduling.yaml    - Reschedule hour, reminder window, attachment limit
    logging.yaml       - Logging configuration
    concurrency.yaml   - I/O thread pool size
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from spaced_notes.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    LoggingSchema,
    SchedulingSchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides loaded from config/.env and the process environment."""

    data_dir: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="SPACED_NOTES_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._scheduling = _load_validated(SchedulingSchema, "scheduling.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def storage(self) -> StorageSchema:
        """Storage location and keys."""
        return self._storage

    @property
    def scheduling(self) -> SchedulingSchema:
        """Scheduling settings."""
        return self._scheduling

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (I/O pool)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_data_dir() -> Path:
    """
    Resolve the directory holding the persisted document.

    SPACED_NOTES_DATA_DIR wins over storage.yaml. Relative paths are
    resolved against the project root.

    Returns:
        Absolute path of the data directory.
    """
    configured = get_settings().data_dir or get_app_config().storage.data_dir
    path = Path(configured).expanduser()
    if not path.is_absolute():
        path = find_project_root() / path
    return path
