"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    StorageSchema      → storage.yaml
    SchedulingSchema   → scheduling.yaml
    LoggingSchema      → logging.yaml
    ConcurrencySchema  → concurrency.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str


# =============================================================================
# storage.yaml
# =============================================================================


class StorageSchema(_StrictBase):
    data_dir: str
    document_key: str
    congrats_prefix: str
    fake_today_key: str
    reminder_key: str
    export_prefix: str


# =============================================================================
# scheduling.yaml
# =============================================================================


class SchedulingSchema(_StrictBase):
    reschedule_hour: int = Field(ge=0, le=23)
    reminder_window_minutes: int = Field(ge=0)
    max_attachment_bytes: int = Field(gt=0)


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: int = Field(gt=0)


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
