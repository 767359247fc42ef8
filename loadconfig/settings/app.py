"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from loadconfig.loader.constants import DEFAULT_WORK_BUFFER_SIZE


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field can be set with a ``LOADCONFIG_`` prefixed environment
    variable or in a ``.env`` file; command line options take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOADCONFIG_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    verbose: bool = Field(default=False, description="Write progress lines")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    state_path: Path | None = Field(
        default=None, description="SQLite variable store location"
    )
    strict: bool = Field(
        default=False, description="Reject assignments to undeclared variables"
    )
    work_buffer_size: int = Field(
        default=DEFAULT_WORK_BUFFER_SIZE,
        gt=0,
        description="Maximum length of an expanded line",
    )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
