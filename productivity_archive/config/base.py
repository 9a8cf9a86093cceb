"""Base configuration settings."""

import os
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are read from the environment (prefixed with ``ARCHIVE_``) and an
    optional ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARCHIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Productivity Archive"
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "development")
    )
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "console"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_v1_prefix: str = "/api/v1"
    allowed_origins: List[str] = ["http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./archive.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Archive behaviour
    default_list_limit: int = Field(default=100, ge=1)
    restore_due_date_shift_days: int = Field(default=7, ge=0)
    restore_end_date_shift_months: int = Field(default=1, ge=0)
    reconciliation_grace_seconds: int = Field(default=300, ge=0)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only console and json renderers are supported."""
        v = v.lower()
        if v not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the log level name."""
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v
