"""Runtime settings for the WebCSV service and CLI.

Loaded from environment variables with the ``WEBCSV_`` prefix and from a
``.env`` file in the working directory.

Example:
    >>> # WEBCSV_PORT=9000
    >>> # WEBCSV_STRICT_TYPES=true
    >>> settings = WebCSVSettings()
    >>> settings.port
    9000
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["WebCSVSettings", "get_settings"]


class WebCSVSettings(BaseSettings):
    """Environment-based settings using pydantic-settings."""

    host: str = Field(default="127.0.0.1", description="Address the service binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port the service listens on")
    strict_types: bool = Field(
        default=False,
        description="Reject values of columns whose type is not recognized",
    )
    schema_header: str = Field(
        default="Content-Schema",
        min_length=1,
        description="HTTP header carrying the schema description",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: 'json' or 'console'")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    model_config = SettingsConfigDict(
        env_prefix="WEBCSV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate format is a known value."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()


def get_settings() -> WebCSVSettings:
    """Build settings from the current environment."""
    return WebCSVSettings()
