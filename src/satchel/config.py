"""Configuration management for Satchel."""

import tempfile
from pathlib import Path

import pendulum
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_archive_path() -> Path:
    return Path(tempfile.gettempdir()) / "satchel.archive"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="satchel_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    archive_path: Path = Field(
        default_factory=_default_archive_path,
        description="Archive file used by the CLI when --path is not given",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # Time handling
    timezone: str | None = None

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is one of the supported renderers."""
        valid_formats = {"console", "json"}
        if v.lower() not in valid_formats:
            raise ValueError(
                f"Invalid SATCHEL_LOG_FORMAT: '{v}'. "
                f"Must be one of: {', '.join(sorted(valid_formats))}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(
                f"Invalid SATCHEL_LOG_LEVEL: '{v}'. "
                f"Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return v.upper()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate the display timezone is a known IANA name."""
        if v is None:
            return None
        try:
            pendulum.timezone(v)
        except Exception as e:
            raise ValueError(f"Unknown SATCHEL_TIMEZONE: '{v}'") from e
        return v


# Lazy settings initialization
_settings = None


def get_settings() -> Settings:
    """Get the settings instance, creating it if needed."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


class SettingsProxy:
    """Proxy to provide attribute access to settings."""

    def __getattr__(self, name):
        return getattr(get_settings(), name)

    def __setattr__(self, name, value):
        setattr(get_settings(), name, value)


settings = SettingsProxy()
