"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from decimal import Decimal
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Override via environment variables (prefixed with VATD_) or .env file.

    Examples:
        VATD_LOG_LEVEL=DEBUG
        VATD_LOG_FORMAT=json
        VATD_FETCH_CHUNK_SIZE=100
        VATD_DEFAULT_ADJUSTMENT_RATE=20
    """

    model_config = SettingsConfigDict(
        env_prefix="VATD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "VAT Declaration Engine"
    environment: Environment = Environment.DEVELOPMENT

    # Record store (reference SQLite collaborator)
    sqlite_path: Path = Field(
        default=Path("vat_declaration.db"),
        description="SQLite database file path for the reference record store",
    )
    fetch_chunk_size: int = Field(
        default=200,
        ge=1,
        le=200,
        description="Maximum number of document ids per line query",
    )

    # Declaration rules
    default_adjustment_rate: Decimal = Field(
        default=Decimal("20"),
        ge=0,
        description="Rate assumed for credit notes whose effective rate cannot be derived",
    )

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: Literal["json", "console"] | None = Field(
        default=None,
        validate_default=True,
        description="Log output format; unset means json in production, console elsewhere",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("log_format", mode="before")
    @classmethod
    def set_log_format_from_environment(cls, v: str | None, info) -> str:
        """Default to JSON logging in production."""
        if v:
            return v
        if info.data.get("environment") == Environment.PRODUCTION:
            return "json"
        return "console"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
