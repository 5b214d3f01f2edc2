"""
Configuration Management for Bill Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The importer's locale assumption (which character is the decimal
separator) lives here as an explicit setting instead of being buried
inside the row parser.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImportSettings(BaseSettings):
    """Bill file import configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILL_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    decimal_separator: Literal["auto", ",", "."] = Field(
        default="auto",
        description=(
            "Decimal separator of the source locale. 'auto' guesses per value "
            "from the position of the last dot and comma."
        )
    )
    header_scan_lines: int = Field(
        default=10,
        ge=1,
        le=100,
        description="How many non-blank lines are searched for a header row"
    )
    rejected_extensions: str = Field(
        default="xlsx,xls",
        description="Comma-separated spreadsheet-binary extensions refused before parsing"
    )

    @property
    def rejected_extensions_list(self) -> list[str]:
        """Get rejected extensions as a list (lowercase, no leading dot)."""
        return [
            ext.strip().lower().lstrip(".")
            for ext in self.rejected_extensions.split(",")
            if ext.strip()
        ]


class RecurrenceSettings(BaseSettings):
    """Installment / monthly repetition configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILL_RECURRENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_count: int = Field(
        default=360,
        ge=1,
        le=360,
        description="Largest number of monthly installments one entry may create"
    )


class StorageSettings(BaseSettings):
    """Local bill storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BILL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "json"] = Field(
        default="memory",
        description="Which storage backend to use"
    )
    json_path: str = Field(
        default="bills.json",
        description="File used by the JSON backend"
    )

    @field_validator('json_path')
    @classmethod
    def validate_json_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("json_path cannot be empty")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Standard library log level used by structlog"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def importer(self) -> ImportSettings:
        return ImportSettings()

    @property
    def recurrence(self) -> RecurrenceSettings:
        return RecurrenceSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every group that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("importer", "recurrence", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
