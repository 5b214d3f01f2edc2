"""Configuration package."""

from bill_tracker.config.settings import (
    AppSettings,
    ImportSettings,
    RecurrenceSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ImportSettings",
    "RecurrenceSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
