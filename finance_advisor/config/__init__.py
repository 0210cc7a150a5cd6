"""Configuration package."""

from finance_advisor.config.settings import (
    AppSettings,
    GoogleSheetsSettings,
    Settings,
    StorageBackend,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GoogleSheetsSettings",
    "Settings",
    "StorageBackend",
    "get_settings",
    "validate_all_settings",
]
