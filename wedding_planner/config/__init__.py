"""Configuration package."""

from wedding_planner.config.settings import (
    AppSettings,
    MessagingSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "MessagingSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
