"""
Configuration module.

Provides centralized access to application settings.
"""

from .settings import (
    Settings,
    DatabaseSettings,
    MailSettings,
    SecuritySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "DatabaseSettings",
    "MailSettings",
    "SecuritySettings",
    "clear_settings_cache",
    "get_settings",
]
