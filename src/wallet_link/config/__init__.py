"""Configuration subpackage."""

from wallet_link.config.config import (
    AppSettings,
    LedgerSettings,
    LoggingSettings,
    SessionSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "LoggingSettings",
    "SessionSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
