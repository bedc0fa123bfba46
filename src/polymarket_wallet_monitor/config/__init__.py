"""Configuration subpackage."""

from polymarket_wallet_monitor.config.config import (
    ApiSettings,
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    MonitorSettings,
    ResolutionSettings,
    Settings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "MonitorSettings",
    "ResolutionSettings",
    "Settings",
    "get_settings",
]
