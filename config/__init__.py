"""
Configuration Package for Keep-Alive Bot

This package contains all configuration-related modules including:
- Settings management with environment variable support
- Constants, enums and message templates used throughout the application
"""

from config.settings import (
    Settings,
    DatabaseSettings,
    BotSettings,
    MonitoringSettings,
    LoggingSettings,
    Environment,
    LogLevel,
    get_settings
)

from config.constants import (
    BotCommands,
    BotStatus,
    STATUS_EMOJI,
    TimeFormats,
    Defaults,
    MessageTemplates
)

__all__ = [
    # Settings
    "Settings",
    "DatabaseSettings",
    "BotSettings",
    "MonitoringSettings",
    "LoggingSettings",
    "Environment",
    "LogLevel",
    "get_settings",

    # Constants
    "BotCommands",
    "BotStatus",
    "STATUS_EMOJI",
    "TimeFormats",
    "Defaults",
    "MessageTemplates"
]
