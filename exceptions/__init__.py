"""
Exceptions Package for Keep-Alive Bot

Provides the exception hierarchy used for error handling
throughout the application.
"""

from exceptions.base import (
    KeepAliveBotException,
    ConfigurationError,
    InitializationError
)

from exceptions.database import (
    DatabaseException,
    DatabaseConnectionError,
    DatabaseQueryError,
    DatabaseDuplicateError
)

from exceptions.validation import (
    ValidationException,
    InvalidURLError,
    InvalidIntervalError,
    InvalidUserIdError,
    UsageError
)

from exceptions.monitoring import (
    MonitoringException,
    NotificationError
)

__all__ = [
    # Base exceptions
    "KeepAliveBotException",
    "ConfigurationError",
    "InitializationError",

    # Database exceptions
    "DatabaseException",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "DatabaseDuplicateError",

    # Validation exceptions
    "ValidationException",
    "InvalidURLError",
    "InvalidIntervalError",
    "InvalidUserIdError",
    "UsageError",

    # Monitoring exceptions
    "MonitoringException",
    "NotificationError"
]
