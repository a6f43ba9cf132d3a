"""
Base Exception Classes for Keep-Alive Bot

Provides the foundation exception hierarchy from which all
other exceptions inherit.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class KeepAliveBotException(Exception):
    """
    Base Exception Class

    All custom exceptions in the Keep-Alive Bot application inherit
    from this class. Provides common functionality for error
    handling, logging, and serialization.

    Attributes:
        message: Human-readable error message
        error_code: Numeric error code for categorization
        details: Additional error details as dictionary
        cause: The underlying exception, if any
        recoverable: Whether the error is recoverable
    """

    default_error_code: int = 1000
    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable

    @property
    def full_message(self) -> str:
        """Get full error message with code."""
        return f"[{self.error_code}] {self.message}"

    def log_format(self) -> str:
        """
        Format exception for logging.

        Returns:
            Formatted string for logging
        """
        parts = [
            f"Exception: {self.__class__.__name__}",
            f"Code: {self.error_code}",
            f"Message: {self.message}"
        ]

        if self.details:
            parts.append(f"Details: {self.details}")

        if self.cause:
            parts.append(f"Cause: {self.cause!r}")

        return " | ".join(parts)

    def user_message(self) -> str:
        """
        Get user-friendly error message.

        Returns:
            Message suitable for displaying to users
        """
        return self.message

    def __str__(self) -> str:
        return self.full_message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"details={self.details})"
        )


class ConfigurationError(KeepAliveBotException):
    """
    Configuration Error

    Raised when required settings are missing or malformed
    (bot token, database URL).
    """

    default_error_code = 1100
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if config_key:
            self.details["config_key"] = config_key


class InitializationError(KeepAliveBotException):
    """
    Initialization Error

    Raised when a component fails to start (database, bot, web server).
    """

    default_error_code = 1200
    default_recoverable = False

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if component:
            self.details["component"] = component
