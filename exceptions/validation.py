"""
Validation Exception Classes for Keep-Alive Bot

Raised by the command layer when operator input is malformed. Each
exception's user_message() is the exact reply sent back to the operator.
"""

from __future__ import annotations

from typing import Any, Optional

from config.constants import MessageTemplates
from exceptions.base import KeepAliveBotException


class ValidationException(KeepAliveBotException):
    """
    Base Validation Exception

    Parent class for all validation-related exceptions.
    """

    default_error_code = 3000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if field:
            self.details["field"] = field

        if value is not None:
            self.details["value"] = self._sanitize_value(value)

    @staticmethod
    def _sanitize_value(value: Any) -> str:
        """Truncate long values before they end up in logs."""
        str_value = str(value)

        if len(str_value) > 100:
            str_value = str_value[:100] + "..."

        return str_value


class InvalidURLError(ValidationException):
    """Raised when a probe address does not use a supported scheme."""

    default_error_code = 3001

    def __init__(
        self,
        message: str = "Invalid URL format",
        url: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="url", value=url, **kwargs)

    def user_message(self) -> str:
        return MessageTemplates.INVALID_URL


class InvalidIntervalError(ValidationException):
    """Raised when a probe interval is not a positive integer."""

    default_error_code = 3002

    def __init__(
        self,
        message: str = "Invalid interval",
        interval: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="interval", value=interval, **kwargs)

    def user_message(self) -> str:
        return MessageTemplates.INVALID_INTERVAL


class InvalidUserIdError(ValidationException):
    """Raised when a Telegram user ID cannot be parsed."""

    default_error_code = 3003

    def __init__(
        self,
        message: str = "Invalid user ID",
        user_id: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="user_id", value=user_id, **kwargs)

    def user_message(self) -> str:
        return MessageTemplates.INVALID_USER_ID


class UsageError(ValidationException):
    """
    Raised when a command is called with the wrong number of arguments.

    The usage text is carried as the message and returned verbatim.
    """

    default_error_code = 3004

    def __init__(self, usage: str, **kwargs: Any) -> None:
        super().__init__(usage, **kwargs)
        self.usage = usage

    def user_message(self) -> str:
        return self.usage
