"""
Monitoring Exception Classes for Keep-Alive Bot

Probe failures are never raised: they are recorded as failure outcomes.
These exceptions cover the remaining runtime collaborators.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import KeepAliveBotException


class MonitoringException(KeepAliveBotException):
    """Base class for monitoring runtime errors."""

    default_error_code = 4000
    default_recoverable = True


class NotificationError(MonitoringException):
    """
    Notification Error

    Raised by a notification channel when a message could not be delivered.
    The alert path logs and swallows it.
    """

    default_error_code = 4001

    def __init__(
        self,
        message: str = "Failed to deliver notification",
        recipient: Optional[int] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if recipient is not None:
            self.details["recipient"] = recipient
