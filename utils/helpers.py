"""
============================================================================
KEEP-ALIVE BOT - HELPERS UTILITY
============================================================================
Time helpers shared by the storage, monitoring and command layers.

All persisted timestamps are naive UTC.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from datetime import datetime, timezone
from typing import Optional


# ============================================================================
# TIME UTILITIES
# ============================================================================

class TimeHelper:
    """
    Time and date manipulation utilities.
    """

    @staticmethod
    def get_utc_now() -> datetime:
        """Get current UTC datetime as a naive value."""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def to_naive_utc(dt: datetime) -> datetime:
        """
        Normalize a datetime to naive UTC.

        Aware values are converted; naive values are assumed to be UTC
        already.
        """
        if dt.tzinfo is not None:
            return dt.astimezone(timezone.utc).replace(tzinfo=None)
        return dt

    @staticmethod
    def format_datetime(dt: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """
        Format datetime to string.

        Args:
            dt: Datetime to format
            fmt: Format string

        Returns:
            Formatted string, or "never" when dt is None
        """
        if dt is None:
            return "never"
        return dt.strftime(fmt)

    @staticmethod
    def rfc3339_now() -> str:
        """Current UTC time in RFC 3339 form, e.g. 2024-05-01T12:00:00Z."""
        return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def utcnow() -> datetime:
    """Shortcut for TimeHelper.get_utc_now()."""
    return TimeHelper.get_utc_now()
