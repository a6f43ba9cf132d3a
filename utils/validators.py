"""
============================================================================
KEEP-ALIVE BOT - VALIDATORS UTILITY
============================================================================
Parsing and validation of operator input: probe addresses, intervals,
bot names and Telegram user IDs.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Any, Optional

import validators as external_validators

from config.constants import Defaults
from exceptions import InvalidIntervalError, InvalidURLError, InvalidUserIdError
from utils.logger import get_logger


logger = get_logger(__name__)


# ============================================================================
# URL VALIDATOR
# ============================================================================

class URLValidator:
    """
    Probe address validation.

    Only http:// and https:// are accepted since the prober issues a
    plain HTTP GET.
    """

    @staticmethod
    def has_supported_scheme(url: str) -> bool:
        """Check that the URL starts with a scheme the prober supports."""
        return url.startswith(Defaults.ALLOWED_URL_SCHEMES)

    @staticmethod
    def is_well_formed(url: str) -> bool:
        """
        Check URL structure with the `validators` package.

        Args:
            url: URL to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            return external_validators.url(url, simple_host=True) is True
        except Exception as e:
            logger.debug(f"URL validation error: {e}")
            return False

    @staticmethod
    def validate(url: str) -> str:
        """
        Validate a probe address.

        Structural problems other than the scheme are only logged: a
        target behind an unusual host name is still worth probing.

        Args:
            url: Address as typed by the operator

        Returns:
            The stripped address

        Raises:
            InvalidURLError: If the scheme is not http or https
        """
        url = (url or "").strip()

        if not URLValidator.has_supported_scheme(url):
            raise InvalidURLError(url=url)

        if not URLValidator.is_well_formed(url):
            logger.warning(f"Accepting unusual URL: {url}")

        return url


# ============================================================================
# DATA VALIDATORS
# ============================================================================

class DataValidator:
    """
    General operator input parsing.

    Integers are bounded to what the store's integer columns hold.
    """

    @staticmethod
    def parse_interval(
        value: Any,
        min_val: int = 1,
        max_val: int = Defaults.MAX_INTERVAL_MINUTES
    ) -> int:
        """
        Parse a probe interval in minutes.

        Raises:
            InvalidIntervalError: If the value is not an integer in
                [min_val, max_val]
        """
        try:
            interval = int(str(value).strip())
        except (TypeError, ValueError) as e:
            raise InvalidIntervalError(interval=value, cause=e)

        if not min_val <= interval <= max_val:
            raise InvalidIntervalError(interval=value)

        return interval

    @staticmethod
    def parse_telegram_id(value: Any) -> int:
        """
        Parse a Telegram user ID as a signed 64-bit integer.

        Raises:
            InvalidUserIdError: If the value is not an integer or does not
                fit in 64 bits
        """
        try:
            user_id = int(str(value).strip())
        except (TypeError, ValueError) as e:
            raise InvalidUserIdError(user_id=value, cause=e)

        if not Defaults.INT64_MIN <= user_id <= Defaults.INT64_MAX:
            raise InvalidUserIdError(user_id=value)

        return user_id


# ============================================================================
# BOT NAME VALIDATOR
# ============================================================================

class BotNameValidator:
    """Normalization of monitored bot names."""

    @staticmethod
    def normalize(name: Optional[str]) -> str:
        """Strip whitespace and a single leading '@'."""
        return (name or "").strip().removeprefix("@")
