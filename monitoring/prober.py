"""
============================================================================
KEEP-ALIVE BOT - PROBER
============================================================================
Performs one HTTP GET against a monitored bot's URL and classifies the
outcome. Never raises: every failure mode is returned as a failed
ProbeResult with a diagnostic error type.

Classification
--------------
    response with status in [200, 400)  → success
    any other response status           → failure
    timeout / connect / TLS / DNS error → failure

There is no retry inside a probe. The scheduler's next due cycle is the
retry.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import time
from typing import Optional

import httpx

from config.constants import Defaults
from utils.logger import get_logger


logger = get_logger("Prober")

DEFAULT_USER_AGENT = "KeepAliveBot/1.0"


# ============================================================================
# PROBE RESULT
# ============================================================================

class ProbeResult:
    """
    Value object carrying the outcome of a single probe.
    """
    __slots__ = (
        "success", "status_code", "response_time",
        "error_message", "error_type",
    )

    def __init__(
        self,
        success: bool = False,
        status_code: Optional[int] = None,
        response_time: Optional[float] = None,
        error_message: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        self.success = success
        self.status_code = status_code
        self.response_time = response_time
        self.error_message = error_message
        self.error_type = error_type

    @property
    def diagnostic(self) -> str:
        """Short text for logs: the status code or the error type."""
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return self.error_type or "unknown"

    def __repr__(self) -> str:
        return f"<ProbeResult(success={self.success}, {self.diagnostic})>"


def is_success_status(status_code: int) -> bool:
    """2xx and 3xx count as alive."""
    return 200 <= status_code < 400


# ============================================================================
# HTTP PROBER
# ============================================================================

class HTTPProber:
    """
    One-shot HTTP prober built on httpx.

    Parameters
    ----------
    timeout : float
        Upper bound for the whole request, in seconds.
    user_agent : str
        Sent with every probe.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (httpx.MockTransport in tests).
    """

    def __init__(
        self,
        timeout: float = Defaults.PROBE_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def probe(self, url: str) -> ProbeResult:
        """
        Execute one GET against *url*.

        Parameters
        ----------
        url : str
            The monitored bot's address.

        Returns
        -------
        ProbeResult
            Never raises; transport failures come back as failed results.
        """
        logger.debug(f"[HTTP] probing {url}")
        start_time = time.perf_counter()

        try:
            async with self._client() as client:
                response = await client.get(url)

            elapsed = round(time.perf_counter() - start_time, 4)
            success = is_success_status(response.status_code)

            if success:
                logger.info(f"[HTTP] {url} → {response.status_code} in {elapsed:.3f}s")
            else:
                logger.warning(f"[HTTP] {url} → status {response.status_code}")

            return ProbeResult(
                success=success,
                status_code=response.status_code,
                response_time=elapsed,
                error_message=None if success else f"HTTP error: {response.status_code}",
                error_type=None if success else "HTTPStatus",
            )

        except httpx.TimeoutException as e:
            return self._failure(url, start_time, "Timeout", f"Timed out after {self.timeout}s", e)
        except httpx.ConnectError as e:
            return self._failure(url, start_time, "ConnectError", f"Connection error: {str(e)[:200]}", e)
        except httpx.HTTPError as e:
            return self._failure(url, start_time, type(e).__name__, f"Transport error: {str(e)[:200]}", e)
        except httpx.InvalidURL as e:
            return self._failure(url, start_time, "InvalidURL", f"Invalid URL: {str(e)[:200]}", e)
        except Exception as e:
            return self._failure(url, start_time, type(e).__name__, f"Unexpected error: {str(e)[:200]}", e)

    @staticmethod
    def _failure(
        url: str,
        start_time: float,
        error_type: str,
        message: str,
        error: BaseException,
    ) -> ProbeResult:
        elapsed = round(time.perf_counter() - start_time, 4)
        logger.warning(f"[HTTP] {url} failed ({error_type}): {error!r}")
        return ProbeResult(
            success=False,
            response_time=elapsed,
            error_message=message,
            error_type=error_type,
        )
