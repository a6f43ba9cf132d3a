"""
============================================================================
KEEP-ALIVE BOT - LOGGING UTILITY
============================================================================
Loguru-based logging: console sink, optional rotating file sink, and an
intercept handler that routes stdlib logging (aiogram, SQLAlchemy,
aiohttp, httpx) into loguru.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import sys
import logging
from typing import Optional

from loguru import logger

from config.settings import LoggingSettings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "{extra[component]} | {name}:{function}:{line} - {message}"
)

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("aiosqlite", "httpcore", "httpx", "asyncio")


# ============================================================================
# STDLIB INTERCEPTION
# ============================================================================

class InterceptHandler(logging.Handler):
    """
    Forward stdlib logging records to loguru.

    aiogram, SQLAlchemy and aiohttp log through the standard library;
    this keeps every record in one stream with one format.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(component=record.name).opt(
            depth=depth,
            exception=record.exc_info
        ).log(level, record.getMessage())


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(log_settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure loguru sinks and stdlib interception.

    Args:
        log_settings: Logging section of the application settings.
            Defaults are used when omitted.
    """
    log_settings = log_settings or LoggingSettings()
    log_level = log_settings.level.value

    logger.remove()
    logger.configure(extra={"component": "app"})

    if log_settings.console_enabled:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=log_level,
            colorize=log_settings.console_colored,
            backtrace=True,
            diagnose=False,
        )

    if log_settings.file_enabled:
        log_settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_settings.file_path),
            format=FILE_FORMAT,
            level=log_level,
            rotation=log_settings.file_rotation,
            retention=log_settings.file_retention,
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging system initialized")
    logger.info(f"Log level: {log_level}")
    logger.info(f"Console logging: {log_settings.console_enabled}")
    logger.info(f"File logging: {log_settings.file_enabled}")


def get_logger(name: Optional[str] = None):
    """
    Get a loguru logger bound to a component name.

    Args:
        name: Component name (usually __name__)

    Returns:
        Bound logger instance
    """
    return logger.bind(component=name or "app")
