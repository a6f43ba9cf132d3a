"""
============================================================================
KEEP-ALIVE BOT - BOT PACKAGE
============================================================================
Admin command handlers, authorization and Telegram delivery.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from bot.auth import AdminCache, AdminMiddleware
from bot.manager import BotManager
from bot.notifier import TelegramNotifier

__all__ = ["AdminCache", "AdminMiddleware", "BotManager", "TelegramNotifier"]
