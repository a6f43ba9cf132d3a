"""
Telegram notification channel for Keep-Alive Bot.
"""

from __future__ import annotations

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from exceptions import NotificationError
from utils.logger import get_logger


logger = get_logger(__name__)


class TelegramNotifier:
    """
    Sends plain-text messages through the aiogram Bot.

    One attempt per message; failures surface as NotificationError.
    """

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send(self, identity: int, text: str) -> None:
        try:
            await self.bot.send_message(chat_id=identity, text=text)
        except TelegramAPIError as e:
            raise NotificationError(
                message=f"Telegram rejected message: {e}",
                recipient=identity,
                cause=e
            )
        except Exception as e:
            raise NotificationError(
                message=f"Failed to reach Telegram: {e}",
                recipient=identity,
                cause=e
            )
        logger.debug(f"Message delivered to {identity}")
