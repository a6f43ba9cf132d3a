"""
============================================================================
KEEP-ALIVE BOT - BOT MANAGER
============================================================================
Owns the aiogram Bot and Dispatcher: registers the command router and the
admin middleware, injects shared dependencies, publishes the command menu
and runs long polling.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Any, Optional

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand

from bot.auth import AdminCache, AdminMiddleware
from bot.handlers import router as command_router
from bot.notifier import TelegramNotifier
from config.constants import BotCommands
from config.settings import BotSettings
from exceptions import InitializationError
from utils.logger import get_logger


logger = get_logger("BotManager")


class BotManager:
    """
    aiogram lifecycle wrapper.

    Usage
    -----
        manager = BotManager(settings.bot, admin_cache)
        await manager.initialize(bot_repo=..., log_repo=..., admin_repo=...)
        await manager.start_polling()     # blocks
    """

    def __init__(self, bot_settings: BotSettings, admin_cache: AdminCache):
        self.settings = bot_settings
        self.admin_cache = admin_cache
        self.bot: Optional[Bot] = None
        self.dp: Optional[Dispatcher] = None
        self.notifier: Optional[TelegramNotifier] = None

    async def initialize(self, **dependencies: Any) -> None:
        """
        Create Bot and Dispatcher and wire handlers.

        Args:
            **dependencies: Objects handed to handlers by keyword
                (bot_repo, log_repo, admin_repo)

        Raises:
            InitializationError: If the bot cannot be created or the token
                is rejected by Telegram
        """
        try:
            self.bot = Bot(token=self.settings.token.get_secret_value())
            self.dp = Dispatcher()

            self.dp.message.outer_middleware(AdminMiddleware(self.admin_cache))
            self.dp.include_router(command_router)
            self.dp.workflow_data.update(dependencies)
            self.dp.workflow_data["admin_cache"] = self.admin_cache

            me = await self.bot.get_me()
            logger.info(f"  ✓ Authorized as @{me.username}")

            await self._set_commands()
            self.notifier = TelegramNotifier(self.bot)

        except Exception as e:
            if self.bot:
                await self.bot.session.close()
                self.bot = None
            raise InitializationError(
                f"Failed to initialize Telegram bot: {e}",
                component="bot",
                cause=e
            )

    async def _set_commands(self) -> None:
        commands = [
            BotCommand(command=cmd.value, description=BotCommands.get_description(cmd))
            for cmd in BotCommands.all()
        ]
        try:
            await self.bot.set_my_commands(commands)
        except Exception as e:
            logger.warning(f"Could not publish command menu: {e}")

    async def start_polling(self) -> None:
        """Run long polling until stop_polling() is called."""
        logger.info("  Starting aiogram polling…")
        await self.dp.start_polling(
            self.bot,
            polling_timeout=self.settings.polling_timeout,
            handle_signals=False,
            close_bot_session=False,
        )

    async def stop_polling(self) -> None:
        if self.dp:
            try:
                await self.dp.stop_polling()
            except RuntimeError:
                # Polling was never started
                pass

    async def close(self) -> None:
        if self.bot:
            await self.bot.session.close()
            self.bot = None
