"""
Admin authorization for Keep-Alive Bot

AdminCache mirrors the durable admin table in memory so every command
can be gated without a database round trip. AdminMiddleware rejects
commands from anyone not in the cache.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Set

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject

from config.constants import BotCommands, MessageTemplates
from database.repositories import AdminRepository
from utils.logger import get_logger


logger = get_logger(__name__)


class AdminCache:
    """
    Process-wide set of trusted Telegram IDs.

    The admin table is the source of truth: the cache is filled from it at
    startup and extended only after a successful insert.
    """

    def __init__(self) -> None:
        self._ids: Set[int] = set()

    async def load(
        self,
        admin_repo: AdminRepository,
        initial_ids: Optional[Iterable[int]] = None
    ) -> int:
        """
        Persist the configured initial admins, then load every stored admin.

        Returns:
            Number of admins in the cache
        """
        initial = sorted(set(initial_ids or ()))
        if initial:
            created = await admin_repo.add_many_if_absent(initial)
            if created:
                logger.info(f"Persisted {created} configured admin(s)")

        self._ids = await admin_repo.list_ids()
        logger.info(f"Admin cache loaded with {len(self._ids)} admin(s)")
        return len(self._ids)

    def add(self, telegram_id: int) -> None:
        self._ids.add(telegram_id)

    def contains(self, telegram_id: Optional[int]) -> bool:
        return telegram_id is not None and telegram_id in self._ids

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> Set[int]:
        return set(self._ids)


def extract_command(text: Optional[str]) -> Optional[str]:
    """
    Command name of a message, without slash or @botname suffix.

    "/addbot@KeepAliveBot x" -> "addbot"; non-commands -> None.
    """
    if not text or not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0][1:]
    return head.split("@", 1)[0].lower() or None


class AdminMiddleware(BaseMiddleware):
    """
    Outer message middleware that only lets admins' commands through.

    Plain text is passed on untouched; there are no handlers for it.
    """

    def __init__(self, cache: AdminCache) -> None:
        self.cache = cache

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        if not isinstance(event, Message):
            return await handler(event, data)

        command = extract_command(event.text)
        if command is None:
            return await handler(event, data)

        user_id = event.from_user.id if event.from_user else None
        if self.cache.contains(user_id):
            return await handler(event, data)

        logger.warning(f"Rejected /{command} from unauthorized user {user_id}")
        if command == BotCommands.START.value:
            await event.answer(MessageTemplates.UNAUTHORIZED_START)
        else:
            await event.answer(MessageTemplates.UNAUTHORIZED)
        return None
