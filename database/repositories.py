"""
============================================================================
KEEP-ALIVE BOT - REPOSITORIES
============================================================================
Data access for monitored bots, uptime history and admins.

Repositories do not swallow errors: DatabaseException subclasses raised
by DatabaseManager.session() propagate so that callers decide whether a
failure skips a tick, is logged, or is reported back to the operator.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from datetime import datetime
from typing import List, Optional, Sequence, Set

from sqlalchemy import select, update, delete, func

from config.constants import BotStatus
from database.manager import DatabaseManager
from database.models import Admin, MonitoredBot, UptimeLog
from exceptions import DatabaseDuplicateError
from utils.helpers import utcnow
from utils.logger import get_logger


# ============================================================================
# BASE REPOSITORY
# ============================================================================

class BaseRepository:
    """
    Base repository class holding the database manager and a bound logger.
    """

    def __init__(self, db_manager: DatabaseManager):
        """
        Initialize repository.

        Args:
            db_manager: DatabaseManager instance
        """
        self.db = db_manager
        self.logger = get_logger(self.__class__.__name__)


# ============================================================================
# BOT REPOSITORY (TARGET STORE)
# ============================================================================

class BotRepository(BaseRepository):
    """Repository for MonitoredBot operations."""

    async def list_all(self) -> List[MonitoredBot]:
        """All monitored bots in insertion order. Un-paginated."""
        async with self.db.session() as session:
            result = await session.execute(
                select(MonitoredBot).order_by(MonitoredBot.id.asc())
            )
            return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[MonitoredBot]:
        async with self.db.session() as session:
            result = await session.execute(
                select(MonitoredBot).where(MonitoredBot.name == name)
            )
            return result.scalar_one_or_none()

    async def get_by_id(self, bot_id: int) -> Optional[MonitoredBot]:
        async with self.db.session() as session:
            return await session.get(MonitoredBot, bot_id)

    async def insert_if_absent(
        self,
        name: str,
        url: str,
        interval_minutes: int,
        added_by: int,
        now: Optional[datetime] = None
    ) -> Optional[MonitoredBot]:
        """
        Create a monitored bot unless one with the same name exists.

        The new bot starts with status Unknown and last_ping seeded to the
        creation time.

        Returns:
            The created bot, or None if the name is already taken
        """
        if await self.get_by_name(name) is not None:
            return None

        now = now or utcnow()
        bot = MonitoredBot(
            name=name,
            url=url,
            interval_minutes=interval_minutes,
            status=BotStatus.UNKNOWN.value,
            last_ping=now,
            added_by=added_by,
            created_at=now
        )

        try:
            async with self.db.session() as session:
                session.add(bot)
        except DatabaseDuplicateError:
            # Lost a race with a concurrent insert of the same name
            return None

        self.logger.info(f"Added bot @{name} ({url}) every {interval_minutes} min")
        return bot

    async def delete_by_name(self, name: str) -> bool:
        """
        Delete a monitored bot. Its uptime history is left in place.

        Returns:
            True if a row was deleted
        """
        async with self.db.session() as session:
            result = await session.execute(
                delete(MonitoredBot).where(MonitoredBot.name == name)
            )
            deleted = (result.rowcount or 0) > 0

        if deleted:
            self.logger.info(f"Removed bot @{name}")
        return deleted

    async def update_status(
        self,
        bot_id: int,
        status: BotStatus,
        timestamp: datetime
    ) -> bool:
        """
        Set live status and last-probed timestamp of one bot.

        Returns:
            False if the bot no longer exists
        """
        async with self.db.session() as session:
            result = await session.execute(
                update(MonitoredBot)
                .where(MonitoredBot.id == bot_id)
                .values(status=BotStatus(status).value, last_ping=timestamp)
            )
            return (result.rowcount or 0) > 0


# ============================================================================
# UPTIME LOG REPOSITORY (HISTORY STORE)
# ============================================================================

class UptimeLogRepository(BaseRepository):
    """Append-only access to UptimeLog."""

    async def append(self, bot_id: int, timestamp: datetime, result: bool) -> UptimeLog:
        entry = UptimeLog(bot_id=bot_id, timestamp=timestamp, result=result)
        async with self.db.session() as session:
            session.add(entry)
        return entry

    async def count_total(self, bot_id: int) -> int:
        async with self.db.session() as session:
            count = await session.scalar(
                select(func.count(UptimeLog.id)).where(UptimeLog.bot_id == bot_id)
            )
            return int(count or 0)

    async def count_successful(self, bot_id: int) -> int:
        async with self.db.session() as session:
            count = await session.scalar(
                select(func.count(UptimeLog.id)).where(
                    UptimeLog.bot_id == bot_id,
                    UptimeLog.result.is_(True)
                )
            )
            return int(count or 0)

    async def uptime_percentage(self, bot_id: int) -> float:
        """
        successful / total * 100, or 0.0 when the bot has no history.
        """
        total = await self.count_total(bot_id)
        if total == 0:
            return 0.0

        successful = await self.count_successful(bot_id)
        return successful / total * 100


# ============================================================================
# ADMIN REPOSITORY
# ============================================================================

class AdminRepository(BaseRepository):
    """Durable set of trusted Telegram identities."""

    async def list_ids(self) -> Set[int]:
        async with self.db.session() as session:
            result = await session.execute(select(Admin.telegram_id))
            return set(result.scalars().all())

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[Admin]:
        async with self.db.session() as session:
            result = await session.execute(
                select(Admin).where(Admin.telegram_id == telegram_id)
            )
            return result.scalar_one_or_none()

    async def add_if_absent(
        self,
        telegram_id: int,
        username: Optional[str] = None
    ) -> bool:
        """
        Persist an admin unless already present.

        Returns:
            True if a new row was created
        """
        if await self.get_by_telegram_id(telegram_id) is not None:
            return False

        try:
            async with self.db.session() as session:
                session.add(Admin(telegram_id=telegram_id, username=username))
        except DatabaseDuplicateError:
            return False

        self.logger.info(f"Admin {telegram_id} persisted")
        return True

    async def add_many_if_absent(self, telegram_ids: Sequence[int]) -> int:
        """Persist several admins; returns how many were new."""
        created = 0
        for telegram_id in telegram_ids:
            if await self.add_if_absent(telegram_id):
                created += 1
        return created
