"""
Status Updater for Keep-Alive Bot

Applies a probe outcome to a monitored bot: live status and last-probed
timestamp first, then one uptime log row. The two writes are independent;
if one fails the other is still attempted and the next probe cycle
repairs the status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config.constants import BotStatus
from database.models import MonitoredBot
from database.repositories import BotRepository, UptimeLogRepository
from monitoring.prober import ProbeResult
from utils.helpers import utcnow
from utils.logger import get_logger


logger = get_logger("StatusUpdater")


@dataclass(frozen=True)
class StatusChange:
    """What a probe did to one bot. Input to the alert dispatcher."""

    bot_id: int
    name: str
    url: str
    added_by: int
    previous_status: BotStatus
    current_status: BotStatus
    previous_ping: Optional[datetime]
    probed_at: datetime
    status_saved: bool = True
    history_saved: bool = True

    @property
    def success(self) -> bool:
        return self.current_status is BotStatus.ONLINE

    @property
    def went_offline(self) -> bool:
        """True when this probe moved the bot into Offline."""
        return (
            self.current_status is BotStatus.OFFLINE
            and self.previous_status is not BotStatus.OFFLINE
        )


class StatusUpdater:
    """Persists probe outcomes."""

    def __init__(self, bot_repo: BotRepository, log_repo: UptimeLogRepository):
        self.bot_repo = bot_repo
        self.log_repo = log_repo

    async def apply(
        self,
        bot: MonitoredBot,
        result: ProbeResult,
        now: Optional[datetime] = None
    ) -> StatusChange:
        """
        Record *result* for *bot*.

        Args:
            bot: The bot as read at tick time (its status and last_ping are
                the previous values)
            result: Outcome of the probe that just completed
            now: Probe completion time, defaults to the current UTC time

        Returns:
            StatusChange describing previous and new status
        """
        probed_at = now or utcnow()
        new_status = BotStatus.ONLINE if result.success else BotStatus.OFFLINE

        status_saved = True
        try:
            found = await self.bot_repo.update_status(bot.id, new_status, probed_at)
            if not found:
                logger.debug(f"@{bot.name} was removed before its probe finished")
        except Exception as e:
            status_saved = False
            logger.error(f"Failed to update status for @{bot.name}: {e}")

        history_saved = True
        try:
            await self.log_repo.append(bot.id, probed_at, result.success)
        except Exception as e:
            history_saved = False
            logger.error(f"Failed to append uptime log for @{bot.name}: {e}")

        return StatusChange(
            bot_id=bot.id,
            name=bot.name,
            url=bot.url,
            added_by=bot.added_by,
            previous_status=bot.bot_status,
            current_status=new_status,
            previous_ping=bot.last_ping,
            probed_at=probed_at,
            status_saved=status_saved,
            history_saved=history_saved,
        )
