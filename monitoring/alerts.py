"""
============================================================================
KEEP-ALIVE BOT - ALERT DISPATCHER
============================================================================
Tells a bot's owner when a probe of that bot failed.

Policy
------
By default every failed probe alerts, so a bot that stays down re-alerts
its owner on each due cycle. With ``alert_on_every_failure=False`` only
the probe that moves a bot into Offline alerts.

Owner resolution
----------------
The owner is the Telegram ID stored in ``added_by``. It must still be a
known admin; an unknown owner is skipped with a warning.

Delivery is one-shot and best-effort: a failed send is logged and
dropped. Status and history are already persisted by then.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Optional, Protocol

from config.constants import MessageTemplates, TimeFormats
from database.repositories import AdminRepository
from monitoring.status import StatusChange
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("AlertDispatcher")


class NotificationChannel(Protocol):
    """Anything that can deliver a text to a Telegram identity."""

    async def send(self, identity: int, text: str) -> None:
        ...


def format_offline_alert(change: StatusChange) -> str:
    """Build the owner-facing alert text for a failed probe."""
    return MessageTemplates.ALERT_OFFLINE.format(
        name=change.name,
        url=change.url,
        last_ping=TimeHelper.format_datetime(change.previous_ping, TimeFormats.ALERT),
    )


# ============================================================================
# ALERT DISPATCHER
# ============================================================================

class AlertDispatcher:
    """
    Decides whether a StatusChange warrants an alert and delivers it.

    Parameters
    ----------
    admin_repo : AdminRepository
        Used to resolve the owner identity.
    channel : NotificationChannel
        Outbound delivery (TelegramNotifier in production).
    alert_on_every_failure : bool
        Level-triggered (True) or edge-triggered (False) alerting.
    """

    def __init__(
        self,
        admin_repo: AdminRepository,
        channel: NotificationChannel,
        alert_on_every_failure: bool = True,
    ):
        self.admin_repo = admin_repo
        self.channel = channel
        self.alert_on_every_failure = alert_on_every_failure

        self._sent = 0
        self._failed = 0
        self._skipped = 0

        mode = "every failure" if alert_on_every_failure else "offline transitions"
        logger.info(f"AlertDispatcher created, alerting on {mode}")

    def should_alert(self, change: StatusChange) -> bool:
        if change.success:
            return False
        if self.alert_on_every_failure:
            return True
        return change.went_offline

    async def dispatch(self, change: StatusChange) -> bool:
        """
        Alert the owner of *change* if policy says so.

        Returns
        -------
        bool
            True if a notification was handed to the channel successfully.
        """
        if not self.should_alert(change):
            return False

        owner = await self._resolve_owner(change)
        if owner is None:
            self._skipped += 1
            return False

        try:
            await self.channel.send(owner, format_offline_alert(change))
        except Exception as e:
            self._failed += 1
            logger.error(f"[AlertDispatcher] Failed to alert {owner} about @{change.name}: {e}")
            return False

        self._sent += 1
        logger.info(f"[AlertDispatcher] ✓ Offline alert for @{change.name} sent to {owner}")
        return True

    async def _resolve_owner(self, change: StatusChange) -> Optional[int]:
        try:
            admin = await self.admin_repo.get_by_telegram_id(change.added_by)
        except Exception as e:
            logger.error(f"[AlertDispatcher] Owner lookup failed for @{change.name}: {e}")
            return None

        if admin is None:
            logger.warning(
                f"[AlertDispatcher] Owner {change.added_by} of @{change.name} "
                f"is not a known admin, alert skipped"
            )
            return None

        return admin.telegram_id

    def get_stats(self) -> dict:
        """Counters for diagnostics."""
        return {
            "sent": self._sent,
            "failed": self._failed,
            "skipped": self._skipped,
        }
