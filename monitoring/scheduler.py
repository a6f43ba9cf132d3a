"""
============================================================================
KEEP-ALIVE BOT - PROBE SCHEDULER
============================================================================
Wakes once per tick (60 s by default), reads every monitored bot and
launches a probe for each bot that is due.

    due  ⇔  now - last_ping >= interval_minutes

Each due bot gets its own fire-and-forget asyncio task running
probe → status update → alert. The tick never waits for those tasks.
Bots are dispatched in store order. A bot whose previous probe is still
in flight is skipped until that probe finishes.

A store failure while listing bots is logged and the tick is skipped; the
next tick retries.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List, Set

from config.constants import Defaults
from database.models import MonitoredBot
from database.repositories import BotRepository
from monitoring.alerts import AlertDispatcher
from monitoring.prober import HTTPProber
from monitoring.status import StatusUpdater
from utils.helpers import TimeHelper, utcnow
from utils.logger import get_logger


logger = get_logger("Scheduler")


def is_due(bot: MonitoredBot, now: datetime) -> bool:
    """
    True when at least `interval_minutes` have passed since `last_ping`.

    A bot that was never probed is due.
    """
    if bot.last_ping is None:
        return True

    elapsed = TimeHelper.to_naive_utc(now) - TimeHelper.to_naive_utc(bot.last_ping)
    return elapsed >= timedelta(minutes=bot.interval_minutes)


# ============================================================================
# SCHEDULER
# ============================================================================

class Scheduler:
    """
    Asyncio-based due-check loop.

    Usage
    -----
        scheduler = Scheduler(bot_repo, prober, updater, dispatcher)
        await scheduler.start()
        # ... later ...
        await scheduler.stop()

    Parameters
    ----------
    tick_interval : float
        Seconds between due-check passes.
    max_concurrent_probes : int
        0 means unbounded; otherwise probes beyond this many wait on a
        semaphore.
    """

    def __init__(
        self,
        bot_repo: BotRepository,
        prober: HTTPProber,
        updater: StatusUpdater,
        dispatcher: AlertDispatcher,
        tick_interval: float = Defaults.TICK_INTERVAL_SECONDS,
        max_concurrent_probes: int = 0,
    ):
        self.bot_repo = bot_repo
        self.prober = prober
        self.updater = updater
        self.dispatcher = dispatcher

        self._tick_interval = tick_interval
        self._semaphore: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_concurrent_probes) if max_concurrent_probes > 0 else None
        )

        self._running = False
        self._loop_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()
        self._in_flight: Set[int] = set()

        self._tick_count = 0
        self._skipped_ticks = 0
        self._dispatched = 0

        logger.info(
            f"Scheduler created, tick={tick_interval}s, "
            f"max_concurrent_probes={max_concurrent_probes or 'unbounded'}"
        )

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the tick loop."""
        if self._running:
            logger.warning("Scheduler is already running")
            return
        self._running = True
        self._loop_task = asyncio.create_task(self._main_loop())
        logger.info("✓ Scheduler started")

    async def stop(self) -> None:
        """Stop the tick loop and cancel in-flight probes."""
        self._running = False
        if self._loop_task:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info(f"[Scheduler] Cancelled {len(pending)} in-flight probes")

        logger.info("✓ Scheduler stopped")

    # ------------------------------------------------------------------
    # MAIN LOOP
    # ------------------------------------------------------------------

    async def _main_loop(self) -> None:
        logger.info("[Scheduler] Main loop started")
        while self._running:
            try:
                await asyncio.sleep(self._tick_interval)
            except asyncio.CancelledError:
                break
            await self.run_tick()
        logger.info("[Scheduler] Main loop exited")

    async def run_tick(self, now: Optional[datetime] = None) -> List[MonitoredBot]:
        """
        One due-check pass.

        Returns
        -------
        list of MonitoredBot
            The bots a probe was dispatched for, in store order.
        """
        self._tick_count += 1
        now = now or utcnow()

        try:
            bots = await self.bot_repo.list_all()
        except Exception as e:
            self._skipped_ticks += 1
            logger.error(f"[Scheduler] Failed to read monitored bots, skipping tick: {e}")
            return []

        dispatched: List[MonitoredBot] = []
        for bot in bots:
            if not is_due(bot, now):
                continue
            if bot.id in self._in_flight:
                logger.debug(f"[Scheduler] @{bot.name} still being probed, skipping")
                continue
            self._dispatch(bot)
            dispatched.append(bot)

        logger.debug(
            f"[Scheduler] Tick #{self._tick_count}: {len(bots)} bots, "
            f"{len(dispatched)} due"
        )
        return dispatched

    def _dispatch(self, bot: MonitoredBot) -> None:
        self._in_flight.add(bot.id)
        self._dispatched += 1
        task = asyncio.create_task(self._probe_and_update(bot), name=f"probe:{bot.name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ------------------------------------------------------------------
    # PROBE UNIT OF WORK
    # ------------------------------------------------------------------

    async def _probe_and_update(self, bot: MonitoredBot) -> None:
        try:
            if self._semaphore is not None:
                async with self._semaphore:
                    result = await self.prober.probe(bot.url)
            else:
                result = await self.prober.probe(bot.url)

            change = await self.updater.apply(bot, result)
            await self.dispatcher.dispatch(change)

        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[Scheduler] Probe of @{bot.name} failed unexpectedly: {e}")
        finally:
            self._in_flight.discard(bot.id)

    async def drain(self) -> None:
        """Wait for every dispatched probe to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        return {
            "running": self._running,
            "ticks": self._tick_count,
            "skipped_ticks": self._skipped_ticks,
            "dispatched": self._dispatched,
            "in_flight": len(self._in_flight),
        }
