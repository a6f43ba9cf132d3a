"""
============================================================================
KEEP-ALIVE BOT - MAIN APPLICATION
============================================================================
Wires every layer of the bot together.

Startup Order
-------------
1.  Load settings & configure logging
2.  Initialize DatabaseManager (create tables if needed)      (fatal)
3.  Load the admin cache (configured admins are persisted)
4.  Create aiogram Bot + Dispatcher, register handlers        (fatal)
5.  Wire Prober → StatusUpdater → AlertDispatcher → Scheduler
6.  Start Scheduler
7.  Start HealthServer (aiohttp, non-blocking)
8.  Start aiogram polling (this blocks until shutdown)

Shutdown Order (reverse)
-------------------------
On SIGINT or SIGTERM:
    stop polling → stop health server → stop scheduler (in-flight probes
    are cancelled) → close bot session → close DB → exit

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import signal
import sys
from typing import Optional

from pydantic import ValidationError

from bot import AdminCache, BotManager
from config.settings import Settings, get_settings
from database import AdminRepository, BotRepository, DatabaseManager, UptimeLogRepository
from exceptions import ConfigurationError, KeepAliveBotException
from monitoring import AlertDispatcher, HealthServer, HTTPProber, Scheduler, StatusUpdater
from utils.logger import get_logger, setup_logging


logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class KeepAliveBotApplication:
    """
    Top-level application orchestrator.

    Owns every subsystem and is the single place that knows the startup /
    shutdown order.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

        # --- subsystems (populated during startup) ---
        self.db_manager: Optional[DatabaseManager] = None
        self.bot_repo: Optional[BotRepository] = None
        self.log_repo: Optional[UptimeLogRepository] = None
        self.admin_repo: Optional[AdminRepository] = None
        self.admin_cache = AdminCache()
        self.bot_manager: Optional[BotManager] = None
        self.scheduler: Optional[Scheduler] = None
        self.health_server: Optional[HealthServer] = None

        self._is_running = False
        self._shutdown_started = False

    # ==================================================================
    # PHASE 1: DATABASE
    # ==================================================================

    async def _init_database(self) -> None:
        logger.info("── Phase 1: Database ─────────────────────────────")
        self.db_manager = DatabaseManager(self.settings.database)
        await self.db_manager.initialize()

        self.bot_repo = BotRepository(self.db_manager)
        self.log_repo = UptimeLogRepository(self.db_manager)
        self.admin_repo = AdminRepository(self.db_manager)
        logger.info("  ✓ Database ready")

    # ==================================================================
    # PHASE 2: ADMINS
    # ==================================================================

    async def _init_admins(self) -> None:
        logger.info("── Phase 2: Admins ───────────────────────────────")
        count = await self.admin_cache.load(self.admin_repo, self.settings.bot.admin_ids)
        if count == 0:
            logger.warning("  ⚠ No admins configured, every command will be rejected")

    # ==================================================================
    # PHASE 3: BOT (aiogram)
    # ==================================================================

    async def _init_bot(self) -> None:
        logger.info("── Phase 3: Telegram Bot ─────────────────────────")
        self.bot_manager = BotManager(self.settings.bot, self.admin_cache)
        await self.bot_manager.initialize(
            bot_repo=self.bot_repo,
            log_repo=self.log_repo,
            admin_repo=self.admin_repo,
        )
        logger.info("  ✓ Bot initialized, handlers registered")

    # ==================================================================
    # PHASE 4: MONITORING
    # ==================================================================

    def _init_monitoring(self) -> None:
        logger.info("── Phase 4: Monitoring ───────────────────────────")
        monitoring = self.settings.monitoring

        prober = HTTPProber(
            timeout=monitoring.probe_timeout,
            user_agent=monitoring.user_agent,
        )
        updater = StatusUpdater(self.bot_repo, self.log_repo)
        dispatcher = AlertDispatcher(
            self.admin_repo,
            self.bot_manager.notifier,
            alert_on_every_failure=monitoring.alert_on_every_failure,
        )
        self.scheduler = Scheduler(
            self.bot_repo,
            prober,
            updater,
            dispatcher,
            tick_interval=monitoring.tick_interval,
            max_concurrent_probes=monitoring.max_concurrent_probes,
        )
        self.health_server = HealthServer(self.settings.web_host, self.settings.port)
        logger.info("  ✓ Prober, StatusUpdater, AlertDispatcher, Scheduler created")

    # ==================================================================
    # FULL STARTUP SEQUENCE
    # ==================================================================

    async def startup(self) -> None:
        """
        Execute the complete startup sequence.

        Raises:
            KeepAliveBotException: If a critical phase fails
        """
        logger.info("=" * 74)
        logger.info(f"  STARTING {self.settings.app_name} v{self.settings.app_version} …")
        logger.info("=" * 74)

        await self._init_database()
        await self._init_admins()
        await self._init_bot()
        self._init_monitoring()

        logger.info("── Starting background services ───────────────────")
        await self.scheduler.start()
        await self.health_server.start()

        self._is_running = True

        logger.info("=" * 74)
        logger.info("  ✓ ALL SYSTEMS OPERATIONAL")
        logger.info(f"  Health endpoint: http://{self.settings.web_host}:{self.settings.port}/health")
        logger.info(
            f"  Monitoring: tick {self.settings.monitoring.tick_interval:.0f}s, "
            f"probe timeout {self.settings.monitoring.probe_timeout:.0f}s"
        )
        logger.info("=" * 74)

    # ==================================================================
    # SHUTDOWN SEQUENCE
    # ==================================================================

    async def shutdown(self) -> None:
        """
        Graceful shutdown in reverse order.
        Each step is wrapped in try/except so a failure in one subsystem
        doesn't prevent the others from cleaning up.
        """
        if self._shutdown_started:
            return
        self._shutdown_started = True
        self._is_running = False

        logger.info("=" * 74)
        logger.info("  SHUTTING DOWN …")
        logger.info("=" * 74)

        if self.bot_manager:
            try:
                await self.bot_manager.stop_polling()
                logger.info("  ✓ Bot polling stopped")
            except Exception as e:
                logger.error(f"  ✗ Bot stop error: {e}")

        if self.health_server:
            try:
                await self.health_server.stop()
            except Exception as e:
                logger.error(f"  ✗ HealthServer stop error: {e}")

        if self.scheduler:
            try:
                await self.scheduler.stop()
            except Exception as e:
                logger.error(f"  ✗ Scheduler stop error: {e}")

        if self.bot_manager:
            try:
                await self.bot_manager.close()
            except Exception as e:
                logger.error(f"  ✗ Bot session close error: {e}")

        if self.db_manager:
            try:
                await self.db_manager.close()
            except Exception as e:
                logger.error(f"  ✗ Database close error: {e}")

        logger.info("=" * 74)
        logger.info("  ✓ SHUTDOWN COMPLETE")
        logger.info("=" * 74)

    # ==================================================================
    # RUN
    # ==================================================================

    async def run(self) -> None:
        """Start aiogram polling, which blocks until the bot is stopped."""
        await self.bot_manager.start_polling()


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(app: KeepAliveBotApplication) -> None:
    """
    Stop polling on SIGTERM / SIGINT; run() then returns and main()
    finishes the shutdown.
    """
    loop = asyncio.get_running_loop()

    def _handle_signal(sig: signal.Signals) -> None:
        logger.info(f"  ⚡ {sig.name} received, initiating graceful shutdown…")
        if app.bot_manager:
            asyncio.ensure_future(app.bot_manager.stop_polling())

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal, sig)
        except (NotImplementedError, RuntimeError):
            # Not supported on Windows, fall back to KeyboardInterrupt
            pass


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def load_settings() -> Settings:
    """
    Read settings from the environment.

    Raises:
        ConfigurationError: If a required value is missing or malformed
    """
    try:
        return get_settings()
    except ValidationError as e:
        missing = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"Invalid configuration: {missing}", cause=e)


async def main() -> int:
    """
    Async main: creates the app, starts it, and runs until shutdown.

    Returns:
        Process exit code
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.critical(f"✗ {e.message}")
        logger.critical(str(e.cause))
        return 1

    setup_logging(settings.logging)
    logger.debug(f"Configuration: {settings.to_dict()}")

    app = KeepAliveBotApplication(settings)
    _install_signal_handlers(app)

    try:
        await app.startup()
    except KeepAliveBotException as e:
        logger.critical(f"  ✗ Startup failed: {e.log_format()}")
        await app.shutdown()
        return 1

    try:
        await app.run()
    except Exception as e:
        logger.exception(f"  ✗ Unhandled error in run: {e}")
        return 1
    finally:
        await app.shutdown()

    return 0


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass
