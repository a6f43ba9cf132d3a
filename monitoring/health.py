"""
============================================================================
KEEP-ALIVE BOT - LIVENESS ENDPOINT
============================================================================
A small aiohttp server so the hosting platform sees the process as alive.

    GET /        → 200 "🤖 Keep-Alive Bot is running!\\nTime: <RFC 3339>"
    GET /health  → 200 "OK"

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import Optional

from aiohttp import web

from config.constants import MessageTemplates
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("HealthServer")


class HealthServer:
    """
    aiohttp server exposing the liveness routes.

    Attributes
    ----------
    app : aiohttp.web.Application
    _runner : aiohttp.web.AppRunner
    _site : aiohttp.web.TCPSite
    """

    def __init__(self, host: str = "0.0.0.0", port: int = 8080):
        self._host = host
        self._port = port
        self.app = web.Application()
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

        self.app.router.add_get("/", self._handle_root)
        self.app.router.add_get("/health", self._handle_health)

    @property
    def port(self) -> int:
        return self._port

    async def start(self) -> None:
        """Bind and start serving."""
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        logger.info(f"✓ HealthServer listening on {self._host}:{self._port}")

    async def stop(self) -> None:
        """Gracefully shut down the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
        logger.info("✓ HealthServer stopped")

    # ------------------------------------------------------------------
    # ROUTE HANDLERS
    # ------------------------------------------------------------------

    async def _handle_root(self, request: web.Request) -> web.Response:
        text = MessageTemplates.HEALTH_ROOT.format(time=TimeHelper.rfc3339_now())
        return web.Response(text=text, status=200)

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.Response(text="OK", status=200)
