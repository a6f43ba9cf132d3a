from __future__ import annotations

import pytest
import pytest_asyncio

from config.settings import DatabaseSettings
from database import AdminRepository, BotRepository, DatabaseManager, UptimeLogRepository


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Keep a developer's .env or exported variables out of the tests
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "BOT_TOKEN", "ADMIN_IDS", "BOT_ADMIN_IDS", "PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    manager = DatabaseManager(DatabaseSettings(url=f"sqlite:///{tmp_path / 'keepalive.db'}"))
    await manager.initialize()
    yield manager
    await manager.close()


@pytest.fixture
def bot_repo(db_manager) -> BotRepository:
    return BotRepository(db_manager)


@pytest.fixture
def log_repo(db_manager) -> UptimeLogRepository:
    return UptimeLogRepository(db_manager)


@pytest.fixture
def admin_repo(db_manager) -> AdminRepository:
    return AdminRepository(db_manager)
