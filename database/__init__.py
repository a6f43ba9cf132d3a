"""
Database Package for Keep-Alive Bot

Provides database connectivity, models, and repositories
for data persistence using SQLAlchemy with async support.
"""

from database.manager import DatabaseManager

from database.models import (
    Base,
    Admin,
    MonitoredBot,
    UptimeLog
)

from database.repositories import (
    BaseRepository,
    BotRepository,
    UptimeLogRepository,
    AdminRepository
)

__all__ = [
    # Manager
    "DatabaseManager",

    # Models
    "Base",
    "Admin",
    "MonitoredBot",
    "UptimeLog",

    # Repositories
    "BaseRepository",
    "BotRepository",
    "UptimeLogRepository",
    "AdminRepository"
]
