"""
============================================================================
KEEP-ALIVE BOT - DATABASE MODELS
============================================================================
SQLAlchemy ORM models: trusted admins, monitored bots and the
append-only uptime log.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, Boolean, DateTime,
    Index, CheckConstraint
)
from sqlalchemy.orm import declarative_base

from config.constants import BotStatus, Defaults
from utils.helpers import utcnow


# ============================================================================
# BASE MODEL CONFIGURATION
# ============================================================================

Base = declarative_base()


# ============================================================================
# ADMIN MODEL
# ============================================================================

class Admin(Base):
    """
    A Telegram user allowed to issue commands and receive alerts.
    """
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_id = Column(BigInteger, unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, telegram_id={self.telegram_id})>"


# ============================================================================
# MONITORED BOT MODEL
# ============================================================================

class MonitoredBot(Base):
    """
    A watched target: a bot's HTTP endpoint probed every `interval_minutes`.

    `status` and `last_ping` are written only by the status updater
    (and seeded at creation).
    """
    __tablename__ = "monitored_bots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    interval_minutes = Column(
        Integer,
        nullable=False,
        default=Defaults.PROBE_INTERVAL_MINUTES
    )

    status = Column(String(16), nullable=False, default=BotStatus.UNKNOWN.value)
    last_ping = Column(DateTime, nullable=True, default=utcnow)

    added_by = Column(BigInteger, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("interval_minutes >= 1", name="check_interval_positive"),
    )

    @property
    def bot_status(self) -> BotStatus:
        """Status as an enum; unrecognized values read as Unknown."""
        try:
            return BotStatus(self.status)
        except ValueError:
            return BotStatus.UNKNOWN

    @property
    def is_online(self) -> bool:
        return self.bot_status is BotStatus.ONLINE

    def __repr__(self) -> str:
        return f"<MonitoredBot(id={self.id}, name={self.name}, status={self.status})>"


# ============================================================================
# UPTIME LOG MODEL
# ============================================================================

class UptimeLog(Base):
    """
    One probe outcome.

    `bot_id` is a plain column rather than a foreign key: rows outlive the
    bot they refer to.
    """
    __tablename__ = "uptime_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bot_id = Column(Integer, nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    result = Column(Boolean, nullable=False)

    __table_args__ = (
        Index("idx_uptime_log_bot_time", "bot_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<UptimeLog(bot_id={self.bot_id}, result={self.result})>"
