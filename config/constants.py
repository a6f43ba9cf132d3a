"""
Constants Module for Keep-Alive Bot

Contains constant values, enumerations, and message templates
used throughout the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Final, List


class BotCommands(str, Enum):
    """
    Bot Commands Enumeration

    Defines all available bot commands with their descriptions.
    """

    START = "start"
    HELP = "help"
    ADDBOT = "addbot"
    REMOVEBOT = "removebot"
    LISTBOTS = "listbots"
    STATS = "stats"
    ADDADMIN = "addadmin"

    @classmethod
    def all(cls) -> List["BotCommands"]:
        """Get all commands in menu order."""
        return [
            cls.START, cls.HELP, cls.ADDBOT, cls.REMOVEBOT,
            cls.LISTBOTS, cls.STATS, cls.ADDADMIN
        ]

    @classmethod
    def get_description(cls, command: "BotCommands") -> str:
        """Get command description."""
        descriptions = {
            cls.START: "Start the bot and see welcome message",
            cls.HELP: "Show available commands",
            cls.ADDBOT: "Add a bot to monitor",
            cls.REMOVEBOT: "Remove a bot from monitoring",
            cls.LISTBOTS: "Show all monitored bots",
            cls.STATS: "View uptime statistics",
            cls.ADDADMIN: "Add a new admin",
        }
        return descriptions.get(command, "No description available")


class BotStatus(str, Enum):
    """Live status of a monitored bot."""
    UNKNOWN = "Unknown"
    ONLINE = "Online"
    OFFLINE = "Offline"

    @property
    def emoji(self) -> str:
        return STATUS_EMOJI[self]


STATUS_EMOJI: Final[Dict[BotStatus, str]] = {
    BotStatus.UNKNOWN: "❓",
    BotStatus.ONLINE: "✅",
    BotStatus.OFFLINE: "❌",
}


class TimeFormats:
    """strftime patterns used in user-facing messages."""

    LIST: Final[str] = "%d %b %H:%M"
    ALERT: Final[str] = "%d %b %Y %H:%M"


class Defaults:
    """Default values shared across modules."""

    TICK_INTERVAL_SECONDS: Final[int] = 60
    PROBE_TIMEOUT_SECONDS: Final[int] = 30
    PROBE_INTERVAL_MINUTES: Final[int] = 5
    ALLOWED_URL_SCHEMES: Final[tuple] = ("http://", "https://")

    # Bounds of the integer columns
    MAX_INTERVAL_MINUTES: Final[int] = 2**31 - 1
    INT64_MIN: Final[int] = -2**63
    INT64_MAX: Final[int] = 2**63 - 1


class MessageTemplates:
    """
    Message Templates for Bot Responses

    Messages are sent as plain text.
    """

    WELCOME: Final[str] = (
        "👋 Welcome to Keep-Alive Bot!\n\n"
        "I help monitor and keep your Telegram bots alive by sending periodic pings.\n\n"
        "Use /help to see available commands."
    )

    HELP: Final[str] = (
        "📖 Available Commands:\n\n"
        "/addbot <username> <url> <interval> - Add bot to monitor\n"
        "   Example: /addbot @mybot https://mybot.onrender.com 5\n\n"
        "/removebot <username> - Remove bot from monitoring\n"
        "   Example: /removebot @mybot\n\n"
        "/listbots - Show all monitored bots\n\n"
        "/stats - View uptime statistics\n\n"
        "/addadmin <user_id> - Add new admin\n\n"
        "/help - Show this help message"
    )

    UNAUTHORIZED_START: Final[str] = "❌ Unauthorized. This bot is for admins only."
    UNAUTHORIZED: Final[str] = "❌ Unauthorized."

    ADDBOT_USAGE: Final[str] = (
        "❌ Usage: /addbot <username> <url> <interval_minutes>\n"
        "Example: /addbot @mybot https://mybot.onrender.com 5"
    )
    REMOVEBOT_USAGE: Final[str] = (
        "❌ Usage: /removebot <username>\n"
        "Example: /removebot @mybot"
    )
    ADDADMIN_USAGE: Final[str] = "❌ Usage: /addadmin <telegram_user_id>"

    INVALID_INTERVAL: Final[str] = "❌ Invalid interval. Must be a positive number."
    INVALID_URL: Final[str] = "❌ Invalid URL. Must start with http:// or https://"
    INVALID_USER_ID: Final[str] = "❌ Invalid user ID."

    BOT_EXISTS: Final[str] = "❌ Bot already exists in monitoring list."
    BOT_ADDED: Final[str] = (
        "✅ Bot @{name} added successfully!\n"
        "URL: {url}\n"
        "Ping interval: {interval} minutes"
    )
    BOT_NOT_FOUND: Final[str] = "❌ Bot not found in monitoring list."
    BOT_REMOVED: Final[str] = "✅ Bot @{name} removed from monitoring."

    NO_BOTS: Final[str] = "📭 No bots are currently being monitored."
    NO_STATS: Final[str] = "📭 No bots to show statistics for."
    LIST_HEADER: Final[str] = "🤖 Monitored Bots:\n\n"
    LIST_ENTRY: Final[str] = (
        "{index}. @{name} {emoji}\n"
        "   URL: {url}\n"
        "   Interval: {interval} min | Last Ping: {last_ping}\n\n"
    )
    STATS_HEADER: Final[str] = "📊 Uptime Statistics:\n\n"
    STATS_ENTRY: Final[str] = (
        "@{name}\n"
        "  Status: {status}\n"
        "  Uptime: {uptime:.2f}%\n"
        "  Total Pings: {total}\n\n"
    )

    ADMIN_EXISTS: Final[str] = "ℹ️ Admin already exists."
    ADMIN_ADDED: Final[str] = "✅ Admin {user_id} added successfully!"

    ALERT_OFFLINE: Final[str] = (
        "⚠️ Alert: Bot @{name} is OFFLINE!\n\n"
        "URL: {url}\n"
        "Last ping: {last_ping}"
    )

    TEMPORARY_ERROR: Final[str] = "⚠️ Something went wrong. Please try again later."

    HEALTH_ROOT: Final[str] = "🤖 Keep-Alive Bot is running!\nTime: {time}"
