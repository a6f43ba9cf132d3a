"""
============================================================================
KEEP-ALIVE BOT - BOT HANDLERS
============================================================================
Admin command handlers. Authorization is enforced by AdminMiddleware
before any handler here runs.

Shared objects (repositories, admin cache) are injected through the
dispatcher's workflow_data and received as keyword arguments.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from typing import List, Sequence, Tuple

from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from bot.auth import AdminCache
from config.constants import BotCommands, MessageTemplates, TimeFormats
from database import AdminRepository, BotRepository, MonitoredBot, UptimeLogRepository
from exceptions import KeepAliveBotException, UsageError, ValidationException
from utils.helpers import TimeHelper
from utils.logger import get_logger
from utils.validators import BotNameValidator, DataValidator, URLValidator


logger = get_logger(__name__)

# Create router for handlers
router = Router(name="commands")


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def split_args(command: CommandObject, required: int, usage: str) -> List[str]:
    """
    Whitespace-split command arguments; extra arguments are ignored.

    Raises:
        UsageError: If fewer than `required` arguments were given
    """
    args = (command.args or "").split()
    if len(args) < required:
        raise UsageError(usage)
    return args


def parse_addbot_args(command: CommandObject) -> Tuple[str, str, int]:
    """(name, url, interval) from /addbot; interval is checked before URL."""
    name, url, raw_interval = split_args(command, 3, MessageTemplates.ADDBOT_USAGE)[:3]
    interval = DataValidator.parse_interval(raw_interval)
    url = URLValidator.validate(url)
    return BotNameValidator.normalize(name), url, interval


# ============================================================================
# FORMATTING
# ============================================================================

def format_bot_list(bots: Sequence[MonitoredBot]) -> str:
    if not bots:
        return MessageTemplates.NO_BOTS

    text = MessageTemplates.LIST_HEADER
    for index, bot in enumerate(bots, 1):
        text += MessageTemplates.LIST_ENTRY.format(
            index=index,
            name=bot.name,
            emoji=bot.bot_status.emoji,
            url=bot.url,
            interval=bot.interval_minutes,
            last_ping=TimeHelper.format_datetime(bot.last_ping, TimeFormats.LIST),
        )
    return text


def format_stats(rows: Sequence[Tuple[MonitoredBot, float, int]]) -> str:
    """
    Render /stats.

    Args:
        rows: (bot, uptime percentage, total pings) per bot
    """
    if not rows:
        return MessageTemplates.NO_STATS

    text = MessageTemplates.STATS_HEADER
    for bot, uptime, total in rows:
        text += MessageTemplates.STATS_ENTRY.format(
            name=bot.name,
            status=bot.status,
            uptime=uptime,
            total=total,
        )
    return text


async def reply_error(message: Message, error: Exception, command: BotCommands) -> None:
    """Turn an exception raised by a handler into an operator-facing reply."""
    if isinstance(error, ValidationException):
        await message.answer(error.user_message())
        return

    if isinstance(error, KeepAliveBotException):
        logger.error(f"/{command.value} failed: {error.log_format()}")
    else:
        logger.error(f"/{command.value} failed: {error!r}")
    await message.answer(MessageTemplates.TEMPORARY_ERROR)


# ============================================================================
# COMMAND HANDLERS
# ============================================================================

@router.message(CommandStart())
async def cmd_start(message: Message):
    """Handle /start command."""
    await message.answer(MessageTemplates.WELCOME)
    logger.info(f"User {message.from_user.id} started bot")


@router.message(Command(BotCommands.HELP.value))
async def cmd_help(message: Message):
    """Handle /help command."""
    await message.answer(MessageTemplates.HELP)


@router.message(Command(BotCommands.ADDBOT.value))
async def cmd_addbot(message: Message, command: CommandObject, bot_repo: BotRepository):
    """Handle /addbot <username> <url> <interval_minutes>."""
    try:
        name, url, interval = parse_addbot_args(command)

        bot = await bot_repo.insert_if_absent(
            name=name,
            url=url,
            interval_minutes=interval,
            added_by=message.from_user.id,
        )
        if bot is None:
            await message.answer(MessageTemplates.BOT_EXISTS)
            return

        await message.answer(
            MessageTemplates.BOT_ADDED.format(name=name, url=url, interval=interval)
        )
        logger.info(f"User {message.from_user.id} added @{name}")

    except Exception as e:
        await reply_error(message, e, BotCommands.ADDBOT)


@router.message(Command(BotCommands.REMOVEBOT.value))
async def cmd_removebot(message: Message, command: CommandObject, bot_repo: BotRepository):
    """Handle /removebot <username>."""
    try:
        raw_name = split_args(command, 1, MessageTemplates.REMOVEBOT_USAGE)[0]
        name = BotNameValidator.normalize(raw_name)

        if not await bot_repo.delete_by_name(name):
            await message.answer(MessageTemplates.BOT_NOT_FOUND)
            return

        await message.answer(MessageTemplates.BOT_REMOVED.format(name=name))

    except Exception as e:
        await reply_error(message, e, BotCommands.REMOVEBOT)


@router.message(Command(BotCommands.LISTBOTS.value))
async def cmd_listbots(message: Message, bot_repo: BotRepository):
    """Handle /listbots command."""
    try:
        bots = await bot_repo.list_all()
        await message.answer(format_bot_list(bots))
    except Exception as e:
        await reply_error(message, e, BotCommands.LISTBOTS)


@router.message(Command(BotCommands.STATS.value))
async def cmd_stats(
    message: Message,
    bot_repo: BotRepository,
    log_repo: UptimeLogRepository
):
    """Handle /stats command."""
    try:
        bots = await bot_repo.list_all()
        rows = []
        for bot in bots:
            total = await log_repo.count_total(bot.id)
            uptime = await log_repo.uptime_percentage(bot.id)
            rows.append((bot, uptime, total))

        await message.answer(format_stats(rows))
    except Exception as e:
        await reply_error(message, e, BotCommands.STATS)


@router.message(Command(BotCommands.ADDADMIN.value))
async def cmd_addadmin(
    message: Message,
    command: CommandObject,
    admin_repo: AdminRepository,
    admin_cache: AdminCache
):
    """Handle /addadmin <telegram_user_id>."""
    try:
        raw_id = split_args(command, 1, MessageTemplates.ADDADMIN_USAGE)[0]
        new_admin_id = DataValidator.parse_telegram_id(raw_id)

        if not await admin_repo.add_if_absent(new_admin_id):
            await message.answer(MessageTemplates.ADMIN_EXISTS)
            return

        admin_cache.add(new_admin_id)
        await message.answer(MessageTemplates.ADMIN_ADDED.format(user_id=new_admin_id))
        logger.info(f"User {message.from_user.id} added admin {new_admin_id}")

    except Exception as e:
        await reply_error(message, e, BotCommands.ADDADMIN)
