from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramNetworkError
from aiogram.methods import SendMessage

from bot.notifier import TelegramNotifier
from config.constants import BotStatus
from exceptions import NotificationError
from monitoring.alerts import AlertDispatcher, format_offline_alert
from monitoring.status import StatusChange


OWNER = 42


def change(previous: BotStatus, current: BotStatus, added_by: int = OWNER) -> StatusChange:
    return StatusChange(
        bot_id=1,
        name="mybot",
        url="https://mybot.example.com",
        added_by=added_by,
        previous_status=previous,
        current_status=current,
        previous_ping=datetime(2024, 1, 2, 15, 4),
        probed_at=datetime(2024, 1, 2, 15, 9),
    )


def known_owner_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_telegram_id = AsyncMock(return_value=SimpleNamespace(telegram_id=OWNER))
    return repo


def test_alert_text() -> None:
    assert format_offline_alert(change(BotStatus.ONLINE, BotStatus.OFFLINE)) == (
        "⚠️ Alert: Bot @mybot is OFFLINE!\n\n"
        "URL: https://mybot.example.com\n"
        "Last ping: 02 Jan 2024 15:04"
    )


def test_every_failure_policy() -> None:
    dispatcher = AlertDispatcher(MagicMock(), MagicMock())

    assert dispatcher.should_alert(change(BotStatus.ONLINE, BotStatus.OFFLINE)) is True
    assert dispatcher.should_alert(change(BotStatus.OFFLINE, BotStatus.OFFLINE)) is True
    assert dispatcher.should_alert(change(BotStatus.OFFLINE, BotStatus.ONLINE)) is False


def test_transition_only_policy() -> None:
    dispatcher = AlertDispatcher(MagicMock(), MagicMock(), alert_on_every_failure=False)

    assert dispatcher.should_alert(change(BotStatus.UNKNOWN, BotStatus.OFFLINE)) is True
    assert dispatcher.should_alert(change(BotStatus.ONLINE, BotStatus.OFFLINE)) is True
    assert dispatcher.should_alert(change(BotStatus.OFFLINE, BotStatus.OFFLINE)) is False


@pytest.mark.asyncio
async def test_dispatch_sends_to_owner() -> None:
    channel = SimpleNamespace(send=AsyncMock())
    dispatcher = AlertDispatcher(known_owner_repo(), channel)

    assert await dispatcher.dispatch(change(BotStatus.ONLINE, BotStatus.OFFLINE)) is True

    channel.send.assert_awaited_once()
    assert channel.send.await_args.args[0] == OWNER
    assert dispatcher.get_stats()["sent"] == 1


@pytest.mark.asyncio
async def test_success_does_not_alert() -> None:
    channel = SimpleNamespace(send=AsyncMock())
    dispatcher = AlertDispatcher(known_owner_repo(), channel)

    assert await dispatcher.dispatch(change(BotStatus.OFFLINE, BotStatus.ONLINE)) is False
    channel.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_owner_is_skipped(admin_repo) -> None:
    channel = SimpleNamespace(send=AsyncMock())
    dispatcher = AlertDispatcher(admin_repo, channel)

    assert await dispatcher.dispatch(change(BotStatus.ONLINE, BotStatus.OFFLINE, added_by=777)) is False

    channel.send.assert_not_awaited()
    assert dispatcher.get_stats()["skipped"] == 1


@pytest.mark.asyncio
async def test_notification_failure_is_swallowed() -> None:
    channel = SimpleNamespace(send=AsyncMock(side_effect=NotificationError(recipient=OWNER)))
    dispatcher = AlertDispatcher(known_owner_repo(), channel)

    assert await dispatcher.dispatch(change(BotStatus.ONLINE, BotStatus.OFFLINE)) is False
    assert dispatcher.get_stats()["failed"] == 1


@pytest.mark.asyncio
async def test_owner_lookup_failure_is_swallowed() -> None:
    repo = MagicMock()
    repo.get_by_telegram_id = AsyncMock(side_effect=RuntimeError("db gone"))
    channel = SimpleNamespace(send=AsyncMock())

    assert await AlertDispatcher(repo, channel).dispatch(change(BotStatus.ONLINE, BotStatus.OFFLINE)) is False
    channel.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_telegram_notifier_sends_plain_text() -> None:
    bot = MagicMock()
    bot.send_message = AsyncMock()

    await TelegramNotifier(bot).send(OWNER, "hello")

    bot.send_message.assert_awaited_once_with(chat_id=OWNER, text="hello")


@pytest.mark.asyncio
async def test_telegram_notifier_wraps_api_errors() -> None:
    bot = MagicMock()
    bot.send_message = AsyncMock(
        side_effect=TelegramNetworkError(method=SendMessage(chat_id=OWNER, text="x"), message="down")
    )

    with pytest.raises(NotificationError) as info:
        await TelegramNotifier(bot).send(OWNER, "hello")

    assert info.value.details["recipient"] == OWNER
