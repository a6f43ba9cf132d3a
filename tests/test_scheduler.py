from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from config.constants import BotStatus
from exceptions import DatabaseQueryError
from helpers import fake_prober, minutes_ago
from monitoring.alerts import AlertDispatcher
from monitoring.prober import HTTPProber, ProbeResult
from monitoring.scheduler import Scheduler, is_due
from monitoring.status import StatusUpdater
from utils.helpers import utcnow


OWNER = 42


def target(interval: int, last_ping):
    return SimpleNamespace(id=1, name="t", interval_minutes=interval, last_ping=last_ping)


def test_six_minutes_with_five_minute_interval_is_due() -> None:
    now = utcnow()
    assert is_due(target(5, now - timedelta(minutes=6)), now) is True


def test_four_minutes_with_five_minute_interval_is_not_due() -> None:
    now = utcnow()
    assert is_due(target(5, now - timedelta(minutes=4)), now) is False


def test_exactly_interval_is_due() -> None:
    now = utcnow()
    assert is_due(target(5, now - timedelta(minutes=5)), now) is True
    assert is_due(target(5, now - timedelta(minutes=5) + timedelta(seconds=1)), now) is False


def test_never_probed_is_due() -> None:
    assert is_due(target(5, None), utcnow()) is True


def test_aware_now_is_normalized() -> None:
    last = datetime(2024, 5, 1, 12, 0)
    now = datetime(2024, 5, 1, 14, 6, tzinfo=timezone(timedelta(hours=2)))
    assert is_due(target(5, last), now) is True


def build_scheduler(bot_repo, log_repo, admin_repo, prober, channel=None) -> Scheduler:
    channel = channel or SimpleNamespace(send=AsyncMock())
    return Scheduler(
        bot_repo,
        prober,
        StatusUpdater(bot_repo, log_repo),
        AlertDispatcher(admin_repo, channel),
        tick_interval=60,
    )


@pytest.mark.asyncio
async def test_tick_dispatches_only_due_bots(bot_repo, log_repo, admin_repo) -> None:
    await bot_repo.insert_if_absent("due", "https://due.example.com", 5, added_by=OWNER, now=minutes_ago(6))
    await bot_repo.insert_if_absent("fresh", "https://fresh.example.com", 5, added_by=OWNER, now=minutes_ago(4))
    prober = fake_prober(success=True)
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober)

    dispatched = await scheduler.run_tick()
    await scheduler.drain()

    assert [b.name for b in dispatched] == ["due"]
    prober.probe.assert_awaited_once_with("https://due.example.com")
    assert (await bot_repo.get_by_name("due")).bot_status is BotStatus.ONLINE
    assert (await bot_repo.get_by_name("fresh")).bot_status is BotStatus.UNKNOWN


@pytest.mark.asyncio
async def test_second_tick_without_elapsed_time_does_not_reprobe(bot_repo, log_repo, admin_repo) -> None:
    await bot_repo.insert_if_absent("mybot", "https://mybot.example.com", 5, added_by=OWNER, now=minutes_ago(10))
    prober = fake_prober(success=True)
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober)

    assert len(await scheduler.run_tick()) == 1
    await scheduler.drain()
    assert await scheduler.run_tick() == []
    await scheduler.drain()

    assert prober.probe.await_count == 1


@pytest.mark.asyncio
async def test_store_failure_skips_tick() -> None:
    bot_repo = MagicMock()
    bot_repo.list_all = AsyncMock(side_effect=DatabaseQueryError("database is locked"))
    prober = fake_prober()
    scheduler = Scheduler(bot_repo, prober, MagicMock(), MagicMock())

    assert await scheduler.run_tick() == []
    assert await scheduler.run_tick() == []

    prober.probe.assert_not_awaited()
    assert scheduler.get_stats()["skipped_ticks"] == 2


@pytest.mark.asyncio
async def test_503_marks_offline_logs_failure_and_alerts_owner(bot_repo, log_repo, admin_repo) -> None:
    await admin_repo.add_if_absent(OWNER)
    await bot_repo.insert_if_absent("mybot", "https://mybot.example.com", 5, added_by=OWNER, now=minutes_ago(6))
    channel = SimpleNamespace(send=AsyncMock())
    prober = HTTPProber(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober, channel)

    await scheduler.run_tick()
    await scheduler.drain()

    bot = await bot_repo.get_by_name("mybot")
    assert bot.bot_status is BotStatus.OFFLINE
    assert await log_repo.count_total(bot.id) == 1
    assert await log_repo.count_successful(bot.id) == 0
    channel.send.assert_awaited_once()
    identity, text = channel.send.await_args.args
    assert identity == OWNER
    assert "@mybot is OFFLINE!" in text
    assert "URL: https://mybot.example.com" in text


@pytest.mark.asyncio
async def test_200_marks_online_without_alert(bot_repo, log_repo, admin_repo) -> None:
    await admin_repo.add_if_absent(OWNER)
    await bot_repo.insert_if_absent("mybot", "https://mybot.example.com", 5, added_by=OWNER, now=minutes_ago(6))
    channel = SimpleNamespace(send=AsyncMock())
    prober = HTTPProber(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober, channel)

    await scheduler.run_tick()
    await scheduler.drain()

    bot = await bot_repo.get_by_name("mybot")
    assert bot.bot_status is BotStatus.ONLINE
    assert await log_repo.count_successful(bot.id) == 1
    channel.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_persistently_offline_bot_alerts_every_cycle(bot_repo, log_repo, admin_repo) -> None:
    await admin_repo.add_if_absent(OWNER)
    await bot_repo.insert_if_absent("mybot", "https://mybot.example.com", 1, added_by=OWNER, now=minutes_ago(2))
    channel = SimpleNamespace(send=AsyncMock())
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, fake_prober(success=False, status_code=502), channel)

    await scheduler.run_tick()
    await scheduler.drain()
    await scheduler.run_tick(now=utcnow() + timedelta(minutes=2))
    await scheduler.drain()

    assert channel.send.await_count == 2


@pytest.mark.asyncio
async def test_bot_still_in_flight_is_not_dispatched_again(bot_repo, log_repo, admin_repo) -> None:
    await bot_repo.insert_if_absent("slow", "https://slow.example.com", 1, added_by=OWNER, now=minutes_ago(5))
    release = asyncio.Event()

    async def slow_probe(url: str) -> ProbeResult:
        await release.wait()
        return ProbeResult(success=True, status_code=200)

    prober = MagicMock()
    prober.probe = AsyncMock(side_effect=slow_probe)
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober)

    assert len(await scheduler.run_tick()) == 1
    assert await scheduler.run_tick(now=utcnow() + timedelta(minutes=2)) == []

    release.set()
    await scheduler.drain()
    assert prober.probe.await_count == 1
    assert scheduler.get_stats()["in_flight"] == 0


@pytest.mark.asyncio
async def test_concurrency_cap_limits_parallel_probes(bot_repo, log_repo, admin_repo) -> None:
    for i in range(5):
        await bot_repo.insert_if_absent(f"bot{i}", f"https://bot{i}.example.com", 1, added_by=OWNER, now=minutes_ago(3))

    active = 0
    peak = 0

    async def probe(url: str) -> ProbeResult:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return ProbeResult(success=True, status_code=200)

    prober = MagicMock()
    prober.probe = AsyncMock(side_effect=probe)
    scheduler = Scheduler(
        bot_repo,
        prober,
        StatusUpdater(bot_repo, log_repo),
        AlertDispatcher(admin_repo, SimpleNamespace(send=AsyncMock())),
        max_concurrent_probes=2,
    )

    assert len(await scheduler.run_tick()) == 5
    await scheduler.drain()

    assert prober.probe.await_count == 5
    assert peak <= 2


@pytest.mark.asyncio
async def test_stop_cancels_in_flight_probes(bot_repo, log_repo, admin_repo) -> None:
    await bot_repo.insert_if_absent("hung", "https://hung.example.com", 1, added_by=OWNER, now=minutes_ago(5))

    async def never_returns(url: str) -> ProbeResult:
        await asyncio.Event().wait()

    prober = MagicMock()
    prober.probe = AsyncMock(side_effect=never_returns)
    scheduler = build_scheduler(bot_repo, log_repo, admin_repo, prober)

    await scheduler.start()
    await scheduler.run_tick()
    await asyncio.sleep(0)
    await scheduler.stop()

    assert scheduler.is_running is False
    assert scheduler.get_stats()["in_flight"] == 0
    assert (await bot_repo.get_by_name("hung")).bot_status is BotStatus.UNKNOWN
