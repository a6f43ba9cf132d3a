from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from aiogram.types import Message

from monitoring.prober import ProbeResult
from utils.helpers import utcnow


def minutes_ago(minutes: float):
    return utcnow() - timedelta(minutes=minutes)


def fake_prober(success: bool = True, status_code: int = 200) -> MagicMock:
    prober = MagicMock()
    prober.probe = AsyncMock(return_value=ProbeResult(success=success, status_code=status_code))
    return prober


def make_message(text: str, user_id: int = 42) -> MagicMock:
    message = MagicMock(spec=Message)
    message.text = text
    message.from_user = SimpleNamespace(id=user_id, username="operator")
    message.answer = AsyncMock()
    return message


def last_reply(message: MagicMock) -> str:
    return message.answer.await_args.args[0]
