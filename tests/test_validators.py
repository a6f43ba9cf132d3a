from __future__ import annotations

import pytest

from config.constants import MessageTemplates
from exceptions import InvalidIntervalError, InvalidURLError, InvalidUserIdError, UsageError
from utils.validators import BotNameValidator, DataValidator, URLValidator


@pytest.mark.parametrize(
    "url",
    ["https://mybot.onrender.com", "http://localhost:8080/health", "  https://x.example.com/ping  "],
)
def test_accepts_http_and_https(url) -> None:
    assert URLValidator.validate(url) == url.strip()


@pytest.mark.parametrize("url", ["ftp://files.example.com", "mybot.onrender.com", "", "HTTPS://x.example.com"])
def test_rejects_other_schemes(url) -> None:
    with pytest.raises(InvalidURLError) as info:
        URLValidator.validate(url)

    assert info.value.user_message() == MessageTemplates.INVALID_URL


@pytest.mark.parametrize(("value", "expected"), [("5", 5), (" 10 ", 10), (1, 1)])
def test_parse_interval(value, expected) -> None:
    assert DataValidator.parse_interval(value) == expected


@pytest.mark.parametrize("value", ["0", "-3", "five", "1.5", None, str(2**31)])
def test_parse_interval_rejects(value) -> None:
    with pytest.raises(InvalidIntervalError):
        DataValidator.parse_interval(value)


def test_parse_telegram_id() -> None:
    assert DataValidator.parse_telegram_id("123456789") == 123456789
    assert DataValidator.parse_telegram_id(str(-2**63)) == -2**63
    assert DataValidator.parse_telegram_id(str(2**63 - 1)) == 2**63 - 1

    with pytest.raises(InvalidUserIdError) as info:
        DataValidator.parse_telegram_id("alice")
    assert info.value.user_message() == MessageTemplates.INVALID_USER_ID


@pytest.mark.parametrize("value", [str(2**63), str(-2**63 - 1), "99999999999999999999999"])
def test_parse_telegram_id_rejects_values_beyond_64_bits(value) -> None:
    with pytest.raises(InvalidUserIdError):
        DataValidator.parse_telegram_id(value)


@pytest.mark.parametrize(("raw", "name"), [("@mybot", "mybot"), ("mybot", "mybot"), (" @mybot ", "mybot"), ("@@mybot", "@mybot")])
def test_normalize_bot_name(raw, name) -> None:
    assert BotNameValidator.normalize(raw) == name


def test_usage_error_replies_with_usage() -> None:
    error = UsageError(MessageTemplates.REMOVEBOT_USAGE)

    assert error.user_message() == MessageTemplates.REMOVEBOT_USAGE
    assert error.recoverable is True
