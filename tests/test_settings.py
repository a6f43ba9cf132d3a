from __future__ import annotations

import pytest
from pydantic import ValidationError

import main
from config.settings import BotSettings, DatabaseSettings, Settings, get_settings
from exceptions import ConfigurationError


TOKEN = "123456:ABC-test-token"


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://user:pw@db.example.com:5432/keepalive")
    monkeypatch.setenv("BOT_TOKEN", TOKEN)
    monkeypatch.setenv("ADMIN_IDS", "1, 2,abc,99999999999999999999")
    monkeypatch.setenv("PORT", "9000")
    return monkeypatch


def test_settings_from_environment(env) -> None:
    settings = Settings()

    assert settings.bot.token.get_secret_value() == TOKEN
    assert settings.bot.admin_ids == {1, 2}
    assert settings.port == 9000
    assert settings.database.async_url == "postgresql+asyncpg://user:pw@db.example.com:5432/keepalive"
    assert settings.monitoring.tick_interval == 60.0
    assert settings.monitoring.alert_on_every_failure is True


def test_admin_ids_default_to_empty(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", TOKEN)
    assert BotSettings().admin_ids == set()


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgresql://u@h/db", "postgresql+asyncpg://u@h/db"),
        ("sqlite:///./keepalive.db", "sqlite+aiosqlite:///./keepalive.db"),
        ("postgresql+asyncpg://u@h/db", "postgresql+asyncpg://u@h/db"),
    ],
)
def test_async_url(url, expected) -> None:
    assert DatabaseSettings(url=url).async_url == expected


def test_unsupported_database_rejected() -> None:
    with pytest.raises(ValidationError):
        DatabaseSettings(url="mysql://u@h/db")


@pytest.mark.parametrize("token", ["", "no-colon", "abc:def", "123:"])
def test_malformed_token_rejected(token) -> None:
    with pytest.raises(ValidationError):
        BotSettings(token=token)


def test_missing_configuration_is_a_configuration_error() -> None:
    get_settings.cache_clear()
    try:
        with pytest.raises(ConfigurationError):
            main.load_settings()
    finally:
        get_settings.cache_clear()


def test_to_dict_hides_secrets(env) -> None:
    data = Settings().to_dict()

    assert "token" not in data["bot"]
    assert "url" not in data["database"]
    assert data["port"] == 9000
