"""
Settings Module for Keep-Alive Bot

Configuration management using Pydantic Settings.
Supports environment variables and .env files, with validation,
type checking, and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, Set
from enum import Enum

from pydantic import (
    AliasChoices,
    Field,
    SecretStr,
    field_validator,
    model_validator
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from config.constants import Defaults


class Environment(str, Enum):
    """Application environment enumeration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseSettingsConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


class DatabaseSettings(BaseSettingsConfig):
    """
    Database Configuration Settings

    The connection descriptor is a single URL (DATABASE_URL), as handed
    out by managed PostgreSQL providers. SQLite is accepted for local runs.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        extra="ignore"
    )

    url: str = Field(
        ...,  # Required
        min_length=1,
        description="Database connection URL (postgres://... or sqlite:///...)"
    )

    # Connection pool settings (ignored for SQLite)
    pool_size: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Connection pool size"
    )
    max_overflow: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum overflow connections"
    )
    pool_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Pool connection timeout in seconds"
    )
    pool_recycle: int = Field(
        default=1800,
        ge=60,
        le=7200,
        description="Connection recycle time in seconds"
    )

    echo: bool = Field(
        default=False,
        description="Echo SQL queries (debug mode)"
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the URL points at a SQLite database."""
        return self.url.startswith("sqlite")

    @property
    def async_url(self) -> str:
        """URL rewritten to use an asyncio driver."""
        url = self.url

        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]

        if url.startswith("sqlite://"):
            return "sqlite+aiosqlite://" + url[len("sqlite://"):]

        return url

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Reject URLs for engines we have no async driver for."""
        supported = (
            "postgres://",
            "postgresql://",
            "postgresql+asyncpg://",
            "sqlite://",
            "sqlite+aiosqlite://",
        )
        if not v.startswith(supported):
            raise ValueError(f"Unsupported database URL scheme: {v.split(':', 1)[0]}")
        return v


class BotSettings(BaseSettingsConfig):
    """
    Telegram Bot Configuration Settings

    Contains the bot token and the initial set of trusted admin IDs.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOT_",
        env_file=".env",
        extra="ignore"
    )

    token: SecretStr = Field(
        ...,  # Required
        description="Telegram Bot API token from @BotFather"
    )

    # Initial trusted identities, comma separated in the environment
    admin_ids: Annotated[Set[int], NoDecode] = Field(
        default_factory=set,
        validation_alias=AliasChoices("ADMIN_IDS", "BOT_ADMIN_IDS", "admin_ids"),
        description="Telegram user IDs allowed to manage the bot"
    )

    polling_timeout: int = Field(
        default=10,
        ge=1,
        le=60,
        description="Long polling timeout in seconds"
    )

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: SecretStr) -> SecretStr:
        """Validate Telegram bot token format."""
        token = v.get_secret_value()

        if not token:
            raise ValueError("Bot token cannot be empty")

        parts = token.split(":")
        if len(parts) != 2 or not parts[1]:
            raise ValueError("Invalid bot token format")

        try:
            int(parts[0])
        except ValueError:
            raise ValueError("Invalid bot token format: ID must be numeric")

        return v

    @field_validator("admin_ids", mode="before")
    @classmethod
    def parse_admin_ids(cls, v: Any) -> Set[int]:
        """Parse admin IDs from a comma separated string or a list.

        Entries that are not 64-bit integers are skipped.
        """
        if v is None:
            return set()

        if isinstance(v, int):
            return {v}

        if isinstance(v, str):
            items = v.split(",")
        else:
            items = list(v)

        parsed: Set[int] = set()
        for item in items:
            try:
                admin_id = int(str(item).strip())
            except ValueError:
                continue
            if Defaults.INT64_MIN <= admin_id <= Defaults.INT64_MAX:
                parsed.add(admin_id)
        return parsed


class MonitoringSettings(BaseSettingsConfig):
    """
    Monitoring Engine Configuration Settings

    Controls scheduler tick granularity, probe timeout, concurrency
    and alerting policy.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONITOR_",
        env_file=".env",
        extra="ignore"
    )

    tick_interval: float = Field(
        default=60.0,
        gt=0,
        le=3600,
        description="Seconds between due-check passes"
    )
    probe_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for a single probe request in seconds"
    )
    max_concurrent_probes: int = Field(
        default=0,
        ge=0,
        le=1000,
        description="Cap on concurrent probes (0 = unbounded)"
    )
    alert_on_every_failure: bool = Field(
        default=True,
        description="Alert on every failed probe instead of only on a transition to Offline"
    )
    user_agent: str = Field(
        default="KeepAliveBot/1.0 (+https://core.telegram.org/bots)",
        description="User agent string for probe requests"
    )


class LoggingSettings(BaseSettingsConfig):
    """
    Logging Configuration Settings
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore"
    )

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum logging level"
    )
    console_enabled: bool = Field(
        default=True,
        description="Enable console logging"
    )
    console_colored: bool = Field(
        default=True,
        description="Enable colored console output"
    )
    file_enabled: bool = Field(
        default=False,
        description="Enable file logging"
    )
    file_path: Path = Field(
        default=Path("logs/keepalive_bot.log"),
        description="Log file path"
    )
    file_rotation: str = Field(
        default="10 MB",
        description="Log rotation size (e.g., '10 MB', '1 day')"
    )
    file_retention: str = Field(
        default="14 days",
        description="Log retention period"
    )


class Settings(BaseSettingsConfig):
    """
    Main Settings Class

    Aggregates all settings sections and provides the main
    configuration interface for the application.
    """

    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Application environment"
    )

    app_name: str = Field(
        default="Keep-Alive Bot",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Liveness endpoint
    web_host: str = Field(
        default="0.0.0.0",
        description="Liveness server host"
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Liveness server port"
    )

    # Nested settings
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings
    )
    bot: BotSettings = Field(
        default_factory=BotSettings
    )
    monitoring: MonitoringSettings = Field(
        default_factory=MonitoringSettings
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @model_validator(mode="after")
    def configure_for_environment(self) -> "Settings":
        """Apply environment-specific configuration."""
        if self.is_production:
            self.database.echo = False
        elif self.is_development:
            if self.logging.level == LogLevel.INFO:
                self.logging.level = LogLevel.DEBUG

        return self

    def to_dict(self, *, exclude_secrets: bool = True) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        data = self.model_dump(mode="json")

        if exclude_secrets:
            def remove_secrets(obj: Any) -> Any:
                if isinstance(obj, dict):
                    return {
                        k: remove_secrets(v)
                        for k, v in obj.items()
                        if "secret" not in k.lower()
                        and "token" not in k.lower()
                        and k.lower() != "url"
                    }
                elif isinstance(obj, list):
                    return [remove_secrets(item) for item in obj]
                return obj

            data = remove_secrets(data)

        return data


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure a single settings instance
    is used throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
