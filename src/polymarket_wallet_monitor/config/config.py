# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, DATABASE__URL.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "polymarket-wallet-monitor"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/wallet_monitor.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for Polymarket Data API and Gamma API (HTTP)."""

    model_config = SettingsConfigDict(extra="ignore")

    data_api_host: str = Field(
        default="https://data-api.polymarket.com",
        description="Polymarket Data API base URL.",
    )
    gamma_host: str = Field(
        default="https://gamma-api.polymarket.com",
        description="Polymarket Gamma API base URL.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=4,
        ge=1,
        le=20,
        description="Maximum number of attempts for retryable failures.",
    )
    positions_page_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Page size for GET /positions (API maximum is 500).",
    )
    positions_max_pages: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Safety cap on /positions pages fetched per snapshot.",
    )
    user_agent: str = "polymarket-wallet-monitor/0.0.1"


class ResolutionSettings(BaseSettings):
    """Market resolution lookup through the Gamma API."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = Field(
        default=True,
        description="Whether to resolve market outcomes via Gamma API.",
    )
    batch_size: int = Field(default=50, ge=1, le=200)
    cache_size: int = Field(default=4096, ge=1, le=100_000)


class DatabaseSettings(BaseSettings):
    """Snapshot chain storage (SQLAlchemy async URL)."""

    model_config = SettingsConfigDict(extra="ignore")

    url: str = Field(
        default="sqlite+aiosqlite:///data/polymonitor.db",
        description="SQLAlchemy async database URL.",
    )
    echo: bool = False


class MonitorSettings(BaseSettings):
    """Configuration for periodic wallet snapshots."""

    model_config = SettingsConfigDict(extra="ignore")

    # Raw string from env so pydantic-settings does not try to JSON-decode it (list[str] would trigger json.loads).
    wallets_raw: str = Field(
        default="",
        description="Wallet addresses to watch, comma-separated. Env: MONITOR__WALLETS.",
        validation_alias="wallets",
    )
    poll_seconds: float = Field(
        default=300.0,
        ge=5.0,
        le=86_400.0,
        description="Interval between snapshot rounds in watch mode.",
    )
    events_limit: int = Field(
        default=50,
        ge=1,
        le=10_000,
        description="Default number of events listed by the events command.",
    )

    @computed_field
    @property
    def wallets(self) -> list[str]:
        """Parse comma-separated wallets_raw into list of stripped strings."""
        if not self.wallets_raw or not self.wallets_raw.strip():
            return []
        return [s.strip() for s in self.wallets_raw.split(",") if s.strip()]


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, DATABASE__URL.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(database={"url": "sqlite+aiosqlite:///tmp/test.db"})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from polymarket_wallet_monitor.config import get_settings

        settings = get_settings()
        db_url = settings.database.url
    """
    return Settings()
