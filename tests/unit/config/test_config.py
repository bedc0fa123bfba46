# -*- coding: utf-8 -*-
"""Unit tests for Settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from polymarket_wallet_monitor.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE__URL", raising=False)
    settings = Settings.from_env()

    assert settings.database.url.startswith("sqlite+aiosqlite:///")
    assert settings.api.positions_page_size == 500
    assert settings.resolution.enabled is True
    assert settings.monitor.wallets == []


def test_nested_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///tmp/x.db")
    monkeypatch.setenv("MONITOR__WALLETS", " 0xabc , ,0xdef ")
    monkeypatch.setenv("MONITOR__POLL_SECONDS", "60")

    settings = Settings.from_env()

    assert settings.database.url == "sqlite+aiosqlite:///tmp/x.db"
    assert settings.monitor.wallets == ["0xabc", "0xdef"]
    assert settings.monitor.poll_seconds == 60.0


def test_explicit_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///from-env.db")

    settings = Settings.from_env(database={"url": "sqlite+aiosqlite:///explicit.db"})

    assert settings.database.url == "sqlite+aiosqlite:///explicit.db"


def test_out_of_range_values_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(api={"positions_page_size": 501})


def test_settings_are_frozen(settings: Settings) -> None:
    with pytest.raises(ValidationError):
        settings.database = settings.database  # type: ignore[misc]
