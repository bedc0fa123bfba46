# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.models.position import MarketOutcome, Position, Snapshot
from polymarket_wallet_monitor.persistence.repositories.in_memory import (
    InMemoryChainState,
    InMemoryEventStore,
    InMemorySnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.repositories.interfaces import (
    IEventStore,
    ISnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.repositories.sql import (
    SqlEventStore,
    SqlSnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.sql.database import Database


@pytest.fixture
def wallet() -> str:
    """Default tracked wallet used by tests."""
    return "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"


@pytest.fixture
def other_wallet() -> str:
    return "0x742d35cc6634c0532925a3b844bc9e7595f0bebc"


@pytest.fixture
def market_id() -> str:
    """Default market condition id (0x + 64 hex)."""
    return "0x" + "ab" * 32


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def position_factory(market_id: str) -> Callable[..., Position]:
    """Build Position with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> Position:
        return Position(
            market_id=overrides.pop("market_id", market_id),
            market_title=overrides.pop("market_title", "Will it rain tomorrow?"),
            yes_shares=overrides.pop("yes_shares", 100.0),
            no_shares=overrides.pop("no_shares", 0.0),
            yes_avg_price=overrides.pop("yes_avg_price", 0.5),
            no_avg_price=overrides.pop("no_avg_price", None),
            resolved_outcome=overrides.pop("resolved_outcome", MarketOutcome.UNRESOLVED),
        )

    return _build


@pytest.fixture
def snapshot_factory(wallet: str, now_utc: datetime) -> Callable[..., Snapshot]:
    """Build Snapshot for the default wallet; minutes offsets now_utc."""

    def _build(
        positions: Iterable[Position] = (),
        *,
        minutes: int = 0,
        wallet_address: str | None = None,
    ) -> Snapshot:
        return Snapshot(
            wallet=wallet_address or wallet,
            timestamp=now_utc + timedelta(minutes=minutes),
            positions=tuple(positions),
        )

    return _build


@pytest.fixture
def id_sequence() -> Callable[[], str]:
    """Deterministic event id factory: evt-1, evt-2, ..."""
    counter = iter(range(1, 1_000_000))
    return lambda: f"evt-{next(counter)}"


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'monitor.db'}"


@pytest.fixture
def settings(db_url: str) -> Settings:
    """Settings isolated from the environment's database."""
    return Settings.from_env(database={"url": db_url})


@pytest.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    """Fresh sqlite database with schema, disposed after the test."""
    db = Database(settings)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def chain_state() -> InMemoryChainState:
    return InMemoryChainState()


@pytest.fixture
def memory_chain_store(chain_state: InMemoryChainState) -> InMemorySnapshotChainStore:
    return InMemorySnapshotChainStore(chain_state)


@pytest.fixture(params=["memory", "sql"])
async def stores(
    request: pytest.FixtureRequest,
    settings: Settings,
) -> AsyncIterator[tuple[ISnapshotChainStore, IEventStore]]:
    """(chain store, event store) pair over shared state, for each backend."""
    if request.param == "memory":
        state = InMemoryChainState()
        yield InMemorySnapshotChainStore(state), InMemoryEventStore(state)
        return
    db = Database(settings)
    await db.create_schema()
    yield SqlSnapshotChainStore(db), SqlEventStore(db)
    await db.dispose()
