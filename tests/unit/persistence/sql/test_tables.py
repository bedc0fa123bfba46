# -*- coding: utf-8 -*-
"""Unit tests for the snapshot chain schema constraints (sqlite)."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from polymarket_wallet_monitor.persistence.sql.database import Database
from polymarket_wallet_monitor.persistence.sql.tables import EventRecord, SnapshotRecord

_TS = "2026-02-13T12:00:00.000000+00:00"


def _snapshot(wallet: str, prev: int | None = None) -> SnapshotRecord:
    return SnapshotRecord(wallet=wallet, positions=[], timestamp=_TS, prev_snapshot_id=prev)


async def _insert(database: Database, *records) -> None:
    async with database.session() as session, session.begin():
        for record in records:
            session.add(record)
            await session.flush()


async def test_second_chain_head_for_wallet_is_rejected(database: Database, wallet: str) -> None:
    await _insert(database, _snapshot(wallet))

    with pytest.raises(IntegrityError):
        await _insert(database, _snapshot(wallet))


async def test_heads_of_different_wallets_coexist(database: Database, wallet: str, other_wallet: str) -> None:
    await _insert(database, _snapshot(wallet), _snapshot(other_wallet))


async def test_snapshot_cannot_have_two_successors(database: Database, wallet: str) -> None:
    head = _snapshot(wallet)
    await _insert(database, head)
    await _insert(database, _snapshot(wallet, prev=head.id))

    with pytest.raises(IntegrityError):
        await _insert(database, _snapshot(wallet, prev=head.id))


async def test_predecessor_must_exist(database: Database, wallet: str) -> None:
    await _insert(database, _snapshot(wallet))

    with pytest.raises(IntegrityError):
        await _insert(database, _snapshot(wallet, prev=12345))


async def test_event_requires_existing_snapshot(database: Database, wallet: str) -> None:
    event = EventRecord(
        id="orphan",
        wallet=wallet,
        event_type="OPENED",
        market_id="m",
        market_title="t",
        snapshot_id=999,
        sequence=0,
        resolved_outcome="unresolved",
    )

    with pytest.raises(IntegrityError):
        await _insert(database, event)


async def test_create_schema_is_idempotent(database: Database) -> None:
    await database.create_schema()


async def test_sqlite_parent_directory_is_created(settings, tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'dir' / 'monitor.db'}"

    db = Database(settings, url=url)
    try:
        await db.create_schema()
    finally:
        await db.dispose()

    assert (tmp_path / "nested" / "dir" / "monitor.db").exists()
    assert db.url == url
