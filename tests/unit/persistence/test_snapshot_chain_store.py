# -*- coding: utf-8 -*-
"""Unit tests for the snapshot chain and event stores (in-memory and SQL backends)."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from polymarket_wallet_monitor.models.chain import (
    ChainWriteOk,
    DuplicateInitialization,
    EmptyEventSet,
    NoPredecessor,
    StorageFailure,
)
from polymarket_wallet_monitor.models.change_event import ChangeEvent, EventType
from polymarket_wallet_monitor.models.position import MarketOutcome, Snapshot
from polymarket_wallet_monitor.persistence.repositories.sql import SqlSnapshotChainStore
from polymarket_wallet_monitor.services.diff import compute_diff


def _opened(wallet: str, market_id: str, event_id: str) -> ChangeEvent:
    return ChangeEvent(
        event_id=event_id,
        wallet=wallet,
        event_type=EventType.OPENED,
        market_id=market_id,
        market_title=f"Market {market_id}",
        prev_yes_shares=None,
        prev_no_shares=None,
        prev_yes_avg_price=None,
        prev_no_avg_price=None,
        curr_yes_shares=10.0,
        curr_no_shares=0.0,
        curr_yes_avg_price=0.5,
        curr_no_avg_price=None,
    )


async def _init(chain, snapshot: Snapshot) -> int:
    result = await chain.initialize_chain(snapshot)
    assert isinstance(result, ChainWriteOk)
    return result.snapshot_id


async def test_initialize_then_get_latest(stores, position_factory, snapshot_factory, wallet) -> None:
    chain, _ = stores
    snap = snapshot_factory([position_factory(no_avg_price=None)])

    snapshot_id = await _init(chain, snap)
    latest = await chain.get_latest(wallet)

    assert latest is not None
    assert latest.id == snapshot_id
    assert latest.predecessor_id is None
    assert latest.is_chain_head
    assert latest.snapshot == snap


async def test_initialize_twice_is_duplicate(stores, snapshot_factory, wallet) -> None:
    chain, _ = stores
    first_id = await _init(chain, snapshot_factory())

    result = await chain.initialize_chain(snapshot_factory(minutes=1))

    assert result == DuplicateInitialization(wallet=wallet, existing_snapshot_id=first_id)
    assert (await chain.get_stats()).total_snapshots == 1


async def test_append_before_initialize_is_no_predecessor(stores, snapshot_factory, wallet) -> None:
    chain, _ = stores

    result = await chain.append_with_events(snapshot_factory(), [_opened(wallet, "m", "e1")])

    assert result == NoPredecessor(wallet=wallet)
    assert await chain.get_latest(wallet) is None


async def test_append_without_events_is_empty_event_set(stores, snapshot_factory, wallet) -> None:
    chain, _ = stores
    await _init(chain, snapshot_factory())

    result = await chain.append_with_events(snapshot_factory(minutes=1), [])

    assert result == EmptyEventSet(wallet=wallet)
    assert (await chain.get_stats()).total_snapshots == 1


async def test_append_links_predecessor_and_stamps_events(
    stores, position_factory, snapshot_factory, wallet, id_sequence
) -> None:
    chain, events_store = stores
    first = snapshot_factory([position_factory(market_id="a")])
    second = snapshot_factory([position_factory(market_id="a"), position_factory(market_id="b")], minutes=1)
    first_id = await _init(chain, first)
    diff = compute_diff(first, second, new_event_id=id_sequence)

    result = await chain.append_with_events(second, diff)

    assert isinstance(result, ChainWriteOk)
    record = await chain.get_record(result.snapshot_id)
    assert record is not None
    assert record.predecessor_id == first_id
    assert (await chain.get_latest(wallet)).id == result.snapshot_id
    recorded = await events_store.events_by_wallet(wallet)
    assert [r.event.event_id for r in recorded] == ["evt-1"]
    assert recorded[0].event.snapshot_id == result.snapshot_id
    assert recorded[0].timestamp == second.timestamp
    assert recorded[0].event.logical_key() == diff[0].logical_key()


async def test_get_by_id_missing_returns_none(stores) -> None:
    chain, _ = stores
    assert await chain.get_by_id(999) is None
    assert await chain.get_record(999) is None


async def test_get_by_id_returns_snapshot(stores, position_factory, snapshot_factory) -> None:
    chain, _ = stores
    snap = snapshot_factory([position_factory(resolved_outcome=MarketOutcome.INVALID)])
    snapshot_id = await _init(chain, snap)

    assert await chain.get_by_id(snapshot_id) == snap


async def test_failed_append_leaves_no_trace(stores, snapshot_factory, wallet) -> None:
    chain, events_store = stores
    head_id = await _init(chain, snapshot_factory())
    ok = await chain.append_with_events(snapshot_factory(minutes=1), [_opened(wallet, "a", "dup")])
    assert isinstance(ok, ChainWriteOk)
    before = await chain.get_stats()

    # Second event reuses an id already stored, so the write fails after the snapshot is staged.
    result = await chain.append_with_events(
        snapshot_factory(minutes=2),
        [_opened(wallet, "b", "fresh"), _opened(wallet, "c", "dup")],
    )

    assert isinstance(result, StorageFailure)
    assert result.wallet == wallet
    latest = await chain.get_latest(wallet)
    assert latest.id == ok.snapshot_id
    assert latest.predecessor_id == head_id
    after = await chain.get_stats()
    assert after.total_snapshots == before.total_snapshots
    assert after.total_events == before.total_events
    assert [r.event.event_id for r in await events_store.events_by_wallet(wallet)] == ["dup"]


async def test_sql_storage_failure_carries_driver_exception(database, snapshot_factory, wallet) -> None:
    chain = SqlSnapshotChainStore(database)
    await _init(chain, snapshot_factory())
    await chain.append_with_events(snapshot_factory(minutes=1), [_opened(wallet, "a", "dup")])

    result = await chain.append_with_events(snapshot_factory(minutes=2), [_opened(wallet, "b", "dup")])

    assert isinstance(result, StorageFailure)
    assert isinstance(result.cause, IntegrityError)
    assert result.error_type == "IntegrityError"


async def test_chain_continues_after_failed_append(stores, snapshot_factory, wallet) -> None:
    chain, _ = stores
    await _init(chain, snapshot_factory())
    await chain.append_with_events(snapshot_factory(minutes=1), [_opened(wallet, "a", "x")])
    failed = await chain.append_with_events(snapshot_factory(minutes=2), [_opened(wallet, "b", "x")])
    assert isinstance(failed, StorageFailure)

    result = await chain.append_with_events(snapshot_factory(minutes=3), [_opened(wallet, "b", "y")])

    assert isinstance(result, ChainWriteOk)
    assert len(await chain.walk_chain(wallet)) == 3


async def test_events_newest_first_and_diff_order_within_snapshot(
    stores, snapshot_factory, wallet
) -> None:
    chain, events_store = stores
    await _init(chain, snapshot_factory())
    await chain.append_with_events(
        snapshot_factory(minutes=1),
        [_opened(wallet, "a", "s1-0"), _opened(wallet, "b", "s1-1")],
    )
    await chain.append_with_events(
        snapshot_factory(minutes=2),
        [_opened(wallet, "z", "s2-0"), _opened(wallet, "c", "s2-1"), _opened(wallet, "m", "s2-2")],
    )

    recorded = await events_store.events_by_wallet(wallet)

    assert [r.event.event_id for r in recorded] == ["s2-0", "s2-1", "s2-2", "s1-0", "s1-1"]


async def test_events_by_wallet_respects_limit(stores, snapshot_factory, wallet) -> None:
    chain, events_store = stores
    await _init(chain, snapshot_factory())
    for i in range(1, 4):
        await chain.append_with_events(snapshot_factory(minutes=i), [_opened(wallet, "a", f"e{i}")])

    assert [r.event.event_id for r in await events_store.events_by_wallet(wallet, limit=2)] == ["e3", "e2"]
    assert await events_store.events_by_wallet(wallet, limit=0) == []
    assert len(await events_store.events_by_wallet(wallet)) == 3


async def test_events_are_isolated_per_wallet(stores, snapshot_factory, wallet, other_wallet) -> None:
    chain, events_store = stores
    await _init(chain, snapshot_factory())
    await _init(chain, snapshot_factory(wallet_address=other_wallet))
    await chain.append_with_events(snapshot_factory(minutes=1), [_opened(wallet, "shared", "mine")])
    await chain.append_with_events(
        snapshot_factory(minutes=2, wallet_address=other_wallet),
        [_opened(other_wallet, "shared", "theirs")],
    )

    assert [r.event.event_id for r in await events_store.events_by_wallet(wallet)] == ["mine"]
    assert [r.event.event_id for r in await events_store.events_by_wallet(other_wallet)] == ["theirs"]
    by_market = await events_store.events_by_market("shared")
    assert [r.event.event_id for r in by_market] == ["theirs", "mine"]
    assert await events_store.events_by_market("unknown") == []


async def test_walk_chain_follows_predecessors(stores, snapshot_factory, wallet) -> None:
    chain, _ = stores
    head_id = await _init(chain, snapshot_factory())
    ids = [head_id]
    for i in range(1, 4):
        result = await chain.append_with_events(snapshot_factory(minutes=i), [_opened(wallet, "a", f"e{i}")])
        ids.append(result.snapshot_id)

    walked = await chain.walk_chain(wallet)

    assert [r.id for r in walked] == list(reversed(ids))
    assert walked[-1].predecessor_id is None
    assert [r.id for r in await chain.walk_chain(wallet, limit=2)] == list(reversed(ids))[:2]
    assert await chain.walk_chain("0x" + "0" * 40) == []


async def test_stats_count_snapshots_events_and_wallets(
    stores, snapshot_factory, wallet, other_wallet
) -> None:
    chain, _ = stores
    assert (await chain.get_stats()).total_snapshots == 0

    await _init(chain, snapshot_factory())
    await chain.append_with_events(
        snapshot_factory(minutes=1),
        [_opened(wallet, "a", "e1"), _opened(wallet, "b", "e2")],
    )
    await _init(chain, snapshot_factory(minutes=5, wallet_address=other_wallet))

    stats = await chain.get_stats()

    assert stats.total_snapshots == 3
    assert stats.total_events == 2
    assert stats.unique_wallets == 2
    # Newest latest snapshot first.
    assert [w.wallet for w in stats.wallets] == [other_wallet, wallet]
    mine = stats.wallets[1]
    assert mine.snapshot_count == 2
    assert mine.latest_timestamp == snapshot_factory(minutes=1).timestamp


async def test_snapshot_ids_increase(stores, snapshot_factory, wallet, other_wallet) -> None:
    chain, _ = stores
    a = await _init(chain, snapshot_factory())
    b = await _init(chain, snapshot_factory(wallet_address=other_wallet))
    c = await chain.append_with_events(snapshot_factory(minutes=1), [_opened(wallet, "a", "e")])

    assert a < b < c.snapshot_id
