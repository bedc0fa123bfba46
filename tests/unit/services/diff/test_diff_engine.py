# -*- coding: utf-8 -*-
"""Unit tests for compute_diff."""

from __future__ import annotations

from collections import Counter

import pytest

from polymarket_wallet_monitor.models.change_event import EventType
from polymarket_wallet_monitor.models.position import MarketOutcome
from polymarket_wallet_monitor.services.diff import compute_diff


def _types(events) -> list[EventType]:
    return [e.event_type for e in events]


def test_first_observation_yields_no_events(position_factory, snapshot_factory) -> None:
    snap = snapshot_factory([position_factory(), position_factory(market_id="m2")])
    assert compute_diff(None, snap) == []


def test_identical_snapshots_yield_no_events(position_factory, snapshot_factory) -> None:
    positions = [position_factory(), position_factory(market_id="m2", resolved_outcome=MarketOutcome.YES)]
    prev = snapshot_factory(positions)
    curr = snapshot_factory(list(positions), minutes=5)

    assert compute_diff(prev, prev) == []
    assert compute_diff(prev, curr) == []


def test_new_markets_yield_one_opened_each(position_factory, snapshot_factory) -> None:
    a = [position_factory(market_id="a1"), position_factory(market_id="a2")]
    b = [position_factory(market_id="b1", yes_shares=10.0), position_factory(market_id="b2", no_shares=3.0)]

    events = compute_diff(snapshot_factory(a), snapshot_factory(a + b, minutes=1))

    assert _types(events) == [EventType.OPENED, EventType.OPENED]
    assert [e.market_id for e in events] == ["b1", "b2"]
    opened = events[0]
    assert opened.prev_yes_shares is None
    assert opened.prev_no_shares is None
    assert opened.prev_yes_avg_price is None
    assert opened.prev_no_avg_price is None
    assert opened.curr_yes_shares == 10.0
    assert opened.pnl is None


def test_missing_markets_yield_one_closed_each(position_factory, snapshot_factory) -> None:
    a = [position_factory(market_id="a1")]
    b = [position_factory(market_id="b1", yes_avg_price=0.3), position_factory(market_id="b2")]

    events = compute_diff(snapshot_factory(a + b), snapshot_factory(a, minutes=1))

    assert _types(events) == [EventType.CLOSED, EventType.CLOSED]
    assert [e.market_id for e in events] == ["b1", "b2"]
    closed = events[0]
    assert closed.prev_yes_avg_price == 0.3
    assert closed.curr_yes_shares is None
    assert closed.curr_no_shares is None
    assert closed.curr_yes_avg_price is None
    assert closed.curr_no_avg_price is None


def test_unresolved_to_yes_yields_single_resolved_with_pnl(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(yes_shares=200.0, yes_avg_price=0.55)])
    curr = snapshot_factory(
        [position_factory(yes_shares=200.0, yes_avg_price=0.55, resolved_outcome=MarketOutcome.YES)],
        minutes=1,
    )

    events = compute_diff(prev, curr)

    assert _types(events) == [EventType.RESOLVED]
    assert events[0].pnl == pytest.approx(90.0)
    assert events[0].resolved_outcome is MarketOutcome.YES
    assert events[0].prev_yes_shares == 200.0
    assert events[0].curr_yes_shares == 200.0


def test_already_resolved_market_yields_nothing(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(resolved_outcome=MarketOutcome.YES)])
    curr = snapshot_factory([position_factory(resolved_outcome=MarketOutcome.YES)], minutes=1)
    assert compute_diff(prev, curr) == []


def test_resolved_to_unresolved_yields_nothing(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(resolved_outcome=MarketOutcome.YES)])
    curr = snapshot_factory([position_factory()], minutes=1)
    assert compute_diff(prev, curr) == []


def test_change_and_resolution_yield_updated_then_resolved(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(yes_shares=100.0)])
    curr = snapshot_factory(
        [position_factory(yes_shares=150.0, resolved_outcome=MarketOutcome.NO)],
        minutes=1,
    )

    events = compute_diff(prev, curr)

    assert _types(events) == [EventType.UPDATED, EventType.RESOLVED]
    updated, resolved = events
    assert updated.resolved_outcome is MarketOutcome.NO
    assert updated.pnl is None
    # Losing YES side: 150 shares bought at 0.5.
    assert resolved.pnl == pytest.approx(-75.0)


def test_invalid_resolution_has_zero_pnl(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory()])
    curr = snapshot_factory([position_factory(resolved_outcome=MarketOutcome.INVALID)], minutes=1)

    events = compute_diff(prev, curr)

    assert _types(events) == [EventType.RESOLVED]
    assert events[0].pnl == 0.0


def test_price_only_change_is_updated(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(yes_avg_price=0.5)])
    curr = snapshot_factory([position_factory(yes_avg_price=0.55)], minutes=1)

    events = compute_diff(prev, curr)

    assert _types(events) == [EventType.UPDATED]
    assert events[0].prev_yes_avg_price == 0.5
    assert events[0].curr_yes_avg_price == 0.55


def test_price_appearing_from_none_is_updated(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(no_shares=0.0, no_avg_price=None)])
    curr = snapshot_factory([position_factory(no_shares=0.0, no_avg_price=0.2)], minutes=1)
    assert _types(compute_diff(prev, curr)) == [EventType.UPDATED]


def test_title_change_alone_is_not_an_event(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(market_title="Old")])
    curr = snapshot_factory([position_factory(market_title="New")], minutes=1)
    assert compute_diff(prev, curr) == []


def test_market_leaving_snapshot_yields_only_closed(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(market_id="gone")])
    curr = snapshot_factory([], minutes=1)

    events = compute_diff(prev, curr)

    assert _types(events) == [EventType.CLOSED]
    assert events[0].resolved_outcome is MarketOutcome.UNRESOLVED


def test_order_is_current_markets_then_closed(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory(
        [
            position_factory(market_id="closed-1"),
            position_factory(market_id="kept", yes_shares=1.0),
            position_factory(market_id="closed-2"),
        ]
    )
    curr = snapshot_factory(
        [
            position_factory(market_id="new"),
            position_factory(market_id="kept", yes_shares=2.0, resolved_outcome=MarketOutcome.YES),
        ],
        minutes=1,
    )

    events = compute_diff(prev, curr)

    assert [(e.event_type, e.market_id) for e in events] == [
        (EventType.OPENED, "new"),
        (EventType.UPDATED, "kept"),
        (EventType.RESOLVED, "kept"),
        (EventType.CLOSED, "closed-1"),
        (EventType.CLOSED, "closed-2"),
    ]


def test_events_carry_current_wallet_and_no_snapshot_id(position_factory, snapshot_factory, wallet) -> None:
    prev = snapshot_factory([position_factory(market_id="a")])
    curr = snapshot_factory([position_factory(market_id="b")], minutes=1)

    events = compute_diff(prev, curr)

    assert {e.wallet for e in events} == {wallet}
    assert all(e.snapshot_id is None for e in events)


def test_event_ids_are_unique_by_default(position_factory, snapshot_factory) -> None:
    prev = snapshot_factory([position_factory(market_id=f"old-{i}") for i in range(5)])
    curr = snapshot_factory([position_factory(market_id=f"new-{i}") for i in range(5)], minutes=1)

    events = compute_diff(prev, curr)

    assert len(events) == 10
    assert max(Counter(e.event_id for e in events).values()) == 1


def test_same_inputs_give_same_logical_events(position_factory, snapshot_factory, id_sequence) -> None:
    prev = snapshot_factory([position_factory(market_id="a"), position_factory(market_id="b")])
    curr = snapshot_factory(
        [position_factory(market_id="b", yes_shares=3.0), position_factory(market_id="c")],
        minutes=1,
    )

    first = compute_diff(prev, curr)
    second = compute_diff(prev, curr, new_event_id=id_sequence)

    assert [e.logical_key() for e in first] == [e.logical_key() for e in second]
    assert [e.event_id for e in second] == ["evt-1", "evt-2", "evt-3"]
