# -*- coding: utf-8 -*-
"""Snapshot diff engine: pure comparison of two snapshots of the same wallet.

No I/O and no randomness except event ids. The same pair of snapshots always
yields the same logical events (compare with ChangeEvent.logical_key).

Output order: markets of the current snapshot in their iteration order
(OPENED, or UPDATED then RESOLVED for the same market), followed by CLOSED
events for previous-only markets in the previous snapshot's order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional
from uuid import uuid4

from polymarket_wallet_monitor.models.change_event import ChangeEvent, EventType
from polymarket_wallet_monitor.models.position import MarketOutcome, Position, Snapshot
from polymarket_wallet_monitor.services.pnl.settlement import calculate_pnl


def _new_event_id() -> str:
    return str(uuid4())


def _position_changed(prev: Position, curr: Position) -> bool:
    """Exact comparison of share counts and average prices (no tolerance)."""
    return (
        prev.yes_shares != curr.yes_shares
        or prev.no_shares != curr.no_shares
        or prev.yes_avg_price != curr.yes_avg_price
        or prev.no_avg_price != curr.no_avg_price
    )


def _build_event(
    event_id: str,
    event_type: EventType,
    wallet: str,
    market_id: str,
    market_title: str,
    prev: Optional[Position],
    curr: Optional[Position],
    *,
    pnl: Optional[float] = None,
) -> ChangeEvent:
    if curr is not None:
        outcome = curr.resolved_outcome
    elif prev is not None:
        outcome = prev.resolved_outcome
    else:
        outcome = MarketOutcome.UNRESOLVED
    return ChangeEvent(
        event_id=event_id,
        wallet=wallet,
        event_type=event_type,
        market_id=market_id,
        market_title=market_title,
        prev_yes_shares=prev.yes_shares if prev else None,
        prev_no_shares=prev.no_shares if prev else None,
        prev_yes_avg_price=prev.yes_avg_price if prev else None,
        prev_no_avg_price=prev.no_avg_price if prev else None,
        curr_yes_shares=curr.yes_shares if curr else None,
        curr_no_shares=curr.no_shares if curr else None,
        curr_yes_avg_price=curr.yes_avg_price if curr else None,
        curr_no_avg_price=curr.no_avg_price if curr else None,
        resolved_outcome=outcome,
        pnl=pnl,
    )


def compute_diff(
    previous: Optional[Snapshot],
    current: Snapshot,
    *,
    new_event_id: Callable[[], str] = _new_event_id,
) -> list[ChangeEvent]:
    """Compute the change events that turn previous into current.

    Args:
        previous: Last persisted snapshot of the wallet, or None for the first observation.
        current: Freshly captured snapshot of the same wallet.
        new_event_id: Event id factory (defaults to uuid4 strings).

    Returns:
        Events without snapshot_id. Empty when previous is None (baseline)
        or when nothing changed.
    """
    if previous is None:
        return []

    events: list[ChangeEvent] = []
    wallet = current.wallet
    prev_by_market: dict[str, Position] = {p.market_id: p for p in previous.positions}
    curr_market_ids: set[str] = {p.market_id for p in current.positions}

    for curr in current.positions:
        prev = prev_by_market.get(curr.market_id)
        if prev is None:
            events.append(
                _build_event(
                    new_event_id(), EventType.OPENED, wallet,
                    curr.market_id, curr.market_title, None, curr,
                )
            )
            continue

        if _position_changed(prev, curr):
            events.append(
                _build_event(
                    new_event_id(), EventType.UPDATED, wallet,
                    curr.market_id, curr.market_title, prev, curr,
                )
            )

        # Independent of UPDATED: a market can yield both events in one pass.
        if not prev.resolved_outcome.is_resolved and curr.resolved_outcome.is_resolved:
            events.append(
                _build_event(
                    new_event_id(), EventType.RESOLVED, wallet,
                    curr.market_id, curr.market_title, prev, curr,
                    pnl=calculate_pnl(curr, curr.resolved_outcome),
                )
            )

    for prev in previous.positions:
        if prev.market_id not in curr_market_ids:
            events.append(
                _build_event(
                    new_event_id(), EventType.CLOSED, wallet,
                    prev.market_id, prev.market_title, prev, None,
                )
            )

    return events
