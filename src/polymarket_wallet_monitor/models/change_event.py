"""ChangeEvent: one detected transition of one market between two adjacent snapshots."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from polymarket_wallet_monitor.models.position import MarketOutcome


class EventType(str, Enum):
    """Kind of transition detected by the diff engine."""

    OPENED = "OPENED"
    UPDATED = "UPDATED"
    CLOSED = "CLOSED"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Self-contained changelog entry carrying full before/after state.

    prev_* fields are all None for OPENED; curr_* fields are all None for CLOSED.
    pnl is set only on RESOLVED events. snapshot_id stays None until the chain
    store commits the event; the diff engine never sets it.
    """

    event_id: str
    wallet: str
    event_type: EventType
    market_id: str
    market_title: str

    prev_yes_shares: Optional[float]
    prev_no_shares: Optional[float]
    prev_yes_avg_price: Optional[float]
    prev_no_avg_price: Optional[float]

    curr_yes_shares: Optional[float]
    curr_no_shares: Optional[float]
    curr_yes_avg_price: Optional[float]
    curr_no_avg_price: Optional[float]

    resolved_outcome: MarketOutcome = MarketOutcome.UNRESOLVED
    pnl: Optional[float] = None
    snapshot_id: Optional[int] = None

    def with_snapshot_id(self, snapshot_id: int) -> ChangeEvent:
        """Return a copy linked to the persisted snapshot that produced it."""
        return replace(self, snapshot_id=snapshot_id)

    def logical_key(self) -> tuple[Any, ...]:
        """Every field except event_id and snapshot_id (for comparing diff output)."""
        return (
            self.wallet,
            self.event_type,
            self.market_id,
            self.market_title,
            self.prev_yes_shares,
            self.prev_no_shares,
            self.prev_yes_avg_price,
            self.prev_no_avg_price,
            self.curr_yes_shares,
            self.curr_no_shares,
            self.curr_yes_avg_price,
            self.curr_no_avg_price,
            self.resolved_outcome,
            self.pnl,
        )


@dataclass(frozen=True, slots=True)
class RecordedEvent:
    """A persisted event joined with the timestamp of the snapshot that produced it."""

    event: ChangeEvent
    timestamp: datetime
