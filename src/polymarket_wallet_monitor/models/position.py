"""Position and Snapshot: point-in-time holdings of a wallet.

A Position is one market's YES/NO holdings; a Snapshot is the immutable set of
all positions of one wallet at one instant, unique by market_id. Neither type
validates itself: the ingestion boundary (see clients.position_provider) checks
the invariants with is_valid_share_count / is_valid_market_price, and the diff
engine and chain stores trust their inputs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Iterable, Optional


class MarketOutcome(str, Enum):
    """Resolution state of a binary market."""

    YES = "yes"
    NO = "no"
    INVALID = "invalid"
    UNRESOLVED = "unresolved"
    """Default state; the only value meaning the market is still open."""

    @property
    def is_resolved(self) -> bool:
        return self is not MarketOutcome.UNRESOLVED


def is_valid_market_price(price: Optional[float]) -> bool:
    """Return True if price is None or lies in [0, 1]."""
    return price is None or 0.0 <= price <= 1.0


def is_valid_share_count(shares: float) -> bool:
    """Return True if shares is non-negative."""
    return shares >= 0


def format_timestamp(ts: datetime) -> str:
    """Serialize a datetime as ISO 8601 in UTC (naive values are taken as UTC)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="microseconds")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO 8601 timestamp (``Z`` suffix accepted) into an aware UTC datetime."""
    ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class Position:
    """One market's holdings for a wallet at a point in time.

    Identity across snapshots is market_id only.
    """

    market_id: str
    """Opaque stable identifier (Polymarket conditionId)."""
    market_title: str
    yes_shares: float = 0.0
    no_shares: float = 0.0
    yes_avg_price: Optional[float] = None
    """None means no YES position held, so no price to report."""
    no_avg_price: Optional[float] = None
    resolved_outcome: MarketOutcome = MarketOutcome.UNRESOLVED

    def to_dict(self) -> dict[str, Any]:
        return {
            "market_id": self.market_id,
            "market_title": self.market_title,
            "yes_shares": self.yes_shares,
            "no_shares": self.no_shares,
            "yes_avg_price": self.yes_avg_price,
            "no_avg_price": self.no_avg_price,
            "resolved_outcome": self.resolved_outcome.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        yes_price = data.get("yes_avg_price")
        no_price = data.get("no_avg_price")
        return cls(
            market_id=str(data["market_id"]),
            market_title=str(data["market_title"]),
            yes_shares=float(data.get("yes_shares", 0.0)),
            no_shares=float(data.get("no_shares", 0.0)),
            yes_avg_price=float(yes_price) if yes_price is not None else None,
            no_avg_price=float(no_price) if no_price is not None else None,
            resolved_outcome=MarketOutcome(data.get("resolved_outcome", MarketOutcome.UNRESOLVED.value)),
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable capture of all of a wallet's positions at an instant."""

    wallet: str
    timestamp: datetime
    positions: tuple[Position, ...] = field(default_factory=tuple)

    @property
    def market_ids(self) -> list[str]:
        return [p.market_id for p in self.positions]

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet": self.wallet,
            "timestamp": format_timestamp(self.timestamp),
            "positions": [p.to_dict() for p in self.positions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            wallet=str(data["wallet"]),
            timestamp=parse_timestamp(str(data["timestamp"])),
            positions=tuple(Position.from_dict(p) for p in data.get("positions", [])),
        )

    @classmethod
    def create(
        cls,
        wallet: str,
        positions: Iterable[Position] = (),
        *,
        timestamp: datetime | None = None,
    ) -> Snapshot:
        """Create a snapshot stamped now (UTC) unless a timestamp is given."""
        return cls(
            wallet=wallet,
            timestamp=timestamp or datetime.now(UTC),
            positions=tuple(positions),
        )
