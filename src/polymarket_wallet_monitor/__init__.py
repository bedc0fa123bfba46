"""Polymarket wallet monitor: snapshot diffs and an append-only snapshot chain."""

from polymarket_wallet_monitor.config import get_settings
from polymarket_wallet_monitor.models import ChangeEvent, EventType, MarketOutcome, Position, Snapshot
from polymarket_wallet_monitor.services import SnapshotService, calculate_pnl, compute_diff

__version__ = "0.0.1"
__all__ = [
    "ChangeEvent",
    "EventType",
    "MarketOutcome",
    "Position",
    "Snapshot",
    "SnapshotService",
    "calculate_pnl",
    "compute_diff",
    "get_settings",
]
