# -*- coding: utf-8 -*-
"""Application services."""

from polymarket_wallet_monitor.services.diff import compute_diff
from polymarket_wallet_monitor.services.pnl import calculate_pnl
from polymarket_wallet_monitor.services.snapshot import (
    PositionProvider,
    SnapshotResult,
    SnapshotService,
)

__all__ = [
    "PositionProvider",
    "SnapshotResult",
    "SnapshotService",
    "calculate_pnl",
    "compute_diff",
]
