# -*- coding: utf-8 -*-
"""Domain models."""

from polymarket_wallet_monitor.models.chain import (
    ChainStats,
    ChainWriteFailure,
    ChainWriteOk,
    ChainWriteResult,
    DuplicateInitialization,
    EmptyEventSet,
    NoPredecessor,
    StorageFailure,
    StoredSnapshot,
    WalletChainStats,
)
from polymarket_wallet_monitor.models.change_event import ChangeEvent, EventType, RecordedEvent
from polymarket_wallet_monitor.models.position import (
    MarketOutcome,
    Position,
    Snapshot,
    is_valid_market_price,
    is_valid_share_count,
)

__all__ = [
    "ChainStats",
    "ChainWriteFailure",
    "ChainWriteOk",
    "ChainWriteResult",
    "ChangeEvent",
    "DuplicateInitialization",
    "EmptyEventSet",
    "EventType",
    "MarketOutcome",
    "NoPredecessor",
    "Position",
    "RecordedEvent",
    "Snapshot",
    "StorageFailure",
    "StoredSnapshot",
    "WalletChainStats",
    "is_valid_market_price",
    "is_valid_share_count",
]
