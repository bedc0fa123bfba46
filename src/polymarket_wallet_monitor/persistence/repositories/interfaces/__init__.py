# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/ and sql/."""

from polymarket_wallet_monitor.persistence.repositories.interfaces.event_store import IEventStore
from polymarket_wallet_monitor.persistence.repositories.interfaces.snapshot_chain_store import (
    ISnapshotChainStore,
)

__all__ = ["IEventStore", "ISnapshotChainStore"]
