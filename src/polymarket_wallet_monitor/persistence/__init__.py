"""Persistence layer (snapshot chain and event stores, database)."""

from polymarket_wallet_monitor.persistence.repositories import (
    IEventStore,
    InMemoryChainState,
    InMemoryEventStore,
    InMemorySnapshotChainStore,
    ISnapshotChainStore,
    SqlEventStore,
    SqlSnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.sql import Database

__all__ = [
    "Database",
    "IEventStore",
    "ISnapshotChainStore",
    "InMemoryChainState",
    "InMemoryEventStore",
    "InMemorySnapshotChainStore",
    "SqlEventStore",
    "SqlSnapshotChainStore",
]
