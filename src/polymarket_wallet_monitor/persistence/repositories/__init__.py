# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, sql)."""

from polymarket_wallet_monitor.persistence.repositories.in_memory import (
    InMemoryChainState,
    InMemoryEventStore,
    InMemorySnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.repositories.interfaces import (
    IEventStore,
    ISnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.repositories.sql import (
    SqlEventStore,
    SqlSnapshotChainStore,
)

__all__ = [
    "IEventStore",
    "ISnapshotChainStore",
    "InMemoryChainState",
    "InMemoryEventStore",
    "InMemorySnapshotChainStore",
    "SqlEventStore",
    "SqlSnapshotChainStore",
]
