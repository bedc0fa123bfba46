"""In-memory store implementations."""

from polymarket_wallet_monitor.persistence.repositories.in_memory.snapshot_chain_store import (
    InMemoryChainState,
    InMemoryEventStore,
    InMemorySnapshotChainStore,
)

__all__ = ["InMemoryChainState", "InMemoryEventStore", "InMemorySnapshotChainStore"]
