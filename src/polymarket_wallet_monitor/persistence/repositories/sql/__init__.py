"""SQL store implementations."""

from polymarket_wallet_monitor.persistence.repositories.sql.snapshot_chain_store import (
    SqlEventStore,
    SqlSnapshotChainStore,
)

__all__ = ["SqlEventStore", "SqlSnapshotChainStore"]
