"""Snapshot chain records and the tagged results of chain writes.

Chain writes return one variant instead of raising, so each caller handles
every precondition failure explicitly:

    ChainWriteOk | DuplicateInitialization | EmptyEventSet | NoPredecessor | StorageFailure
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from polymarket_wallet_monitor.models.position import Snapshot


@dataclass(frozen=True, slots=True)
class StoredSnapshot:
    """A persisted snapshot with its chain link."""

    id: int
    snapshot: Snapshot
    predecessor_id: Optional[int]
    """None only for the first snapshot of a wallet."""

    @property
    def is_chain_head(self) -> bool:
        return self.predecessor_id is None


@dataclass(frozen=True, slots=True)
class ChainWriteOk:
    snapshot_id: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class DuplicateInitialization:
    """initialize_chain was called for a wallet that already has snapshots."""

    wallet: str
    existing_snapshot_id: int

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        return (
            f"wallet {self.wallet} already has snapshots "
            f"(latest id {self.existing_snapshot_id}); use append_with_events"
        )


@dataclass(frozen=True, slots=True)
class EmptyEventSet:
    """append_with_events was called with no events."""

    wallet: str

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        return "at least one event is required to append a snapshot"


@dataclass(frozen=True, slots=True)
class NoPredecessor:
    """append_with_events was called before initialize_chain for the wallet."""

    wallet: str

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        return f"no previous snapshot exists for wallet {self.wallet}; use initialize_chain first"


@dataclass(frozen=True, slots=True)
class StorageFailure:
    """The unit of work failed and was rolled back; nothing was written."""

    wallet: str
    detail: str
    error_type: Optional[str] = None
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        prefix = f"{self.error_type}: " if self.error_type else ""
        return f"storage failure ({prefix}{self.detail})"


ChainWriteFailure = Union[DuplicateInitialization, EmptyEventSet, NoPredecessor, StorageFailure]
ChainWriteResult = Union[ChainWriteOk, ChainWriteFailure]


@dataclass(frozen=True, slots=True)
class WalletChainStats:
    wallet: str
    snapshot_count: int
    latest_timestamp: datetime


@dataclass(frozen=True, slots=True)
class ChainStats:
    """Totals across all wallets, per-wallet rows ordered by latest snapshot (newest first)."""

    total_snapshots: int
    total_events: int
    wallets: list[WalletChainStats] = field(default_factory=list)

    @property
    def unique_wallets(self) -> int:
        return len(self.wallets)
