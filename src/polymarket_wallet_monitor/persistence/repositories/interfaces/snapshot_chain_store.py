# -*- coding: utf-8 -*-
"""Abstract interface for the per-wallet snapshot chain (in-memory, SQL, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from polymarket_wallet_monitor.models.chain import ChainStats, ChainWriteResult, StoredSnapshot
from polymarket_wallet_monitor.models.change_event import ChangeEvent
from polymarket_wallet_monitor.models.position import Snapshot


class ISnapshotChainStore(ABC):
    """Append-only chain of snapshots per wallet, each linked to its predecessor.

    There are exactly two writes. initialize_chain creates the head of a
    wallet's chain and never takes events; append_with_events extends the
    tail and requires at least one event. Both return a ChainWriteResult
    variant instead of raising for precondition or storage failures.
    """

    @abstractmethod
    async def initialize_chain(self, snapshot: Snapshot) -> ChainWriteResult:
        """Persist the first snapshot of snapshot.wallet with no predecessor.

        Returns:
            ChainWriteOk(snapshot_id), DuplicateInitialization if the wallet
            already has a snapshot, or StorageFailure.
        """
        ...

    @abstractmethod
    async def append_with_events(
        self,
        snapshot: Snapshot,
        events: Sequence[ChangeEvent],
    ) -> ChainWriteResult:
        """Persist snapshot linked to the wallet's current tail, plus all events, atomically.

        Every event is stored with snapshot_id set to the new snapshot's id.

        Returns:
            ChainWriteOk(snapshot_id), EmptyEventSet if events is empty,
            NoPredecessor if the wallet has no snapshot yet, or StorageFailure
            (in which case neither the snapshot nor any event is visible).
        """
        ...

    @abstractmethod
    async def get_latest(self, wallet: str) -> Optional[StoredSnapshot]:
        """Return the most recently created snapshot (chain tail) for wallet, or None."""
        ...

    @abstractmethod
    async def get_by_id(self, snapshot_id: int) -> Optional[Snapshot]:
        """Return the snapshot with this id, or None if missing."""
        ...

    @abstractmethod
    async def get_record(self, snapshot_id: int) -> Optional[StoredSnapshot]:
        """Return the snapshot with its id and predecessor link, or None if missing."""
        ...

    @abstractmethod
    async def get_stats(self) -> ChainStats:
        """Return snapshot/event totals and per-wallet snapshot counts."""
        ...

    async def walk_chain(self, wallet: str, limit: Optional[int] = None) -> list[StoredSnapshot]:
        """Follow predecessor links backward from the tail; newest first.

        Args:
            wallet: Wallet address.
            limit: Maximum number of snapshots to return (None for the whole chain).
        """
        chain: list[StoredSnapshot] = []
        current = await self.get_latest(wallet)
        while current is not None and (limit is None or len(chain) < limit):
            chain.append(current)
            if current.predecessor_id is None:
                break
            current = await self.get_record(current.predecessor_id)
        return chain
