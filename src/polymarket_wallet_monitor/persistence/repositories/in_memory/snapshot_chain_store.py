# -*- coding: utf-8 -*-
"""In-memory snapshot chain and event stores sharing one state object."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from polymarket_wallet_monitor.models.chain import (
    ChainStats,
    ChainWriteOk,
    ChainWriteResult,
    DuplicateInitialization,
    EmptyEventSet,
    NoPredecessor,
    StorageFailure,
    StoredSnapshot,
    WalletChainStats,
)
from polymarket_wallet_monitor.models.change_event import ChangeEvent, RecordedEvent
from polymarket_wallet_monitor.models.position import Snapshot
from polymarket_wallet_monitor.persistence.repositories.interfaces.event_store import IEventStore
from polymarket_wallet_monitor.persistence.repositories.interfaces.snapshot_chain_store import (
    ISnapshotChainStore,
)


@dataclass
class InMemoryChainState:
    """Backing storage shared by InMemorySnapshotChainStore and InMemoryEventStore."""

    snapshots: dict[int, StoredSnapshot] = field(default_factory=dict)
    tails: dict[str, int] = field(default_factory=dict)
    """wallet -> id of the latest snapshot (chain tail)."""
    events: list[ChangeEvent] = field(default_factory=list)
    """Insertion order; the list index is the event's sequence."""
    event_ids: set[str] = field(default_factory=set)
    next_snapshot_id: int = 1


class InMemorySnapshotChainStore(ISnapshotChainStore):
    """In-memory implementation of ISnapshotChainStore.

    Writes stage every record first and publish them in one step, so a
    rejected write leaves the state untouched.
    """

    def __init__(self, state: InMemoryChainState | None = None) -> None:
        """Initialize over the given state (or a fresh empty one)."""
        self._state = state or InMemoryChainState()

    @property
    def state(self) -> InMemoryChainState:
        return self._state

    def _allocate_id(self) -> int:
        snapshot_id = self._state.next_snapshot_id
        self._state.next_snapshot_id += 1
        return snapshot_id

    async def initialize_chain(self, snapshot: Snapshot) -> ChainWriteResult:
        existing = self._state.tails.get(snapshot.wallet)
        if existing is not None:
            return DuplicateInitialization(wallet=snapshot.wallet, existing_snapshot_id=existing)

        snapshot_id = self._allocate_id()
        self._state.snapshots[snapshot_id] = StoredSnapshot(
            id=snapshot_id,
            snapshot=snapshot,
            predecessor_id=None,
        )
        self._state.tails[snapshot.wallet] = snapshot_id
        return ChainWriteOk(snapshot_id=snapshot_id)

    async def append_with_events(
        self,
        snapshot: Snapshot,
        events: Sequence[ChangeEvent],
    ) -> ChainWriteResult:
        if not events:
            return EmptyEventSet(wallet=snapshot.wallet)
        predecessor_id = self._state.tails.get(snapshot.wallet)
        if predecessor_id is None:
            return NoPredecessor(wallet=snapshot.wallet)

        incoming_ids = [e.event_id for e in events]
        duplicates = sorted(
            {i for i in incoming_ids if i in self._state.event_ids}
            | {i for i in incoming_ids if incoming_ids.count(i) > 1}
        )
        if duplicates:
            return StorageFailure(
                wallet=snapshot.wallet,
                detail=f"duplicate event id(s): {', '.join(duplicates)}",
                error_type="IntegrityError",
            )

        snapshot_id = self._state.next_snapshot_id
        record = StoredSnapshot(id=snapshot_id, snapshot=snapshot, predecessor_id=predecessor_id)
        staged = [e.with_snapshot_id(snapshot_id) for e in events]

        self._allocate_id()
        self._state.snapshots[snapshot_id] = record
        self._state.tails[snapshot.wallet] = snapshot_id
        self._state.events.extend(staged)
        self._state.event_ids.update(incoming_ids)
        return ChainWriteOk(snapshot_id=snapshot_id)

    async def get_latest(self, wallet: str) -> StoredSnapshot | None:
        tail = self._state.tails.get(wallet)
        return self._state.snapshots.get(tail) if tail is not None else None

    async def get_by_id(self, snapshot_id: int) -> Snapshot | None:
        record = self._state.snapshots.get(snapshot_id)
        return record.snapshot if record is not None else None

    async def get_record(self, snapshot_id: int) -> StoredSnapshot | None:
        return self._state.snapshots.get(snapshot_id)

    async def get_stats(self) -> ChainStats:
        per_wallet: dict[str, list[StoredSnapshot]] = {}
        for record in self._state.snapshots.values():
            per_wallet.setdefault(record.snapshot.wallet, []).append(record)
        wallets = [
            WalletChainStats(
                wallet=wallet,
                snapshot_count=len(records),
                latest_timestamp=max(r.snapshot.timestamp for r in records),
            )
            for wallet, records in per_wallet.items()
        ]
        wallets.sort(key=lambda w: w.latest_timestamp, reverse=True)
        return ChainStats(
            total_snapshots=len(self._state.snapshots),
            total_events=len(self._state.events),
            wallets=wallets,
        )


class InMemoryEventStore(IEventStore):
    """In-memory implementation of IEventStore (reads InMemoryChainState)."""

    def __init__(self, state: InMemoryChainState) -> None:
        self._state = state

    def _recorded(self, predicate: Callable[[ChangeEvent], bool]) -> list[RecordedEvent]:
        rows: list[RecordedEvent] = []
        for event in self._state.events:
            if event.snapshot_id is None or not predicate(event):
                continue
            owner = self._state.snapshots[event.snapshot_id]
            rows.append(RecordedEvent(event=event, timestamp=owner.snapshot.timestamp))
        # Newest snapshot first; sort is stable so diff order holds within a snapshot.
        rows.sort(key=lambda r: (r.timestamp, r.event.snapshot_id or 0), reverse=True)
        return rows

    async def events_by_wallet(self, wallet: str, limit: int = 50) -> list[RecordedEvent]:
        return self._recorded(lambda e: e.wallet == wallet)[: max(0, limit)]

    async def events_by_market(self, market_id: str) -> list[RecordedEvent]:
        return self._recorded(lambda e: e.market_id == market_id)
