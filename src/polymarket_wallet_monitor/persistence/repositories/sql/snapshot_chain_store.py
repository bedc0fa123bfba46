# -*- coding: utf-8 -*-
"""SQL (SQLAlchemy async) snapshot chain store and event store."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, Optional

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog.contextvars import bound_contextvars

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
from polymarket_wallet_monitor.models.position import Snapshot, parse_timestamp
from polymarket_wallet_monitor.persistence.repositories.interfaces.event_store import IEventStore
from polymarket_wallet_monitor.persistence.repositories.interfaces.snapshot_chain_store import (
    ISnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.repositories.sql.mapping import (
    event_to_record,
    record_to_event,
    record_to_snapshot,
    record_to_stored,
    snapshot_to_record,
)
from polymarket_wallet_monitor.persistence.sql.database import Database
from polymarket_wallet_monitor.persistence.sql.tables import EventRecord, SnapshotRecord
from polymarket_wallet_monitor.utils.validation import mask_address


async def _tail_id(session: AsyncSession, wallet: str) -> Optional[int]:
    stmt = (
        select(SnapshotRecord.id)
        .where(SnapshotRecord.wallet == wallet)
        .order_by(SnapshotRecord.id.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


class SqlSnapshotChainStore(ISnapshotChainStore):
    """ISnapshotChainStore on SQLAlchemy's async ORM.

    Each write runs in a single transaction. Precondition checks read inside
    that transaction, so a concurrent writer racing past them is stopped by
    the unique constraints (one head per wallet, one successor per snapshot)
    and the whole transaction rolls back into a StorageFailure.
    """

    def __init__(
        self,
        database: Database,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the store.

        Args:
            database: Database owning the engine and session factory (injected).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._db = database
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _storage_failure(self, wallet: str, operation: str, error: Exception) -> StorageFailure:
        self._logger.exception(
            "snapshot_chain_write_failed",
            chain_operation=operation,
            wallet_masked=mask_address(wallet),
            error_type=type(error).__name__,
            error_message=str(error),
        )
        return StorageFailure(
            wallet=wallet, detail=str(error), error_type=type(error).__name__, cause=error
        )

    async def initialize_chain(self, snapshot: Snapshot) -> ChainWriteResult:
        wallet = snapshot.wallet
        with bound_contextvars(wallet_masked=mask_address(wallet)):
            try:
                async with self._db.session() as session, session.begin():
                    existing = await _tail_id(session, wallet)
                    if existing is not None:
                        return DuplicateInitialization(wallet=wallet, existing_snapshot_id=existing)
                    record = snapshot_to_record(snapshot, prev_snapshot_id=None)
                    session.add(record)
                    await session.flush()
                    snapshot_id = record.id
            except Exception as e:
                return self._storage_failure(wallet, "initialize_chain", e)

            self._logger.debug(
                "snapshot_chain_initialized",
                snapshot_id=snapshot_id,
                positions_count=len(snapshot.positions),
            )
            return ChainWriteOk(snapshot_id=snapshot_id)

    async def append_with_events(
        self,
        snapshot: Snapshot,
        events: Sequence[ChangeEvent],
    ) -> ChainWriteResult:
        wallet = snapshot.wallet
        if not events:
            return EmptyEventSet(wallet=wallet)

        with bound_contextvars(wallet_masked=mask_address(wallet)):
            try:
                async with self._db.session() as session, session.begin():
                    predecessor_id = await _tail_id(session, wallet)
                    if predecessor_id is None:
                        return NoPredecessor(wallet=wallet)
                    record = snapshot_to_record(snapshot, prev_snapshot_id=predecessor_id)
                    session.add(record)
                    await session.flush()
                    snapshot_id = record.id
                    session.add_all(
                        [event_to_record(e, snapshot_id, seq) for seq, e in enumerate(events)]
                    )
                    await session.flush()
            except Exception as e:
                return self._storage_failure(wallet, "append_with_events", e)

            self._logger.debug(
                "snapshot_chain_appended",
                snapshot_id=snapshot_id,
                predecessor_id=predecessor_id,
                events_count=len(events),
            )
            return ChainWriteOk(snapshot_id=snapshot_id)

    async def get_latest(self, wallet: str) -> Optional[StoredSnapshot]:
        stmt = (
            select(SnapshotRecord)
            .where(SnapshotRecord.wallet == wallet)
            .order_by(SnapshotRecord.id.desc())
            .limit(1)
        )
        async with self._db.session() as session:
            record = (await session.execute(stmt)).scalar_one_or_none()
            return record_to_stored(record) if record is not None else None

    async def get_by_id(self, snapshot_id: int) -> Optional[Snapshot]:
        async with self._db.session() as session:
            record = await session.get(SnapshotRecord, snapshot_id)
            return record_to_snapshot(record) if record is not None else None

    async def get_record(self, snapshot_id: int) -> Optional[StoredSnapshot]:
        async with self._db.session() as session:
            record = await session.get(SnapshotRecord, snapshot_id)
            return record_to_stored(record) if record is not None else None

    async def get_stats(self) -> ChainStats:
        latest = func.max(SnapshotRecord.timestamp)
        per_wallet_stmt = (
            select(SnapshotRecord.wallet, func.count(SnapshotRecord.id), latest)
            .group_by(SnapshotRecord.wallet)
            .order_by(latest.desc())
        )
        async with self._db.session() as session:
            total_snapshots = (
                await session.execute(select(func.count(SnapshotRecord.id)))
            ).scalar_one()
            total_events = (await session.execute(select(func.count(EventRecord.id)))).scalar_one()
            rows = (await session.execute(per_wallet_stmt)).all()

        return ChainStats(
            total_snapshots=total_snapshots,
            total_events=total_events,
            wallets=[
                WalletChainStats(
                    wallet=wallet,
                    snapshot_count=count,
                    latest_timestamp=parse_timestamp(ts),
                )
                for wallet, count, ts in rows
            ],
        )


class SqlEventStore(IEventStore):
    """IEventStore reading the events table joined with the owning snapshot."""

    def __init__(self, database: Database) -> None:
        self._db = database

    @staticmethod
    def _base_query() -> Select[tuple[EventRecord, str]]:
        return (
            select(EventRecord, SnapshotRecord.timestamp)
            .join(SnapshotRecord, EventRecord.snapshot_id == SnapshotRecord.id)
            .order_by(
                SnapshotRecord.timestamp.desc(),
                EventRecord.snapshot_id.desc(),
                EventRecord.sequence.asc(),
            )
        )

    async def _fetch(self, stmt: Select[tuple[EventRecord, str]]) -> list[RecordedEvent]:
        async with self._db.session() as session:
            rows = (await session.execute(stmt)).all()
            return [record_to_event(record, ts) for record, ts in rows]

    async def events_by_wallet(self, wallet: str, limit: int = 50) -> list[RecordedEvent]:
        if limit <= 0:
            return []
        stmt = self._base_query().where(EventRecord.wallet == wallet).limit(limit)
        return await self._fetch(stmt)

    async def events_by_market(self, market_id: str) -> list[RecordedEvent]:
        stmt = self._base_query().where(EventRecord.market_id == market_id)
        return await self._fetch(stmt)
