"""Conversion between domain models and ORM records."""

from __future__ import annotations

from polymarket_wallet_monitor.models.chain import StoredSnapshot
from polymarket_wallet_monitor.models.change_event import ChangeEvent, EventType, RecordedEvent
from polymarket_wallet_monitor.models.position import (
    MarketOutcome,
    Position,
    Snapshot,
    format_timestamp,
    parse_timestamp,
)
from polymarket_wallet_monitor.persistence.sql.tables import EventRecord, SnapshotRecord


def snapshot_to_record(snapshot: Snapshot, prev_snapshot_id: int | None) -> SnapshotRecord:
    return SnapshotRecord(
        wallet=snapshot.wallet,
        positions=[p.to_dict() for p in snapshot.positions],
        timestamp=format_timestamp(snapshot.timestamp),
        prev_snapshot_id=prev_snapshot_id,
    )


def record_to_snapshot(record: SnapshotRecord) -> Snapshot:
    return Snapshot(
        wallet=record.wallet,
        timestamp=parse_timestamp(record.timestamp),
        positions=tuple(Position.from_dict(p) for p in record.positions or []),
    )


def record_to_stored(record: SnapshotRecord) -> StoredSnapshot:
    return StoredSnapshot(
        id=record.id,
        snapshot=record_to_snapshot(record),
        predecessor_id=record.prev_snapshot_id,
    )


def event_to_record(event: ChangeEvent, snapshot_id: int, sequence: int) -> EventRecord:
    return EventRecord(
        id=event.event_id,
        wallet=event.wallet,
        event_type=event.event_type.value,
        market_id=event.market_id,
        market_title=event.market_title,
        snapshot_id=snapshot_id,
        sequence=sequence,
        prev_yes_shares=event.prev_yes_shares,
        prev_no_shares=event.prev_no_shares,
        prev_yes_avg_price=event.prev_yes_avg_price,
        prev_no_avg_price=event.prev_no_avg_price,
        curr_yes_shares=event.curr_yes_shares,
        curr_no_shares=event.curr_no_shares,
        curr_yes_avg_price=event.curr_yes_avg_price,
        curr_no_avg_price=event.curr_no_avg_price,
        resolved_outcome=MarketOutcome(event.resolved_outcome).value,
        pnl=event.pnl,
    )


def record_to_event(record: EventRecord, snapshot_timestamp: str) -> RecordedEvent:
    event = ChangeEvent(
        event_id=record.id,
        wallet=record.wallet,
        event_type=EventType(record.event_type),
        market_id=record.market_id,
        market_title=record.market_title,
        prev_yes_shares=record.prev_yes_shares,
        prev_no_shares=record.prev_no_shares,
        prev_yes_avg_price=record.prev_yes_avg_price,
        prev_no_avg_price=record.prev_no_avg_price,
        curr_yes_shares=record.curr_yes_shares,
        curr_no_shares=record.curr_no_shares,
        curr_yes_avg_price=record.curr_yes_avg_price,
        curr_no_avg_price=record.curr_no_avg_price,
        resolved_outcome=MarketOutcome(record.resolved_outcome),
        pnl=record.pnl,
        snapshot_id=record.snapshot_id,
    )
    return RecordedEvent(event=event, timestamp=parse_timestamp(snapshot_timestamp))
