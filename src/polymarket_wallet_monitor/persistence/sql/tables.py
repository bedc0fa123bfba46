"""ORM tables for the snapshot chain: snapshots (JSON position blob) and events."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SnapshotRecord(Base):
    __tablename__ = "snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wallet: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    positions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    # ISO 8601 UTC with microseconds; sorts lexicographically.
    timestamp: Mapped[str] = mapped_column(String(40), nullable=False)
    # Unique: a snapshot has at most one successor.
    prev_snapshot_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("snapshots.id"),
        nullable=True,
        unique=True,
    )

    __table_args__ = (
        # One chain head per wallet.
        Index(
            "uq_snapshots_wallet_head",
            "wallet",
            unique=True,
            sqlite_where=text("prev_snapshot_id IS NULL"),
            postgresql_where=text("prev_snapshot_id IS NULL"),
        ),
        Index("ix_snapshots_wallet_id", "wallet", "id"),
    )


class EventRecord(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    wallet: Mapped[str] = mapped_column(String(42), nullable=False)
    event_type: Mapped[str] = mapped_column(String(16), nullable=False)
    market_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    market_title: Mapped[str] = mapped_column(String, nullable=False)
    snapshot_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("snapshots.id"), nullable=False, index=True
    )
    # Position within the snapshot's event batch (diff order).
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    prev_yes_shares: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prev_no_shares: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prev_yes_avg_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prev_no_avg_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    curr_yes_shares: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    curr_no_shares: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    curr_yes_avg_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    curr_no_avg_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    resolved_outcome: Mapped[str] = mapped_column(String(16), nullable=False)
    pnl: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_events_wallet", "wallet"),)
