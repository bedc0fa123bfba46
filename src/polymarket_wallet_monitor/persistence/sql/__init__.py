"""SQLAlchemy engine and table definitions."""

from polymarket_wallet_monitor.persistence.sql.database import Database
from polymarket_wallet_monitor.persistence.sql.tables import Base, EventRecord, SnapshotRecord

__all__ = ["Base", "Database", "EventRecord", "SnapshotRecord"]
