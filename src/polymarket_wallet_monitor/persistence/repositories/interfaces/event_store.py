"""Abstract interface for reading persisted change events (in-memory, SQL, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from polymarket_wallet_monitor.models.change_event import RecordedEvent


class IEventStore(ABC):
    """Read side of the events written by ISnapshotChainStore.append_with_events.

    Events are ordered newest first by the timestamp of the snapshot that
    produced them; events of the same snapshot keep their diff order.
    """

    @abstractmethod
    async def events_by_wallet(self, wallet: str, limit: int = 50) -> list[RecordedEvent]:
        """Return up to limit events for the wallet, newest first."""
        ...

    @abstractmethod
    async def events_by_market(self, market_id: str) -> list[RecordedEvent]:
        """Return all events for the market across wallets, newest first."""
        ...
