# -*- coding: utf-8 -*-
"""Snapshot service: fetch current positions, diff against the chain tail, persist."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.exceptions import SnapshotChainError
from polymarket_wallet_monitor.models.chain import ChainWriteOk, ChainWriteResult
from polymarket_wallet_monitor.models.change_event import ChangeEvent
from polymarket_wallet_monitor.models.position import Snapshot
from polymarket_wallet_monitor.persistence.repositories.interfaces.snapshot_chain_store import (
    ISnapshotChainStore,
)
from polymarket_wallet_monitor.services.diff.diff_engine import compute_diff
from polymarket_wallet_monitor.utils.validation import mask_address, validate_wallet_address


class PositionProvider(Protocol):
    """Source of a wallet's current positions."""

    async def get_wallet_positions(self, wallet: str) -> Snapshot: ...


@dataclass(frozen=True)
class SnapshotResult:
    """Outcome of one take_snapshot call."""

    snapshot: Snapshot
    """The freshly fetched snapshot (returned even when not saved)."""
    events: list[ChangeEvent] = field(default_factory=list)
    """Persisted events with snapshot_id set; empty for a first or unchanged snapshot."""
    is_first_snapshot: bool = False
    saved: bool = False
    snapshot_id: int | None = None


class SnapshotService:
    """Orchestrates position provider, diff engine and chain store for one wallet.

    Saves the first snapshot of a wallet as the chain head, saves later
    snapshots only when the diff produced events, and never writes a snapshot
    that is identical to the chain tail.
    """

    def __init__(
        self,
        position_provider: PositionProvider,
        chain_store: ISnapshotChainStore,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            position_provider: Fetches current positions (injected).
            chain_store: Snapshot chain store (injected).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._provider = position_provider
        self._store = chain_store
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _require_ok(self, wallet: str, operation: str, result: ChainWriteResult) -> int:
        if isinstance(result, ChainWriteOk):
            return result.snapshot_id
        self._logger.error(
            "snapshot_chain_write_rejected",
            chain_operation=operation,
            failure_type=type(result).__name__,
            failure_detail=result.describe(),
        )
        raise SnapshotChainError(wallet, operation, result) from getattr(result, "cause", None)

    async def take_snapshot(self, wallet: str) -> SnapshotResult:
        """Capture wallet positions now and record what changed since the last capture.

        Args:
            wallet: Wallet address (0x + 40 hex chars).

        Returns:
            SnapshotResult with the fetched snapshot, persisted events and flags.

        Raises:
            InvalidWalletAddressError: Before any I/O if wallet is malformed.
            SnapshotChainError: If the chain store returns a failure variant.
            Any error of the position provider or store reads, unchanged.
        """
        wallet = validate_wallet_address(wallet)

        with bound_contextvars(wallet_masked=mask_address(wallet)):
            self._logger.debug("snapshot_take_started")
            try:
                current = await self._provider.get_wallet_positions(wallet)
                latest = await self._store.get_latest(wallet)

                if latest is None:
                    snapshot_id = self._require_ok(
                        wallet, "initialize_chain", await self._store.initialize_chain(current)
                    )
                    self._logger.info(
                        "snapshot_first_saved",
                        snapshot_id=snapshot_id,
                        positions_count=len(current.positions),
                    )
                    return SnapshotResult(
                        snapshot=current,
                        events=[],
                        is_first_snapshot=True,
                        saved=True,
                        snapshot_id=snapshot_id,
                    )

                diff_events = compute_diff(latest.snapshot, current)
                if not diff_events:
                    self._logger.info(
                        "snapshot_unchanged_skipped",
                        previous_snapshot_id=latest.id,
                        positions_count=len(current.positions),
                    )
                    return SnapshotResult(snapshot=current, is_first_snapshot=False, saved=False)

                snapshot_id = self._require_ok(
                    wallet,
                    "append_with_events",
                    await self._store.append_with_events(current, diff_events),
                )
                events = [e.with_snapshot_id(snapshot_id) for e in diff_events]
                self._logger.info(
                    "snapshot_saved_with_events",
                    snapshot_id=snapshot_id,
                    previous_snapshot_id=latest.id,
                    events_count=len(events),
                )
                return SnapshotResult(
                    snapshot=current,
                    events=events,
                    is_first_snapshot=False,
                    saved=True,
                    snapshot_id=snapshot_id,
                )
            except Exception as e:
                self._logger.error(
                    "snapshot_take_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
