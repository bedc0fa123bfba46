# -*- coding: utf-8 -*-
"""Position provider: Data API rows -> validated Snapshot (the ingestion boundary).

Everything the diff engine and chain stores trust about a Snapshot is checked
here: share counts non-negative, prices null or in [0, 1], non-empty market
id and title, one position per market.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.clients.data_api import DataApiClient, PositionSchema
from polymarket_wallet_monitor.clients.resolution_cache import MarketResolutionCache
from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.exceptions import InvalidPositionDataError
from polymarket_wallet_monitor.models.position import (
    Position,
    Snapshot,
    is_valid_market_price,
    is_valid_share_count,
)
from polymarket_wallet_monitor.utils.validation import mask_address, validate_wallet_address


def _float_or_none(raw: Any, field_name: str, market_id: str) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidPositionDataError(
            f"Non-numeric {field_name} {raw!r} in Data API position", market_id=market_id
        ) from e


def _side_of(row: PositionSchema, market_id: str) -> str:
    """Return "yes" or "no" for one Data API row.

    A Yes/No label decides; otherwise the outcome index does (0 is YES, 1 is
    NO), which is the order Gamma lists outcomes and prices in.
    """
    label = str(row.get("outcome") or "").strip().lower()
    if label in ("yes", "no"):
        return label
    index = row.get("outcomeIndex")
    if isinstance(index, int) and not isinstance(index, bool) and index in (0, 1):
        return "yes" if index == 0 else "no"
    raise InvalidPositionDataError(
        f"Cannot map outcome {row.get('outcome')!r} (outcomeIndex {index!r}) to a YES/NO side",
        market_id=market_id,
    )


def transform_positions(
    wallet: str,
    raw_positions: Iterable[PositionSchema],
    timestamp: datetime,
) -> Snapshot:
    """Group Data API rows (one per outcome token) into one Position per market.

    Each row fills the side chosen by _side_of; a second row for a side
    already filled is rejected rather than overwriting it. Negative average
    prices, which the API occasionally reports, are clamped to 0. A side without a row keeps 0 shares and no price.
    Markets keep the order in which they are first seen; every position is
    unresolved until enriched.
    """
    by_market: dict[str, Position] = {}
    filled: dict[str, set[str]] = {}
    for row in raw_positions:
        market_id = str(row.get("conditionId") or "")
        position = by_market.get(market_id)
        if position is None:
            position = Position(market_id=market_id, market_title=str(row.get("title") or ""))

        size = _float_or_none(row.get("size"), "size", market_id) or 0.0
        avg_price = _float_or_none(row.get("avgPrice"), "avgPrice", market_id)
        if avg_price is not None:
            avg_price = max(0.0, avg_price)

        side = _side_of(row, market_id)
        if side in filled.setdefault(market_id, set()):
            raise InvalidPositionDataError(
                f"Duplicate {side.upper()} row in Data API positions", market_id=market_id
            )
        filled[market_id].add(side)
        if side == "yes":
            position = replace(position, yes_shares=size, yes_avg_price=avg_price)
        else:
            position = replace(position, no_shares=size, no_avg_price=avg_price)
        by_market[market_id] = position

    return Snapshot(wallet=wallet, timestamp=timestamp, positions=tuple(by_market.values()))


def validate_snapshot(snapshot: Snapshot) -> Snapshot:
    """Check Position/Snapshot invariants; return the snapshot unchanged.

    Raises:
        InvalidPositionDataError: On the first violated invariant.
    """
    seen: set[str] = set()
    for p in snapshot.positions:
        if not p.market_id:
            raise InvalidPositionDataError("Market ID cannot be empty")
        if not p.market_title:
            raise InvalidPositionDataError("Market title cannot be empty", market_id=p.market_id)
        if p.market_id in seen:
            raise InvalidPositionDataError(
                f"Duplicate market {p.market_id} in snapshot", market_id=p.market_id
            )
        seen.add(p.market_id)
        if not (is_valid_share_count(p.yes_shares) and is_valid_share_count(p.no_shares)):
            raise InvalidPositionDataError(
                "Share counts must be non-negative", market_id=p.market_id
            )
        if not (is_valid_market_price(p.yes_avg_price) and is_valid_market_price(p.no_avg_price)):
            raise InvalidPositionDataError(
                "Average prices must be between 0 and 1", market_id=p.market_id
            )
    return snapshot


class PolymarketPositionProvider:
    """Fetches a wallet's current positions and returns them as a Snapshot."""

    def __init__(
        self,
        data_api: DataApiClient,
        settings: Settings,
        *,
        resolution_cache: Optional[MarketResolutionCache] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            data_api: Data API client (injected).
            settings: Application settings (uses settings.api paging and settings.resolution).
            resolution_cache: Optional outcome lookup; without it every position stays unresolved.
            clock: Source of the snapshot timestamp (UTC).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._data_api = data_api
        self._settings = settings
        self._resolution = resolution_cache
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _fetch_all(self, wallet: str) -> list[PositionSchema]:
        page_size = self._settings.api.positions_page_size
        max_pages = self._settings.api.positions_max_pages
        rows: list[PositionSchema] = []
        for page in range(max_pages):
            batch = await self._data_api.get_positions(
                wallet, limit=page_size, offset=page * page_size
            )
            rows.extend(batch)
            if len(batch) < page_size:
                return rows
        self._logger.warning(
            "position_provider_page_cap_reached",
            positions_max_pages=max_pages,
            positions_fetched=len(rows),
        )
        return rows

    async def get_wallet_positions(self, wallet: str) -> Snapshot:
        """Return the wallet's current positions stamped with the current UTC time.

        Args:
            wallet: Wallet address (0x + 40 hex chars).

        Returns:
            Validated Snapshot, outcomes enriched from Gamma when enabled.

        Raises:
            InvalidWalletAddressError: Before any request if wallet is malformed.
            PolymarketAPIError: If the Data API or Gamma API request fails.
            InvalidPositionDataError: If the fetched data breaks Position invariants.
        """
        wallet = validate_wallet_address(wallet)
        with bound_contextvars(wallet_masked=mask_address(wallet)):
            rows = await self._fetch_all(wallet)
            snapshot = transform_positions(wallet, rows, self._clock())

            if self._resolution is not None and self._settings.resolution.enabled and snapshot.positions:
                outcomes = await self._resolution.resolve(snapshot.market_ids)
                snapshot = replace(
                    snapshot,
                    positions=tuple(
                        replace(p, resolved_outcome=outcomes.get(p.market_id, p.resolved_outcome))
                        for p in snapshot.positions
                    ),
                )

            validate_snapshot(snapshot)
            self._logger.info(
                "position_provider_snapshot_fetched",
                api_rows_count=len(rows),
                positions_count=len(snapshot.positions),
                resolved_count=sum(1 for p in snapshot.positions if p.resolved_outcome.is_resolved),
            )
            return snapshot
