# -*- coding: utf-8 -*-
"""Market outcome resolution via Gamma, with an LRU cache of settled markets."""

from __future__ import annotations

import structlog
from typing import Any, Callable, Dict, List, Optional
from cachetools import LRUCache
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.clients.data_api.schema import MarketInfo
from polymarket_wallet_monitor.clients.gamma_api import GammaApiClient
from polymarket_wallet_monitor.models.position import MarketOutcome


def _price_for(info: MarketInfo, side: str, default_index: int) -> Optional[float]:
    prices = info["outcome_prices"]
    outcomes = [o.strip().lower() for o in info["outcomes"]]
    index = outcomes.index(side) if side in outcomes else default_index
    return prices[index] if index < len(prices) else None


def resolve_outcome(info: Optional[MarketInfo]) -> MarketOutcome:
    """Derive a market's outcome from its Gamma status.

    Sides follow the Yes/No labels when Gamma has them, else the outcome
    order (index 0 is YES, index 1 is NO), matching how positions are split
    into sides.

    Not closed (or unknown) is unresolved. A closed market whose YES or NO
    price is exactly 1 resolved to that side; a closed market with both
    prices at 0.5 resolved invalid (50/50 refund). Anything else is still
    awaiting settlement and stays unresolved.
    """
    if info is None or not info["closed"]:
        return MarketOutcome.UNRESOLVED
    yes_price = _price_for(info, "yes", 0)
    no_price = _price_for(info, "no", 1)
    if yes_price == 1.0:
        return MarketOutcome.YES
    if no_price == 1.0:
        return MarketOutcome.NO
    if yes_price == 0.5 and no_price == 0.5:
        return MarketOutcome.INVALID
    return MarketOutcome.UNRESOLVED


class MarketResolutionCache:
    """condition_id -> MarketOutcome, looking up only what is not settled yet.

    Only terminal outcomes are cached: a resolved market never changes
    outcome, while an open one must be asked again next time. Uses
    cachetools.LRUCache so memory stays bounded when watching many markets.
    """

    def __init__(
        self,
        gamma_client: GammaApiClient,
        *,
        maxsize: int = 4096,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the cache.

        Args:
            gamma_client: Gamma API client (injected).
            maxsize: Maximum number of settled markets to keep (LRU eviction).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._client = gamma_client
        self._cache: LRUCache[str, MarketOutcome] = LRUCache(maxsize=max(1, maxsize))
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def resolve(self, condition_ids: List[str]) -> Dict[str, MarketOutcome]:
        """Return the outcome of every requested market.

        Args:
            condition_ids: Market condition IDs.

        Returns:
            Dict with one entry per requested id (UNRESOLVED when unknown).
        """
        result: Dict[str, MarketOutcome] = {}
        missing: list[str] = []
        for cid in condition_ids:
            cached = self._cache.get(cid)
            if cached is not None:
                result[cid] = cached
            else:
                missing.append(cid)

        if missing:
            with bound_contextvars(
                resolution_requested_count=len(condition_ids),
                resolution_missing_count=len(missing),
            ):
                markets = await self._client.get_markets_by_condition_ids(missing)
                settled = 0
                for cid in missing:
                    outcome = resolve_outcome(markets.get(cid))
                    result[cid] = outcome
                    if outcome.is_resolved:
                        self._cache[cid] = outcome
                        settled += 1
                self._logger.debug(
                    "resolution_cache_resolve",
                    resolution_found_count=len(markets),
                    resolution_settled_count=settled,
                )
        return result

    def get(self, condition_id: str) -> Optional[MarketOutcome]:
        """Return the cached outcome of a settled market, or None."""
        return self._cache.get(condition_id)
