# -*- coding: utf-8 -*-
"""Polymarket Gamma API client (market status by condition_id)."""

from __future__ import annotations

import json
import structlog
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, cast
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.clients.data_api.schema import MarketInfo
from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.utils.validation import is_condition_id

if TYPE_CHECKING:
    from .http import AsyncHttpClient


def _as_list(raw: Any) -> list[Any]:
    """Gamma serializes outcomes/outcomePrices either as lists or as JSON-encoded strings."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    return list(raw) if isinstance(raw, list) else []


def _as_prices(raw: Any) -> list[float]:
    prices: list[float] = []
    for p in _as_list(raw):
        try:
            prices.append(float(p))
        except (TypeError, ValueError):
            return []
    return prices


def parse_market(market: Dict[str, Any]) -> MarketInfo:
    """Normalize one Gamma /markets item into MarketInfo."""
    return {
        "closed": bool(market.get("closed", False)),
        "outcomes": [str(o) for o in _as_list(market.get("outcomes"))],
        "outcome_prices": _as_prices(market.get("outcomePrices")),
        "title": str(market.get("question") or market.get("title") or ""),
    }


class GammaApiClient:
    """Client for Polymarket Gamma API (/markets by condition_ids)."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.api.gamma_host,
                settings.resolution.batch_size).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        return self._settings.api.gamma_host.rstrip("/")

    async def get_markets_by_condition_ids(
        self,
        condition_ids: List[str],
    ) -> Dict[str, MarketInfo]:
        """Look up closed status and outcome prices for condition_ids.

        Batches requests using settings.resolution.batch_size. Tries params
        condition_ids first, then condition_ids[] if the response is empty.
        Request failures propagate; ids Gamma does not return are absent
        from the result.

        Args:
            condition_ids: List of 0x condition IDs (66 chars). Others are skipped.

        Returns:
            Dict mapping condition_id -> MarketInfo.
        """
        uniq: list[str] = []
        seen: set[str] = set()
        for cid in condition_ids:
            if is_condition_id(cid) and cid not in seen:
                seen.add(cid)
                uniq.append(cid)

        if not uniq:
            return {}

        batch_size = max(1, self._settings.resolution.batch_size)
        out: Dict[str, MarketInfo] = {}

        for i in range(0, len(uniq), batch_size):
            batch = uniq[i : i + batch_size]
            with bound_contextvars(
                gamma_api_batch_index=i // batch_size,
                gamma_api_batch_size=len(batch),
                gamma_api_condition_ids_count=len(uniq),
            ):
                self._logger.debug("gamma_api_batch_request")
                arr = await self._fetch_one_batch(batch)

            for m in arr:
                cid = m.get("conditionId") or m.get("condition_id")
                if not cid or str(cid) not in seen:
                    continue
                out[str(cid)] = parse_market(m)

        return out

    async def _fetch_one_batch(self, condition_ids: List[str]) -> List[Dict[str, Any]]:
        url = f"{self._base_url()}/markets"
        params: Dict[str, Any] = {
            "condition_ids": condition_ids,
            "limit": max(1, len(condition_ids)),
            "offset": 0,
        }
        data = await self._http.get(url, params=params)
        arr = self.__as_list_of_dicts(data)
        if arr:
            return arr
        self._logger.debug(
            "gamma_api_batch_empty",
            gamma_api_fallback_params="condition_ids[]",
        )
        params2: Dict[str, Any] = {
            "condition_ids[]": condition_ids,
            "limit": max(1, len(condition_ids)),
            "offset": 0,
        }
        data2 = await self._http.get(url, params=params2)
        return self.__as_list_of_dicts(data2)

    @staticmethod
    def __as_list_of_dicts(x: Any) -> List[Dict[str, Any]]:
        if not isinstance(x, list):
            return []
        result: List[Dict[str, Any]] = []
        for v in cast(List[Any], x):
            if isinstance(v, dict):
                result.append(cast(Dict[str, Any], v))
        return result
