# -*- coding: utf-8 -*-
"""Unit tests for DataApiClient."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

from polymarket_wallet_monitor.clients.data_api import DataApiClient


async def test_get_positions_builds_query(settings, wallet) -> None:
    http = SimpleNamespace(get=AsyncMock(return_value=[{"conditionId": "m1"}, "junk"]))
    client = DataApiClient(http, settings)

    rows = await client.get_positions(wallet, limit=900, offset=-5)

    assert rows == [{"conditionId": "m1"}]
    http.get.assert_awaited_once_with(
        "https://data-api.polymarket.com/positions",
        params={"user": wallet, "sizeThreshold": 0, "limit": 500, "offset": 0},
    )


async def test_get_positions_non_list_returns_empty(settings, wallet) -> None:
    http = SimpleNamespace(get=AsyncMock(return_value={"error": "nope"}))
    client = DataApiClient(http, settings)

    assert await client.get_positions(wallet) == []
