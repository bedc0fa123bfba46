"""Data API and Gamma API response types (OpenAPI schema alignment)."""

from __future__ import annotations

from typing import TypedDict


class PositionSchema(TypedDict, total=False):
    """GET /positions item (Position schema). Keys match API response (camelCase).

    One row per outcome token: a wallet holding both sides of a market gets
    two rows sharing conditionId.
    """

    proxyWallet: str
    asset: str
    conditionId: str
    size: float
    avgPrice: float
    initialValue: float
    currentValue: float
    cashPnl: float
    percentPnl: float
    totalBought: float
    realizedPnl: float
    percentRealizedPnl: float
    curPrice: float
    redeemable: bool
    mergeable: bool
    title: str
    slug: str
    icon: str
    eventSlug: str
    outcome: str
    outcomeIndex: int
    oppositeOutcome: str
    oppositeAsset: str
    endDate: str
    negativeRisk: bool


class MarketInfo(TypedDict):
    """Resolution-relevant subset of a Gamma /markets item, normalized."""

    closed: bool
    outcomes: list[str]
    outcome_prices: list[float]
    title: str
