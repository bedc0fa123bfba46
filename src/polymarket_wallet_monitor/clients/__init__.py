"""HTTP and API clients."""

from polymarket_wallet_monitor.clients.data_api import DataApiClient
from polymarket_wallet_monitor.clients.gamma_api import GammaApiClient
from polymarket_wallet_monitor.clients.http import AsyncHttpClient
from polymarket_wallet_monitor.clients.position_provider import (
    PolymarketPositionProvider,
    transform_positions,
    validate_snapshot,
)
from polymarket_wallet_monitor.clients.resolution_cache import MarketResolutionCache, resolve_outcome

__all__ = [
    "AsyncHttpClient",
    "DataApiClient",
    "GammaApiClient",
    "MarketResolutionCache",
    "PolymarketPositionProvider",
    "resolve_outcome",
    "transform_positions",
    "validate_snapshot",
]
