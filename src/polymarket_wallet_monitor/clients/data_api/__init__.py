"""Polymarket Data API client and response types."""

from polymarket_wallet_monitor.clients.data_api.data_api import DataApiClient
from polymarket_wallet_monitor.clients.data_api.schema import MarketInfo, PositionSchema

__all__ = ["DataApiClient", "MarketInfo", "PositionSchema"]
