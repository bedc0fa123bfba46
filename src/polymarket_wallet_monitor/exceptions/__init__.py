"""Exceptions subpackage."""

from polymarket_wallet_monitor.exceptions.exceptions import (
    ClientError,
    InvalidPositionDataError,
    InvalidWalletAddressError,
    MissingRequiredConfigError,
    MonitorError,
    NetworkError,
    PolymarketAPIError,
    RateLimitError,
    ServerError,
    SnapshotChainError,
)

__all__ = [
    "ClientError",
    "InvalidPositionDataError",
    "InvalidWalletAddressError",
    "MissingRequiredConfigError",
    "MonitorError",
    "NetworkError",
    "PolymarketAPIError",
    "RateLimitError",
    "ServerError",
    "SnapshotChainError",
]
