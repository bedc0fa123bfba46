"""Custom exceptions for the Polymarket APIs, ingestion and the snapshot chain."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from polymarket_wallet_monitor.models.chain import ChainWriteFailure


class MonitorError(Exception):
    """Base exception for wallet-monitor errors."""

    pass


class MissingRequiredConfigError(MonitorError):
    """Raised when a required configuration value is missing."""

    pass


class InvalidWalletAddressError(MonitorError):
    """Raised when a wallet identifier is not a 0x-prefixed 40 hex char address."""

    def __init__(self, address: str) -> None:
        super().__init__(
            f"Invalid wallet address {address!r}. Expected: 0x followed by 40 "
            "hexadecimal characters."
        )
        self.address = address


class InvalidPositionDataError(MonitorError):
    """Raised at the ingestion boundary when fetched positions break model invariants."""

    def __init__(self, message: str, *, market_id: str | None = None) -> None:
        super().__init__(message)
        self.market_id = market_id


class PolymarketAPIError(MonitorError):
    """Raised when a Polymarket API request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class ClientError(PolymarketAPIError):
    """Raised for HTTP 4xx responses other than 429 (never retried)."""

    pass


class ServerError(PolymarketAPIError):
    """Raised when the API keeps returning HTTP 5xx after retries."""

    pass


class NetworkError(PolymarketAPIError):
    """Raised on transport failures (DNS, connection, timeout) after retries."""

    pass


class RateLimitError(PolymarketAPIError):
    """Raised when the API returns HTTP 429 (Too Many Requests) and retries are exhausted."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class SnapshotChainError(MonitorError):
    """Raised by the snapshot service when a chain write returns a failure variant.

    The original variant is kept on ``failure`` so callers can discriminate
    between precondition violations and storage failures.
    """

    def __init__(self, wallet: str, operation: str, failure: "ChainWriteFailure") -> None:
        super().__init__(f"{operation} failed for wallet {wallet}: {failure.describe()}")
        self.wallet = wallet
        self.operation = operation
        self.failure = failure
