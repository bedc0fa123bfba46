# -*- coding: utf-8 -*-
"""Async HTTP client with retries and rate-limit handling."""

from __future__ import annotations

import asyncio
import random
import uuid
import aiohttp
import structlog
from typing import Any, Awaitable, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.exceptions import (
    ClientError,
    NetworkError,
    PolymarketAPIError,
    RateLimitError,
    ServerError,
)

_CLIENT_ERROR_MESSAGES: dict[int, str] = {
    400: "Invalid wallet address format or parameters",
    404: "Wallet address not found on Polymarket or has no positions",
}


def _parse_retry_after(header: Optional[str]) -> Optional[float]:
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None


class AsyncHttpClient:
    """Async HTTP client for Polymarket APIs with retries and 429 handling.

    Transport errors and 5xx responses are retried with exponential backoff;
    429 honors Retry-After; any other 4xx fails immediately with ClientError.
    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (timeout, max_retries, user_agent).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            sleep: Awaitable used between attempts (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self._settings.api.user_agent},
            )
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform a GET request and return JSON.

        Args:
            url: Full URL to request.
            params: Optional query parameters.

        Returns:
            Parsed JSON response (dict or list).

        Raises:
            ClientError: On a 4xx response other than 429 (not retried).
            RateLimitError: If 429 is returned and retries are exhausted.
            ServerError: If 5xx is returned and retries are exhausted.
            NetworkError: If the transport keeps failing after retries.
            PolymarketAPIError: If the body is not valid JSON.
        """
        params = params or {}
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.api.max_retries
        last_error: Optional[PolymarketAPIError] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                is_last = attempt + 1 >= max_retries
                delay = self._backoff_delay(attempt)
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.get(url, params=params) as response:
                            status = response.status
                            if status == 429:
                                retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                                self._logger.warning(
                                    "http_get_rate_limited",
                                    http_status_code=429,
                                    http_retry_after_seconds=retry_after,
                                )
                                last_error = RateLimitError(
                                    "Polymarket API rate limit exceeded. Please try again in a moment.",
                                    url=url,
                                    retry_after=retry_after,
                                )
                                if retry_after is not None and retry_after > 0:
                                    delay = retry_after
                            elif status >= 500:
                                self._logger.debug("http_get_retry", http_status_code=status)
                                last_error = ServerError(
                                    "Polymarket API is temporarily unavailable. Please try again later.",
                                    url=url,
                                    status_code=status,
                                )
                            elif status >= 400:
                                self._logger.warning("http_get_client_error", http_status_code=status)
                                raise ClientError(
                                    _CLIENT_ERROR_MESSAGES.get(status, f"HTTP {status}: {response.reason}"),
                                    url=url,
                                    status_code=status,
                                )
                            else:
                                try:
                                    return await response.json(content_type=None)
                                except ValueError as e:
                                    raise PolymarketAPIError(
                                        f"Invalid JSON in response from {url}",
                                        url=url,
                                        status_code=status,
                                        cause=e,
                                    ) from e
                    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                        last_error = NetworkError(
                            "Failed to fetch from Polymarket API: network error",
                            url=url,
                            cause=e,
                        )

                if not is_last:
                    await self._sleep(delay)

            self._logger.error(
                "http_get_failed",
                http_status_code=last_error.status_code if last_error else None,
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            if last_error is None:
                raise PolymarketAPIError(f"GET failed after {max_retries} attempts: {url}", url=url)
            raise last_error from last_error.cause
