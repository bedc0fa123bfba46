# -*- coding: utf-8 -*-
"""Polymarket Data API client (public endpoints)."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, cast
from structlog.contextvars import bound_contextvars

from polymarket_wallet_monitor.clients.data_api.schema import PositionSchema
from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.utils.validation import mask_address

if TYPE_CHECKING:
    from polymarket_wallet_monitor.clients.http import AsyncHttpClient


class DataApiClient:
    """Client for Polymarket Data API (/positions)."""

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
            settings: Application settings (uses settings.api.data_api_host).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        return self._settings.api.data_api_host.rstrip("/")

    async def get_positions(
        self,
        user: str,
        *,
        limit: int = 500,
        offset: int = 0,
    ) -> List[PositionSchema]:
        """Get current positions for a user.

        API: GET /positions. sizeThreshold is 0 so dust positions are kept;
        the snapshot must reflect every held token.

        Args:
            user: User address (0x..., required).
            limit: Max results (0-500).
            offset: Pagination offset (0-10000).

        Returns:
            List of position items from the Data API (Position schema).
        """
        # aiohttp/yarl only accept str, int, float in query params (no bool)
        params: Dict[str, Any] = {
            "user": user,
            "sizeThreshold": 0,
            "limit": max(0, min(500, limit)),
            "offset": max(0, min(10000, offset)),
        }

        user_masked = mask_address(user)
        with bound_contextvars(
            data_api_user_masked=user_masked,
            data_api_positions_limit=params["limit"],
            data_api_positions_offset=params["offset"],
        ):
            url = f"{self._base_url()}/positions"
            data = await self._http.get(url, params=params)
            if not isinstance(data, list):
                self._logger.warning(
                    "data_api_get_positions_non_list",
                    data_api_response_type=type(data).__name__,
                )
                return []
            result: List[PositionSchema] = []
            for x in cast(list[Any], data):
                if isinstance(x, dict):
                    result.append(cast(PositionSchema, x))
            return result
