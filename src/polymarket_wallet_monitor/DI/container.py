# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from polymarket_wallet_monitor.config import Settings, get_settings
from polymarket_wallet_monitor.clients.data_api import DataApiClient
from polymarket_wallet_monitor.clients.gamma_api import GammaApiClient
from polymarket_wallet_monitor.clients.http import AsyncHttpClient
from polymarket_wallet_monitor.clients.position_provider import PolymarketPositionProvider
from polymarket_wallet_monitor.clients.resolution_cache import MarketResolutionCache
from polymarket_wallet_monitor.persistence.repositories.sql import (
    SqlEventStore,
    SqlSnapshotChainStore,
)
from polymarket_wallet_monitor.persistence.sql.database import Database
from polymarket_wallet_monitor.services.snapshot import SnapshotService


def _resolution_cache_size(settings: Settings) -> int:
    return settings.resolution.cache_size


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP/API clients, database, stores, snapshot service."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    data_api_client = providers.Singleton(
        DataApiClient,
        http_client=http_client,
        settings=config,
    )

    gamma_api_client = providers.Singleton(
        GammaApiClient,
        http_client=http_client,
        settings=config,
    )

    resolution_cache = providers.Singleton(
        MarketResolutionCache,
        gamma_client=gamma_api_client,
        maxsize=providers.Callable(_resolution_cache_size, config),
    )

    position_provider = providers.Singleton(
        PolymarketPositionProvider,
        data_api=data_api_client,
        settings=config,
        resolution_cache=resolution_cache,
    )

    database = providers.Singleton(
        Database,
        settings=config,
    )

    chain_store = providers.Singleton(
        SqlSnapshotChainStore,
        database=database,
    )

    event_store = providers.Singleton(
        SqlEventStore,
        database=database,
    )

    snapshot_service = providers.Singleton(
        SnapshotService,
        position_provider=position_provider,
        chain_store=chain_store,
    )
