"""Dependency injection."""

from polymarket_wallet_monitor.DI.container import Container

__all__ = ["Container"]
