"""Logging subpackage (structlog configuration)."""

from polymarket_wallet_monitor.logging.config import configure_logging

__all__ = ["configure_logging"]
