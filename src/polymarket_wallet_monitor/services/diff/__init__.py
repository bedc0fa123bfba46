# -*- coding: utf-8 -*-
"""Snapshot diff engine (sync, pure)."""

from polymarket_wallet_monitor.services.diff.diff_engine import compute_diff

__all__ = ["compute_diff"]
