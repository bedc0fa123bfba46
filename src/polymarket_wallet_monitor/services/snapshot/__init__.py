# -*- coding: utf-8 -*-
"""Snapshot orchestration (provider -> diff -> chain store)."""

from polymarket_wallet_monitor.services.snapshot.snapshot_service import (
    PositionProvider,
    SnapshotResult,
    SnapshotService,
)

__all__ = ["PositionProvider", "SnapshotResult", "SnapshotService"]
