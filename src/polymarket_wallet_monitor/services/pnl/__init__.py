# -*- coding: utf-8 -*-
"""Settlement PnL computation (sync, pure)."""

from polymarket_wallet_monitor.services.pnl.settlement import calculate_pnl

__all__ = ["calculate_pnl"]
