# -*- coding: utf-8 -*-
"""Utility modules."""

from polymarket_wallet_monitor.utils.validation import (
    is_condition_id,
    is_wallet_address,
    mask_address,
    validate_wallet_address,
)

__all__ = ["is_condition_id", "is_wallet_address", "mask_address", "validate_wallet_address"]
