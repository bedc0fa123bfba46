"""Validation helpers for wallet addresses and condition IDs."""

from __future__ import annotations

import re
from typing import Any

from polymarket_wallet_monitor.exceptions import InvalidWalletAddressError

_WALLET_RE = re.compile(r"0x[a-fA-F0-9]{40}")


def is_wallet_address(addr: Any) -> bool:
    """Return True if addr is a 0x-prefixed 40 hex char wallet address (no surrounding whitespace)."""
    return isinstance(addr, str) and _WALLET_RE.fullmatch(addr) is not None


def validate_wallet_address(addr: Any) -> str:
    """Return addr lowercased if it is a valid wallet address, else raise InvalidWalletAddressError.

    Hex addresses are case-insensitive; the lowercase form is the wallet key
    everywhere downstream, so a checksum-cased and a lowercase entry of the
    same address share one chain.
    """
    if not is_wallet_address(addr):
        raise InvalidWalletAddressError(str(addr))
    return addr.lower()


def is_condition_id(x: Any) -> bool:
    """Return True if x is a valid condition ID (0x + 64 hex chars = 66 chars)."""
    if not isinstance(x, str):
        return False
    s = x.strip()
    return s.startswith("0x") and len(s) == 66


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"
