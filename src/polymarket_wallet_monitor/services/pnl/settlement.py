# -*- coding: utf-8 -*-
"""Settlement PnL for resolved binary markets (sync, pure).

Each share redeems for 1 unit of quote currency on the winning side and 0 on
the losing side. A missing average price counts as a zero cost basis.

    yes:     yes_shares * (1 - yes_avg) - no_shares * no_avg
    no:      no_shares * (1 - no_avg) - yes_shares * yes_avg
    invalid: 0 (both sides refunded at cost)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from polymarket_wallet_monitor.models.position import MarketOutcome

if TYPE_CHECKING:
    from polymarket_wallet_monitor.models.position import Position


def _cost_basis(price: Optional[float]) -> float:
    return price if price is not None else 0.0


def calculate_pnl(position: "Position", resolved_outcome: MarketOutcome) -> float:
    """Realized PnL of position once its market resolved to resolved_outcome.

    Callers only pass terminal outcomes; UNRESOLVED yields 0.0.
    """
    yes_cost = _cost_basis(position.yes_avg_price)
    no_cost = _cost_basis(position.no_avg_price)

    if resolved_outcome == MarketOutcome.YES:
        return position.yes_shares * (1.0 - yes_cost) - position.no_shares * no_cost
    if resolved_outcome == MarketOutcome.NO:
        return position.no_shares * (1.0 - no_cost) - position.yes_shares * yes_cost
    return 0.0
