# -*- coding: utf-8 -*-
"""Plain-text rendering for CLI output (pure functions, no I/O)."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Optional

from polymarket_wallet_monitor.models.chain import ChainStats
from polymarket_wallet_monitor.models.change_event import ChangeEvent, EventType, RecordedEvent
from polymarket_wallet_monitor.models.position import MarketOutcome

_WHITESPACE = re.compile(r"\s+")

_EVENT_ICONS: dict[EventType, str] = {
    EventType.OPENED: "▸",
    EventType.UPDATED: "▴",
    EventType.CLOSED: "▪",
    EventType.RESOLVED: "◆",
}


def format_wallet_address(address: str) -> str:
    """Shorten an address for display, e.g. 0x742d35Cc...0bEb."""
    if len(address) <= 12:
        return address
    return f"{address[:10]}...{address[-4:]}"


def format_number(value: float, decimals: int = 2) -> str:
    """Fixed-point number with M/B/T suffixes for large magnitudes."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    magnitude = abs(value)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M")):
        if magnitude >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return f"{value:.{decimals}f}"


def format_price(price: Optional[float]) -> str:
    if price is None:
        return "N/A"
    return f"${format_number(price, 2)}"


def format_shares(shares: Optional[float]) -> str:
    if not shares:
        return "0"
    return format_number(shares, 0)


def format_pnl(pnl: float) -> str:
    """Signed dollar amount, e.g. +$90.00 or -$12.50."""
    if pnl >= 0:
        return f"+${format_number(pnl)}"
    return f"-${format_number(abs(pnl))}"


def _holdings(yes_shares: Optional[float], no_shares: Optional[float]) -> str:
    yes = yes_shares or 0.0
    no = no_shares or 0.0
    if yes > 0 and no > 0:
        return f"{format_shares(yes)} YES, {format_shares(no)} NO shares"
    if yes > 0:
        return f"{format_shares(yes)} YES shares"
    return f"{format_shares(no)} NO shares"


def format_event_change(event: ChangeEvent) -> str:
    """One-line summary of what an event changed, e.g. "100→200 YES shares"."""
    if event.event_type is EventType.OPENED:
        return _holdings(event.curr_yes_shares, event.curr_no_shares)
    if event.event_type is EventType.CLOSED:
        return _holdings(event.prev_yes_shares, event.prev_no_shares)
    if event.event_type is EventType.UPDATED:
        parts: list[str] = []
        prev_yes, curr_yes = event.prev_yes_shares or 0.0, event.curr_yes_shares or 0.0
        prev_no, curr_no = event.prev_no_shares or 0.0, event.curr_no_shares or 0.0
        if prev_yes != curr_yes:
            parts.append(f"{format_shares(prev_yes)}→{format_shares(curr_yes)} YES")
        if prev_no != curr_no:
            parts.append(f"{format_shares(prev_no)}→{format_shares(curr_no)} NO")
        if not parts:
            # Shares equal, so only an average price moved.
            return "average price changed"
        return ", ".join(parts) + " shares"
    outcome = MarketOutcome(event.resolved_outcome).value.upper()
    return f"Resolved: {outcome} ({format_pnl(event.pnl or 0.0)})"


def event_icon(event_type: EventType) -> str:
    return _EVENT_ICONS.get(event_type, "•")


def truncate_title(title: str, max_length: int = 50) -> str:
    """Collapse whitespace/control characters and cut to max_length with an ellipsis."""
    sanitized = _WHITESPACE.sub(" ", title or "").strip()
    if not sanitized:
        return "(Empty title)"
    if len(sanitized) <= max_length:
        return sanitized
    return sanitized[: max_length - 3] + "..."


def display_timestamp(ts: datetime) -> str:
    """UTC timestamp as YYYY-MM-DD HH:MM:SS."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.strftime("%Y-%m-%d %H:%M:%S")


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a bordered plain-text table; columns sized to their widest cell."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(c.ljust(widths[i]) for i, c in enumerate(cells)) + " |"

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    out = [border, line(headers), border]
    out.extend(line(row) for row in rows)
    out.append(border)
    return "\n".join(out)


def render_event_details(recorded: RecordedEvent) -> str:
    """Verbose Field/Value table with before/after state of one event."""
    event = recorded.event
    rows: list[list[str]] = [
        ["Event ID", event.event_id],
        ["Event Type", event.event_type.value],
        ["Timestamp", display_timestamp(recorded.timestamp)],
        ["Market ID", event.market_id],
        ["Market Title", truncate_title(event.market_title, 80)],
        ["Snapshot ID", str(event.snapshot_id) if event.snapshot_id is not None else "N/A"],
    ]
    if event.prev_yes_shares is not None or event.curr_yes_shares is not None:
        rows += [
            ["Previous YES Shares", format_shares(event.prev_yes_shares)],
            ["Current YES Shares", format_shares(event.curr_yes_shares)],
            ["Previous YES Price", format_price(event.prev_yes_avg_price)],
            ["Current YES Price", format_price(event.curr_yes_avg_price)],
        ]
    if event.prev_no_shares is not None or event.curr_no_shares is not None:
        rows += [
            ["Previous NO Shares", format_shares(event.prev_no_shares)],
            ["Current NO Shares", format_shares(event.curr_no_shares)],
            ["Previous NO Price", format_price(event.prev_no_avg_price)],
            ["Current NO Price", format_price(event.curr_no_avg_price)],
        ]
    if MarketOutcome(event.resolved_outcome).is_resolved:
        rows.append(["Resolved Outcome", MarketOutcome(event.resolved_outcome).value.upper()])
    if event.pnl is not None:
        rows.append(["PnL", format_pnl(event.pnl)])
    return render_table(["Field", "Value"], rows)


def render_events(wallet: str, events: Sequence[RecordedEvent], *, verbose: bool = False) -> str:
    if not events:
        return f"No events recorded for {format_wallet_address(wallet)}."
    header = f"Events for {format_wallet_address(wallet)} ({len(events)} shown, newest first)"
    if verbose:
        return "\n\n".join([header] + [render_event_details(r) for r in events])
    rows = [
        [
            display_timestamp(r.timestamp),
            f"{event_icon(r.event.event_type)} {r.event.event_type.value}",
            truncate_title(r.event.market_title),
            format_event_change(r.event),
        ]
        for r in events
    ]
    return header + "\n" + render_table(["Time (UTC)", "Type", "Market", "Change"], rows)


def render_status(stats: ChainStats) -> str:
    summary = (
        f"Snapshots: {stats.total_snapshots}  "
        f"Events: {stats.total_events}  "
        f"Wallets: {stats.unique_wallets}"
    )
    if not stats.wallets:
        return summary + "\nNo wallets tracked yet."
    rows = [
        [
            format_wallet_address(w.wallet),
            str(w.snapshot_count),
            display_timestamp(w.latest_timestamp),
        ]
        for w in stats.wallets
    ]
    return summary + "\n" + render_table(["Wallet", "Snapshots", "Last snapshot (UTC)"], rows)


def render_snapshot_result(
    wallet: str,
    events: Sequence[ChangeEvent],
    *,
    is_first_snapshot: bool,
    saved: bool,
    timestamp: datetime,
    verbose: bool = False,
) -> str:
    """Describe one take_snapshot outcome: events generated, initial snapshot, or no changes."""
    short = format_wallet_address(wallet)
    if events:
        plural = "" if len(events) == 1 else "s"
        lines = [f"✓ Snapshot taken for {short}", "", f"Generated {len(events)} event{plural}:"]
        for event in events:
            if verbose:
                lines += ["", f"Event: {event.event_type.value}"]
                lines.append(render_event_details(RecordedEvent(event=event, timestamp=timestamp)))
            else:
                lines.append(
                    f"  {event_icon(event.event_type)} {event.event_type.value:<10} "
                    f"{truncate_title(event.market_title):<52} {format_event_change(event)}"
                )
        return "\n".join(lines)
    if is_first_snapshot:
        return f"✓ Initial snapshot taken for {short}\n\nNo events generated (first snapshot)."
    saved_line = "Snapshot saved." if saved else "Snapshot not saved."
    return (
        f"✓ No changes detected for {short}\n\n"
        f"Wallet positions unchanged since last snapshot.\n{saved_line}"
    )
