"""Command-line presentation helpers."""

from polymarket_wallet_monitor.cli.formatting import (
    format_event_change,
    format_wallet_address,
    render_events,
    render_snapshot_result,
    render_status,
    render_table,
    truncate_title,
)

__all__ = [
    "format_event_change",
    "format_wallet_address",
    "render_events",
    "render_snapshot_result",
    "render_status",
    "render_table",
    "truncate_title",
]
