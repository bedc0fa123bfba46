# -*- coding: utf-8 -*-
"""
Entry point for the wallet monitor CLI.

Orchestrates: settings, logging, container, schema creation, one command, shutdown.
Commands:
    snapshot <wallet> [-v]     capture positions now and record what changed
    events <wallet> [-l N] [-v]
    status
    watch [wallet ...]         snapshot every monitor.poll_seconds until SIGINT

Run with: polymarket-wallet-monitor <command> ... (or python -m polymarket_wallet_monitor.main)
"""
from __future__ import annotations

import argparse
import asyncio
import signal
import sys
import structlog
from typing import Any, Optional, Sequence

from dependency_injector import providers
from sqlalchemy.exc import SQLAlchemyError

from polymarket_wallet_monitor import __version__
from polymarket_wallet_monitor.DI import Container
from polymarket_wallet_monitor.cli.formatting import (
    render_events,
    render_snapshot_result,
    render_status,
)
from polymarket_wallet_monitor.config import Settings, get_settings
from polymarket_wallet_monitor.exceptions import (
    InvalidPositionDataError,
    InvalidWalletAddressError,
    MissingRequiredConfigError,
    MonitorError,
    PolymarketAPIError,
    SnapshotChainError,
)
from polymarket_wallet_monitor.logging.config import configure_logging
from polymarket_wallet_monitor.services.snapshot import SnapshotResult, SnapshotService
from polymarket_wallet_monitor.utils import mask_address, validate_wallet_address

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENTS = 2
EXIT_API_ERROR = 3
EXIT_STORAGE_ERROR = 4


def exit_code_for(error: BaseException) -> int:
    """Map an error to the CLI exit code."""
    if isinstance(error, (InvalidWalletAddressError, MissingRequiredConfigError)):
        return EXIT_INVALID_ARGUMENTS
    if isinstance(error, (PolymarketAPIError, InvalidPositionDataError)):
        return EXIT_API_ERROR
    if isinstance(error, (SnapshotChainError, SQLAlchemyError)):
        return EXIT_STORAGE_ERROR
    return EXIT_FAILURE


def describe_error(error: BaseException) -> str:
    """User-facing error title plus details."""
    titles: list[tuple[type[BaseException], str]] = [
        (InvalidWalletAddressError, "Invalid wallet address"),
        (MissingRequiredConfigError, "Missing configuration"),
        (InvalidPositionDataError, "Invalid position data from Polymarket"),
        (PolymarketAPIError, "Failed to fetch wallet data"),
        (SnapshotChainError, "Snapshot storage error"),
        (SQLAlchemyError, "Database error"),
    ]
    title = next((t for cls, t in titles if isinstance(error, cls)), "Operation failed")
    return f"✗ Error: {title}\n\n  {error}"


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polymarket-wallet-monitor",
        description="Track Polymarket wallet positions as a chain of snapshots and change events.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (overrides DATABASE__URL).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    snap = sub.add_parser("snapshot", help="Take a snapshot of a wallet and record changes.")
    snap.add_argument("wallet", help="Wallet address (0x + 40 hex chars).")
    snap.add_argument("-v", "--verbose", action="store_true", help="Show full event details.")

    events = sub.add_parser("events", help="List recorded events for a wallet (newest first).")
    events.add_argument("wallet", help="Wallet address (0x + 40 hex chars).")
    events.add_argument("-l", "--limit", type=_positive_int, default=None, help="Maximum events to show.")
    events.add_argument("-v", "--verbose", action="store_true", help="Show full event details.")

    sub.add_parser("status", help="Show snapshot and event totals per wallet.")

    watch = sub.add_parser("watch", help="Snapshot wallets periodically until interrupted.")
    watch.add_argument("wallets", nargs="*", help="Wallets to watch (default: MONITOR__WALLETS).")
    return parser


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


def _print_snapshot(wallet: str, result: SnapshotResult, *, verbose: bool) -> None:
    print(
        render_snapshot_result(
            wallet,
            result.events,
            is_first_snapshot=result.is_first_snapshot,
            saved=result.saved,
            timestamp=result.snapshot.timestamp,
            verbose=verbose,
        )
    )


async def _cmd_snapshot(container: Container, args: argparse.Namespace) -> int:
    wallet = validate_wallet_address(args.wallet)
    service: SnapshotService = container.snapshot_service()
    result = await service.take_snapshot(wallet)
    _print_snapshot(wallet, result, verbose=args.verbose)
    return EXIT_OK


async def _cmd_events(container: Container, args: argparse.Namespace, settings: Settings) -> int:
    wallet = validate_wallet_address(args.wallet)
    limit = args.limit if args.limit is not None else settings.monitor.events_limit
    events = await container.event_store().events_by_wallet(wallet, limit=limit)
    print(render_events(wallet, events, verbose=args.verbose))
    return EXIT_OK


async def _cmd_status(container: Container) -> int:
    stats = await container.chain_store().get_stats()
    print(render_status(stats))
    return EXIT_OK


async def _cmd_watch(
    container: Container,
    args: argparse.Namespace,
    settings: Settings,
    logger: Any,
) -> int:
    wallets: list[str] = list(args.wallets) or settings.monitor.wallets
    if not wallets:
        logger.error(
            "main_missing_wallets",
            message="pass wallets or set MONITOR__WALLETS",
        )
        raise MissingRequiredConfigError("MONITOR__WALLETS")
    # Lowercased and deduplicated, order kept.
    wallets = list(dict.fromkeys(validate_wallet_address(w) for w in wallets))

    service: SnapshotService = container.snapshot_service()
    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)
    poll_seconds = settings.monitor.poll_seconds

    logger.info(
        "main_watch_started",
        wallets=[mask_address(w) for w in wallets],
        poll_seconds=poll_seconds,
    )
    while not shutdown_event.is_set():
        for wallet in wallets:
            if shutdown_event.is_set():
                break
            try:
                result = await service.take_snapshot(wallet)
            except (MonitorError, SQLAlchemyError) as e:
                # Already logged with context by the service; keep watching the others.
                logger.warning(
                    "main_watch_wallet_failed",
                    wallet_masked=mask_address(wallet),
                    error_type=type(e).__name__,
                )
                continue
            if result.events or result.is_first_snapshot:
                _print_snapshot(wallet, result, verbose=False)
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=poll_seconds)
        except asyncio.TimeoutError:
            pass

    logger.info("main_shutdown_complete")
    return EXIT_OK


async def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse argv, run one command, and return the exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.database_url:
        settings = Settings.from_env(database={"url": args.database_url})
    configure_logging(settings)
    logger = structlog.get_logger("main")

    container = Container()
    container.config.override(providers.Object(settings))
    database = container.database()
    http_client = container.http_client()
    try:
        await database.create_schema()
        if args.command == "snapshot":
            return await _cmd_snapshot(container, args)
        if args.command == "events":
            return await _cmd_events(container, args, settings)
        if args.command == "status":
            return await _cmd_status(container)
        return await _cmd_watch(container, args, settings, logger)
    except (MonitorError, SQLAlchemyError) as e:
        logger.debug(
            "main_command_failed",
            command=args.command,
            error_type=type(e).__name__,
        )
        print(describe_error(e), file=sys.stderr)
        return exit_code_for(e)
    finally:
        await http_client.aclose()
        await database.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(asyncio.run(run(argv)))


__all__ = ["run", "main", "build_parser", "exit_code_for", "describe_error"]

if __name__ == "__main__":
    main()
