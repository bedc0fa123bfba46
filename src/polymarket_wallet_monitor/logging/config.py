# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire.

Console and file output go through stdlib handlers; structlog renders the
event (ConsoleRenderer, or JSON whenever a file is written). Raw wallet
addresses never reach a renderer: any ``wallet`` key left in an event is
masked by a processor.
"""

from __future__ import annotations

import logging
import logfire
import structlog
from typing import Any
from structlog.types import EventDict, Processor
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from polymarket_wallet_monitor.config import AppSettings, LoggingSettings, Settings, get_settings
from polymarket_wallet_monitor.utils.validation import mask_address

# Map standard logging levels to Logfire levels
LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Third-party loggers that flood DEBUG output (SQL statements, connection pool chatter).
_NOISY_LOGGERS: tuple[str, ...] = ("aiosqlite", "sqlalchemy.engine", "sqlalchemy.pool", "asyncio")


def _service_context_processor(app_settings: AppSettings) -> Processor:
    """Build a processor that attaches logger name and service identity to every log event."""

    def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        stdlib_logger = getattr(logger, "_logger", None)
        event_dict["logger"] = (
            getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
        )
        event_dict["app_name"] = app_settings.app_name
        if app_settings.service_name:
            event_dict["service_name"] = app_settings.service_name
        if app_settings.service_version:
            event_dict["service_version"] = app_settings.service_version
        event_dict["environment"] = app_settings.environment
        return event_dict

    return _add_service_context


def mask_wallet_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace a raw ``wallet`` value with its masked form (``wallet_masked``)."""
    wallet = event_dict.pop("wallet", None)
    if wallet is not None:
        event_dict.setdefault("wallet_masked", mask_address(str(wallet)))
    return event_dict


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _build_handlers(logging_settings: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if logging_settings.log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(logging_settings.console_level))
        handlers.append(console_handler)

    if logging_settings.log_to_file:
        log_file_path = Path(logging_settings.log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file_path,
            when=logging_settings.log_file_when,
            interval=logging_settings.log_file_interval,
            backupCount=logging_settings.log_file_backup_count,
            encoding="utf-8",
            utc=logging_settings.log_file_utc,
        )
        file_handler.setLevel(_level(logging_settings.file_level))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
    return handlers


def _configure_logfire(settings: Settings) -> None:
    app_settings = settings.app
    logging_settings = settings.logging
    logfire.configure(
        token=logging_settings.logfire_token,
        service_name=app_settings.service_name or app_settings.app_name,
        service_version=app_settings.service_version,
        min_level=LOG_LEVEL_TO_LOGFIRE.get(logging_settings.logfire_level, "info"),  # type: ignore[arg-type]
        environment=app_settings.environment,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog + Logfire.

    Args:
        settings: Application settings (defaults to the cached get_settings()).
    """
    settings = settings or get_settings()
    logging_settings = settings.logging

    handlers = _build_handlers(logging_settings)
    if handlers:
        logging.basicConfig(
            level=min(h.level for h in handlers),
            handlers=handlers,
            force=True,
        )
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(logging.WARNING, min(h.level for h in handlers)))

    if logging_settings.logfire_enabled:
        _configure_logfire(settings)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        mask_wallet_fields,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context_processor(settings.app),
    ]

    if logging_settings.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    # A log file is always JSON; then the console shares that renderer.
    if handlers:
        use_json = logging_settings.log_to_file or logging_settings.json_format
        processors.append(
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer()
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
