# -*- coding: utf-8 -*-
"""Async SQLAlchemy engine and session factory for the snapshot chain store."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import structlog
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from polymarket_wallet_monitor.config import Settings
from polymarket_wallet_monitor.persistence.sql.tables import Base


def _ensure_sqlite_path(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).parent.mkdir(parents=True, exist_ok=True)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and session factory.

    SQLite files get their parent directory created and foreign keys enabled
    on every connection; other backends are used as configured.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        url: Optional[str] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Application settings (uses settings.database).
            url: Optional URL overriding settings.database.url.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._url = url or settings.database.url
        self._logger = get_logger(logger_name or self.__class__.__name__)

        backend = make_url(self._url).get_backend_name()
        if backend == "sqlite":
            _ensure_sqlite_path(self._url)

        self._engine: AsyncEngine = create_async_engine(
            self._url,
            echo=settings.database.echo,
            future=True,
        )
        if backend == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def url(self) -> str:
        return self._url

    def session(self) -> AsyncSession:
        """Return a new session; use as ``async with db.session() as s, s.begin(): ...``."""
        return self._session_factory()

    async def create_schema(self) -> None:
        """Create the snapshots and events tables (idempotent)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._logger.debug(
            "database_schema_ready",
            database_backend=self._engine.dialect.name,
        )

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
