"""Async engine lifecycle for the SQLAlchemy repositories.

``init()`` at process start (creates tables), ``dispose()`` at shutdown.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from wallet_link.exceptions import StorageError
from wallet_link.persistence.repositories.sql.models import Base


class Database:
    """Owns the async engine and session factory shared by both repositories."""

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Create the engine (lazy: no connection is opened until first use).

        Args:
            database_url: SQLAlchemy async URL (e.g. sqlite+aiosqlite:///wallet_link.db).
            echo: Log SQL statements.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._url = database_url
        self._engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def init(self) -> None:
        """Create missing tables."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except DBAPIError as e:
            raise StorageError("database initialisation failed", cause=e) from e
        self._logger.info("database_initialized", database_backend=self._engine.dialect.name)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
        self._logger.info("database_disposed")
