"""Periodic purge of expired link sessions until shutdown (signal or CancelledError).

Storage hygiene only: reads already enforce expiry, so a stopped sweeper never
lets an expired link through.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import structlog

from wallet_link.config import Settings
from wallet_link.exceptions import StorageError
from wallet_link.services.session_store import SessionStore


class ExpiredSessionSweeper:
    """Calls SessionStore.purge_expired every session.sweep_interval_seconds."""

    def __init__(
        self,
        session_store: SessionStore,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._store = session_store
        self._interval = settings.session.sweep_interval_seconds
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def sweep_once(self) -> int:
        """Run one purge. StorageError is logged and reported as 0 removed."""
        try:
            return await self._store.purge_expired()
        except StorageError as e:
            self._logger.warning("session_sweep_failed", error=str(e), retryable=e.retryable)
            return 0

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Sweep, then wait interval seconds or until shutdown_event is set."""
        self._logger.info("session_sweeper_started", sweep_interval_seconds=self._interval)
        try:
            while not shutdown_event.is_set():
                await self.sweep_once()
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=self._interval)
                except TimeoutError:
                    continue
        except asyncio.CancelledError:
            self._logger.info("session_sweeper_stopped", stop_reason="cancelled")
            raise
        except Exception as e:
            self._logger.exception(
                "session_sweeper_exception",
                exception_type=type(e).__name__,
                exception_message=str(e),
            )
            raise
        self._logger.info("session_sweeper_stopped", stop_reason="shutdown")
