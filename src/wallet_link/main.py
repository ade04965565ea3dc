# -*- coding: utf-8 -*-
"""
Entry point for the wallet-link broker process.

Orchestrates: logging, settings, container, storage init, optional expired-session
sweeper, shutdown (SIGINT or CancelledError), storage dispose.
The transport layer (HTTP routes, operator auth) embeds the container and calls
Container.connection_coordinator().

Run with: python -m wallet_link.main
"""
from __future__ import annotations

import asyncio
import signal
from typing import Any

import structlog

from wallet_link.DI import Container
from wallet_link.config import Settings, get_settings
from wallet_link.exceptions import MissingRequiredConfigError
from wallet_link.logging.config import configure_logging


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


def _check_settings(settings: Settings, logger: Any) -> None:
    if settings.storage.backend == "sqlalchemy" and not settings.storage.database_url.strip():
        logger.error(
            "main_missing_database_url",
            message="STORAGE__DATABASE_URL is not set",
        )
        raise MissingRequiredConfigError("STORAGE__DATABASE_URL")


async def run(container: Container | None = None) -> None:
    settings = get_settings()
    configure_logging(settings)
    logger = structlog.get_logger("main")
    _check_settings(settings, logger)

    container = container or Container()
    uses_database = settings.storage.backend == "sqlalchemy"
    if uses_database:
        await container.database().init()

    container.connection_coordinator()

    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)

    sweep_task: asyncio.Task[None] | None = None
    if settings.session.sweep_enabled:
        sweeper = container.expired_session_sweeper()
        sweep_task = asyncio.create_task(sweeper.run(shutdown_event))

    logger.info(
        "main_started",
        storage_backend=settings.storage.backend,
        session_ttl_seconds=settings.session.ttl_seconds,
        sweep_enabled=settings.session.sweep_enabled,
    )
    try:
        await shutdown_event.wait()
    finally:
        logger.info("main_shutdown_started")
        shutdown_event.set()
        if sweep_task is not None:
            sweep_task.cancel()
            try:
                await sweep_task
            except asyncio.CancelledError:
                pass
        if uses_database:
            await container.database().dispose()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
