# -*- coding: utf-8 -*-
"""Unit tests for ExpiredSessionSweeper."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from wallet_link.config import SessionSettings, Settings
from wallet_link.exceptions import StorageError
from wallet_link.services.maintenance import ExpiredSessionSweeper
from wallet_link.services.session_store import SessionStore


async def test_sweep_once_purges_expired(
    session_store: SessionStore,
    settings: Settings,
    clock: Any,
) -> None:
    stale = await session_store.create()
    clock.advance(hours=2)
    fresh = await session_store.create()
    sweeper = ExpiredSessionSweeper(session_store, settings)

    removed = await sweeper.sweep_once()

    assert removed == 1
    assert [s.link_id for s in await session_store.list_sessions()] == [fresh.link_id]
    assert stale.link_id != fresh.link_id


async def test_sweep_once_reports_zero_on_storage_error(settings: Settings) -> None:
    store = SimpleNamespace(purge_expired=AsyncMock(side_effect=StorageError("db down")))
    sweeper = ExpiredSessionSweeper(store, settings)  # type: ignore[arg-type]

    assert await sweeper.sweep_once() == 0
    store.purge_expired.assert_awaited_once()


async def test_run_stops_when_shutdown_is_set() -> None:
    shutdown_event = asyncio.Event()

    async def _purge() -> int:
        shutdown_event.set()
        return 3

    store = SimpleNamespace(purge_expired=AsyncMock(side_effect=_purge))
    settings = Settings(session=SessionSettings(sweep_interval_seconds=60))
    sweeper = ExpiredSessionSweeper(store, settings)  # type: ignore[arg-type]

    await asyncio.wait_for(sweeper.run(shutdown_event), timeout=5)

    store.purge_expired.assert_awaited_once()


async def test_run_propagates_cancellation() -> None:
    store = SimpleNamespace(purge_expired=AsyncMock(return_value=0))
    settings = Settings(session=SessionSettings(sweep_interval_seconds=60))
    sweeper = ExpiredSessionSweeper(store, settings)  # type: ignore[arg-type]
    task = asyncio.create_task(sweeper.run(asyncio.Event()))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
