# -*- coding: utf-8 -*-
"""Unit tests for SessionStore: lazy expiry, one-time bind, touch."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any

import pytest

from wallet_link.config import LedgerSettings, SessionSettings, Settings
from wallet_link.exceptions import (
    AlreadyBoundError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    ValidationError,
)
from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.persistence.repositories.in_memory import InMemoryLinkSessionRepository
from wallet_link.services.session_store import SessionStore


class _YieldingSessionRepository(InMemoryLinkSessionRepository):
    """Yields to the event loop between read and write so binders interleave."""

    async def get(self, link_id: str) -> LinkSession | None:
        await asyncio.sleep(0)
        return await super().get(link_id)


class _AlwaysConflictingRepository(InMemoryLinkSessionRepository):
    """Every conditional replace loses, as if another writer always got there first."""

    async def replace(self, session: LinkSession, expected_version: int) -> bool:
        return False


async def test_create_uses_ttl_from_settings(
    session_store: SessionStore,
    now_utc: datetime,
) -> None:
    session = await session_store.create(SessionMetadata(ip_address="10.0.0.1"))

    assert session.created_at == now_utc
    assert session.expires_at == now_utc + timedelta(seconds=3600)
    assert session.bound is False
    assert session.metadata.ip_address == "10.0.0.1"
    assert await session_store.get(session.link_id) == session


async def test_create_generates_distinct_ids(session_store: SessionStore) -> None:
    ids = {(await session_store.create()).link_id for _ in range(20)}
    assert len(ids) == 20


async def test_create_retries_on_id_collision(
    session_repo: InMemoryLinkSessionRepository,
    settings: Settings,
    clock: Any,
) -> None:
    ids = iter(["same", "same", "other"])
    store = SessionStore(session_repo, settings, clock=clock, id_generator=lambda: next(ids))

    first = await store.create()
    second = await store.create()

    assert (first.link_id, second.link_id) == ("same", "other")


async def test_get_unknown_raises_not_found(session_store: SessionStore) -> None:
    with pytest.raises(SessionNotFoundError):
        await session_store.get("nope")


async def test_get_expired_keeps_raising_expired_after_deletion(
    session_store: SessionStore,
    session_repo: InMemoryLinkSessionRepository,
    clock: Any,
) -> None:
    session = await session_store.create()
    clock.advance(seconds=3600)

    for _ in range(3):
        with pytest.raises(SessionExpiredError):
            await session_store.get(session.link_id)
    assert await session_repo.get(session.link_id) is None


async def test_expired_tombstone_lapses_to_not_found(
    session_repo: InMemoryLinkSessionRepository,
    clock: Any,
) -> None:
    store = SessionStore(
        session_repo,
        Settings(session=SessionSettings(ttl_seconds=60, expired_tombstone_seconds=600)),
        clock=clock,
    )
    session = await store.create()
    clock.advance(seconds=60)
    with pytest.raises(SessionExpiredError):
        await store.get(session.link_id)

    clock.advance(seconds=599)
    with pytest.raises(SessionExpiredError):
        await store.get(session.link_id)
    clock.advance(seconds=1)
    with pytest.raises(SessionNotFoundError):
        await store.get(session.link_id)


async def test_expired_tombstones_disabled(
    session_repo: InMemoryLinkSessionRepository,
    clock: Any,
) -> None:
    store = SessionStore(
        session_repo,
        Settings(session=SessionSettings(ttl_seconds=60, expired_tombstone_seconds=0)),
        clock=clock,
    )
    session = await store.create()
    clock.advance(seconds=60)

    with pytest.raises(SessionExpiredError):
        await store.get(session.link_id)
    with pytest.raises(SessionNotFoundError):
        await store.get(session.link_id)


async def test_deleted_session_is_not_found_not_expired(session_store: SessionStore) -> None:
    session = await session_store.create()
    await session_store.delete(session.link_id)

    with pytest.raises(SessionNotFoundError):
        await session_store.get(session.link_id)


async def test_bind_sets_wallet_once(
    session_store: SessionStore,
    wallet: str,
    clock: Any,
) -> None:
    session = await session_store.create()
    bound_at = clock.advance(minutes=1)

    bound = await session_store.bind(
        session.link_id, wallet, SessionMetadata(chain_id="0x1", wallet_type="metamask")
    )

    assert bound.bound is True
    assert bound.wallet_address == wallet
    assert bound.bound_at == bound_at
    assert bound.metadata.wallet_type == "metamask"
    assert await session_store.get(session.link_id) == bound


async def test_rebind_same_address_is_idempotent(
    session_store: SessionStore,
    wallet: str,
) -> None:
    session = await session_store.create()
    first = await session_store.try_bind(session.link_id, wallet)

    again = await session_store.try_bind(session.link_id, wallet.lower())

    assert first.newly_bound is True
    assert again.newly_bound is False
    assert again.session == first.session


async def test_bind_other_address_rejected(
    session_store: SessionStore,
    wallet: str,
    recipient: str,
) -> None:
    session = await session_store.create()
    await session_store.bind(session.link_id, wallet)

    with pytest.raises(AlreadyBoundError):
        await session_store.bind(session.link_id, recipient)
    assert (await session_store.get(session.link_id)).wallet_address == wallet


@pytest.mark.parametrize("address", ["", "   ", "0x123", "not-an-address"])
async def test_bind_rejects_malformed_address(
    session_store: SessionStore,
    address: str,
) -> None:
    session = await session_store.create()

    with pytest.raises(ValidationError):
        await session_store.bind(session.link_id, address)


async def test_bind_base58_respects_setting(
    session_repo: InMemoryLinkSessionRepository,
    clock: Any,
) -> None:
    solana = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
    strict = SessionStore(
        session_repo,
        Settings(ledger=LedgerSettings(allow_base58_fallback=False)),
        clock=clock,
    )
    session = await strict.create()

    with pytest.raises(ValidationError):
        await strict.bind(session.link_id, solana)


async def test_bind_expired_session_raises_expired(
    session_store: SessionStore,
    wallet: str,
    clock: Any,
) -> None:
    session = await session_store.create()
    clock.advance(hours=2)

    with pytest.raises(SessionExpiredError):
        await session_store.bind(session.link_id, wallet)


async def test_concurrent_binds_have_single_winner(
    settings: Settings,
    clock: Any,
) -> None:
    store = SessionStore(_YieldingSessionRepository(), settings, clock=clock)
    session = await store.create()
    addresses = [f"0x{str(i) * 40}" for i in range(1, 9)]

    results = await asyncio.gather(
        *(store.bind(session.link_id, a) for a in addresses),
        return_exceptions=True,
    )

    winners = [r for r in results if isinstance(r, LinkSession)]
    losers = [r for r in results if isinstance(r, AlreadyBoundError)]
    assert len(winners) == 1
    assert len(losers) == len(addresses) - 1
    assert (await store.get(session.link_id)).wallet_address == winners[0].wallet_address


async def test_touch_updates_activity_not_expiry(
    session_store: SessionStore,
    clock: Any,
) -> None:
    session = await session_store.create()
    later = clock.advance(minutes=10)

    touched = await session_store.touch(session.link_id)

    assert touched.last_activity == later
    assert touched.expires_at == session.expires_at


async def test_touch_never_moves_activity_backwards(
    session_store: SessionStore,
    clock: Any,
    now_utc: datetime,
) -> None:
    session = await session_store.create()
    clock.advance(minutes=10)
    await session_store.touch(session.link_id)
    clock.now = now_utc

    touched = await session_store.touch(session.link_id)

    assert touched.last_activity == now_utc + timedelta(minutes=10)


async def test_touch_gives_up_after_max_retries(settings: Settings, clock: Any) -> None:
    store = SessionStore(_AlwaysConflictingRepository(), settings, clock=clock)
    session = await store.create()

    with pytest.raises(StorageError) as exc_info:
        await store.touch(session.link_id)
    assert exc_info.value.retryable is True


async def test_delete_is_idempotent(session_store: SessionStore) -> None:
    session = await session_store.create()

    await session_store.delete(session.link_id)
    await session_store.delete(session.link_id)

    with pytest.raises(SessionNotFoundError):
        await session_store.get(session.link_id)


async def test_list_sessions_skips_expired_and_filters_bound(
    session_store: SessionStore,
    wallet: str,
    clock: Any,
) -> None:
    stale = await session_store.create()
    clock.advance(minutes=50)
    unbound = await session_store.create()
    bound = await session_store.create()
    await session_store.bind(bound.link_id, wallet)
    clock.advance(minutes=20)

    live_ids = {s.link_id for s in await session_store.list_sessions()}
    bound_ids = [s.link_id for s in await session_store.list_sessions(bound=True)]
    unbound_ids = [s.link_id for s in await session_store.list_sessions(bound=False)]

    assert stale.link_id not in live_ids
    assert live_ids == {unbound.link_id, bound.link_id}
    assert bound_ids == [bound.link_id]
    assert unbound_ids == [unbound.link_id]


async def test_purge_expired(
    session_store: SessionStore,
    session_repo: InMemoryLinkSessionRepository,
    clock: Any,
) -> None:
    stale = await session_store.create()
    clock.advance(minutes=59)
    fresh = await session_store.create()
    clock.advance(minutes=2)

    assert await session_store.purge_expired() == 1
    assert await session_repo.get(stale.link_id) is None
    assert await session_repo.get(fresh.link_id) is not None


async def test_purge_expired_remembers_purged_ids_as_expired(
    session_store: SessionStore,
    clock: Any,
) -> None:
    stale = await session_store.create()
    clock.advance(hours=2)

    assert await session_store.purge_expired() == 1
    with pytest.raises(SessionExpiredError):
        await session_store.get(stale.link_id)
