# -*- coding: utf-8 -*-
"""Unit tests for ConnectionCoordinator: the end-to-end handshake."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import pytest

from wallet_link.events import (
    LinkSessionCreatedEvent,
    TransactionProposedEvent,
    TransactionResolvedEvent,
    WalletBoundEvent,
)
from wallet_link.exceptions import (
    AlreadyResolvedError,
    NotReadyError,
    SessionExpiredError,
    SessionNotFoundError,
    TransactionNotFoundError,
)
from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.models.transaction_record import TransactionFilter, TransactionStatus
from wallet_link.persistence.repositories.in_memory import InMemoryLinkSessionRepository
from wallet_link.services.coordinator import ConnectionCoordinator
from wallet_link.services.ledger import TransactionLedger
from wallet_link.services.session_store import SessionStore

SCENARIO_WALLET = "0xABCD000000000000000000000000000000000001"
SCENARIO_RECIPIENT = "0x1234000000000000000000000000000000000002"


class _FakeEventBus:
    """Minimal event bus fake for asserting dispatched events."""

    def __init__(self) -> None:
        self.dispatched: list[Any] = []

    def dispatch(self, event: Any) -> Any:
        self.dispatched.append(event)
        return event

    def of_type(self, event_type: type) -> list[Any]:
        return [e for e in self.dispatched if isinstance(e, event_type)]


@pytest.fixture
def event_bus() -> _FakeEventBus:
    return _FakeEventBus()


@pytest.fixture
def coordinator(
    session_store: SessionStore,
    ledger: TransactionLedger,
    clock: Any,
    event_bus: _FakeEventBus,
) -> ConnectionCoordinator:
    return ConnectionCoordinator(session_store, ledger, clock=clock, event_bus=event_bus)


async def _bound_link(coordinator: ConnectionCoordinator, wallet: str = SCENARIO_WALLET) -> str:
    session = await coordinator.create_session()
    await coordinator.bind_wallet(session.link_id, wallet)
    return session.link_id


async def test_full_handshake_scenario(
    coordinator: ConnectionCoordinator,
    event_bus: _FakeEventBus,
) -> None:
    session = await coordinator.create_session(SessionMetadata(ip_address="10.0.0.1"))
    status = await coordinator.verify_session(session.link_id)
    assert (status.live, status.bound, status.wallet_address) == (True, False, None)

    await coordinator.bind_wallet(
        session.link_id, SCENARIO_WALLET, SessionMetadata(chain_id="0x1")
    )
    status = await coordinator.verify_session(session.link_id)
    assert (status.bound, status.wallet_address) == (True, SCENARIO_WALLET)

    proposed = await coordinator.propose_transaction(
        session.link_id, SCENARIO_RECIPIENT, 1000000000000000000, note="test"
    )
    assert proposed.status == TransactionStatus.PENDING
    assert proposed.from_address == SCENARIO_WALLET
    assert proposed.chain_id == "0x1"

    resolved = await coordinator.resolve_transaction(
        proposed.transaction_id, session.link_id, "0xhash1"
    )

    assert resolved.status == TransactionStatus.EXECUTED
    assert resolved.tx_hash == "0xhash1"
    assert resolved.value == 1000000000000000000
    assert resolved.value_display == "1.0"
    assert [type(e) for e in event_bus.dispatched] == [
        LinkSessionCreatedEvent,
        WalletBoundEvent,
        TransactionProposedEvent,
        TransactionResolvedEvent,
    ]
    done = event_bus.of_type(TransactionResolvedEvent)[0]
    assert (done.outcome, done.tx_hash) == ("executed", "0xhash1")
    assert event_bus.of_type(TransactionProposedEvent)[0].value == "1000000000000000000"


async def test_verify_unknown_link_not_found(coordinator: ConnectionCoordinator) -> None:
    with pytest.raises(SessionNotFoundError):
        await coordinator.verify_session("does-not-exist")


async def test_verify_backdated_link_expired(
    session_repo: InMemoryLinkSessionRepository,
    coordinator: ConnectionCoordinator,
    now_utc: datetime,
) -> None:
    backdated = LinkSession.create(
        "old-link", created_at=now_utc - timedelta(days=2), ttl=timedelta(hours=24)
    )
    await session_repo.add(backdated)

    with pytest.raises(SessionExpiredError) as exc_info:
        await coordinator.verify_session("old-link")
    assert exc_info.value.retryable is False


async def test_verify_after_ttl_elapses_expired(
    coordinator: ConnectionCoordinator,
    clock: Any,
) -> None:
    link_id = await _bound_link(coordinator)
    clock.advance(hours=1)

    for _ in range(2):
        with pytest.raises(SessionExpiredError):
            await coordinator.verify_session(link_id)


async def test_rebind_same_wallet_emits_single_event(
    coordinator: ConnectionCoordinator,
    event_bus: _FakeEventBus,
) -> None:
    link_id = await _bound_link(coordinator)

    again = await coordinator.bind_wallet(link_id, SCENARIO_WALLET.lower())

    assert again.wallet_address == SCENARIO_WALLET
    assert len(event_bus.of_type(WalletBoundEvent)) == 1


async def test_propose_on_unbound_link_not_ready(coordinator: ConnectionCoordinator) -> None:
    session = await coordinator.create_session()

    with pytest.raises(NotReadyError):
        await coordinator.propose_transaction(session.link_id, SCENARIO_RECIPIENT, 1)


async def test_propose_on_expired_link_rejected(
    coordinator: ConnectionCoordinator,
    clock: Any,
) -> None:
    link_id = await _bound_link(coordinator)
    clock.advance(hours=2)

    with pytest.raises(SessionExpiredError):
        await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 1)


async def test_propose_touches_session(
    coordinator: ConnectionCoordinator,
    session_store: SessionStore,
    clock: Any,
) -> None:
    link_id = await _bound_link(coordinator)
    later = clock.advance(minutes=5)

    await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 1)

    assert (await session_store.get(link_id)).last_activity == later


async def test_resolve_with_other_link_reports_not_found(
    coordinator: ConnectionCoordinator,
) -> None:
    link_a = await _bound_link(coordinator)
    link_b = await _bound_link(coordinator)
    record = await coordinator.propose_transaction(link_a, SCENARIO_RECIPIENT, 1)

    with pytest.raises(TransactionNotFoundError):
        await coordinator.resolve_transaction(record.transaction_id, link_b, "0xhash1")
    with pytest.raises(TransactionNotFoundError):
        await coordinator.get_transaction_for_approval(record.transaction_id, link_b)
    assert (await coordinator.get_transaction(record.transaction_id)).is_pending


async def test_resolve_twice_already_resolved(coordinator: ConnectionCoordinator) -> None:
    link_id = await _bound_link(coordinator)
    record = await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 1)
    await coordinator.resolve_transaction(record.transaction_id, link_id, "0xhash1")

    with pytest.raises(AlreadyResolvedError):
        await coordinator.reject_transaction(record.transaction_id, link_id)


async def test_reject_marks_failed_and_emits(
    coordinator: ConnectionCoordinator,
    event_bus: _FakeEventBus,
) -> None:
    link_id = await _bound_link(coordinator)
    record = await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 5)

    rejected = await coordinator.reject_transaction(record.transaction_id, link_id, "declined")

    assert rejected.status == TransactionStatus.FAILED
    assert rejected.failure_reason == "declined"
    event = event_bus.of_type(TransactionResolvedEvent)[0]
    assert (event.outcome, event.failure_reason) == ("failed", "declined")


async def test_resolve_after_session_deleted_still_succeeds(
    coordinator: ConnectionCoordinator,
) -> None:
    link_id = await _bound_link(coordinator)
    record = await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 1)
    await coordinator.delete_session(link_id)

    resolved = await coordinator.resolve_transaction(record.transaction_id, link_id, "0xhash1")

    assert resolved.status == TransactionStatus.EXECUTED
    assert await coordinator.list_sessions() == []


async def test_operator_queries_delegate_to_ledger(coordinator: ConnectionCoordinator) -> None:
    link_id = await _bound_link(coordinator)
    first = await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 2 * 10**18)
    await coordinator.propose_transaction(link_id, SCENARIO_RECIPIENT, 10**18)
    await coordinator.resolve_transaction(first.transaction_id, link_id, "0xhash1")

    page = await coordinator.list_transactions(TransactionFilter(link_id=link_id))
    agg = await coordinator.aggregate_transactions(TransactionFilter(link_id=link_id))
    stats = await coordinator.transaction_stats()

    assert page.total == 2
    assert (agg.count, agg.sum_value, agg.avg_value) == (2, 3 * 10**18, 15 * 10**17)
    assert agg.avg_display == "1.5"
    assert (stats.executed, stats.pending) == (1, 1)
    assert [s.link_id for s in await coordinator.list_sessions(bound=True)] == [link_id]


async def test_touch_session_delegates(
    coordinator: ConnectionCoordinator,
    clock: Any,
) -> None:
    session = await coordinator.create_session()
    later = clock.advance(seconds=10)

    touched = await coordinator.touch_session(session.link_id)

    assert touched.last_activity == later


async def test_works_without_event_bus(
    session_store: SessionStore,
    ledger: TransactionLedger,
    clock: Any,
) -> None:
    coordinator = ConnectionCoordinator(session_store, ledger, clock=clock)

    session = await coordinator.create_session()

    assert (await coordinator.verify_session(session.link_id)).live is True
