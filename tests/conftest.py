# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from wallet_link.config import LedgerSettings, SessionSettings, Settings
from wallet_link.models.link_session import LinkSession
from wallet_link.models.transaction_record import TransactionRecord
from wallet_link.persistence.repositories.in_memory import (
    InMemoryLinkSessionRepository,
    InMemoryTransactionRepository,
)
from wallet_link.services.ledger import TransactionLedger
from wallet_link.services.session_store import SessionStore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def wallet() -> str:
    """Default wallet bound to sessions in tests."""
    return "0xABCDEFabcdef0123456789ABCDEFabcdef012345"


@pytest.fixture
def recipient() -> str:
    """Default transfer recipient."""
    return "0x1234567890123456789012345678901234567890"


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now_utc: datetime) -> FakeClock:
    return FakeClock(now_utc)


@pytest.fixture
def settings() -> Settings:
    """Defaults with a one-hour TTL so expiry is easy to reach."""
    return Settings(
        session=SessionSettings(ttl_seconds=3600, max_cas_retries=5),
        ledger=LedgerSettings(default_page_size=10, max_page_size=50),
    )


@pytest.fixture
def sequential_ids() -> Callable[[str], Callable[[], str]]:
    """sequential_ids('tx') -> generator of 'tx-0001', 'tx-0002', ..."""

    def _make(prefix: str) -> Callable[[], str]:
        counter = itertools.count(1)
        return lambda: f"{prefix}-{next(counter):04d}"

    return _make


@pytest.fixture
def link_session_factory(now_utc: datetime) -> Callable[..., LinkSession]:
    """Build an unbound LinkSession with easy overrides."""
    counter = itertools.count(1)

    def _build(**overrides: Any) -> LinkSession:
        return LinkSession.create(
            overrides.pop("link_id", f"link-{next(counter):04d}"),
            created_at=overrides.pop("created_at", now_utc),
            ttl=overrides.pop("ttl", timedelta(hours=1)),
            metadata=overrides.pop("metadata", None),
        )

    return _build


@pytest.fixture
def transaction_record_factory(
    wallet: str,
    recipient: str,
    now_utc: datetime,
) -> Callable[..., TransactionRecord]:
    """Build a PENDING TransactionRecord with easy overrides."""
    counter = itertools.count(1)

    def _build(**overrides: Any) -> TransactionRecord:
        return TransactionRecord.create(
            overrides.pop("transaction_id", f"tx-{next(counter):04d}"),
            overrides.pop("link_id", "link-0001"),
            overrides.pop("from_address", wallet),
            overrides.pop("to_address", recipient),
            overrides.pop("value", 10**18),
            created_at=overrides.pop("created_at", now_utc),
            note=overrides.pop("note", ""),
            chain_id=overrides.pop("chain_id", None),
        )

    return _build


@pytest.fixture
def session_repo() -> InMemoryLinkSessionRepository:
    """Fresh in-memory session repository per test."""
    return InMemoryLinkSessionRepository()


@pytest.fixture
def transaction_repo() -> InMemoryTransactionRepository:
    """Fresh in-memory transaction repository per test."""
    return InMemoryTransactionRepository()


@pytest.fixture
def session_store(
    session_repo: InMemoryLinkSessionRepository,
    settings: Settings,
    clock: FakeClock,
) -> SessionStore:
    return SessionStore(session_repo, settings, clock=clock)


@pytest.fixture
def ledger(
    transaction_repo: InMemoryTransactionRepository,
    settings: Settings,
    clock: FakeClock,
) -> TransactionLedger:
    return TransactionLedger(transaction_repo, settings, clock=clock)
