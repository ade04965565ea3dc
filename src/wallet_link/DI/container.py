# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from wallet_link.config import Settings, get_settings
from wallet_link.events.bus import get_event_bus
from wallet_link.persistence.repositories.in_memory import (
    InMemoryLinkSessionRepository,
    InMemoryTransactionRepository,
)
from wallet_link.persistence.repositories.sql import (
    Database,
    SqlLinkSessionRepository,
    SqlTransactionRepository,
)
from wallet_link.services.coordinator import ConnectionCoordinator
from wallet_link.services.ledger import TransactionLedger
from wallet_link.services.maintenance import ExpiredSessionSweeper
from wallet_link.services.session_store import SessionStore
from wallet_link.utils.clock import new_link_id, new_transaction_id, utc_now


def _storage_backend(settings: Settings) -> str:
    """Selector key for the repository providers."""
    return settings.storage.backend


def _build_database(settings: Settings) -> Database:
    return Database(settings.storage.database_url, echo=settings.storage.echo)


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, storage backend, services and event bus."""

    config = providers.Callable(get_settings)

    clock = providers.Object(utc_now)

    event_bus = providers.Callable(get_event_bus)

    database = providers.Singleton(_build_database, config)

    storage_backend = providers.Callable(_storage_backend, config)

    link_session_repository = providers.Selector(
        storage_backend,
        memory=providers.Singleton(InMemoryLinkSessionRepository),
        sqlalchemy=providers.Singleton(
            SqlLinkSessionRepository,
            session_factory=database.provided.session_factory,
        ),
    )

    transaction_repository = providers.Selector(
        storage_backend,
        memory=providers.Singleton(InMemoryTransactionRepository),
        sqlalchemy=providers.Singleton(
            SqlTransactionRepository,
            session_factory=database.provided.session_factory,
        ),
    )

    session_store = providers.Singleton(
        SessionStore,
        repository=link_session_repository,
        settings=config,
        clock=clock,
        id_generator=providers.Object(new_link_id),
    )

    transaction_ledger = providers.Singleton(
        TransactionLedger,
        repository=transaction_repository,
        settings=config,
        clock=clock,
        id_generator=providers.Object(new_transaction_id),
    )

    connection_coordinator = providers.Singleton(
        ConnectionCoordinator,
        session_store=session_store,
        ledger=transaction_ledger,
        clock=clock,
        event_bus=event_bus,
    )

    expired_session_sweeper = providers.Singleton(
        ExpiredSessionSweeper,
        session_store=session_store,
        settings=config,
    )
