"""Persistence layer (repositories, database)."""

from wallet_link.persistence.repositories import (
    ILinkSessionRepository,
    InMemoryLinkSessionRepository,
    InMemoryTransactionRepository,
    ITransactionRepository,
)

__all__ = [
    "ILinkSessionRepository",
    "ITransactionRepository",
    "InMemoryLinkSessionRepository",
    "InMemoryTransactionRepository",
]
