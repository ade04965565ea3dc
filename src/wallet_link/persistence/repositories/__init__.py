# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, sql)."""

from wallet_link.persistence.repositories.interfaces import (
    ILinkSessionRepository,
    ITransactionRepository,
)
from wallet_link.persistence.repositories.in_memory import (
    InMemoryLinkSessionRepository,
    InMemoryTransactionRepository,
)

__all__ = [
    "ILinkSessionRepository",
    "ITransactionRepository",
    "InMemoryLinkSessionRepository",
    "InMemoryTransactionRepository",
]
