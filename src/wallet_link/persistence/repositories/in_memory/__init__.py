"""In-memory repository implementations."""

from wallet_link.persistence.repositories.in_memory.link_session_repository import (
    InMemoryLinkSessionRepository,
)
from wallet_link.persistence.repositories.in_memory.transaction_repository import (
    InMemoryTransactionRepository,
)

__all__ = [
    "InMemoryLinkSessionRepository",
    "InMemoryTransactionRepository",
]
