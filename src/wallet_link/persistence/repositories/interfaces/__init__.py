# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/, sql/."""

from wallet_link.persistence.repositories.interfaces.link_session_repository import (
    ILinkSessionRepository,
)
from wallet_link.persistence.repositories.interfaces.transaction_repository import (
    ITransactionRepository,
)

__all__ = [
    "ILinkSessionRepository",
    "ITransactionRepository",
]
