"""SQLAlchemy (async) repository implementations."""

from wallet_link.persistence.repositories.sql.database import Database
from wallet_link.persistence.repositories.sql.link_session_repository import (
    SqlLinkSessionRepository,
)
from wallet_link.persistence.repositories.sql.transaction_repository import (
    SqlTransactionRepository,
)

__all__ = [
    "Database",
    "SqlLinkSessionRepository",
    "SqlTransactionRepository",
]
