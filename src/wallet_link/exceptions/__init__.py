"""Exceptions subpackage."""

from wallet_link.exceptions.exceptions import (
    AlreadyBoundError,
    AlreadyResolvedError,
    MissingRequiredConfigError,
    NotFoundError,
    NotReadyError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    TransactionNotFoundError,
    ValidationError,
    WalletLinkError,
)

__all__ = [
    "AlreadyBoundError",
    "AlreadyResolvedError",
    "MissingRequiredConfigError",
    "NotFoundError",
    "NotReadyError",
    "SessionExpiredError",
    "SessionNotFoundError",
    "StorageError",
    "TransactionNotFoundError",
    "ValidationError",
    "WalletLinkError",
]
