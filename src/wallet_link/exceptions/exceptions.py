"""Custom exceptions for link sessions and the transaction ledger.

Every business-rule rejection is a distinct subclass so the transport layer can
map each kind to its own response. Only ``StorageError`` is marked retryable;
expiry, binding and resolution conflicts are terminal outcomes.
"""

from __future__ import annotations

from typing import Any


class WalletLinkError(Exception):
    """Base exception for wallet-link errors."""

    code: str = "wallet_link_error"
    retryable: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload (never contains signing material)."""
        return {
            "error": self.code,
            "message": str(self),
            "retryable": self.retryable,
        }


class MissingRequiredConfigError(WalletLinkError):
    """Raised when a required configuration value is missing or invalid."""

    code = "missing_required_config"


class ValidationError(WalletLinkError):
    """Raised when an address, amount, outcome or pagination argument is malformed."""

    code = "validation_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.field:
            payload["field"] = self.field
        return payload


class NotFoundError(WalletLinkError):
    """Base for lookups of unknown identifiers."""

    code = "not_found"


class SessionNotFoundError(NotFoundError):
    """Raised when no session exists for the link id."""

    code = "session_not_found"

    def __init__(self, link_id: str, message: str | None = None) -> None:
        super().__init__(message or "Invalid or unknown link")
        self.link_id = link_id


class SessionExpiredError(WalletLinkError):
    """Raised when the link existed but its TTL has elapsed. Terminal: do not retry."""

    code = "session_expired"

    def __init__(self, link_id: str, message: str | None = None) -> None:
        super().__init__(message or "Link has expired")
        self.link_id = link_id


class AlreadyBoundError(WalletLinkError):
    """Raised when a different wallet tries to bind an already bound session."""

    code = "already_bound"

    def __init__(self, link_id: str, message: str | None = None) -> None:
        super().__init__(message or "Link is already bound to a wallet")
        self.link_id = link_id


class NotReadyError(WalletLinkError):
    """Raised when a transaction is proposed on a session without a bound wallet."""

    code = "not_ready"

    def __init__(self, link_id: str, message: str | None = None) -> None:
        super().__init__(message or "Wallet not connected for this link")
        self.link_id = link_id


class TransactionNotFoundError(NotFoundError):
    """Raised when no transaction exists for the id (or it belongs to another link)."""

    code = "transaction_not_found"

    def __init__(self, transaction_id: str, message: str | None = None) -> None:
        super().__init__(message or "Transaction not found")
        self.transaction_id = transaction_id


class AlreadyResolvedError(WalletLinkError):
    """Raised when resolving a transaction that already reached a terminal status."""

    code = "already_resolved"

    def __init__(
        self,
        transaction_id: str,
        *,
        status: str | None = None,
        message: str | None = None,
    ) -> None:
        super().__init__(message or "Transaction already resolved")
        self.transaction_id = transaction_id
        self.status = status

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.status:
            payload["status"] = self.status
        return payload


class StorageError(WalletLinkError):
    """Raised when the persistence layer fails (I/O, connection). Eligible for caller retry."""

    code = "storage_error"
    retryable = True

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
