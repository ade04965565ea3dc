"""TransactionRecord: append-only ledger entry for a proposed value transfer.

Created pending by the coordinator on a bound session; moved exactly once to
EXECUTED (with the signer's hash) or FAILED. ``link_id`` is a weak reference:
the record outlives the session for audit.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from wallet_link.utils.units import DEFAULT_DECIMALS, format_units


class TransactionStatus(str, Enum):
    """Transaction lifecycle state."""

    PENDING = "pending"
    """Proposed by the operator; awaiting the remote party."""
    EXECUTED = "executed"
    """Approved and signed; tx_hash is set."""
    FAILED = "failed"
    """Declined or failed at the signer."""

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


@dataclass(frozen=True, slots=True)
class TransactionMetadata:
    """Who requested the transfer. Descriptive only."""

    ip_address: str | None = None
    user_agent: str | None = None
    requested_by: str = "operator"


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """One proposed transfer and its single resolution.

    - value: base units (int, arbitrary precision). The only source of truth for the amount.
    - status: PENDING -> EXECUTED | FAILED; terminal statuses never change.
    """

    transaction_id: str
    link_id: str
    from_address: str
    to_address: str
    value: int
    status: TransactionStatus
    created_at: datetime
    tx_hash: str | None = None
    """Set only on the transition to EXECUTED."""
    resolved_at: datetime | None = None
    """Set exactly once, at the terminal transition."""
    failure_reason: str | None = None
    note: str = ""
    metadata: TransactionMetadata = field(default_factory=TransactionMetadata)
    chain_id: str | None = None
    gas_limit: int = 21000
    gas_price: int = 20_000_000_000
    version: int = 0

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    @property
    def value_display(self) -> str:
        """Human-readable amount in ether units (always 18 decimals). Derived, never stored.

        For the operator-configured precision use TransactionLedger.display_value.
        """
        return format_units(self.value, DEFAULT_DECIMALS)

    def display_value(self, decimals: int = DEFAULT_DECIMALS) -> str:
        """Render value with a custom number of decimals."""
        return format_units(self.value, decimals)

    def with_executed(self, tx_hash: str, resolved_at: datetime) -> TransactionRecord:
        """Return the next version in EXECUTED with tx_hash. Only valid while PENDING."""
        if not self.is_pending:
            raise ValueError(f"transaction already {self.status.value}")
        tx_hash = tx_hash.strip()
        if not tx_hash:
            raise ValueError("tx_hash must be non-empty")
        return replace(
            self,
            status=TransactionStatus.EXECUTED,
            tx_hash=tx_hash,
            resolved_at=resolved_at,
            version=self.version + 1,
        )

    def with_failed(self, resolved_at: datetime, *, reason: str | None = None) -> TransactionRecord:
        """Return the next version in FAILED. Only valid while PENDING."""
        if not self.is_pending:
            raise ValueError(f"transaction already {self.status.value}")
        return replace(
            self,
            status=TransactionStatus.FAILED,
            failure_reason=reason,
            resolved_at=resolved_at,
            version=self.version + 1,
        )

    @classmethod
    def create(
        cls,
        transaction_id: str,
        link_id: str,
        from_address: str,
        to_address: str,
        value: int,
        *,
        created_at: datetime,
        note: str = "",
        metadata: TransactionMetadata | None = None,
        chain_id: str | None = None,
        gas_limit: int = 21000,
        gas_price: int = 20_000_000_000,
    ) -> TransactionRecord:
        """Create a new PENDING record."""
        if value < 0:
            raise ValueError("value must be non-negative")
        return cls(
            transaction_id=transaction_id,
            link_id=link_id,
            from_address=from_address.strip(),
            to_address=to_address.strip(),
            value=value,
            status=TransactionStatus.PENDING,
            created_at=created_at,
            note=note,
            metadata=metadata or TransactionMetadata(),
            chain_id=chain_id,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )


@dataclass(frozen=True, slots=True)
class TransactionFilter:
    """Query filter over the ledger. None means no constraint."""

    link_id: str | None = None
    status: TransactionStatus | None = None

    def matches(self, record: TransactionRecord) -> bool:
        if self.link_id is not None and record.link_id != self.link_id:
            return False
        if self.status is not None and record.status != self.status:
            return False
        return True

    def with_status(self, status: TransactionStatus | None) -> TransactionFilter:
        return replace(self, status=status)
