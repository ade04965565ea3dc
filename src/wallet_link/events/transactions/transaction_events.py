"""Events emitted when transactions are proposed and resolved."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from bubus import BaseEvent  # type: ignore[import-untyped]


class TransactionProposedEvent(BaseEvent[None]):
    """Emitted when a PENDING record is appended for a bound link."""

    transaction_id: str
    link_id: str
    from_address: str
    to_address: str
    value: str
    """Base units as a decimal string (exceeds float precision)."""
    created_at: datetime


class TransactionResolvedEvent(BaseEvent[None]):
    """Emitted exactly once per transaction, by the resolver that won the transition."""

    transaction_id: str
    link_id: str
    outcome: Literal["executed", "failed"]
    tx_hash: str | None = None
    failure_reason: str | None = None
    resolved_at: datetime
