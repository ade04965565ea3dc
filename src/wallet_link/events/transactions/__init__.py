# -*- coding: utf-8 -*-
"""Transaction ledger events."""

from wallet_link.events.transactions.transaction_events import (
    TransactionProposedEvent,
    TransactionResolvedEvent,
)

__all__ = ["TransactionProposedEvent", "TransactionResolvedEvent"]
