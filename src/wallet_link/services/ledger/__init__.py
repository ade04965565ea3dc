# -*- coding: utf-8 -*-
"""Transaction ledger: append-on-create, single status transition, queries."""

from wallet_link.services.ledger.dto import (
    TransactionAggregate,
    TransactionPage,
    TransactionStats,
)
from wallet_link.services.ledger.transaction_ledger import TransactionLedger

__all__ = [
    "TransactionAggregate",
    "TransactionLedger",
    "TransactionPage",
    "TransactionStats",
]
