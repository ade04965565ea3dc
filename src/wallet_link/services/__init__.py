# -*- coding: utf-8 -*-
"""Application services."""

from wallet_link.services.coordinator import ConnectionCoordinator, SessionStatusView
from wallet_link.services.ledger import (
    TransactionAggregate,
    TransactionLedger,
    TransactionPage,
    TransactionStats,
)
from wallet_link.services.maintenance import ExpiredSessionSweeper
from wallet_link.services.session_store import BindResult, SessionStore

__all__ = [
    "BindResult",
    "ConnectionCoordinator",
    "ExpiredSessionSweeper",
    "SessionStatusView",
    "SessionStore",
    "TransactionAggregate",
    "TransactionLedger",
    "TransactionPage",
    "TransactionStats",
]
