# -*- coding: utf-8 -*-
"""Domain models."""

from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.models.transaction_record import (
    TransactionFilter,
    TransactionMetadata,
    TransactionRecord,
    TransactionStatus,
)

__all__ = [
    "LinkSession",
    "SessionMetadata",
    "TransactionFilter",
    "TransactionMetadata",
    "TransactionRecord",
    "TransactionStatus",
]
