# -*- coding: utf-8 -*-
"""Abstract interface for transaction ledger storage (in-memory, SQL, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from wallet_link.models.transaction_record import TransactionFilter, TransactionRecord


class ITransactionRepository(ABC):
    """Interface for the single authoritative store of TransactionRecord.

    Records are append-only: there is no delete. ``replace`` is the only way a
    stored record changes and must be an atomic conditional write.
    """

    @abstractmethod
    async def get(self, transaction_id: str) -> Optional[TransactionRecord]:
        """Return the record by id, or None if missing."""
        ...

    @abstractmethod
    async def add(self, record: TransactionRecord) -> None:
        """Append a new record. Raises ValueError if transaction_id already exists."""
        ...

    @abstractmethod
    async def replace(self, record: TransactionRecord, expected_version: int) -> bool:
        """Store record only if the stored version still equals expected_version.

        Returns:
            True if written; False if missing or another writer won.
        """
        ...

    @abstractmethod
    async def find(
        self,
        record_filter: TransactionFilter,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        """Return matching records ordered by created_at desc, then transaction_id desc."""
        ...

    @abstractmethod
    async def count(self, record_filter: TransactionFilter) -> int:
        """Return the number of matching records."""
        ...
