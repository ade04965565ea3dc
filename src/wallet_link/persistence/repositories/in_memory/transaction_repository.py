# -*- coding: utf-8 -*-
"""In-memory transaction repository (keyed by transaction_id)."""

from __future__ import annotations

import asyncio
from datetime import datetime

from wallet_link.models.transaction_record import TransactionFilter, TransactionRecord
from wallet_link.persistence.repositories.interfaces.transaction_repository import (
    ITransactionRepository,
)


def _newest_first(record: TransactionRecord) -> tuple[datetime, str]:
    """Sort key (used with reverse=True): created_at desc, transaction_id desc."""
    return (record.created_at, record.transaction_id)


class InMemoryTransactionRepository(ITransactionRepository):
    """In-memory implementation of ITransactionRepository."""

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, TransactionRecord] = {}
        self._lock = asyncio.Lock()

    async def get(self, transaction_id: str) -> TransactionRecord | None:
        """Return the record by id, or None if missing."""
        return self._store.get(transaction_id)

    async def add(self, record: TransactionRecord) -> None:
        async with self._lock:
            if record.transaction_id in self._store:
                raise ValueError(f"transaction {record.transaction_id!r} already exists")
            self._store[record.transaction_id] = record

    async def replace(self, record: TransactionRecord, expected_version: int) -> bool:
        """Compare-and-set on version."""
        async with self._lock:
            current = self._store.get(record.transaction_id)
            if current is None or current.version != expected_version:
                return False
            self._store[record.transaction_id] = record
            return True

    async def find(
        self,
        record_filter: TransactionFilter,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        """Return matching records, newest first, sliced by offset/limit."""
        matching = sorted(
            (r for r in self._store.values() if record_filter.matches(r)),
            key=_newest_first,
            reverse=True,
        )
        end = None if limit is None else offset + limit
        return matching[offset:end]

    async def count(self, record_filter: TransactionFilter) -> int:
        return sum(1 for r in self._store.values() if record_filter.matches(r))
