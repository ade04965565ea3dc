"""SQLAlchemy transaction repository (single authoritative ledger table)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wallet_link.exceptions import StorageError
from wallet_link.models.transaction_record import TransactionFilter, TransactionRecord
from wallet_link.persistence.repositories.interfaces.transaction_repository import (
    ITransactionRepository,
)
from wallet_link.persistence.repositories.sql.converters import (
    transaction_columns,
    transaction_model_to_entity,
)
from wallet_link.persistence.repositories.sql.models import TransactionModel


def _apply_filter(stmt: Select[Any], record_filter: TransactionFilter) -> Select[Any]:
    if record_filter.link_id is not None:
        stmt = stmt.where(TransactionModel.link_id == record_filter.link_id)
    if record_filter.status is not None:
        stmt = stmt.where(TransactionModel.status == record_filter.status.value)
    return stmt


class SqlTransactionRepository(ITransactionRepository):
    """SQLAlchemy implementation of ITransactionRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, transaction_id: str) -> TransactionRecord | None:
        try:
            async with self._session_factory() as db:
                model = await db.get(TransactionModel, transaction_id)
                return transaction_model_to_entity(model) if model is not None else None
        except DBAPIError as e:
            raise StorageError("failed to load transaction", cause=e) from e

    async def add(self, record: TransactionRecord) -> None:
        try:
            async with self._session_factory() as db:
                db.add(TransactionModel(**transaction_columns(record)))
                await db.commit()
        except IntegrityError:
            raise ValueError(f"transaction {record.transaction_id!r} already exists") from None
        except DBAPIError as e:
            raise StorageError("failed to insert transaction", cause=e) from e

    async def replace(self, record: TransactionRecord, expected_version: int) -> bool:
        values = transaction_columns(record)
        values.pop("transaction_id")
        stmt = (
            update(TransactionModel)
            .where(
                TransactionModel.transaction_id == record.transaction_id,
                TransactionModel.version == expected_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            async with self._session_factory() as db:
                result = await db.execute(stmt)
                await db.commit()
                return result.rowcount == 1  # type: ignore[attr-defined]
        except DBAPIError as e:
            raise StorageError("failed to update transaction", cause=e) from e

    async def find(
        self,
        record_filter: TransactionFilter,
        *,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        stmt = _apply_filter(select(TransactionModel), record_filter).order_by(
            TransactionModel.created_at.desc(),
            TransactionModel.transaction_id.desc(),
        )
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with self._session_factory() as db:
                rows = (await db.scalars(stmt)).all()
                return [transaction_model_to_entity(m) for m in rows]
        except DBAPIError as e:
            raise StorageError("failed to query transactions", cause=e) from e

    async def count(self, record_filter: TransactionFilter) -> int:
        stmt = _apply_filter(select(func.count()).select_from(TransactionModel), record_filter)
        try:
            async with self._session_factory() as db:
                return int(await db.scalar(stmt) or 0)
        except DBAPIError as e:
            raise StorageError("failed to count transactions", cause=e) from e
