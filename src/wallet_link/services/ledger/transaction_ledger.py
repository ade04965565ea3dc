# -*- coding: utf-8 -*-
"""TransactionLedger: the single authoritative store of proposed transfers.

Records are appended PENDING and leave that state exactly once. The transition
is a compare-and-set on the record version: when several resolvers race, the
repository accepts one replace and every other caller re-reads a terminal
record and gets AlreadyResolvedError.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

import structlog

from wallet_link.config import Settings
from wallet_link.exceptions import (
    AlreadyResolvedError,
    StorageError,
    TransactionNotFoundError,
    ValidationError,
)
from wallet_link.models.transaction_record import (
    TransactionFilter,
    TransactionMetadata,
    TransactionRecord,
    TransactionStatus,
)
from wallet_link.persistence.repositories.interfaces import ITransactionRepository
from wallet_link.services.ledger.dto import (
    TransactionAggregate,
    TransactionPage,
    TransactionStats,
)
from wallet_link.utils.clock import Clock, IdGenerator, new_transaction_id, utc_now
from wallet_link.utils.units import MAX_BASE_UNITS, parse_base_units
from wallet_link.utils.validation import is_plausible_address, mask_address, short_id


class TransactionLedger:
    """Appends, resolves and queries TransactionRecords."""

    def __init__(
        self,
        repository: ITransactionRepository,
        settings: Settings,
        *,
        clock: Clock = utc_now,
        id_generator: IdGenerator = new_transaction_id,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the ledger.

        Args:
            repository: Transaction persistence (in-memory or SQL).
            settings: Application settings (uses settings.ledger).
            clock: Returns the current UTC time.
            id_generator: Produces new transaction ids.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._repo = repository
        self._config = settings.ledger
        self._clock = clock
        self._id_generator = id_generator
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def propose(
        self,
        link_id: str,
        from_address: str,
        to_address: str,
        amount: Any,
        *,
        note: str = "",
        metadata: TransactionMetadata | None = None,
        chain_id: str | None = None,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> TransactionRecord:
        """Append a new PENDING record.

        Args:
            link_id: Session the transfer is proposed on.
            from_address: The wallet bound to that session.
            to_address: Recipient; must look like a 0x address (or base58 when allowed).
            amount: Base units as int, integral Decimal or digit string.
            note: Free-form operator note.
            metadata: Requester details (descriptive only).
            chain_id: Chain reported by the wallet at bind time.
            gas_limit: Defaults to ledger.default_gas_limit.
            gas_price: Base units; defaults to ledger.default_gas_price.

        Raises:
            ValidationError: Malformed recipient, amount or gas parameters.
        """
        if not isinstance(from_address, str) or not from_address.strip():
            raise ValidationError("sender address is required", field="from_address")
        if not isinstance(to_address, str) or not to_address.strip():
            raise ValidationError("recipient address is required", field="to_address")
        if not is_plausible_address(to_address, allow_base58=self._config.allow_base58_fallback):
            raise ValidationError("invalid recipient address", field="to_address")
        value = parse_base_units(amount)
        gas_limit = self._gas_param(gas_limit, self._config.default_gas_limit, "gas_limit")
        gas_price = self._gas_param(gas_price, self._config.default_gas_price, "gas_price")

        record = TransactionRecord.create(
            self._id_generator(),
            link_id,
            from_address,
            to_address,
            value,
            created_at=self._clock(),
            note=note or "",
            metadata=metadata,
            chain_id=chain_id,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
        try:
            await self._repo.add(record)
        except ValueError as e:
            raise StorageError("transaction id collision", cause=e) from e
        self._logger.info(
            "transaction_proposed",
            transaction_id=short_id(record.transaction_id),
            link_id=short_id(link_id),
            to_masked=mask_address(record.to_address),
            value=str(value),
        )
        return record

    async def resolve(
        self,
        transaction_id: str,
        outcome: TransactionStatus | str,
        tx_hash: str | None = None,
        *,
        reason: str | None = None,
    ) -> TransactionRecord:
        """Move a PENDING record to EXECUTED or FAILED, exactly once.

        Raises:
            ValidationError: outcome is not terminal, or EXECUTED without tx_hash.
            TransactionNotFoundError: Unknown transaction id.
            AlreadyResolvedError: The record already left PENDING (another caller won).
        """
        status = self._parse_outcome(outcome)
        if status is TransactionStatus.EXECUTED:
            if not isinstance(tx_hash, str) or not tx_hash.strip():
                raise ValidationError("tx_hash is required to mark executed", field="tx_hash")

        current = await self._get_pending(transaction_id)
        now = self._clock()
        if status is TransactionStatus.EXECUTED:
            candidate = current.with_executed(tx_hash or "", now)
        else:
            candidate = current.with_failed(now, reason=reason)

        if not await self._repo.replace(candidate, current.version):
            # Lost the race: the re-read classifies it
            await self._get_pending(transaction_id)
            raise StorageError("transaction changed concurrently but is still pending")

        self._logger.info(
            "transaction_resolved",
            transaction_id=short_id(transaction_id),
            status=status.value,
            tx_hash=candidate.tx_hash,
        )
        return candidate

    async def get(self, transaction_id: str) -> TransactionRecord:
        """Return the record or raise TransactionNotFoundError."""
        record = await self._repo.get(transaction_id)
        if record is None:
            raise TransactionNotFoundError(transaction_id)
        return record

    async def list(
        self,
        record_filter: TransactionFilter | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> TransactionPage:
        """Return one page, newest first (created_at desc, then transaction_id desc).

        page_size defaults to ledger.default_page_size and is capped at ledger.max_page_size.
        """
        if page < 1:
            raise ValidationError("page must be >= 1", field="page")
        if page_size is None:
            page_size = self._config.default_page_size
        if page_size < 1:
            raise ValidationError("page_size must be >= 1", field="page_size")
        page_size = min(page_size, self._config.max_page_size)
        record_filter = record_filter or TransactionFilter()

        total = await self._repo.count(record_filter)
        records = await self._repo.find(
            record_filter,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return TransactionPage(
            records=tuple(records),
            total=total,
            page=page,
            page_size=page_size,
            pages=math.ceil(total / page_size) if total else 0,
        )

    async def aggregate(self, record_filter: TransactionFilter | None = None) -> TransactionAggregate:
        """Count, sum and floor-average value over the filtered set (integers, base units)."""
        records = await self._repo.find(record_filter or TransactionFilter())
        return TransactionAggregate.of(
            [r.value for r in records],
            decimals=self._config.display_decimals,
        )

    def display_value(self, record: TransactionRecord) -> str:
        """Render record.value with the configured display decimals."""
        return record.display_value(self._config.display_decimals)

    async def stats(self, record_filter: TransactionFilter | None = None) -> TransactionStats:
        """Counts per status, executed volume and the most recent executed records.

        A status in record_filter narrows the whole summary: the other buckets
        are zero, and the executed aggregate is empty unless status is executed.
        """
        base = record_filter or TransactionFilter()
        counts: dict[TransactionStatus, int] = {}
        for status in TransactionStatus:
            if base.status is None or base.status == status:
                counts[status] = await self._repo.count(base.with_status(status))
            else:
                counts[status] = 0
        executed_filter = base.with_status(TransactionStatus.EXECUTED)
        executed_in_scope = base.status is None or base.status == TransactionStatus.EXECUTED
        recent: list[TransactionRecord] = []
        if executed_in_scope and self._config.recent_executed_limit:
            recent = await self._repo.find(
                executed_filter,
                limit=self._config.recent_executed_limit,
            )
        if executed_in_scope:
            executed_aggregate = await self.aggregate(executed_filter)
        else:
            executed_aggregate = TransactionAggregate.of([], decimals=self._config.display_decimals)
        return TransactionStats(
            total=sum(counts.values()),
            pending=counts[TransactionStatus.PENDING],
            executed=counts[TransactionStatus.EXECUTED],
            failed=counts[TransactionStatus.FAILED],
            executed_aggregate=executed_aggregate,
            recent_executed=tuple(recent),
        )

    async def _get_pending(self, transaction_id: str) -> TransactionRecord:
        record = await self.get(transaction_id)
        if not record.is_pending:
            self._logger.info(
                "transaction_already_resolved",
                transaction_id=short_id(transaction_id),
                status=record.status.value,
            )
            raise AlreadyResolvedError(transaction_id, status=record.status.value)
        return record

    @staticmethod
    def _parse_outcome(outcome: TransactionStatus | str) -> TransactionStatus:
        try:
            status = TransactionStatus(outcome)
        except ValueError:
            raise ValidationError(f"unknown outcome {outcome!r}", field="outcome") from None
        if not status.is_terminal:
            raise ValidationError("outcome must be executed or failed", field="outcome")
        return status

    @staticmethod
    def _gas_param(value: int | None, default: int, name: str) -> int:
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"{name} must be a non-negative integer", field=name)
        if value > MAX_BASE_UNITS:
            raise ValidationError(f"{name} exceeds uint256", field=name)
        return value
