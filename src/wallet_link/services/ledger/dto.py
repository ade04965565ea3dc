"""Read models returned by TransactionLedger queries."""

from __future__ import annotations

from dataclasses import dataclass, field

from wallet_link.models.transaction_record import TransactionRecord
from wallet_link.utils.units import DEFAULT_DECIMALS, format_units


@dataclass(frozen=True)
class TransactionPage:
    """One page of a filtered ledger listing (pages are 1-based)."""

    records: tuple[TransactionRecord, ...]
    total: int
    page: int
    page_size: int
    pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


@dataclass(frozen=True)
class TransactionAggregate:
    """Count, sum and floor average of value over a filtered set, in base units."""

    count: int
    sum_value: int
    avg_value: int
    decimals: int = DEFAULT_DECIMALS

    @property
    def sum_display(self) -> str:
        return format_units(self.sum_value, self.decimals)

    @property
    def avg_display(self) -> str:
        return format_units(self.avg_value, self.decimals)

    @classmethod
    def of(cls, values: list[int], decimals: int = DEFAULT_DECIMALS) -> TransactionAggregate:
        """Build from raw base-unit values. An empty list gives all zeros."""
        count = len(values)
        total = sum(values)
        return cls(
            count=count,
            sum_value=total,
            avg_value=total // count if count else 0,
            decimals=decimals,
        )


@dataclass(frozen=True)
class TransactionStats:
    """Operator dashboard summary: counts per status plus executed volume."""

    total: int
    pending: int
    executed: int
    failed: int
    executed_aggregate: TransactionAggregate
    recent_executed: tuple[TransactionRecord, ...] = field(default_factory=tuple)
