"""
SQLAlchemy ORM tables for link sessions and the transaction ledger.

Works on SQLite (aiosqlite) and PostgreSQL (asyncpg). Datetimes are stored
normalised to UTC; SQLite returns them naive, so readers re-attach UTC.
Amounts are stored as decimal strings: base-unit integers exceed every native
integer column type. Width is the uint256 digit count enforced by parse_base_units.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from wallet_link.utils.units import MAX_BASE_UNITS_DIGITS


class Base(DeclarativeBase):
    """Base class for all models."""


class LinkSessionModel(Base):
    __tablename__ = "link_sessions"

    link_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_activity: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    wallet_address: Mapped[str | None] = mapped_column(String(128), nullable=True)
    bound: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bound_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    chain_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    wallet_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_link_sessions_expires_at", "expires_at"),
        Index("ix_link_sessions_created_at", "created_at"),
    )


class TransactionModel(Base):
    __tablename__ = "transactions"

    transaction_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    link_id: Mapped[str] = mapped_column(String(64), nullable=False)
    from_address: Mapped[str] = mapped_column(String(128), nullable=False)
    to_address: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(String(MAX_BASE_UNITS_DIGITS), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    tx_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    requested_by: Mapped[str] = mapped_column(String(64), nullable=False, default="operator")
    chain_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    gas_limit: Mapped[str] = mapped_column(String(MAX_BASE_UNITS_DIGITS), nullable=False)
    gas_price: Mapped[str] = mapped_column(String(MAX_BASE_UNITS_DIGITS), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_transactions_link_created", "link_id", "created_at"),
        Index("ix_transactions_status_created", "status", "created_at"),
        Index("ix_transactions_tx_hash", "tx_hash"),
    )
