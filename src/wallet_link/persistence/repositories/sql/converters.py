"""Row <-> domain entity conversion for the SQL repositories."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.models.transaction_record import (
    TransactionMetadata,
    TransactionRecord,
    TransactionStatus,
)
from wallet_link.persistence.repositories.sql.models import LinkSessionModel, TransactionModel


def to_db_datetime(value: datetime | None) -> datetime | None:
    """Normalise to UTC before writing."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def from_db_datetime(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; everything is stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _required(value: datetime | None) -> datetime:
    dt = from_db_datetime(value)
    if dt is None:
        raise ValueError("required datetime column is NULL")
    return dt


def session_columns(session: LinkSession) -> dict[str, Any]:
    """Column values for insert/update."""
    return {
        "link_id": session.link_id,
        "created_at": to_db_datetime(session.created_at),
        "expires_at": to_db_datetime(session.expires_at),
        "last_activity": to_db_datetime(session.last_activity),
        "wallet_address": session.wallet_address,
        "bound": session.bound,
        "bound_at": to_db_datetime(session.bound_at),
        "ip_address": session.metadata.ip_address,
        "user_agent": session.metadata.user_agent,
        "chain_id": session.metadata.chain_id,
        "wallet_type": session.metadata.wallet_type,
        "version": session.version,
    }


def session_model_to_entity(model: LinkSessionModel) -> LinkSession:
    return LinkSession(
        link_id=model.link_id,
        created_at=_required(model.created_at),
        expires_at=_required(model.expires_at),
        last_activity=_required(model.last_activity),
        wallet_address=model.wallet_address,
        bound=model.bound,
        bound_at=from_db_datetime(model.bound_at),
        metadata=SessionMetadata(
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            chain_id=model.chain_id,
            wallet_type=model.wallet_type,
        ),
        version=model.version,
    )


def transaction_columns(record: TransactionRecord) -> dict[str, Any]:
    return {
        "transaction_id": record.transaction_id,
        "link_id": record.link_id,
        "from_address": record.from_address,
        "to_address": record.to_address,
        "value": str(record.value),
        "status": record.status.value,
        "created_at": to_db_datetime(record.created_at),
        "tx_hash": record.tx_hash,
        "resolved_at": to_db_datetime(record.resolved_at),
        "failure_reason": record.failure_reason,
        "note": record.note,
        "ip_address": record.metadata.ip_address,
        "user_agent": record.metadata.user_agent,
        "requested_by": record.metadata.requested_by,
        "chain_id": record.chain_id,
        "gas_limit": str(record.gas_limit),
        "gas_price": str(record.gas_price),
        "version": record.version,
    }


def transaction_model_to_entity(model: TransactionModel) -> TransactionRecord:
    return TransactionRecord(
        transaction_id=model.transaction_id,
        link_id=model.link_id,
        from_address=model.from_address,
        to_address=model.to_address,
        value=int(model.value),
        status=TransactionStatus(model.status),
        created_at=_required(model.created_at),
        tx_hash=model.tx_hash,
        resolved_at=from_db_datetime(model.resolved_at),
        failure_reason=model.failure_reason,
        note=model.note,
        metadata=TransactionMetadata(
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            requested_by=model.requested_by,
        ),
        chain_id=model.chain_id,
        gas_limit=int(model.gas_limit),
        gas_price=int(model.gas_price),
        version=model.version,
    )
