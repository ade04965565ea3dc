# -*- coding: utf-8 -*-
"""ConnectionCoordinator: the operator / remote-party handshake.

Operator side: create_session, propose_transaction, listings and stats.
Remote side: verify_session, bind_wallet, get_transaction_for_approval,
resolve_transaction, reject_transaction.

Holds no state of its own; every rule that needs atomicity lives in
SessionStore or TransactionLedger.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog

from wallet_link.events.sessions import LinkSessionCreatedEvent, WalletBoundEvent
from wallet_link.events.transactions import (
    TransactionProposedEvent,
    TransactionResolvedEvent,
)
from wallet_link.exceptions import (
    NotReadyError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    TransactionNotFoundError,
)
from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.models.transaction_record import (
    TransactionFilter,
    TransactionMetadata,
    TransactionRecord,
    TransactionStatus,
)
from wallet_link.services.coordinator.dto import SessionStatusView
from wallet_link.services.ledger import (
    TransactionAggregate,
    TransactionLedger,
    TransactionPage,
    TransactionStats,
)
from wallet_link.services.session_store import SessionStore
from wallet_link.utils.clock import Clock, utc_now
from wallet_link.utils.validation import short_id

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]


class ConnectionCoordinator:
    """Entry point for the transport layer."""

    _event_bus: Optional["EventBus"] = None

    def __init__(
        self,
        session_store: SessionStore,
        ledger: TransactionLedger,
        *,
        clock: Clock = utc_now,
        event_bus: Optional[Any] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            session_store: Owns link sessions.
            ledger: Owns transaction records.
            clock: Same clock the store uses; only for building status views.
            event_bus: Optional; if set, lifecycle events are dispatched on it.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._sessions = session_store
        self._ledger = ledger
        self._clock = clock
        self._event_bus = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    # --- session handshake ---

    async def create_session(self, metadata: SessionMetadata | None = None) -> LinkSession:
        session = await self._sessions.create(metadata)
        self._emit(
            LinkSessionCreatedEvent(
                link_id=session.link_id,
                created_at=session.created_at,
                expires_at=session.expires_at,
            )
        )
        return session

    async def verify_session(self, link_id: str) -> SessionStatusView:
        """Report whether the link is usable.

        Raises:
            SessionNotFoundError: Unknown link id.
            SessionExpiredError: The link existed but has expired. Terminal.
        """
        session = await self._sessions.get(link_id)
        return SessionStatusView.from_session(session, self._clock())

    async def bind_wallet(
        self,
        link_id: str,
        address: str,
        metadata: SessionMetadata | None = None,
    ) -> LinkSession:
        result = await self._sessions.try_bind(link_id, address, metadata)
        if result.newly_bound:
            session = result.session
            self._emit(
                WalletBoundEvent(
                    link_id=session.link_id,
                    wallet_address=session.wallet_address or address,
                    bound_at=session.bound_at or self._clock(),
                    chain_id=session.metadata.chain_id,
                    wallet_type=session.metadata.wallet_type,
                )
            )
        return result.session

    async def touch_session(self, link_id: str) -> LinkSession:
        return await self._sessions.touch(link_id)

    async def delete_session(self, link_id: str) -> None:
        await self._sessions.delete(link_id)

    async def list_sessions(self, *, bound: bool | None = None) -> list[LinkSession]:
        return await self._sessions.list_sessions(bound=bound)

    # --- transactions ---

    async def propose_transaction(
        self,
        link_id: str,
        to: str,
        amount: Any,
        *,
        note: str = "",
        metadata: TransactionMetadata | None = None,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> TransactionRecord:
        """Propose a transfer from the wallet bound to link_id.

        Raises:
            SessionNotFoundError / SessionExpiredError: The link is not live.
            NotReadyError: No wallet is bound yet.
            ValidationError: Malformed recipient or amount.
        """
        session = await self._sessions.get(link_id)
        if not session.bound or not session.wallet_address:
            raise NotReadyError(link_id)
        record = await self._ledger.propose(
            link_id,
            session.wallet_address,
            to,
            amount,
            note=note,
            metadata=metadata,
            chain_id=session.metadata.chain_id,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )
        await self._touch_quietly(link_id)
        self._emit(
            TransactionProposedEvent(
                transaction_id=record.transaction_id,
                link_id=record.link_id,
                from_address=record.from_address,
                to_address=record.to_address,
                value=str(record.value),
                created_at=record.created_at,
            )
        )
        return record

    async def get_transaction_for_approval(
        self, transaction_id: str, link_id: str
    ) -> TransactionRecord:
        """Return the record the remote party is asked to approve; link_id must own it."""
        return await self._get_owned(transaction_id, link_id)

    async def resolve_transaction(
        self, transaction_id: str, link_id: str, tx_hash: str
    ) -> TransactionRecord:
        """Mark the transaction EXECUTED with the signer's hash.

        Raises:
            TransactionNotFoundError: Unknown id, or it belongs to another link.
            AlreadyResolvedError: Already executed or failed.
            ValidationError: Empty tx_hash.
        """
        await self._get_owned(transaction_id, link_id)
        record = await self._ledger.resolve(transaction_id, TransactionStatus.EXECUTED, tx_hash)
        await self._touch_quietly(link_id)
        self._emit_resolved(record)
        return record

    async def reject_transaction(
        self,
        transaction_id: str,
        link_id: str,
        reason: str | None = None,
    ) -> TransactionRecord:
        """Mark the transaction FAILED (declined by the remote party or the signer)."""
        await self._get_owned(transaction_id, link_id)
        record = await self._ledger.resolve(
            transaction_id, TransactionStatus.FAILED, reason=reason
        )
        await self._touch_quietly(link_id)
        self._emit_resolved(record)
        return record

    async def get_transaction(self, transaction_id: str) -> TransactionRecord:
        return await self._ledger.get(transaction_id)

    async def list_transactions(
        self,
        record_filter: TransactionFilter | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> TransactionPage:
        return await self._ledger.list(record_filter, page=page, page_size=page_size)

    async def aggregate_transactions(
        self, record_filter: TransactionFilter | None = None
    ) -> TransactionAggregate:
        return await self._ledger.aggregate(record_filter)

    async def transaction_stats(
        self, record_filter: TransactionFilter | None = None
    ) -> TransactionStats:
        return await self._ledger.stats(record_filter)

    # --- helpers ---

    async def _get_owned(self, transaction_id: str, link_id: str) -> TransactionRecord:
        record = await self._ledger.get(transaction_id)
        if record.link_id != link_id:
            self._logger.warning(
                "transaction_link_mismatch",
                transaction_id=short_id(transaction_id),
                link_id=short_id(link_id),
            )
            raise TransactionNotFoundError(transaction_id)
        return record

    async def _touch_quietly(self, link_id: str) -> None:
        """Record activity on the link; a vanished or expired link does not fail the caller."""
        try:
            await self._sessions.touch(link_id)
        except (SessionNotFoundError, SessionExpiredError) as e:
            self._logger.debug("session_touch_skipped", link_id=short_id(link_id), reason=e.code)
        except StorageError as e:
            self._logger.warning("session_touch_failed", link_id=short_id(link_id), error=str(e))

    def _emit_resolved(self, record: TransactionRecord) -> None:
        self._emit(
            TransactionResolvedEvent(
                transaction_id=record.transaction_id,
                link_id=record.link_id,
                outcome=record.status.value,
                tx_hash=record.tx_hash,
                failure_reason=record.failure_reason,
                resolved_at=record.resolved_at or self._clock(),
            )
        )

    def _emit(self, event: Any) -> None:
        if self._event_bus is None:
            return
        self._event_bus.dispatch(event)
