# -*- coding: utf-8 -*-
"""SessionStore: owns LinkSession entities and their lifecycle.

Expiry is lazy: every read compares the injected clock against expires_at and
deletes the session the first time it is seen expired. Deleted expired ids are
remembered in a TTL cache for session.expired_tombstone_seconds so later reads
still report expired rather than unknown. Bind and touch are
read-modify-write cycles closed by ``repository.replace(..., expected_version)``,
so concurrent binders race on the version and exactly one wins.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from cachetools import TTLCache
import structlog

from wallet_link.config import Settings
from wallet_link.exceptions import (
    AlreadyBoundError,
    SessionExpiredError,
    SessionNotFoundError,
    StorageError,
    ValidationError,
)
from wallet_link.models.link_session import LinkSession, SessionMetadata
from wallet_link.persistence.repositories.interfaces import ILinkSessionRepository
from wallet_link.services.session_store.dto import BindResult
from wallet_link.utils.clock import Clock, IdGenerator, new_link_id, utc_now
from wallet_link.utils.validation import (
    is_plausible_address,
    mask_address,
    same_address,
    short_id,
)

# Attempts to allocate an unused link_id before giving up.
_MAX_ID_ATTEMPTS = 3


class SessionStore:
    """Creates, reads, binds and expires link sessions."""

    def __init__(
        self,
        repository: ILinkSessionRepository,
        settings: Settings,
        *,
        clock: Clock = utc_now,
        id_generator: IdGenerator = new_link_id,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Session persistence (in-memory or SQL).
            settings: Application settings (uses settings.session and ledger.allow_base58_fallback).
            clock: Returns the current UTC time; injected so tests control expiry.
            id_generator: Produces new link ids.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._repo = repository
        self._settings = settings
        self._clock = clock
        self._id_generator = id_generator
        self._ttl = timedelta(seconds=settings.session.ttl_seconds)
        self._max_retries = settings.session.max_cas_retries
        self._tombstones: TTLCache[str, datetime] = TTLCache(
            maxsize=max(1, settings.session.expired_tombstone_maxsize),
            ttl=settings.session.expired_tombstone_seconds,
            timer=lambda: self._clock().timestamp(),
        )
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def create(self, metadata: SessionMetadata | None = None) -> LinkSession:
        """Create a new unbound session expiring after the configured TTL."""
        for _ in range(_MAX_ID_ATTEMPTS):
            session = LinkSession.create(
                self._id_generator(),
                created_at=self._clock(),
                ttl=self._ttl,
                metadata=metadata,
            )
            try:
                await self._repo.add(session)
            except ValueError:
                self._logger.warning("session_id_collision", link_id=short_id(session.link_id))
                continue
            self._logger.info(
                "session_created",
                link_id=short_id(session.link_id),
                expires_at=session.expires_at.isoformat(),
            )
            return session
        raise StorageError("could not allocate a unique link id")

    async def get(self, link_id: str) -> LinkSession:
        """Return the live session for link_id.

        Raises:
            SessionNotFoundError: Unknown link id.
            SessionExpiredError: The TTL elapsed; the session is deleted as a side effect.
        """
        session = await self._repo.get(link_id)
        if session is None:
            if link_id in self._tombstones:
                raise SessionExpiredError(link_id)
            raise SessionNotFoundError(link_id)
        now = self._clock()
        if session.is_expired(now):
            self._tombstones[link_id] = session.expires_at
            await self._repo.delete(link_id)
            self._logger.info(
                "session_expired",
                link_id=short_id(link_id),
                expires_at=session.expires_at.isoformat(),
            )
            raise SessionExpiredError(link_id)
        return session

    async def bind(
        self,
        link_id: str,
        wallet_address: str,
        metadata: SessionMetadata | None = None,
    ) -> LinkSession:
        """Bind wallet_address to the session exactly once and return the bound session.

        Re-binding the address that already owns the session returns it unchanged.

        Raises:
            ValidationError: Malformed wallet address.
            AlreadyBoundError: Another address won the bind.
            SessionNotFoundError: Unknown link id.
            SessionExpiredError: The TTL elapsed.
        """
        result = await self.try_bind(link_id, wallet_address, metadata)
        return result.session

    async def try_bind(
        self,
        link_id: str,
        wallet_address: str,
        metadata: SessionMetadata | None = None,
    ) -> BindResult:
        """Same as bind, but also reports whether this call performed the bind."""
        address = self._validate_address(wallet_address)
        for _ in range(self._max_retries):
            current = await self.get(link_id)
            if current.bound:
                if same_address(current.wallet_address, address):
                    return BindResult(session=current, newly_bound=False)
                self._logger.info(
                    "session_bind_rejected",
                    link_id=short_id(link_id),
                    wallet_masked=mask_address(address),
                    bound_wallet_masked=mask_address(current.wallet_address),
                )
                raise AlreadyBoundError(link_id)
            candidate = current.with_bound(address, self._clock(), metadata=metadata)
            if await self._repo.replace(candidate, current.version):
                self._logger.info(
                    "session_bound",
                    link_id=short_id(link_id),
                    wallet_masked=mask_address(address),
                )
                return BindResult(session=candidate, newly_bound=True)
            self._logger.debug("session_bind_conflict", link_id=short_id(link_id))
        raise StorageError(f"bind did not converge after {self._max_retries} attempts")

    async def touch(self, link_id: str) -> LinkSession:
        """Advance last_activity to now. Does not extend expiry.

        Raises:
            SessionNotFoundError: Unknown link id.
            SessionExpiredError: The TTL elapsed.
            StorageError: Version conflicts persisted past session.max_cas_retries.
        """
        for _ in range(self._max_retries):
            current = await self.get(link_id)
            candidate = current.with_activity(self._clock())
            if await self._repo.replace(candidate, current.version):
                return candidate
            self._logger.debug("session_touch_conflict", link_id=short_id(link_id))
        self._logger.warning(
            "session_touch_gave_up",
            link_id=short_id(link_id),
            attempts=self._max_retries,
        )
        raise StorageError(f"touch did not converge after {self._max_retries} attempts")

    async def delete(self, link_id: str) -> None:
        """Delete the session. Deleting an unknown id is a no-op."""
        deleted = await self._repo.delete(link_id)
        if deleted:
            self._logger.info("session_deleted", link_id=short_id(link_id))

    async def list_sessions(self, *, bound: bool | None = None) -> list[LinkSession]:
        """Return live sessions, newest first; bound filters on binding state when not None."""
        now = self._clock()
        return [
            s
            for s in await self._repo.list_all()
            if s.is_live(now) and (bound is None or s.bound == bound)
        ]

    async def purge_expired(self) -> int:
        """Delete every expired session; return how many were removed."""
        now = self._clock()
        for session in await self._repo.list_all():
            if session.is_expired(now):
                self._tombstones[session.link_id] = session.expires_at
        removed = await self._repo.delete_expired(now)
        if removed:
            self._logger.info("sessions_purged", removed_count=removed)
        return removed

    def _validate_address(self, wallet_address: str) -> str:
        if not isinstance(wallet_address, str) or not wallet_address.strip():
            raise ValidationError("wallet address is required", field="wallet_address")
        address = wallet_address.strip()
        if not is_plausible_address(
            address, allow_base58=self._settings.ledger.allow_base58_fallback
        ):
            raise ValidationError("invalid wallet address", field="wallet_address")
        return address
