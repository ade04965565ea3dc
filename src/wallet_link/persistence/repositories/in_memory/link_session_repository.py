"""In-memory link session repository (keyed by link_id)."""

from __future__ import annotations

import asyncio
from datetime import datetime

from wallet_link.models.link_session import LinkSession
from wallet_link.persistence.repositories.interfaces.link_session_repository import (
    ILinkSessionRepository,
)


def _by_created_at(session: LinkSession) -> tuple[datetime, str]:
    """Sort key: created_at, link_id as tie-breaker."""
    return (session.created_at, session.link_id)


class InMemoryLinkSessionRepository(ILinkSessionRepository):
    """In-memory implementation of ILinkSessionRepository.

    Single-process only. The version check and the write happen under one
    asyncio.Lock so concurrent coroutines see a single winner.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, LinkSession] = {}
        self._lock = asyncio.Lock()

    async def get(self, link_id: str) -> LinkSession | None:
        """Return the session by link_id, or None if missing."""
        return self._store.get(link_id)

    async def add(self, session: LinkSession) -> None:
        """Insert a new session."""
        async with self._lock:
            if session.link_id in self._store:
                raise ValueError(f"session {session.link_id!r} already exists")
            self._store[session.link_id] = session

    async def replace(self, session: LinkSession, expected_version: int) -> bool:
        """Compare-and-set on version."""
        async with self._lock:
            current = self._store.get(session.link_id)
            if current is None or current.version != expected_version:
                return False
            self._store[session.link_id] = session
            return True

    async def delete(self, link_id: str) -> bool:
        async with self._lock:
            return self._store.pop(link_id, None) is not None

    async def list_all(self) -> list[LinkSession]:
        """Return all sessions, newest first."""
        return sorted(self._store.values(), key=_by_created_at, reverse=True)

    async def delete_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [k for k, s in self._store.items() if s.is_expired(now)]
            for k in expired:
                del self._store[k]
            return len(expired)
