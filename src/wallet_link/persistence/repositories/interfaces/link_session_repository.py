# -*- coding: utf-8 -*-
"""Abstract interface for link session storage (in-memory, SQL, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from wallet_link.models.link_session import LinkSession


class ILinkSessionRepository(ABC):
    """Interface for persisting LinkSession keyed by link_id.

    Implementations shared between processes must make ``replace`` a single
    atomic conditional write in the store itself; an in-process lock is not enough.
    """

    @abstractmethod
    async def get(self, link_id: str) -> Optional[LinkSession]:
        """Return the session by link_id, or None if missing."""
        ...

    @abstractmethod
    async def add(self, session: LinkSession) -> None:
        """Insert a new session. Raises ValueError if link_id already exists."""
        ...

    @abstractmethod
    async def replace(self, session: LinkSession, expected_version: int) -> bool:
        """Store session only if the stored version still equals expected_version.

        Returns:
            True if written; False if the session is missing or another writer got there first.
        """
        ...

    @abstractmethod
    async def delete(self, link_id: str) -> bool:
        """Remove the session. Returns True if something was deleted. Idempotent."""
        ...

    @abstractmethod
    async def list_all(self) -> list[LinkSession]:
        """Return all sessions ordered by created_at descending (newest first)."""
        ...

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete every session with expires_at <= now. Returns the number removed."""
        ...
