"""Clock and identifier sources injected into the session and ledger services.

All time-based decisions (expiry, activity, resolution timestamps) go through a
``Clock`` so tests can move time without sleeping.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

Clock = Callable[[], datetime]
"""Callable returning the current time as a timezone-aware UTC datetime."""

IdGenerator = Callable[[], str]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


def new_link_id() -> str:
    """Return a URL-safe link token with 128 bits of entropy."""
    return secrets.token_urlsafe(16)


def new_transaction_id() -> str:
    return uuid4().hex
