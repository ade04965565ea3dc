"""Result types returned by SessionStore."""

from __future__ import annotations

from dataclasses import dataclass

from wallet_link.models.link_session import LinkSession


@dataclass(frozen=True)
class BindResult:
    """Outcome of a bind call."""

    session: LinkSession
    newly_bound: bool
    """False when the same address re-bound an already bound session (idempotent replay)."""
