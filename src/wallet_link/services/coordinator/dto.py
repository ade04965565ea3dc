"""Views returned by ConnectionCoordinator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from wallet_link.models.link_session import LinkSession


@dataclass(frozen=True)
class SessionStatusView:
    """What the remote party learns when it opens a link."""

    link_id: str
    live: bool
    bound: bool
    wallet_address: str | None
    expires_at: datetime

    @classmethod
    def from_session(cls, session: LinkSession, now: datetime) -> SessionStatusView:
        return cls(
            link_id=session.link_id,
            live=session.is_live(now),
            bound=session.bound,
            wallet_address=session.wallet_address,
            expires_at=session.expires_at,
        )
