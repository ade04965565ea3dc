"""Events emitted by ConnectionCoordinator for the session handshake."""

from __future__ import annotations

from datetime import datetime

from bubus import BaseEvent  # type: ignore[import-untyped]


class LinkSessionCreatedEvent(BaseEvent[None]):
    """Emitted after the operator issues a new link."""

    link_id: str
    created_at: datetime
    expires_at: datetime


class WalletBoundEvent(BaseEvent[None]):
    """Emitted once per link, when the remote party binds a wallet.

    Not emitted for idempotent re-binds of the same address.
    """

    link_id: str
    wallet_address: str
    bound_at: datetime
    chain_id: str | None = None
    wallet_type: str | None = None
