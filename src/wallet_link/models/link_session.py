"""LinkSession: domain entity for an operator-issued, single-use connection link.

A session is created unbound with a fixed TTL. The remote party binds exactly
one wallet address to it; that address becomes the ``from`` of every
transaction proposed on the link. Expiry is evaluated lazily at read time.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class SessionMetadata:
    """Descriptive client data captured at creation and replaced on bind. Non-authoritative."""

    ip_address: str | None = None
    user_agent: str | None = None
    chain_id: str | None = None
    wallet_type: str | None = None

    def merged_with(self, other: SessionMetadata | None) -> SessionMetadata:
        """Return a copy where fields set on other take precedence."""
        if other is None:
            return self
        return SessionMetadata(
            ip_address=other.ip_address or self.ip_address,
            user_agent=other.user_agent or self.user_agent,
            chain_id=other.chain_id or self.chain_id,
            wallet_type=other.wallet_type or self.wallet_type,
        )


@dataclass(frozen=True, slots=True)
class LinkSession:
    """One handshake link: unbound until a wallet binds, live until expires_at.

    Identity: link_id. version is the optimistic-concurrency counter; every
    persisted change must go through a conditional replace on it.
    """

    link_id: str
    created_at: datetime
    expires_at: datetime
    """Live iff now < expires_at. Always strictly after created_at."""
    last_activity: datetime
    """Never moves backwards."""
    wallet_address: str | None = None
    """Set exactly once, on the first successful bind."""
    bound: bool = False
    bound_at: datetime | None = None
    metadata: SessionMetadata = field(default_factory=SessionMetadata)
    version: int = 0

    def __post_init__(self) -> None:
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")
        if self.bound and not self.wallet_address:
            raise ValueError("bound session requires a wallet_address")

    def is_live(self, now: datetime) -> bool:
        """Return True while now < expires_at."""
        return now < self.expires_at

    def is_expired(self, now: datetime) -> bool:
        return not self.is_live(now)

    def with_bound(
        self,
        wallet_address: str,
        bound_at: datetime,
        *,
        metadata: SessionMetadata | None = None,
    ) -> LinkSession:
        """Return the next version with wallet_address bound. Only valid on unbound sessions."""
        if self.bound:
            raise ValueError("session is already bound")
        wallet_address = wallet_address.strip()
        if not wallet_address:
            raise ValueError("wallet_address must be non-empty")
        return replace(
            self,
            wallet_address=wallet_address,
            bound=True,
            bound_at=bound_at,
            last_activity=max(self.last_activity, bound_at),
            metadata=self.metadata.merged_with(metadata),
            version=self.version + 1,
        )

    def with_activity(self, at: datetime) -> LinkSession:
        """Return the next version with last_activity advanced to at (never backwards)."""
        return replace(
            self,
            last_activity=max(self.last_activity, at),
            version=self.version + 1,
        )

    @classmethod
    def create(
        cls,
        link_id: str,
        *,
        created_at: datetime,
        ttl: timedelta,
        metadata: SessionMetadata | None = None,
    ) -> LinkSession:
        """Create a new unbound session expiring ttl after created_at."""
        link_id = link_id.strip()
        if not link_id:
            raise ValueError("link_id must be non-empty")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        return cls(
            link_id=link_id,
            created_at=created_at,
            expires_at=created_at + ttl,
            last_activity=created_at,
            metadata=metadata or SessionMetadata(),
        )
