# -*- coding: utf-8 -*-
"""Link session lifecycle events."""

from wallet_link.events.sessions.session_events import (
    LinkSessionCreatedEvent,
    WalletBoundEvent,
)

__all__ = ["LinkSessionCreatedEvent", "WalletBoundEvent"]
