# -*- coding: utf-8 -*-
"""Event bus and event types."""

from wallet_link.events.bus import get_event_bus, set_event_bus
from wallet_link.events.sessions import LinkSessionCreatedEvent, WalletBoundEvent
from wallet_link.events.transactions import (
    TransactionProposedEvent,
    TransactionResolvedEvent,
)

__all__ = [
    "get_event_bus",
    "set_event_bus",
    "LinkSessionCreatedEvent",
    "WalletBoundEvent",
    "TransactionProposedEvent",
    "TransactionResolvedEvent",
]
