"""Wallet link broker: ephemeral link sessions and a transaction approval ledger."""

from wallet_link.config import get_settings
from wallet_link.DI import Container
from wallet_link.services import ConnectionCoordinator, SessionStore, TransactionLedger

__version__ = "0.1.0"
__all__ = [
    "ConnectionCoordinator",
    "Container",
    "SessionStore",
    "TransactionLedger",
    "get_settings",
]
