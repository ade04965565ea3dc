# -*- coding: utf-8 -*-
"""Handshake orchestration over SessionStore and TransactionLedger."""

from wallet_link.services.coordinator.connection_coordinator import ConnectionCoordinator
from wallet_link.services.coordinator.dto import SessionStatusView

__all__ = ["ConnectionCoordinator", "SessionStatusView"]
