"""Logging setup (structlog)."""

from wallet_link.logging.config import configure_logging

__all__ = ["configure_logging"]
