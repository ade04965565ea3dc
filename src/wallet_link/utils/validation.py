"""Validation helpers for wallet addresses and identifiers."""

from __future__ import annotations

import re
from typing import Any

_HEX_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")

BASE58_MIN_LENGTH = 26
BASE58_MAX_LENGTH = 50


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x wallet address (42 chars)."""
    if not isinstance(addr, str):
        return False
    return _HEX_ADDRESS_RE.match(addr.strip()) is not None


def is_base58_address(addr: Any) -> bool:
    """Return True if addr looks like a base58 address (Bitcoin/Solana style, 26-50 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if not BASE58_MIN_LENGTH <= len(s) <= BASE58_MAX_LENGTH:
        return False
    return _BASE58_RE.match(s) is not None


def is_plausible_address(addr: Any, *, allow_base58: bool = True) -> bool:
    """Return True if addr is syntactically valid for at least one supported address family.

    The base58 branch only checks the alphabet and length (no checksum), so it
    accepts strings that no chain would. Callers can switch it off.
    """
    if is_hex_address(addr):
        return True
    if not allow_base58:
        return False
    if isinstance(addr, str) and addr.strip().startswith("0x"):
        # 0x-prefixed but not 20 bytes of hex: never fall through to base58
        return False
    return is_base58_address(addr)


def same_address(a: str | None, b: str | None) -> bool:
    """Compare two addresses; hex addresses compare case-insensitively (checksum casing)."""
    if a is None or b is None:
        return False
    a, b = a.strip(), b.strip()
    if is_hex_address(a) and is_hex_address(b):
        return a.lower() == b.lower()
    return a == b


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"


def short_id(value: str | None, length: int = 8) -> str:
    """Truncate an opaque identifier (link id, transaction id) for log output."""
    if not value:
        return "***"
    return value[:length]
