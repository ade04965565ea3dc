# -*- coding: utf-8 -*-
"""Utility modules."""

from wallet_link.utils.clock import Clock, IdGenerator, new_link_id, new_transaction_id, utc_now
from wallet_link.utils.units import format_units, parse_base_units, to_base_units
from wallet_link.utils.validation import (
    is_base58_address,
    is_hex_address,
    is_plausible_address,
    mask_address,
    same_address,
    short_id,
)

__all__ = [
    "Clock",
    "IdGenerator",
    "format_units",
    "is_base58_address",
    "is_hex_address",
    "is_plausible_address",
    "mask_address",
    "new_link_id",
    "new_transaction_id",
    "parse_base_units",
    "same_address",
    "short_id",
    "to_base_units",
    "utc_now",
]
