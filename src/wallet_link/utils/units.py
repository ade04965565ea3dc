"""Base-unit amount parsing and display conversion.

Stored values are always Python ints in the smallest unit (wei-style). Decimal
is used only to render or to convert an operator-entered display amount, and
never feeds back into a stored value implicitly.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from wallet_link.exceptions import ValidationError

DEFAULT_DECIMALS = 18

MAX_BASE_UNITS = 2**256 - 1
"""Largest storable amount (uint256). Also bounds gas parameters."""
MAX_BASE_UNITS_DIGITS = len(str(MAX_BASE_UNITS))
"""78 digits; the SQL amount columns are sized to hold this."""


def parse_base_units(amount: Any) -> int:
    """Parse amount into a non-negative int of base units.

    Accepts int, integral Decimal, or a string of ASCII digits. Floats and
    bools are rejected: they cannot represent large base-unit amounts exactly.

    Raises:
        ValidationError: If amount is not an exact non-negative integer.
    """
    if isinstance(amount, bool):
        raise ValidationError("amount must be an integer number of base units", field="amount")
    if isinstance(amount, int):
        value = amount
    elif isinstance(amount, Decimal):
        if not amount.is_finite():
            raise ValidationError("amount must be an integer number of base units", field="amount")
        if not amount.is_zero() and amount.adjusted() >= MAX_BASE_UNITS_DIGITS:
            raise _too_large()
        if amount != amount.to_integral_value():
            raise ValidationError("amount must be an integer number of base units", field="amount")
        value = int(amount)
    elif isinstance(amount, str):
        s = amount.strip()
        if not s or not s.isascii() or not s.isdigit():
            raise ValidationError("amount must be an integer number of base units", field="amount")
        digits = s.lstrip("0") or "0"
        if len(digits) > MAX_BASE_UNITS_DIGITS:
            raise _too_large()
        value = int(digits)
    else:
        raise ValidationError(
            f"unsupported amount type {type(amount).__name__}",
            field="amount",
        )
    if value < 0:
        raise ValidationError("amount must be non-negative", field="amount")
    if value > MAX_BASE_UNITS:
        raise _too_large()
    return value


def _too_large() -> ValidationError:
    return ValidationError(
        f"amount exceeds the maximum of {MAX_BASE_UNITS_DIGITS} digits (uint256)",
        field="amount",
    )


def format_units(value: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render base units as a decimal string (e.g. 1500000000000000000 -> '1.5').

    Always keeps at least one fractional digit, like ethers.formatEther.
    """
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    if decimals == 0:
        return f"{sign}{whole}.0"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"


def to_base_units(display_amount: str | int | Decimal, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert a display amount ('1.5') into base units, rejecting sub-unit precision.

    Raises:
        ValidationError: If the amount is malformed, negative, or more precise than decimals.
    """
    if isinstance(display_amount, bool) or isinstance(display_amount, float):
        raise ValidationError("display amount must be a string, int or Decimal", field="amount")
    if isinstance(display_amount, int):
        if display_amount < 0:
            raise ValidationError("amount must be non-negative", field="amount")
        if display_amount > MAX_BASE_UNITS:
            raise _too_large()
    try:
        d = Decimal(str(display_amount).strip())
    except InvalidOperation:
        raise ValidationError(f"invalid display amount {display_amount!r}", field="amount") from None
    if not d.is_finite():
        raise ValidationError("display amount must be finite", field="amount")
    if d < 0:
        raise ValidationError("amount must be non-negative", field="amount")
    if not d.is_zero() and d.adjusted() + decimals >= MAX_BASE_UNITS_DIGITS:
        raise _too_large()
    with localcontext() as ctx:
        ctx.prec = max(28, len(d.as_tuple().digits) + decimals + 2)
        scaled = d.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValidationError(
                f"amount has more than {decimals} decimal places",
                field="amount",
            )
        value = int(scaled)
    if value > MAX_BASE_UNITS:
        raise _too_large()
    return value
