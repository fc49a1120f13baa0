"""Exact conversion between human token amounts and integer base units."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

# Enough digits for any uint256 amount.
_PRECISION = 80


def parse_units(amount: Union[str, int, Decimal], decimals: int) -> int:
    """Convert ``"1.5"`` with 6 decimals to ``1500000``.

    Raises:
        ValueError: The amount is not a finite non-negative number or has
            more fractional digits than ``decimals``.
    """
    if isinstance(amount, float):
        amount = repr(amount)
    try:
        with localcontext() as ctx:
            ctx.prec = _PRECISION
            value = Decimal(str(amount).strip())
            if not value.is_finite() or value < 0:
                raise ValueError(f"Amount must be a finite non-negative number: {amount}")
            scaled = value.scaleb(decimals)
            if scaled != scaled.to_integral_value():
                raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
            return int(scaled)
    except InvalidOperation:
        raise ValueError(f"Amount is not a number: {amount}") from None


def format_units(value: int, decimals: int) -> str:
    """Convert ``1500000`` with 6 decimals to ``"1.5"``."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        text = format(Decimal(int(value)).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
