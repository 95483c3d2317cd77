"""Peso arithmetic helpers.

Amounts are carried as Decimal while a line item is being computed and
rounded to a whole peso exactly once, when the line item is final.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts.

    Floats go through their shortest repr, so 0.0127 becomes Decimal("0.0127")
    rather than Decimal(0.01269999...).
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_clp(amount: Number) -> int:
    """Round to the nearest whole peso, ties to even.

    Example: 12700.5 -> 12700, 12701.5 -> 12702
    """
    return int(to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def format_clp(amount: Number) -> str:
    """Format an amount the way Chilean pay slips print it: $1.234.567"""
    rounded = round_clp(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}".replace(",", ".")
