"""Decimal helpers for monetary arithmetic.

Amounts are persisted as floats but every computation goes through
``Decimal`` and is quantized to cents with half-up rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    # str() keeps 10.1 as 10.1 instead of its binary float expansion
    return Decimal(str(value))


def round2(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def as_float(value) -> float:
    return float(round2(value))
