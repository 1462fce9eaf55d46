"""
Decimal Utilities
pole_tender/scoring/utils.py

Provides precision-safe decimal math for the bid scoring engine.
"""

from decimal import Context, Decimal, ROUND_HALF_UP, getcontext
from typing import Iterable, Optional

ZERO = Decimal("0")


def quantize(value: Decimal, places: int = 2) -> Decimal:
    """Round a Decimal half-up to a fixed number of places, keeping every integer digit."""
    prec = max(getcontext().prec, value.adjusted() + places + 2)
    return value.quantize(
        Decimal(10) ** -places, rounding=ROUND_HALF_UP, context=Context(prec=prec)
    )


def clamp(
    value: Decimal,
    min_val: Decimal = ZERO,
    max_val: Optional[Decimal] = None,
) -> Decimal:
    """Clamp value to range [min_val, max_val]. A max_val of None leaves the top open."""
    if max_val is not None:
        value = min(max_val, value)
    return max(min_val, value)


def mean(values: Iterable[Decimal], default: Decimal) -> Decimal:
    """
    Arithmetic mean of Decimals.

    Returns `default` when there are no values.
    """
    items = list(values)
    if not items:
        return default
    return sum(items, ZERO) / Decimal(len(items))
