"""Money helpers.

Storage unit: ``Numeric(10, 2)`` columns holding ``Decimal`` values.
API unit: plain JSON numbers (e.g. ``99.99``), parsed back into ``Decimal``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Union

from pydantic import Field, PlainSerializer

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Prices and discount amounts: non-negative, two decimal places, JSON number.
Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


def to_money(value: Union[Decimal, float, int, str]) -> Decimal:
    """Quantize to cents, rounding half-up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def apply_fixed_discount(price: Decimal, amount: Decimal) -> Decimal:
    """Subtract a fixed discount, never going below zero."""
    return max(ZERO, to_money(price) - to_money(amount))
