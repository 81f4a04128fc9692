"""Derived rating for a location, computed from its reviews."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable

ONE_DECIMAL = Decimal('0.1')


class RatingRounding(Enum):
    """How the one-decimal average is rounded on an exact .x5 boundary."""

    HALF_UP = 'half_up'      # 4.25 -> 4.3
    HALF_EVEN = 'half_even'  # 4.25 -> 4.2

    @property
    def decimal_mode(self) -> str:
        return ROUND_HALF_UP if self is RatingRounding.HALF_UP else ROUND_HALF_EVEN


DEFAULT_RATING_ROUNDING = RatingRounding.HALF_UP


def _as_decimal(value) -> Decimal:
    # str() keeps 4.25 as 4.25 instead of its binary float expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def average_rating(
    ratings: Iterable[int | float | Decimal],
    rounding: RatingRounding = DEFAULT_RATING_ROUNDING,
) -> float:
    """Mean of the ratings rounded to one decimal, or 0 when there are none."""
    values = [_as_decimal(rating) for rating in ratings]
    if not values:
        return 0.0
    mean = sum(values, Decimal(0)) / Decimal(len(values))
    return float(mean.quantize(ONE_DECIMAL, rounding=rounding.decimal_mode))
