"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- DateRange: Represents an inclusive range of calendar dates
- TimeWindow: A from/to pair of times of day
- Coordinates: A point on the map
"""

import math
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from shared.domain.base import ValueObject

EARTH_RADIUS_KM = 6371.0
CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in ['USD', 'EUR', 'GBP', 'KZT']:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, float, Decimal)):
            raise TypeError("Can only multiply Money by number")
        return Money(self.amount * Decimal(str(factor)), self.currency)

    def quantized(self) -> 'Money':
        """Round to whole cents, half away from zero"""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date to end_date, both inclusive.
    A single-day range has start_date == end_date.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must not be after end date ({self.end_date})")

    def days(self) -> Iterator[date]:
        """Every calendar date in the range, ascending"""
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """Number of calendar days, counting both endpoints"""
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"


def _minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time-of-day window

    Unlike DateRange this never rejects its input: a to_time before
    from_time is a legitimate user state that callers must report.
    """
    from_time: time
    to_time: time

    @property
    def is_reversed(self) -> bool:
        return _minutes_of_day(self.to_time) < _minutes_of_day(self.from_time)

    @property
    def is_empty(self) -> bool:
        return _minutes_of_day(self.to_time) == _minutes_of_day(self.from_time)

    def duration_minutes(self) -> int | None:
        """Whole minutes between the two times, None when reversed"""
        if self.is_reversed:
            return None
        return _minutes_of_day(self.to_time) - _minutes_of_day(self.from_time)

    def duration_hours(self) -> Decimal | None:
        minutes = self.duration_minutes()
        if minutes is None:
            return None
        return Decimal(minutes) / Decimal(60)

    def __str__(self):
        return f"{self.from_time.strftime('%H:%M')} - {self.to_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class Coordinates(ValueObject):
    """Latitude/longitude pair in decimal degrees"""
    latitude: float
    longitude: float

    def distance_to(self, other: 'Coordinates') -> float:
        """
        Great-circle distance in kilometers (haversine formula)
        """
        lat_distance = math.radians(other.latitude - self.latitude)
        lng_distance = math.radians(other.longitude - self.longitude)
        a = (
            math.sin(lat_distance / 2) ** 2
            + math.cos(math.radians(self.latitude))
            * math.cos(math.radians(other.latitude))
            * math.sin(lng_distance / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_KM * c
