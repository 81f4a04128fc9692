"""
Reservation windows

A resolved window is one of two shapes, chosen by the booking mode:
- DailyWindow: a completed date range
- HourlyWindow: a time-of-day window, plus the date range if one is picked
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange, TimeWindow


class BookingMode(Enum):
    """Price unit the user toggled on the reservation screen"""
    HOURLY = 'hourly'
    DAILY = 'daily'


@dataclass(frozen=True)
class DailyWindow(ValueObject):
    dates: DateRange
    mode: ClassVar[BookingMode] = BookingMode.DAILY

    @property
    def days(self) -> int:
        return len(self.dates)


@dataclass(frozen=True)
class HourlyWindow(ValueObject):
    time_window: TimeWindow
    dates: DateRange | None = None
    mode: ClassVar[BookingMode] = BookingMode.HOURLY


ReservationWindow = Union[DailyWindow, HourlyWindow]
