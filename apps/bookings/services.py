"""Reservation session state and price resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from apps.bookings.domain.selector import (
    DEFAULT_BOUNDARY_POLICY,
    BoundaryTapPolicy,
    BookingWindowSelector,
    SelectionState,
)
from apps.bookings.domain.window import BookingMode, DailyWindow, HourlyWindow, ReservationWindow
from apps.locations.domain.entities import Location
from shared.domain.value_objects import Money, TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"
DEFAULT_DAILY_RATE_HOURS = 24


class QuoteStatus(Enum):
    PENDING = "pending"                    # nothing chosen yet
    INVALID_DURATION = "invalid_duration"  # to-time earlier than from-time
    QUOTED = "quoted"


@dataclass(frozen=True)
class PriceQuote:
    """Outcome of a price lookup; amount is set only when QUOTED."""
    status: QuoteStatus
    amount: Optional[Money] = None
    billed_units: Optional[Decimal] = None

    @classmethod
    def pending(cls) -> "PriceQuote":
        return cls(QuoteStatus.PENDING)

    @classmethod
    def invalid_duration(cls) -> "PriceQuote":
        return cls(QuoteStatus.INVALID_DURATION)

    @property
    def is_quoted(self) -> bool:
        return self.status is QuoteStatus.QUOTED


def daily_rate(location: Location, daily_rate_hours: int = DEFAULT_DAILY_RATE_HOURS,
               currency: str = DEFAULT_CURRENCY) -> Money:
    """Day price equivalent of the location's hourly rate."""
    return Money(location.price_per_hour, currency) * daily_rate_hours


def resolve_price(
    location: Location,
    window: Optional[ReservationWindow],
    *,
    daily_rate_hours: int = DEFAULT_DAILY_RATE_HOURS,
    currency: str = DEFAULT_CURRENCY,
) -> PriceQuote:
    """Price a window for a location. Never returns a zero amount for an unchosen window."""
    if window is None:
        return PriceQuote.pending()

    if isinstance(window, DailyWindow):
        days = Decimal(window.days)
        amount = daily_rate(location, daily_rate_hours, currency) * days
        return PriceQuote(QuoteStatus.QUOTED, amount.quantized(), days)

    time_window = window.time_window
    if time_window.is_reversed:
        return PriceQuote.invalid_duration()
    if time_window.is_empty:
        # both pickers still on the same time
        return PriceQuote.pending()
    hours = time_window.duration_hours()
    amount = Money(location.price_per_hour, currency) * hours
    return PriceQuote(QuoteStatus.QUOTED, amount.quantized(), hours)


def coerce_time(value) -> Optional[time]:
    """Time of day for a picker value: time, datetime or 'HH:MM[:SS]'."""
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class ReservationSession:
    """
    State of one reservation screen: the day selector, the mode toggle
    and the from/to time pickers. Discarded when the screen closes.
    """

    def __init__(
        self,
        location_id: str,
        mode: BookingMode = BookingMode.DAILY,
        *,
        selector: Optional[BookingWindowSelector] = None,
        policy: BoundaryTapPolicy = DEFAULT_BOUNDARY_POLICY,
        daily_rate_hours: int = DEFAULT_DAILY_RATE_HOURS,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self.location_id = location_id
        self.mode = mode
        self.selector = selector if selector is not None else BookingWindowSelector(policy)
        self.daily_rate_hours = daily_rate_hours
        self.currency = currency
        self._time_window: Optional[TimeWindow] = None

    def set_mode(self, mode: BookingMode) -> None:
        self.mode = mode

    def on_day_selected(self, value) -> SelectionState:
        return self.selector.on_day_selected(value)

    def set_time_window(self, from_time, to_time) -> None:
        start, end = coerce_time(from_time), coerce_time(to_time)
        if start is None or end is None:
            logger.warning("Ignoring unparsable time window: %r - %r", from_time, to_time)
            return
        self._time_window = TimeWindow(start, end)

    @property
    def time_window(self) -> Optional[TimeWindow]:
        return self._time_window

    def window(self) -> Optional[ReservationWindow]:
        """The window for the current mode, or None while it is still pending."""
        dates = self.selector.selected_range
        if self.mode is BookingMode.DAILY:
            return DailyWindow(dates) if dates is not None else None
        if self._time_window is None:
            return None
        return HourlyWindow(self._time_window, dates)

    def quote(self, location: Optional[Location]) -> PriceQuote:
        if location is None:
            return PriceQuote.pending()
        return resolve_price(
            location,
            self.window(),
            daily_rate_hours=self.daily_rate_hours,
            currency=self.currency,
        )
