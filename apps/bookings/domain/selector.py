"""
Booking Window Selector

Turns a stream of calendar day taps into a date range plus the per-day
marking a period calendar needs to draw it. Bad input is normalized or
ignored, never raised.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict

from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    """
    Selection Finite State Machine

    State transitions (tap = day selected):
    - EMPTY -> ANCHORED (any tap sets the anchor)
    - ANCHORED -> RANGE (tap after the anchor)
    - ANCHORED -> ANCHORED (tap on or before the anchor replaces it)
    - RANGE -> ANCHORED (any tap starts a fresh selection)
    """
    EMPTY = 'empty'
    ANCHORED = 'anchored'
    RANGE = 'range'


class BoundaryTapPolicy(Enum):
    """What tapping the anchor day itself does while ANCHORED."""

    RESTART = 'restart'        # d <= anchor restarts; ranges span at least two days
    SINGLE_DAY = 'single_day'  # d >= anchor completes; anchor tapped twice is a one-day range


DEFAULT_BOUNDARY_POLICY = BoundaryTapPolicy.RESTART


@dataclass(frozen=True)
class DayMarking:
    """Rendering flags for one calendar day."""
    is_range_start: bool
    is_range_end: bool
    highlighted: bool = True

    def to_calendar_dict(self) -> dict:
        return {
            'startingDay': self.is_range_start,
            'endingDay': self.is_range_end,
            'selected': self.highlighted,
        }


def coerce_day(value) -> date | None:
    """Calendar date for a tap value: date, datetime or 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # a time part may follow the date, nothing else
        if len(text) > 10 and text[10] not in ('T', ' '):
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


class BookingWindowSelector:
    """
    Day-tap state machine for one reservation session.

    The state is never stored; it is read off whether anchor and end are
    set. Comparisons are by calendar date only.
    """

    def __init__(self, policy: BoundaryTapPolicy = DEFAULT_BOUNDARY_POLICY):
        self.policy = policy
        self._anchor: date | None = None
        self._end: date | None = None

    @property
    def anchor(self) -> date | None:
        return self._anchor

    @property
    def end(self) -> date | None:
        return self._end

    @property
    def state(self) -> SelectionState:
        if self._anchor is None:
            return SelectionState.EMPTY
        if self._end is None:
            return SelectionState.ANCHORED
        return SelectionState.RANGE

    def _completes_range(self, day: date) -> bool:
        if self.policy is BoundaryTapPolicy.SINGLE_DAY:
            return day >= self._anchor
        return day > self._anchor

    def on_day_selected(self, value) -> SelectionState:
        """Apply one tap and return the resulting state."""
        day = coerce_day(value)
        if day is None:
            logger.warning("Ignoring unparsable day tap: %r", value)
            return self.state

        if self.state is SelectionState.ANCHORED and self._completes_range(day):
            self._end = day
        else:
            self._anchor = day
            self._end = None

        logger.debug("Day %s tapped, selection is now %s", day, self.state.value)
        return self.state

    def reset(self) -> None:
        self._anchor = None
        self._end = None

    @property
    def selected_range(self) -> DateRange | None:
        """The completed range, or None until one exists."""
        if self.state is not SelectionState.RANGE:
            return None
        return DateRange(self._anchor, self._end)

    def marked_dates(self) -> Dict[date, DayMarking]:
        state = self.state
        if state is SelectionState.EMPTY:
            return {}
        if state is SelectionState.ANCHORED:
            return {self._anchor: DayMarking(is_range_start=True, is_range_end=True)}
        return {
            day: DayMarking(is_range_start=day == self._anchor, is_range_end=day == self._end)
            for day in self.selected_range.days()
        }

    def calendar_payload(self) -> Dict[str, dict]:
        """marked_dates keyed by ISO date string, as period calendars expect"""
        return {
            day.isoformat(): marking.to_calendar_dict()
            for day, marking in self.marked_dates().items()
        }

    def __repr__(self):
        return f"BookingWindowSelector(state={self.state.value}, anchor={self._anchor}, end={self._end})"
