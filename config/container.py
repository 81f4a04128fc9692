"""Composition root.

Builds one message bus and one location store and hands them to the UI
layer explicitly instead of through a module-level singleton.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import structlog

from apps.bookings.domain.selector import BoundaryTapPolicy
from apps.bookings.domain.window import BookingMode
from apps.bookings.services import ReservationSession
from apps.locations.domain.rating import RatingRounding
from apps.locations.ingestion import normalize_locations
from apps.locations.store import LocationStore
from config import settings
from shared.application.message_bus import MessageBus

logger = structlog.get_logger(__name__)


@dataclass
class Container:
    bus: MessageBus
    store: LocationStore
    boundary_policy: BoundaryTapPolicy = settings.LOCKER_DATE_BOUNDARY_POLICY
    rating_rounding: RatingRounding = settings.LOCKER_RATING_ROUNDING
    currency: str = settings.LOCKER_CURRENCY
    daily_rate_hours: int = settings.LOCKER_DAILY_RATE_HOURS

    def load_catalog(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Normalize a fetched catalog and swap it into the store in one step."""
        locations = normalize_locations(records, self.rating_rounding)
        self.store.replace_all(locations)
        return len(locations)

    def new_reservation(self, location_id: str, mode: BookingMode = BookingMode.DAILY) -> ReservationSession:
        logger.debug("reservation_opened", location_id=location_id, mode=mode.value)
        return ReservationSession(
            location_id,
            mode,
            policy=self.boundary_policy,
            daily_rate_hours=self.daily_rate_hours,
            currency=self.currency,
        )


def build_container(configure_logs: bool = False, **overrides) -> Container:
    if configure_logs:
        settings.configure_logging()
    bus = MessageBus()
    rounding = overrides.get("rating_rounding", settings.LOCKER_RATING_ROUNDING)
    return Container(bus=bus, store=LocationStore(bus, rounding), **overrides)
