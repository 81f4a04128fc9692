"""In-memory location catalog shared by every screen of the app."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple, Type

import structlog

from apps.locations.domain.entities import Location, Review
from apps.locations.domain.events import CatalogReplaced, ReviewAdded
from apps.locations.domain.rating import DEFAULT_RATING_ROUNDING, RatingRounding
from shared.application.message_bus import EventHandler, MessageBus
from shared.domain.base import DomainEvent
from shared.domain.value_objects import Coordinates

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    locations: Tuple[Location, ...] = ()
    index: Dict[str, Location] = field(default_factory=dict)

    @classmethod
    def build(cls, locations: Iterable[Location]) -> "_Snapshot":
        ordered = tuple(locations)
        return cls(locations=ordered, index={location.id: location for location in ordered})


class NearbyLocation(NamedTuple):
    location: Location
    distance_km: float


def _lookup_key(location_id) -> Optional[str]:
    # ids arrive from navigation params; numbers are accepted as their string form
    if isinstance(location_id, bool) or not isinstance(location_id, (str, int)):
        return None
    return str(location_id)


class LocationStore:
    """
    Single source of truth for the location catalog.

    State is one immutable snapshot (ordered tuple plus id index) that is
    swapped in a single assignment, so a reader never sees a review
    without its recomputed rating. Every mutation is followed by a
    publish on the message bus.

    Ratings are always derived with the store's rounding policy, whatever
    policy the incoming snapshots were built with.
    """

    def __init__(
        self,
        bus: Optional[MessageBus] = None,
        rounding: RatingRounding = DEFAULT_RATING_ROUNDING,
    ) -> None:
        self._bus = bus if bus is not None else MessageBus()
        self._rounding = rounding
        self._snapshot = _Snapshot()

    @property
    def bus(self) -> MessageBus:
        return self._bus

    @property
    def rounding(self) -> RatingRounding:
        return self._rounding

    def _adopt(self, location: Location) -> Location:
        if location.rounding is self._rounding:
            return location
        # replace() reruns __post_init__, so the rating is recomputed
        return replace(location, rounding=self._rounding)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: Type[DomainEvent] = DomainEvent,
    ) -> Callable[[], None]:
        """Register a change listener; returns the unsubscribe callable."""
        return self._bus.register_event_handler(event_type, handler)

    # Mutations

    def replace_all(self, locations: Iterable[Location]) -> None:
        snapshot = _Snapshot.build(self._adopt(location) for location in locations)
        self._snapshot = snapshot
        logger.info("catalog_replaced", count=len(snapshot.locations))
        self._bus.publish_events(
            [CatalogReplaced(location_ids=tuple(location.id for location in snapshot.locations))]
        )

    def add_review(self, location_id: str, review: Review) -> None:
        key = _lookup_key(location_id)
        current = self._snapshot
        location = current.index.get(key) if key is not None else None
        if location is None:
            logger.debug("review_for_unknown_location_ignored", location_id=location_id)
            return

        updated = location.with_review(review)
        # only the indexed entry is swapped, duplicates in the catalog stay as they were
        self._snapshot = _Snapshot.build(
            updated if item is location else item for item in current.locations
        )
        logger.info(
            "review_added",
            location_id=updated.id,
            review_id=review.id,
            rating=updated.rating,
        )
        self._bus.publish_events(
            [ReviewAdded(aggregate_id=updated.id, location=updated, review=review)]
        )

    # Queries

    def get_by_id(self, location_id) -> Optional[Location]:
        key = _lookup_key(location_id)
        if key is None:
            return None
        return self._snapshot.index.get(key)

    def all(self) -> Tuple[Location, ...]:
        return self._snapshot.locations

    def __len__(self) -> int:
        return len(self._snapshot.locations)

    def search(self, keyword: str) -> List[Location]:
        """Case-insensitive match on name or address."""
        needle = (keyword or "").strip().casefold()
        if not needle:
            return list(self._snapshot.locations)
        return [
            location
            for location in self._snapshot.locations
            if needle in location.name.casefold() or needle in location.address.casefold()
        ]

    def filter_by_price_range(
        self,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Location]:
        """Locations whose hourly price lies within the inclusive bounds."""
        return [
            location
            for location in self._snapshot.locations
            if (min_price is None or location.price_per_hour >= min_price)
            and (max_price is None or location.price_per_hour <= max_price)
        ]

    def find_nearby(self, latitude: float, longitude: float, radius_km: float) -> List[NearbyLocation]:
        """Locations within radius_km of the point, closest first."""
        origin = Coordinates(latitude, longitude)
        nearby = []
        for location in self._snapshot.locations:
            distance = origin.distance_to(location.coordinates)
            if distance <= radius_km:
                nearby.append(NearbyLocation(location, distance))
        nearby.sort(key=lambda item: item.distance_km)
        return nearby
