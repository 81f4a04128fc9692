"""
Location Domain Events

Published by the location store after each mutation has been applied.
"""

from dataclasses import dataclass
from typing import Tuple

from apps.locations.domain.entities import Location, Review
from shared.domain.base import DomainEvent


@dataclass(frozen=True)
class CatalogReplaced(DomainEvent):
    """
    Event: The whole catalog was swapped for a freshly fetched one

    Triggers:
    - Re-render location lists and the map
    """
    location_ids: Tuple[str, ...]


@dataclass(frozen=True)
class ReviewAdded(DomainEvent):
    """
    Event: A review was appended to a location

    Carries the replacement snapshot, whose rating already includes the
    new review.

    Triggers:
    - Re-render the detail screen for that location
    """
    location: Location
    review: Review

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'review_id': self.review.id,
            'rating': self.location.rating,
            'review_count': self.location.review_count,
        })
        return data
