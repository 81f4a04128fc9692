"""
Location Domain Entities

- Location: a rentable storage spot, with its reviews
- Review: a single customer review

Both are immutable snapshots. A location's rating is derived from its
reviews when the snapshot is built and cannot be passed in.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Tuple
from uuid import uuid4

from apps.locations.domain.rating import DEFAULT_RATING_ROUNDING, RatingRounding, average_rating
from shared.domain.base import Entity, utcnow
from shared.domain.value_objects import Coordinates


@dataclass(frozen=True)
class Review(Entity):
    """
    Customer review

    The comment is stored as typed; escaping it is the renderer's job.
    The rating is nominally 1..5 but is not range-checked here.
    """
    user: str
    comment: str
    rating: int | float | Decimal
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, user: str, comment: str, rating: int | float | Decimal) -> 'Review':
        """Build a new review with a fresh id and the current timestamp"""
        return cls(id=str(uuid4()), user=user, comment=comment, rating=rating)


@dataclass(frozen=True)
class Location(Entity):
    """
    Location snapshot

    Key invariants:
    - rating == average of review ratings rounded to one decimal, 0 if none
    - reviews keep append order
    """
    name: str
    address: str
    price_per_hour: Decimal
    latitude: float
    longitude: float
    reviews: Tuple[Review, ...] = ()
    rounding: RatingRounding = field(default=DEFAULT_RATING_ROUNDING, repr=False, compare=False)
    rating: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'reviews', tuple(self.reviews))
        object.__setattr__(
            self,
            'rating',
            average_rating((review.rating for review in self.reviews), self.rounding),
        )

    def with_review(self, review: Review) -> 'Location':
        """New snapshot with the review appended and the rating recomputed"""
        return replace(self, reviews=self.reviews + (review,))

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.latitude, self.longitude)

    def __str__(self):
        return f"{self.name} ({self.rating:.1f}, {self.review_count} reviews)"
