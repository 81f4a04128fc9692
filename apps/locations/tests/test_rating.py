from decimal import Decimal

import pytest

from apps.locations.domain.entities import Location, Review
from apps.locations.domain.rating import RatingRounding, average_rating


def _review(rating, review_id="r"):
    return Review(id=review_id, user="Alice", comment="ok", rating=rating)


def test_no_reviews_rate_zero():
    assert average_rating([]) == 0


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([5, 4], 4.5),
        ([5, 4, 4], 4.3),
        ([1], 1.0),
        ([Decimal("4.5"), 3], 3.8),
    ],
)
def test_average_is_rounded_to_one_decimal(ratings, expected):
    assert average_rating(ratings) == expected


def test_half_up_and_half_even_diverge_on_exact_boundary():
    # (4.5 + 4.0) / 2 == 4.25 exactly
    assert average_rating([4.5, 4.0], RatingRounding.HALF_UP) == 4.3
    assert average_rating([4.5, 4.0], RatingRounding.HALF_EVEN) == 4.2


def test_both_policies_agree_off_the_boundary():
    assert average_rating([5, 4, 4], RatingRounding.HALF_EVEN) == 4.3


def test_out_of_range_ratings_are_averaged_as_given():
    assert average_rating([10, 0]) == 5.0


def test_location_rating_is_derived_from_reviews():
    location = Location(
        id="1",
        name="Locker Center",
        address="Brickell Ave",
        price_per_hour=Decimal("6"),
        latitude=25.7617,
        longitude=-80.1918,
        reviews=[_review(5, "r1"), _review(4, "r2")],
    )

    assert location.rating == 4.5
    assert isinstance(location.reviews, tuple)

    updated = location.with_review(_review(4, "r3"))

    assert updated.rating == 4.3
    assert updated.review_count == 3
    assert location.rating == 4.5


def test_rating_cannot_be_passed_in():
    with pytest.raises(TypeError):
        Location(
            id="1",
            name="x",
            address="y",
            price_per_hour=Decimal("1"),
            latitude=0.0,
            longitude=0.0,
            rating=5.0,
        )
