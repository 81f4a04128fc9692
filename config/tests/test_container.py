from datetime import date
from decimal import Decimal

from apps.bookings.domain.selector import BoundaryTapPolicy, SelectionState
from apps.bookings.domain.window import BookingMode
from apps.bookings.services import QuoteStatus
from apps.locations.domain.entities import Location, Review
from apps.locations.domain.events import ReviewAdded
from apps.locations.domain.rating import RatingRounding
from apps.locations.seed import SAMPLE_CATALOG
from config.container import build_container
from shared.domain.value_objects import Money


def test_reservation_flow_end_to_end():
    container = build_container()
    assert container.load_catalog(SAMPLE_CATALOG) == 5

    location = container.store.get_by_id("1")
    session = container.new_reservation(location.id)
    assert session.quote(location).status is QuoteStatus.PENDING

    session.on_day_selected(date(2025, 1, 10))
    assert session.on_day_selected(date(2025, 1, 15)) is SelectionState.RANGE
    assert len(session.selector.marked_dates()) == 6
    assert session.quote(location).amount == Money(Decimal("864.00"), "USD")

    renders = []
    container.store.subscribe(renders.append, ReviewAdded)
    container.store.add_review(location.id, Review.create("Dana", "Smooth pickup", 4))

    assert container.store.get_by_id("1").rating == 4.3
    assert renders[0].location.rating == 4.3


def test_overrides_flow_into_sessions():
    container = build_container(
        boundary_policy=BoundaryTapPolicy.SINGLE_DAY,
        daily_rate_hours=12,
    )
    container.load_catalog(SAMPLE_CATALOG)
    location = container.store.get_by_id("3")

    session = container.new_reservation(location.id, BookingMode.DAILY)
    session.on_day_selected("2025-03-01")
    session.on_day_selected("2025-03-01")

    assert session.quote(location).amount == Money(Decimal("60.00"), "USD")


def test_containers_do_not_share_state():
    first, second = build_container(), build_container()
    first.load_catalog(SAMPLE_CATALOG)

    assert len(second.store) == 0
    assert second.store.bus is not first.store.bus


def test_rating_rounding_override_reaches_the_store():
    container = build_container(rating_rounding=RatingRounding.HALF_EVEN)
    container.store.replace_all([
        Location(
            id="9",
            name="Pier Lockers",
            address="Bayside",
            price_per_hour=Decimal("4"),
            latitude=25.7785,
            longitude=-80.1868,
        )
    ])

    container.store.add_review("9", Review.create("Ana", "ok", 4.5))
    container.store.add_review("9", Review.create("Ben", "ok", 4))

    assert container.store.get_by_id("9").rating == 4.2
