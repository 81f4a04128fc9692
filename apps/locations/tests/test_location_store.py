"""Tests for the in-memory location store."""

from __future__ import annotations

from decimal import Decimal

import pytest

from apps.locations.domain.entities import Location, Review
from apps.locations.domain.events import CatalogReplaced, ReviewAdded
from apps.locations.domain.rating import RatingRounding
from apps.locations.ingestion import normalize_locations
from apps.locations.seed import SAMPLE_CATALOG
from apps.locations.store import LocationStore
from shared.application.message_bus import MessageBus


def _review(review_id: str, rating) -> Review:
    return Review(id=review_id, user="Tester", comment="fine", rating=rating)


def _location(location_id: str, **overrides) -> Location:
    fields = dict(
        id=location_id,
        name=f"Spot {location_id}",
        address="Main St",
        price_per_hour=Decimal("5"),
        latitude=25.77,
        longitude=-80.19,
    )
    fields.update(overrides)
    return Location(**fields)


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def store(bus):
    store = LocationStore(bus)
    store.replace_all(normalize_locations(SAMPLE_CATALOG))
    return store


@pytest.fixture
def published(store):
    events = []
    store.subscribe(events.append)
    return events


def test_sample_catalog_is_loaded(store):
    assert len(store) == 5
    assert store.get_by_id("1").rating == 4.5
    assert store.get_by_id("3").rating == 0


def test_replace_all_swaps_without_merging(store, published):
    store.replace_all([_location("9")])

    assert [location.id for location in store.all()] == ["9"]
    assert store.get_by_id("1") is None
    assert isinstance(published[-1], CatalogReplaced)
    assert published[-1].location_ids == ("9",)


def test_empty_catalog_lookup_is_not_found(store):
    store.replace_all([])

    assert store.get_by_id("x") is None
    assert len(store) == 0


@pytest.mark.parametrize("bad_id", [None, "", "does-not-exist", 3.5, ["1"], True])
def test_get_by_id_tolerates_malformed_ids(store, bad_id):
    assert store.get_by_id(bad_id) is None


def test_numeric_navigation_id_matches_string_id(store):
    assert store.get_by_id(2).name == "Hotel Plaza"


def test_get_by_id_is_idempotent(store):
    assert store.get_by_id("1") == store.get_by_id("1")


def test_add_review_appends_and_recomputes(store, published):
    store.add_review("1", _review("r9", 4))

    location = store.get_by_id("1")
    assert [review.id for review in location.reviews] == ["r1", "r2", "r9"]
    assert location.rating == 4.3

    event = published[-1]
    assert isinstance(event, ReviewAdded)
    assert event.location == location
    assert event.review.id == "r9"
    assert event.aggregate_id == "1"


def test_add_review_to_unknown_location_is_silent_noop(store, published):
    before = store.all()

    store.add_review("missing", _review("r9", 1))
    store.add_review(None, _review("r10", 1))

    assert store.all() is before
    assert published == []


def test_add_review_keeps_other_locations_and_order(store):
    before = store.all()

    store.add_review("2", _review("r9", 5))

    after = store.all()
    assert [location.id for location in after] == [location.id for location in before]
    assert after[0] is before[0]
    assert after[1].rating == 4.5


def test_final_rating_does_not_depend_on_review_order(bus):
    first, second = LocationStore(bus), LocationStore(bus)
    for target in (first, second):
        target.replace_all([_location("1")])

    first.add_review("1", _review("a", 5))
    first.add_review("1", _review("b", 2))
    second.add_review("1", _review("b", 2))
    second.add_review("1", _review("a", 5))

    assert first.get_by_id("1").rating == second.get_by_id("1").rating == 3.5


def test_subscriber_never_sees_review_without_rating(store):
    seen = []

    def on_review(event):
        current = store.get_by_id(event.location.id)
        seen.append((current.review_count, current.rating))

    store.subscribe(on_review, ReviewAdded)
    store.add_review("3", _review("r9", 3))
    store.add_review("3", _review("r10", 4))

    assert seen == [(1, 3.0), (2, 3.5)]


def test_snapshot_held_by_reader_is_not_mutated(store):
    held = store.get_by_id("1")

    store.add_review("1", _review("r9", 1))

    assert held.review_count == 2
    assert held.rating == 4.5
    assert store.get_by_id("1").rating == 3.3


def test_failing_subscriber_does_not_break_mutation(store):
    def broken(event):
        raise RuntimeError("render failed")

    store.subscribe(broken)
    store.add_review("1", _review("r9", 5))

    assert store.get_by_id("1").review_count == 3


def test_unsubscribe_stops_notifications(store):
    events = []
    unsubscribe = store.subscribe(events.append)

    unsubscribe()
    store.replace_all([])

    assert events == []


def test_search_matches_name_or_address_case_insensitive(store):
    assert [location.id for location in store.search("LOCKER")] == ["1", "4"]
    assert [location.id for location in store.search("wynwood")] == ["3"]
    assert len(store.search("  ")) == 5


def test_filter_by_price_range_is_inclusive(store):
    matches = store.filter_by_price_range(Decimal("6"), Decimal("8"))

    assert [location.id for location in matches] == ["1", "2", "4"]
    assert [location.id for location in store.filter_by_price_range(min_price=Decimal("9"))] == ["5"]


def test_find_nearby_sorts_by_distance(store):
    nearby = store.find_nearby(25.7617, -80.1918, radius_km=3.0)

    assert [item.location.id for item in nearby] == ["1", "2", "4"]
    assert nearby[0].distance_km == pytest.approx(0.0)
    assert all(a.distance_km <= b.distance_km for a, b in zip(nearby, nearby[1:]))


def test_store_rounding_policy_applies_to_replace_all(bus):
    store = LocationStore(bus, RatingRounding.HALF_EVEN)
    store.replace_all([_location("1", reviews=[_review("a", 4.5)])])

    store.add_review("1", _review("b", 4))

    location = store.get_by_id("1")
    assert location.rounding is RatingRounding.HALF_EVEN
    assert location.rating == 4.2


def test_duplicate_ids_only_indexed_entry_gets_the_review(bus):
    store = LocationStore(bus)
    store.replace_all([_location("1", name="A"), _location("1", name="B")])

    store.add_review("1", _review("r1", 5))

    assert [(location.name, location.review_count) for location in store.all()] == [("A", 0), ("B", 1)]
    assert store.get_by_id("1").name == "B"
