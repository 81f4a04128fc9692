"""Turn raw catalog records (API JSON) into Location snapshots.

The store performs no validation, so whoever fetches the catalog runs
the records through here before calling ``LocationStore.replace_all``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List
from uuid import uuid4

from apps.locations.domain.entities import Location, Review
from apps.locations.domain.rating import DEFAULT_RATING_ROUNDING, RatingRounding

logger = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


class CatalogRecordError(ValueError):
    """A catalog record cannot be turned into a Location."""


def _first(record: Mapping[str, Any], *keys: str):
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _to_decimal(value, field_name: str) -> Decimal:
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise CatalogRecordError(f"{field_name} is not a number: {value!r}")
    if not number.is_finite():
        raise CatalogRecordError(f"{field_name} is not a finite number: {value!r}")
    return number


def _to_float(value, field_name: str) -> float:
    return float(_to_decimal(value, field_name))


def parse_timestamp(value) -> datetime:
    """Parse ISO-8601 timestamps as sent by the API (``...Z`` included)."""
    if value is None or value == "":
        return EPOCH
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            # Some records only carry a date
            try:
                parsed = datetime.strptime(text[:10], "%Y-%m-%d")
            except ValueError:
                raise CatalogRecordError(f"Unrecognised timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_review(record: Mapping[str, Any] | Review) -> Review:
    if isinstance(record, Review):
        return record
    if not isinstance(record, Mapping):
        raise CatalogRecordError(f"Review is not an object: {record!r}")
    rating = _first(record, "rating", "stars")
    if rating is None:
        raise CatalogRecordError("Review has no rating")
    rating = _to_decimal(rating, "rating")
    return Review(
        id=str(record.get("id") or uuid4()),
        user=str(record.get("user") or "Anonymous"),
        comment=str(record.get("comment") or ""),
        rating=int(rating) if rating == rating.to_integral_value() else float(rating),
        created_at=parse_timestamp(_first(record, "createdAt", "created_at")),
    )


def normalize_location(
    record: Mapping[str, Any],
    rounding: RatingRounding = DEFAULT_RATING_ROUNDING,
) -> Location:
    """
    Coerce one raw record into a Location.

    Any incoming ``rating`` is dropped; the snapshot derives its own from
    the reviews. Raises CatalogRecordError for records that cannot be used.
    """
    if not isinstance(record, Mapping):
        raise CatalogRecordError(f"Location record is not an object: {record!r}")
    location_id = record.get("id")
    if location_id is None or str(location_id).strip() == "":
        raise CatalogRecordError("Location record has no id")

    price = _first(record, "pricePerHour", "price_per_hour", "price")
    if price is None:
        raise CatalogRecordError(f"Location {location_id} has no price")
    price = _to_decimal(price, "pricePerHour")
    if price < 0:
        raise CatalogRecordError(f"Location {location_id} has a negative price")

    latitude = _first(record, "latitude", "lat")
    longitude = _first(record, "longitude", "lng")
    if latitude is None or longitude is None:
        raise CatalogRecordError(f"Location {location_id} has no coordinates")

    reviews = []
    for raw_review in record.get("reviews") or ():
        try:
            reviews.append(normalize_review(raw_review))
        except CatalogRecordError as exc:
            logger.warning("Skipping review on location %s: %s", location_id, exc)

    return Location(
        id=str(location_id),
        name=str(record.get("name") or "Unnamed location"),
        address=str(record.get("address") or ""),
        price_per_hour=price,
        latitude=_to_float(latitude, "latitude"),
        longitude=_to_float(longitude, "longitude"),
        reviews=tuple(reviews),
        rounding=rounding,
    )


def normalize_locations(
    records: Iterable[Mapping[str, Any]],
    rounding: RatingRounding = DEFAULT_RATING_ROUNDING,
) -> List[Location]:
    """Normalize a fetched catalog, skipping (and logging) unusable records."""
    locations: List[Location] = []
    for record in records:
        try:
            locations.append(normalize_location(record, rounding))
        except CatalogRecordError as exc:
            logger.warning("Skipping catalog record: %s", exc)
    return locations
