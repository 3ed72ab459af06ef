from __future__ import annotations

import pytest
from pydantic import ValidationError

from commute_engine.fares import driving_fare
from commute_engine.geo import Coordinate
from commute_engine.provider_models import (
    AreaLabel,
    ReverseFeatureProperties,
    SearchFeature,
    pick_area_label,
    place_from_feature,
)


@pytest.mark.parametrize(
    ("props", "expected_short"),
    [
        ({"neighbourhood": "Culiat", "locality": "Quezon City"}, "Culiat"),
        ({"locality": "Quezon City", "borough": "District 6"}, "Quezon City"),
        ({"borough": "District 6", "county": "Second District"}, "District 6"),
        ({"county": "Second District", "region": "Metro Manila"}, "Second District"),
        ({"region": "Metro Manila"}, "Metro Manila"),
        ({}, "Unknown Location"),
    ],
)
def test_short_name_priority(props: dict[str, str], expected_short: str) -> None:
    label = pick_area_label(ReverseFeatureProperties(**props))

    assert label.short_name == expected_short


def test_area_label_priority_skips_empty_strings() -> None:
    props = ReverseFeatureProperties(
        neighbourhood="",
        locality="Quezon City",
        name="",
        street="",
        label="Tandang Sora Ave, Quezon City",
    )

    assert pick_area_label(props) == AreaLabel("Quezon City", "Tandang Sora Ave, Quezon City")


def test_area_label_prefers_name_then_street() -> None:
    assert pick_area_label(ReverseFeatureProperties(name="Banlat", street="Banlat Road")).area_label == "Banlat"
    assert pick_area_label(ReverseFeatureProperties(street="Banlat Road", label="x")).area_label == "Banlat Road"
    assert pick_area_label(ReverseFeatureProperties()).area_label == "Unknown Area"


def test_search_feature_coordinates_are_lng_lat() -> None:
    feature = SearchFeature.model_validate(
        {
            "geometry": {"type": "Point", "coordinates": [121.0330, 14.6540]},
            "properties": {"name": "Trinoma Mall", "label": "Trinoma Mall, Quezon City", "confidence": 0.9},
        }
    )

    place = place_from_feature(feature)

    assert place.position == Coordinate(14.6540, 121.0330)
    assert place.name == "Trinoma Mall"


def test_search_feature_without_point_is_rejected() -> None:
    with pytest.raises(ValidationError):
        SearchFeature.model_validate({"geometry": {"coordinates": [121.0]}, "properties": {}})


@pytest.mark.parametrize(
    ("distance_km", "expected"),
    [(0.0, 13), (3.99, 13), (4.0, 13), (5.0, 15), (6.0, 17), (4.25, 14)],
)
def test_driving_fare(distance_km: float, expected: int) -> None:
    assert driving_fare(distance_km) == expected


def test_driving_fare_overrides() -> None:
    assert driving_fare(10.0, base_fare=20, per_km=3, free_km=5) == 35
