from __future__ import annotations

import random

from commute_engine.geo import Coordinate
from commute_engine.itinerary import Itinerary, RouteCategory, RouteLeg, TransportMode
from commute_engine.variants import expand


def _base(*, time_min: float = 15, distance_km: float = 8.4, cost: float = 33) -> Itinerary:
    return Itinerary(
        id="route-1",
        total_time_minutes=time_min,
        total_distance_km=distance_km,
        total_cost=cost,
        path=(Coordinate(14.6741, 121.0359), Coordinate(14.6575, 121.0580)),
        legs=(RouteLeg("Head south", TransportMode.CAR, 8400.0, 900.0, (0, 1)),),
        category=RouteCategory.FASTEST,
        labels=("Fare", "Distance", "Time"),
    )


def test_expand_rescales_headline_totals() -> None:
    base = _base()

    fastest, cheapest, shortest = expand(base)

    assert fastest.id == "route-1_fast"
    assert fastest.category == RouteCategory.FASTEST
    assert fastest.labels == ("Fastest", "Comfort")
    assert (fastest.total_time_minutes, fastest.total_distance_km, fastest.total_cost) == (15, 8.4, 33)

    assert cheapest.id == "route-1_cheap"
    assert cheapest.category == RouteCategory.CHEAPEST
    assert cheapest.labels == ("Budget", "Saver")
    assert cheapest.total_cost == 23
    assert cheapest.total_time_minutes == 20
    assert cheapest.total_distance_km == 8.4

    assert shortest.id == "route-1_short"
    assert shortest.category == RouteCategory.SHORTEST
    assert shortest.labels == ("Eco", "Direct")
    assert shortest.total_distance_km == 7.98
    assert shortest.total_time_minutes == 17
    assert shortest.total_cost == 33


def test_cheapest_cost_never_drops_below_base_fare() -> None:
    variants = expand(_base(cost=15))

    assert variants.cheapest.total_cost == 13


def test_variants_share_path_and_legs_and_leave_base_untouched() -> None:
    base = _base()

    variants = expand(base)

    for variant in variants:
        assert variant.path is base.path
        assert variant.legs is base.legs
    assert base.id == "route-1"
    assert base.labels == ("Fare", "Distance", "Time")


def test_variant_monotonicity() -> None:
    rng = random.Random(7)
    for _ in range(500):
        base = _base(
            time_min=float(rng.randint(1, 240)),
            distance_km=round(rng.uniform(0.1, 60.0), 2),
            cost=float(rng.randint(13, 400)),
        )

        variants = expand(base)

        assert variants.cheapest.total_cost <= base.total_cost
        assert variants.cheapest.total_cost >= 13
        assert variants.cheapest.total_time_minutes >= base.total_time_minutes
        assert variants.shortest.total_distance_km <= base.total_distance_km
        assert variants.shortest.total_time_minutes >= base.total_time_minutes
