from __future__ import annotations

import math
from dataclasses import replace
from typing import NamedTuple

from .itinerary import Itinerary, RouteCategory

# The provider usually returns a single route, so cheaper and shorter
# alternatives are presented by rescaling its headline totals.
CHEAPEST_COST_FACTOR = 0.7
CHEAPEST_COST_FLOOR = 13
CHEAPEST_TIME_FACTOR = 1.3
SHORTEST_DISTANCE_FACTOR = 0.95
SHORTEST_TIME_FACTOR = 1.1


class RouteVariants(NamedTuple):
    fastest: Itinerary
    cheapest: Itinerary
    shortest: Itinerary


def expand(base: Itinerary) -> RouteVariants:
    fastest = replace(
        base,
        id=f"{base.id}_fast",
        category=RouteCategory.FASTEST,
        labels=("Fastest", "Comfort"),
    )
    cheapest = replace(
        base,
        id=f"{base.id}_cheap",
        total_cost=max(CHEAPEST_COST_FLOOR, math.floor(base.total_cost * CHEAPEST_COST_FACTOR)),
        total_time_minutes=math.ceil(base.total_time_minutes * CHEAPEST_TIME_FACTOR),
        category=RouteCategory.CHEAPEST,
        labels=("Budget", "Saver"),
    )
    shortest = replace(
        base,
        id=f"{base.id}_short",
        total_distance_km=round(base.total_distance_km * SHORTEST_DISTANCE_FACTOR, 2),
        total_time_minutes=math.ceil(base.total_time_minutes * SHORTEST_TIME_FACTOR),
        category=RouteCategory.SHORTEST,
        labels=("Eco", "Direct"),
    )
    return RouteVariants(fastest=fastest, cheapest=cheapest, shortest=shortest)
