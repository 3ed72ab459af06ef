from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass
from enum import Enum

from .geo import Coordinate


class Metric(str, Enum):
    TIME = "TIME"
    DISTANCE = "DISTANCE"
    COST = "COST"


class RouteCategory(str, Enum):
    FASTEST = "FASTEST"
    CHEAPEST = "CHEAPEST"
    SHORTEST = "SHORTEST"


class TransportMode(str, Enum):
    BUS = "BUS"
    JEEP = "JEEP"
    E_JEEP = "E_JEEP"
    TRICYCLE = "TRICYCLE"
    MIXED = "MIXED"
    WALK = "WALK"
    CAR = "CAR"


CATEGORY_BY_METRIC: dict[Metric, RouteCategory] = {
    Metric.TIME: RouteCategory.FASTEST,
    Metric.DISTANCE: RouteCategory.SHORTEST,
    Metric.COST: RouteCategory.CHEAPEST,
}

LABEL_BY_CATEGORY: dict[RouteCategory, str] = {
    RouteCategory.FASTEST: "Fastest",
    RouteCategory.SHORTEST: "Shortest",
    RouteCategory.CHEAPEST: "Cheapest",
}


@dataclass(frozen=True)
class RouteLeg:
    instruction_text: str
    mode: TransportMode
    distance_meters: float
    duration_seconds: float
    waypoint_indices: tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class Itinerary:
    id: str
    total_time_minutes: float
    total_distance_km: float
    total_cost: float
    path: tuple[Coordinate, ...]
    legs: tuple[RouteLeg, ...]
    category: RouteCategory
    labels: tuple[str, ...] = ()


_ID_COUNTER = itertools.count(1)
_ID_LOCK = threading.Lock()


def new_itinerary_id() -> str:
    # Millisecond timestamp alone collides for back-to-back computations.
    with _ID_LOCK:
        seq = next(_ID_COUNTER)
    return f"route-{int(time.time() * 1000)}-{seq}"
