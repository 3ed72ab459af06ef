from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .geo import Coordinate
from .provider_models import PlaceResult
from .transit_graph import TransitGraph, default_graph

# Served when the geocoding provider cannot be reached.
FALLBACK_PLACES: tuple[PlaceResult, ...] = (
    PlaceResult("Tandang Sora Palengke", "Tandang Sora Ave, Quezon City", Coordinate(14.6741, 121.0359)),
    PlaceResult("Visayas Avenue Junction", "Visayas Ave, Quezon City", Coordinate(14.6650, 121.0450)),
    PlaceResult("Commonwealth Market", "Commonwealth Ave, Quezon City", Coordinate(14.6680, 121.0550)),
    PlaceResult("UP Ayala Technohub", "Commonwealth Ave, Diliman, QC", Coordinate(14.6575, 121.0580)),
    PlaceResult("SM City North EDSA", "North Avenue, Quezon City", Coordinate(14.6560, 121.0290)),
    PlaceResult("Trinoma Mall", "North Avenue, Quezon City", Coordinate(14.6540, 121.0330)),
    PlaceResult("Quezon City Hall", "Kalayaan Ave, Quezon City", Coordinate(14.6460, 121.0490)),
    PlaceResult("Iglesia Ni Cristo (Central)", "Commonwealth Ave, Quezon City", Coordinate(14.6610, 121.0540)),
    PlaceResult("Culiat High School", "Tandang Sora Ave, Quezon City", Coordinate(14.6620, 121.0500)),
)

# Street addresses offered by the offline autocomplete next to the terminals.
KNOWN_STREETS: tuple[str, ...] = (
    "1 Sampaguita Ave, Quezon City, 1107 Metro Manila",
    "25 Banlat Road, Tandang Sora, Quezon City, 1116 Metro Manila",
    "St. James College, Mindanao Ave, Quezon City, 1100 Metro Manila",
    "Cherry Foodarama, Congressional Ave, Quezon City, 1100 Metro Manila",
    "Project 6, Quezon City, 1100 Metro Manila",
    "SM City North EDSA, North Avenue, corner Epifanio de los Santos Ave, Quezon City, 1100 Metro Manila",
)

LOCAL_SEARCH_MIN_CHARS = 2

LocationKind = Literal["TERMINAL", "LOCATION"]


@dataclass(frozen=True)
class LocationMatch:
    name: str
    address: str
    kind: LocationKind


def match_fallback_places(query: str) -> list[PlaceResult]:
    needle = query.lower()
    return [
        place
        for place in FALLBACK_PLACES
        if needle in place.name.lower() or needle in place.address.lower()
    ]


def search_locations(query: str, graph: TransitGraph | None = None) -> list[LocationMatch]:
    """Offline autocomplete: terminals first, then the known street list."""
    if not query or len(query) < LOCAL_SEARCH_MIN_CHARS:
        return []
    if graph is None:
        graph = default_graph()

    needle = query.lower()
    results: list[LocationMatch] = []

    for node in graph.nodes:
        if needle in node.display_name.lower() or needle in node.address.lower():
            results.append(LocationMatch(name=node.display_name, address=node.address, kind="TERMINAL"))

    for street in KNOWN_STREETS:
        if needle in street.lower():
            results.append(LocationMatch(name=street.split(",")[0], address=street, kind="LOCATION"))

    return results
