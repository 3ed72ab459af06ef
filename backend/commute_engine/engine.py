from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .debounce import DebouncedCall
from .fallback_places import LocationMatch, search_locations
from .geo import Coordinate
from .geocoding_gateway import GeocodingGateway
from .itinerary import Itinerary, Metric
from .pathfinder import shortest_path
from .provider_models import AreaLabel, PlaceResult
from .transit_graph import TransitGraph, default_graph
from .variants import RouteVariants, expand

TERMINAL_RATING = 4.5


@dataclass(frozen=True)
class TerminalInfo:
    id: str
    name: str
    address: str
    location: Coordinate
    type: str
    rating: float
    route_count: int


class CommuteEngine:
    """Entry points used by the UI layer: graph routing, live routing and place lookups."""

    def __init__(self, gateway: GeocodingGateway, graph: TransitGraph | None = None) -> None:
        self.gateway = gateway
        self.graph = default_graph() if graph is None else graph

    def compute_graph_route(
        self,
        start: Coordinate,
        end: Coordinate,
        metric: Metric = Metric.TIME,
    ) -> Itinerary | None:
        return shortest_path(start, end, metric, self.graph)

    async def compute_live_route(self, start: Coordinate, end: Coordinate) -> Itinerary | None:
        return await self.gateway.fetch_directions(start, end)

    async def compute_live_variants(self, start: Coordinate, end: Coordinate) -> RouteVariants | None:
        base = await self.compute_live_route(start, end)
        if base is None:
            return None
        return expand(base)

    @staticmethod
    def expand(itinerary: Itinerary) -> RouteVariants:
        return expand(itinerary)

    async def search(self, query: str) -> list[PlaceResult]:
        return await self.gateway.search_places(query)

    async def reverse_geocode(self, point: Coordinate) -> AreaLabel:
        return await self.gateway.reverse_geocode(point)

    def debounced_search(
        self,
        on_result: Callable[[list[PlaceResult]], None] | None = None,
        *,
        quiet_period_s: float | None = None,
    ) -> DebouncedCall[list[PlaceResult]]:
        """Search-as-you-type: ``trigger(query)`` on every keystroke."""
        return DebouncedCall(
            self.gateway.search_places,
            quiet_period_s=quiet_period_s,
            on_result=on_result,
            name="search",
        )

    def debounced_reverse_geocode(
        self,
        on_result: Callable[[AreaLabel], None] | None = None,
        *,
        quiet_period_s: float | None = None,
    ) -> DebouncedCall[AreaLabel]:
        """Map-centre lookup: ``trigger(point)`` whenever the map stops panning."""
        return DebouncedCall(
            self.gateway.reverse_geocode,
            quiet_period_s=quiet_period_s,
            on_result=on_result,
            name="reverse_geocode",
        )

    def search_locations(self, query: str) -> list[LocationMatch]:
        return search_locations(query, self.graph)

    def terminals(self) -> list[TerminalInfo]:
        return [
            TerminalInfo(
                id=node.id,
                name=node.display_name,
                address=node.address,
                location=node.position,
                type=node.terminal_category.value,
                rating=TERMINAL_RATING,
                route_count=len(node.outgoing_edges),
            )
            for node in self.graph.nodes
        ]
