from __future__ import annotations

from collections.abc import Sequence

from .errors import GraphDataError
from .itinerary import (
    CATEGORY_BY_METRIC,
    LABEL_BY_CATEGORY,
    Itinerary,
    Metric,
    RouteLeg,
    TransportMode,
    new_itinerary_id,
)
from .transit_graph import Edge, EdgeMode, TransitGraph, default_graph

# Static-graph legs carry no polyline, so waypoint indices are not meaningful.
PLACEHOLDER_WAYPOINTS: tuple[int, int] = (0, 0)


def _leg_mode(edge: Edge) -> TransportMode:
    if edge.mode == EdgeMode.WALK:
        return TransportMode.WALK
    try:
        return TransportMode(str(edge.vehicle_kind or "").upper())
    except ValueError:
        return TransportMode.CAR


def _instruction(edge: Edge, destination_name: str) -> str:
    if edge.mode == EdgeMode.WALK:
        return f"Walk to {destination_name}"
    return f"Ride {edge.vehicle_kind} to {destination_name}"


def assemble(
    node_path: Sequence[str],
    metric: Metric = Metric.TIME,
    graph: TransitGraph | None = None,
) -> Itinerary:
    """Turn an ordered list of node ids into an itinerary with one leg per hop."""
    if graph is None:
        graph = default_graph()
    if len(node_path) < 2:
        raise GraphDataError("an itinerary needs at least two nodes")

    legs: list[RouteLeg] = []
    total_time = 0.0
    total_dist = 0.0
    total_cost = 0.0

    for from_id, to_id in zip(node_path, node_path[1:]):
        edge = graph.first_edge(from_id, to_id)
        if edge is None:
            raise GraphDataError(f"no edge between {from_id} and {to_id}")

        total_time += edge.time_min
        total_dist += edge.distance_km
        total_cost += edge.cost

        legs.append(
            RouteLeg(
                instruction_text=_instruction(edge, graph.node(to_id).display_name),
                mode=_leg_mode(edge),
                distance_meters=edge.distance_km * 1000.0,
                duration_seconds=edge.time_min * 60.0,
                waypoint_indices=PLACEHOLDER_WAYPOINTS,
            )
        )

    category = CATEGORY_BY_METRIC[metric]
    return Itinerary(
        id=new_itinerary_id(),
        total_time_minutes=total_time,
        total_distance_km=total_dist,
        total_cost=total_cost,
        path=tuple(graph.node(node_id).position for node_id in node_path),
        legs=tuple(legs),
        category=category,
        labels=(LABEL_BY_CATEGORY[category],),
    )
