from __future__ import annotations

from .geo import Coordinate, squared_planar_distance
from .transit_graph import TransitGraph, default_graph


def nearest_index(point: Coordinate, graph: TransitGraph) -> int | None:
    best_idx: int | None = None
    best_dist = float("inf")

    for idx, node in enumerate(graph.nodes):
        d = squared_planar_distance(point, node.position)
        # Strict comparison keeps the first node seen on ties.
        if d < best_dist:
            best_dist = d
            best_idx = idx

    return best_idx


def resolve(point: Coordinate, graph: TransitGraph | None = None) -> str | None:
    """
    Snap an arbitrary coordinate to the closest terminal id.

    Uses planar distance in degrees (linear scan over all nodes). Returns
    None for an empty graph.
    """
    if graph is None:
        graph = default_graph()
    idx = nearest_index(point, graph)
    if idx is None:
        return None
    return graph.nodes[idx].id
