from __future__ import annotations

import heapq
from dataclasses import dataclass
from math import inf

from .errors import PathNotFoundError
from .geo import Coordinate
from .itinerary import Itinerary, Metric
from .logging_utils import log_event
from .nearest_node import nearest_index
from .route_assembler import assemble
from .transit_graph import Edge, TransitGraph, default_graph


@dataclass(frozen=True)
class PathResult:
    nodes: tuple[str, ...]
    cost: float


def edge_weight(edge: Edge, metric: Metric) -> float:
    if metric == Metric.TIME:
        return float(edge.time_min)
    if metric == Metric.DISTANCE:
        return float(edge.distance_km)
    return float(edge.cost)


def search_node_path(
    *,
    graph: TransitGraph,
    start_index: int,
    goal_index: int,
    metric: Metric,
    explored_counter: list[int] | None = None,
) -> PathResult:
    """Single-source Dijkstra from ``start_index``, stopping once the goal is settled.

    Heap entries are ``(distance, node_index)`` so equal distances pop in node
    declaration order. Edges into settled nodes are skipped and a predecessor
    only changes on a strictly smaller distance, so among parallel edges the
    first one listed wins.
    Only the optimised metric is guaranteed minimal: when two paths tie on it,
    the one through the lower node index wins, and its other totals may differ.
    """
    n = len(graph.nodes)
    dist = [inf] * n
    prev: list[int | None] = [None] * n
    settled = [False] * n

    dist[start_index] = 0.0
    heap: list[tuple[float, int]] = [(0.0, start_index)]

    while heap:
        d, u = heapq.heappop(heap)
        if settled[u] or d > dist[u]:
            continue
        settled[u] = True
        if explored_counter is not None:
            explored_counter[0] += 1
        if u == goal_index:
            break

        for indexed in graph.adjacency[u]:
            v = indexed.target_index
            if settled[v]:
                continue
            alt = d + edge_weight(indexed.edge, metric)
            if alt < dist[v]:
                dist[v] = alt
                prev[v] = u
                heapq.heappush(heap, (alt, v))

    if dist[goal_index] == inf:
        raise PathNotFoundError("no path")

    indices: list[int] = []
    current: int | None = goal_index
    while current is not None:
        indices.append(current)
        current = prev[current]
    indices.reverse()

    if indices[0] != start_index:
        raise PathNotFoundError("path does not start at origin")

    return PathResult(
        nodes=tuple(graph.nodes[i].id for i in indices),
        cost=dist[goal_index],
    )


def shortest_path(
    start_point: Coordinate,
    end_point: Coordinate,
    metric: Metric = Metric.TIME,
    graph: TransitGraph | None = None,
) -> Itinerary | None:
    """Snap both points to terminals and route between them.

    Returns None when either point cannot be snapped, both snap to the same
    terminal, or the terminals are not connected.
    """
    if graph is None:
        graph = default_graph()

    start_idx = nearest_index(start_point, graph)
    end_idx = nearest_index(end_point, graph)

    if start_idx is None or end_idx is None:
        log_event("route_not_found", reason_code="unresolved_endpoint", metric=metric.value)
        return None
    if start_idx == end_idx:
        log_event(
            "route_not_found",
            reason_code="same_node",
            metric=metric.value,
            node_id=graph.nodes[start_idx].id,
        )
        return None

    explored = [0]
    try:
        result = search_node_path(
            graph=graph,
            start_index=start_idx,
            goal_index=end_idx,
            metric=metric,
            explored_counter=explored,
        )
    except PathNotFoundError as exc:
        log_event(
            "route_not_found",
            reason_code="no_path",
            metric=metric.value,
            start_node=graph.nodes[start_idx].id,
            end_node=graph.nodes[end_idx].id,
            detail=str(exc),
        )
        return None

    itinerary = assemble(result.nodes, metric, graph)
    log_event(
        "route_computed",
        mode="graph",
        metric=metric.value,
        route_id=itinerary.id,
        nodes=list(result.nodes),
        explored_states=explored[0],
        metric_cost=result.cost,
    )
    return itinerary
