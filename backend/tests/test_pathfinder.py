from __future__ import annotations

import random
from math import inf

import pytest

from commute_engine.errors import PathNotFoundError
from commute_engine.geo import Coordinate
from commute_engine.itinerary import Metric, RouteCategory, TransportMode
from commute_engine.pathfinder import edge_weight, search_node_path, shortest_path
from commute_engine.transit_graph import (
    TANDANG_SORA_NODES,
    Edge,
    EdgeMode,
    GraphNode,
    TransitGraph,
)

NEAR_PALENGKE = Coordinate(14.6743, 121.0357)
NEAR_TECHNOHUB = Coordinate(14.6573, 121.0582)


def _jeep_and_bus_graph() -> TransitGraph:
    """The district graph restricted to the JEEP/BUS legs between the palengke and Technohub."""
    by_id = {n.id: n for n in TANDANG_SORA_NODES}
    keep = ("ts_palengke", "visayas_ave", "technohub")
    nodes = []
    for node_id in keep:
        node = by_id[node_id]
        edges = tuple(e for e in node.outgoing_edges if e.target_node_id in keep)
        nodes.append(
            GraphNode(
                id=node.id,
                display_name=node.display_name,
                address=node.address,
                position=node.position,
                terminal_category=node.terminal_category,
                outgoing_edges=edges,
            )
        )
    return TransitGraph.from_nodes(nodes)


def test_palengke_to_technohub_by_time_over_jeep_and_bus_legs() -> None:
    route = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.TIME, _jeep_and_bus_graph())

    assert route is not None
    assert route.path == (
        Coordinate(14.6741, 121.0359),
        Coordinate(14.6650, 121.0450),
        Coordinate(14.6575, 121.0580),
    )
    assert route.total_time_minutes == 40
    assert route.total_cost == 33
    assert route.total_distance_km == pytest.approx(6.5)
    assert route.category == RouteCategory.FASTEST
    assert route.labels == ("Fastest",)
    assert [leg.instruction_text for leg in route.legs] == [
        "Ride JEEP to Visayas Avenue Junction",
        "Ride BUS to UP Ayala Technohub",
    ]


def test_full_district_graph_prefers_commonwealth_walk_when_fastest() -> None:
    route = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.TIME)

    assert route is not None
    assert len(route.path) == 3
    assert route.path[1] == Coordinate(14.6680, 121.0550)
    assert route.total_time_minutes == 25
    assert route.total_cost == 15
    assert [leg.mode for leg in route.legs] == [TransportMode.JEEP, TransportMode.WALK]
    assert route.legs[1].instruction_text == "Walk to UP Ayala Technohub"


def test_metric_selects_weight_dimension_and_category() -> None:
    by_cost = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.COST)
    by_distance = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.DISTANCE)

    assert by_cost is not None and by_distance is not None
    assert by_cost.category == RouteCategory.CHEAPEST
    assert by_cost.labels == ("Cheapest",)
    assert by_cost.total_cost == 15
    assert by_distance.category == RouteCategory.SHORTEST
    assert by_distance.total_distance_km == pytest.approx(4.5)


def test_same_point_yields_no_route() -> None:
    point = Coordinate(14.6741, 121.0359)

    assert shortest_path(point, point, Metric.TIME) is None


def test_points_snapping_to_same_terminal_yield_no_route() -> None:
    assert shortest_path(Coordinate(14.6741, 121.0359), NEAR_PALENGKE) is None


def test_unreachable_terminal_yields_no_route() -> None:
    # Nothing in the district routes back into the tricycle toda.
    assert shortest_path(NEAR_TECHNOHUB, Coordinate(14.6620, 121.0500)) is None


def test_empty_graph_yields_no_route() -> None:
    assert shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.TIME, TransitGraph.from_nodes([])) is None


def test_repeated_calls_are_deterministic_apart_from_ids() -> None:
    first = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.DISTANCE)
    second = shortest_path(NEAR_PALENGKE, NEAR_TECHNOHUB, Metric.DISTANCE)

    assert first is not None and second is not None
    assert first.path == second.path
    assert first.legs == second.legs
    assert (first.total_time_minutes, first.total_distance_km, first.total_cost) == (
        second.total_time_minutes,
        second.total_distance_km,
        second.total_cost,
    )
    assert first.id != second.id


def test_equal_distances_resolve_in_declaration_order() -> None:
    graph = TransitGraph.from_nodes(
        [
            GraphNode("s", "S", "", Coordinate(0, 0), outgoing_edges=(
                Edge("b", 1, 1, 1, EdgeMode.WALK),
                Edge("a", 1, 1, 1, EdgeMode.WALK),
            )),
            GraphNode("a", "A", "", Coordinate(0, 1), outgoing_edges=(Edge("t", 1, 1, 1, EdgeMode.WALK),)),
            GraphNode("b", "B", "", Coordinate(0, 2), outgoing_edges=(Edge("t", 1, 1, 1, EdgeMode.WALK),)),
            GraphNode("t", "T", "", Coordinate(0, 3)),
        ]
    )

    result = search_node_path(graph=graph, start_index=0, goal_index=3, metric=Metric.TIME)

    # "a" is declared before "b", so it is settled first and claims "t".
    assert result.nodes == ("s", "a", "t")
    assert result.cost == 2


def test_search_node_path_raises_when_disconnected() -> None:
    graph = TransitGraph.from_nodes(
        [
            GraphNode("a", "A", "", Coordinate(0, 0), outgoing_edges=(Edge("b", 1, 1, 1, EdgeMode.WALK),)),
            GraphNode("b", "B", "", Coordinate(0, 1)),
            GraphNode("c", "C", "", Coordinate(0, 2)),
        ]
    )

    with pytest.raises(PathNotFoundError):
        search_node_path(graph=graph, start_index=0, goal_index=2, metric=Metric.COST)


def _random_graph(rng: random.Random, n: int) -> TransitGraph:
    nodes = []
    for i in range(n):
        targets = rng.sample([j for j in range(n) if j != i], k=rng.randint(0, min(3, n - 1)))
        edges = tuple(
            Edge(
                f"n{j}",
                distance_km=float(rng.randint(0, 9)),
                time_min=float(rng.randint(0, 30)),
                cost=float(rng.randint(0, 25)),
                mode=EdgeMode.RIDE,
                vehicle_kind="JEEP",
            )
            for j in targets
        )
        nodes.append(GraphNode(f"n{i}", f"N{i}", "", Coordinate(float(i), float(i)), outgoing_edges=edges))
    return TransitGraph.from_nodes(nodes)


def _bellman_ford(graph: TransitGraph, start: int, metric: Metric) -> list[float]:
    dist = [inf] * len(graph.nodes)
    dist[start] = 0.0
    for _ in range(len(graph.nodes) - 1):
        for u, row in enumerate(graph.adjacency):
            if dist[u] == inf:
                continue
            for indexed in row:
                alt = dist[u] + edge_weight(indexed.edge, metric)
                if alt < dist[indexed.target_index]:
                    dist[indexed.target_index] = alt
    return dist


@pytest.mark.parametrize("metric", list(Metric))
def test_matches_bellman_ford_on_random_graphs(metric: Metric) -> None:
    rng = random.Random(20240611)
    for _ in range(25):
        graph = _random_graph(rng, n=rng.randint(2, 9))
        for start in range(len(graph.nodes)):
            reference = _bellman_ford(graph, start, metric)
            for goal in range(len(graph.nodes)):
                if goal == start:
                    continue
                if reference[goal] == inf:
                    with pytest.raises(PathNotFoundError):
                        search_node_path(graph=graph, start_index=start, goal_index=goal, metric=metric)
                    continue

                result = search_node_path(graph=graph, start_index=start, goal_index=goal, metric=metric)
                assert result.cost == reference[goal]
                assert result.nodes[0] == f"n{start}"
                assert result.nodes[-1] == f"n{goal}"
                walked = sum(
                    edge_weight(graph.first_edge(a, b), metric)  # type: ignore[arg-type]
                    for a, b in zip(result.nodes, result.nodes[1:])
                )
                assert walked == reference[goal]
