from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache

from .errors import GraphDataError
from .geo import Coordinate


class TerminalCategory(str, Enum):
    BUS = "BUS"
    JEEP = "JEEP"
    E_JEEP = "E_JEEP"
    TRICYCLE = "TRICYCLE"
    MIXED = "MIXED"


class EdgeMode(str, Enum):
    WALK = "WALK"
    RIDE = "RIDE"


@dataclass(frozen=True)
class Edge:
    target_node_id: str
    distance_km: float
    time_min: float
    cost: float
    mode: EdgeMode
    vehicle_kind: str | None = None


@dataclass(frozen=True)
class GraphNode:
    id: str
    display_name: str
    address: str
    position: Coordinate
    terminal_category: TerminalCategory = TerminalCategory.MIXED
    outgoing_edges: tuple[Edge, ...] = ()


@dataclass(frozen=True)
class IndexedEdge:
    target_index: int
    edge: Edge


@dataclass(frozen=True)
class TransitGraph:
    """Read-only arena of terminals.

    ``nodes`` keeps declaration order, which is also the tie-break order for
    nearest-node snapping and for equal tentative distances in the pathfinder.
    ``adjacency[i]`` mirrors ``nodes[i].outgoing_edges`` with integer targets.
    """

    nodes: tuple[GraphNode, ...]
    adjacency: tuple[tuple[IndexedEdge, ...], ...]
    index_of: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_nodes(cls, nodes: Iterable[GraphNode]) -> TransitGraph:
        ordered = tuple(nodes)
        index_of: dict[str, int] = {}
        for idx, node in enumerate(ordered):
            if node.id in index_of:
                raise GraphDataError(f"duplicate graph node id: {node.id}")
            index_of[node.id] = idx

        adjacency: list[tuple[IndexedEdge, ...]] = []
        for node in ordered:
            row: list[IndexedEdge] = []
            for edge in node.outgoing_edges:
                target = index_of.get(edge.target_node_id)
                if target is None:
                    raise GraphDataError(
                        f"edge {node.id}->{edge.target_node_id} points at an unknown node"
                    )
                if edge.distance_km < 0 or edge.time_min < 0 or edge.cost < 0:
                    raise GraphDataError(f"edge {node.id}->{edge.target_node_id} has a negative weight")
                row.append(IndexedEdge(target_index=target, edge=edge))
            adjacency.append(tuple(row))

        return cls(nodes=ordered, adjacency=tuple(adjacency), index_of=index_of)

    def node(self, node_id: str) -> GraphNode:
        idx = self.index_of.get(node_id)
        if idx is None:
            raise GraphDataError(f"unknown graph node id: {node_id}")
        return self.nodes[idx]

    def first_edge(self, from_id: str, to_id: str) -> Edge | None:
        for edge in self.node(from_id).outgoing_edges:
            if edge.target_node_id == to_id:
                return edge
        return None


def _ride(target: str, km: float, minutes: float, cost: float, vehicle: str) -> Edge:
    return Edge(target, km, minutes, cost, EdgeMode.RIDE, vehicle)


def _walk(target: str, km: float, minutes: float) -> Edge:
    return Edge(target, km, minutes, 0.0, EdgeMode.WALK)


# Tandang Sora, Quezon City. Edges are directed.
TANDANG_SORA_NODES: tuple[GraphNode, ...] = (
    GraphNode(
        id="ts_palengke",
        display_name="Tandang Sora Palengke",
        address="Tandang Sora Palengke, Tandang Sora Ave, Quezon City, 1116 Metro Manila",
        position=Coordinate(14.6741, 121.0359),
        terminal_category=TerminalCategory.MIXED,
        outgoing_edges=(
            _ride("visayas_ave", 2.5, 15, 13, "JEEP"),
            _ride("comm_ave", 3.0, 20, 15, "JEEP"),
        ),
    ),
    GraphNode(
        id="visayas_ave",
        display_name="Visayas Avenue Junction",
        address="Visayas Avenue, corner Tandang Sora Ave, Quezon City, 1128 Metro Manila",
        position=Coordinate(14.6650, 121.0450),
        terminal_category=TerminalCategory.JEEP,
        outgoing_edges=(
            _ride("ts_palengke", 2.5, 15, 13, "JEEP"),
            _ride("technohub", 4.0, 25, 20, "BUS"),
        ),
    ),
    GraphNode(
        id="comm_ave",
        display_name="Commonwealth Avenue",
        address="Commonwealth Ave, Diliman, Quezon City, 1101 Metro Manila",
        position=Coordinate(14.6680, 121.0550),
        terminal_category=TerminalCategory.BUS,
        outgoing_edges=(
            _ride("ts_palengke", 3.0, 20, 15, "JEEP"),
            _walk("technohub", 1.5, 5),
        ),
    ),
    GraphNode(
        id="technohub",
        display_name="UP Ayala Technohub",
        address="UP Ayala Technohub, Commonwealth Ave, Diliman, Quezon City, 1101 Metro Manila",
        position=Coordinate(14.6575, 121.0580),
        terminal_category=TerminalCategory.E_JEEP,
        outgoing_edges=(_ride("visayas_ave", 4.0, 25, 20, "BUS"),),
    ),
    GraphNode(
        id="culiat_tricycle",
        display_name="Culiat Tricycle Toda",
        address="Culiat High School, Tandang Sora Ave, Quezon City, 1128 Metro Manila",
        position=Coordinate(14.6620, 121.0500),
        terminal_category=TerminalCategory.TRICYCLE,
        outgoing_edges=(_ride("visayas_ave", 1.0, 10, 20, "TRICYCLE"),),
    ),
)


@lru_cache(maxsize=1)
def default_graph() -> TransitGraph:
    """Build the district graph once per process."""
    return TransitGraph.from_nodes(TANDANG_SORA_NODES)
