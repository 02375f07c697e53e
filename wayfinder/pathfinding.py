"""Dijkstra shortest-path search over the building room graph.

Purpose:
- Compute the shortest walking route between two rooms, across floors.
- Describe the route hop by hop for narration by a downstream caller.

Usage example:
    >>> from wayfinder.pathfinding import find_shortest_path
    >>> result = find_shortest_path(graph, "1A010", "2A020")
    >>> result.total_distance
    28.0
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from wayfinder.building_graph import BuildingGraph
from wayfinder.floor_schema import Node


@dataclass(frozen=True, slots=True)
class NodeInfo:
    """Per-room projection included in a path result."""

    id: str
    room_type: str
    area: float | None
    floor: str
    floor_label: str

    @classmethod
    def from_node(cls, node: Node) -> "NodeInfo":
        return cls(
            id=node.id,
            room_type=node.room_type,
            area=node.area,
            floor=node.floor,
            floor_label=node.floor_label,
        )


@dataclass(frozen=True, slots=True)
class NavigationStep:
    """One hop between consecutive rooms on a route."""

    from_id: str
    from_type: str
    from_floor_label: str
    to_id: str
    to_type: str
    to_floor_label: str
    distance: float
    is_floor_change: bool


@dataclass(frozen=True)
class PathResult:
    """Structured shortest-path result payload."""

    found: bool
    path: list[str] = field(default_factory=list)
    path_details: list[NodeInfo] = field(default_factory=list)
    total_distance: float = 0.0
    steps: list[NavigationStep] = field(default_factory=list)
    crosses_floors: bool = False
    floors_traversed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def not_found() -> PathResult:
    return PathResult(found=False)


def _dijkstra(graph: BuildingGraph, start: str, goal: str) -> tuple[dict[str, float], dict[str, str | None]]:
    """Run linear-scan Dijkstra from start until goal is settled or nothing is reachable.

    The minimum is picked by scanning unvisited nodes in registration order, so
    equal-distance candidates always resolve to the earliest registered node.
    """
    distances: dict[str, float] = {node_id: math.inf for node_id in graph.nodes}
    previous: dict[str, str | None] = {node_id: None for node_id in graph.nodes}
    unvisited: dict[str, None] = dict.fromkeys(graph.nodes)
    distances[start] = 0.0

    while unvisited:
        current: str | None = None
        best = math.inf
        for node_id in unvisited:
            if distances[node_id] < best:
                best = distances[node_id]
                current = node_id

        if current is None or current == goal:
            break

        del unvisited[current]

        for neighbor, weight in graph.adjacency[current].items():
            if neighbor not in unvisited:
                continue
            candidate = best + weight
            if candidate < distances[neighbor]:
                distances[neighbor] = candidate
                previous[neighbor] = current

    return distances, previous


def _reconstruct(previous: dict[str, str | None], goal: str) -> list[str]:
    path: list[str] = []
    current: str | None = goal
    while current is not None:
        path.append(current)
        current = previous[current]
    path.reverse()
    return path


def find_shortest_path(graph: BuildingGraph, start_id: str, end_id: str) -> PathResult:
    """Compute the shortest route between two rooms.

    Args:
        graph: Assembled building graph.
        start_id: Start room id, matched case-insensitively.
        end_id: Destination room id, matched case-insensitively.

    Returns:
        PathResult; ``found`` is False when either id is unknown or the
        destination is unreachable.
    """
    start = graph.resolve_id(start_id)
    goal = graph.resolve_id(end_id)
    if start is None or goal is None:
        return not_found()

    distances, previous = _dijkstra(graph, start, goal)
    path = _reconstruct(previous, goal)
    if path[0] != start:
        return not_found()

    visited = [graph.nodes[node_id] for node_id in path]

    steps: list[NavigationStep] = []
    for a, b in zip(visited, visited[1:]):
        steps.append(
            NavigationStep(
                from_id=a.id,
                from_type=a.room_type,
                from_floor_label=a.floor_label,
                to_id=b.id,
                to_type=b.room_type,
                to_floor_label=b.floor_label,
                distance=graph.adjacency[a.id][b.id],
                is_floor_change=a.floor != b.floor,
            )
        )

    floors = {node.floor for node in visited}
    return PathResult(
        found=True,
        path=path,
        path_details=[NodeInfo.from_node(node) for node in visited],
        total_distance=distances[goal],
        steps=steps,
        crosses_floors=len(floors) > 1,
        floors_traversed=sorted(floors, key=lambda key: (graph.floor_rank(key), key)),
    )
