"""Room lookup and nearest-facility queries over an assembled building graph.

All functions are pure reads; the graph is never modified.
"""

from __future__ import annotations

from wayfinder.building_graph import BuildingGraph, Floor
from wayfinder.floor_schema import Node
from wayfinder.pathfinding import PathResult, find_shortest_path


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.lower()


def find_room(graph: BuildingGraph, query: str) -> list[Node]:
    """Rooms whose id, name, or room type contains `query`, ignoring case."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        node
        for node in graph.nodes.values()
        if _contains(node.id, needle) or _contains(node.name, needle) or _contains(node.room_type, needle)
    ]


def get_rooms_by_type(graph: BuildingGraph, room_type: str) -> list[Node]:
    needle = room_type.strip().lower()
    if not needle:
        return []
    return [node for node in graph.nodes.values() if _contains(node.room_type, needle)]


def get_rooms_by_type_on_floor(graph: BuildingGraph, room_type: str, floor: str) -> list[Node]:
    floor = str(floor)
    return [node for node in get_rooms_by_type(graph, room_type) if node.floor == floor]


def get_all_room_types(graph: BuildingGraph) -> list[str]:
    return sorted({node.room_type for node in graph.nodes.values()})


def get_rooms_on_floor(graph: BuildingGraph, floor: str) -> list[Node]:
    floor = str(floor)
    return [node for node in graph.nodes.values() if node.floor == floor]


def get_all_rooms(graph: BuildingGraph) -> list[Node]:
    return list(graph.nodes.values())


def get_floor_for_room(graph: BuildingGraph, room_id: str) -> str | None:
    """Floor key of a room, or None when the id is unknown."""
    resolved = graph.resolve_id(room_id)
    if resolved is None:
        return None
    return graph.nodes[resolved].floor


def get_floor_label(graph: BuildingGraph, floor: str) -> str:
    """Human-readable floor name; unknown floors fall back to the key itself."""
    floor = str(floor)
    for item in graph.floors:
        if item.key == floor:
            return item.label
    return floor


def get_all_floors(graph: BuildingGraph) -> list[Floor]:
    return list(graph.floors)


def _nearest(graph: BuildingGraph, start_id: str, candidates: list[Node]) -> PathResult | None:
    best: PathResult | None = None
    for candidate in candidates:
        result = find_shortest_path(graph, start_id, candidate.id)
        if not result.found:
            continue
        if best is None or result.total_distance < best.total_distance:
            best = result
    return best


def find_nearest_of_type(graph: BuildingGraph, start_id: str, room_type: str) -> PathResult | None:
    """Shortest route from `start_id` to any room of `room_type`.

    Returns None when no room of that type exists or none is reachable.
    Equal distances resolve to the earliest registered candidate.
    """
    return _nearest(graph, start_id, get_rooms_by_type(graph, room_type))


def find_nearest_of_type_same_floor(graph: BuildingGraph, start_id: str, room_type: str) -> PathResult | None:
    """Prefer a reachable room of `room_type` on the start's own floor.

    Falls back to the building-wide search only when no same-floor candidate
    is reachable, so a same-floor result wins even over a shorter cross-floor one.
    """
    floor = get_floor_for_room(graph, start_id)
    if floor is not None:
        same_floor = _nearest(graph, start_id, get_rooms_by_type_on_floor(graph, room_type, floor))
        if same_floor is not None:
            return same_floor
    return find_nearest_of_type(graph, start_id, room_type)
