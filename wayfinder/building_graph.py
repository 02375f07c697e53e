"""Multi-floor building graph assembly.

Merges normalized per-floor nodes and corridor edges into one graph and links
vertical circulation (stairwells, lift lobbies) between floors adjacent in the
building's floor order.

Vertical circulation convention:
- A stairwell or lift lobby on floor ``k`` has id ``f"{k}{suffix}"``.
- The same suffix on the next floor up marks the matching landing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from wayfinder.floor_schema import DEFAULT_EDGE_DISTANCE_M, Edge, Node, normalize_floor
from wayfinder.logger import get_logger

logger = get_logger(__name__)

STAIRWELL = "stairwell"
LIFT = "lift"
STAIRWELL_WEIGHT_M = 15.0
LIFT_WEIGHT_M = 10.0


class DuplicateNodeError(ValueError):
    """Raised when two nodes share an identifier."""


@dataclass(frozen=True, slots=True)
class Floor:
    """One building level in floor order."""

    key: str
    label: str


@dataclass(frozen=True, slots=True)
class FloorSource:
    """Raw floor payload paired with its floor metadata."""

    floor: Floor
    raw: dict[str, Any]


@dataclass(frozen=True, slots=True)
class VerticalCirculation:
    """Identifier suffix shared by a stairwell or lift lobby across floors."""

    suffix: str
    kind: str = STAIRWELL
    weight: float = STAIRWELL_WEIGHT_M

    def __post_init__(self) -> None:
        if not self.suffix:
            raise ValueError("Vertical circulation suffix cannot be empty")
        if self.kind not in (STAIRWELL, LIFT):
            raise ValueError(f"Vertical circulation kind must be '{STAIRWELL}' or '{LIFT}'")
        if self.weight <= 0:
            raise ValueError("Vertical circulation weight must be > 0")


def stairwell(suffix: str, weight: float = STAIRWELL_WEIGHT_M) -> VerticalCirculation:
    return VerticalCirculation(suffix=suffix, kind=STAIRWELL, weight=weight)


def lift_lobby(suffix: str, weight: float = LIFT_WEIGHT_M) -> VerticalCirculation:
    return VerticalCirculation(suffix=suffix, kind=LIFT, weight=weight)


@dataclass(frozen=True)
class BuildingGraph:
    """Read-only room graph shared by every query.

    ``nodes`` and ``adjacency`` iterate in node registration order, which makes
    tie-breaking in path and nearest-room searches deterministic.
    """

    name: str
    floors: tuple[Floor, ...]
    nodes: Mapping[str, Node]
    adjacency: Mapping[str, Mapping[str, float]]
    floor_links: tuple[tuple[str, str, str], ...] = ()
    _ids_by_lower: Mapping[str, str] = field(default_factory=dict, repr=False)
    _floor_rank: Mapping[str, int] = field(default_factory=dict, repr=False)

    def resolve_id(self, node_id: str) -> str | None:
        """Resolve a caller-supplied id to its stored spelling, ignoring case."""
        if node_id is None:
            return None
        return self._ids_by_lower.get(str(node_id).strip().lower())

    def floor_rank(self, floor_key: str) -> int:
        """Position of a floor in building order; unknown floors sort last."""
        return self._floor_rank.get(floor_key, len(self._floor_rank))

    def edge_distance(self, source: str, target: str) -> float | None:
        return self.adjacency.get(source, {}).get(target)

    @property
    def edge_count(self) -> int:
        return sum(len(neighbors) for neighbors in self.adjacency.values())


def _freeze_adjacency(adjacency: dict[str, dict[str, float]]) -> Mapping[str, Mapping[str, float]]:
    return MappingProxyType({node_id: MappingProxyType(dict(nbrs)) for node_id, nbrs in adjacency.items()})


def _add_edge(adjacency: dict[str, dict[str, float]], edge: Edge) -> bool:
    if edge.source not in adjacency or edge.target not in adjacency:
        return False
    adjacency[edge.source][edge.target] = edge.distance
    if edge.bidirectional:
        adjacency[edge.target][edge.source] = edge.distance
    return True


def _link_floors(
    floors: list[Floor],
    ids_by_lower: dict[str, str],
    adjacency: dict[str, dict[str, float]],
    circulation: Iterable[VerticalCirculation],
) -> list[tuple[str, str, str]]:
    """Add synthetic edges between matching circulation nodes on adjacent floors."""
    links: list[tuple[str, str, str]] = []
    circulation = list(circulation)

    for lower, upper in zip(floors, floors[1:]):
        for item in circulation:
            lower_id = ids_by_lower.get(f"{lower.key}{item.suffix}".lower())
            upper_id = ids_by_lower.get(f"{upper.key}{item.suffix}".lower())
            if lower_id is None or upper_id is None:
                continue

            _add_edge(adjacency, Edge(source=lower_id, target=upper_id, bidirectional=True, distance=item.weight))
            links.append((lower_id, upper_id, item.kind))

    return links


def build_building_graph(
    floor_sources: Iterable[FloorSource],
    circulation: Iterable[VerticalCirculation] = (),
    name: str = "Building",
    default_edge_distance: float = DEFAULT_EDGE_DISTANCE_M,
) -> BuildingGraph:
    """Assemble one immutable graph from ordered per-floor payloads.

    Args:
        floor_sources: Floor payloads in building order, lowest floor first.
        circulation: Stairwell and lift-lobby suffixes used to link adjacent floors.
        name: Building display name.
        default_edge_distance: Distance for edges whose payload omits one.

    Returns:
        Frozen BuildingGraph.

    Raises:
        FloorSchemaError: If a floor payload cannot be decoded.
        DuplicateNodeError: If a node id (compared case-insensitively) repeats.
        ValueError: If floor keys repeat.
    """
    sources = list(floor_sources)
    floors: list[Floor] = []
    nodes: dict[str, Node] = {}
    ids_by_lower: dict[str, str] = {}
    adjacency: dict[str, dict[str, float]] = {}
    floor_edges: list[list[Edge]] = []

    for source in sources:
        floor = source.floor
        if any(f.key == floor.key for f in floors):
            raise ValueError(f"Floor key '{floor.key}' is defined more than once")
        floors.append(floor)

        floor_nodes, edges = normalize_floor(
            source.raw,
            floor_key=floor.key,
            floor_label=floor.label,
            default_distance=default_edge_distance,
        )
        for node in floor_nodes:
            key = node.id.lower()
            if key in ids_by_lower:
                existing = nodes[ids_by_lower[key]]
                raise DuplicateNodeError(
                    f"Node id '{node.id}' on floor {floor.key} collides with '{existing.id}' on floor {existing.floor}"
                )
            ids_by_lower[key] = node.id
            nodes[node.id] = node
            adjacency[node.id] = {}
        floor_edges.append(edges)

    skipped = 0
    for edges in floor_edges:
        for edge in edges:
            if not _add_edge(adjacency, edge):
                skipped += 1
                logger.debug(
                    "Skipping edge with unknown endpoint",
                    extra={"source": edge.source, "target": edge.target},
                )

    links = _link_floors(floors, ids_by_lower, adjacency, circulation)

    graph = BuildingGraph(
        name=name,
        floors=tuple(floors),
        nodes=MappingProxyType(nodes),
        adjacency=_freeze_adjacency(adjacency),
        floor_links=tuple(links),
        _ids_by_lower=MappingProxyType(ids_by_lower),
        _floor_rank=MappingProxyType({f.key: idx for idx, f in enumerate(floors)}),
    )

    logger.info(
        "Building graph assembled",
        extra={
            "building": name,
            "floors": len(floors),
            "nodes": len(nodes),
            "directed_edges": graph.edge_count,
            "floor_links": len(links),
            "skipped_edges": skipped,
        },
    )
    return graph
