"""Per-floor schema normalization into canonical room nodes and corridor edges.

Purpose:
- Decode raw floor graph payloads whose field names differ between floors.
- Apply explicit defaults only for optional fields (room type, area, distance, direction).
- Fail fast on missing required collections or identifiers.

Usage example:
    >>> from wayfinder.floor_schema import normalize_floor
    >>> raw = {"nodes": [{"id": "1A010", "type": "Office"}], "edges": []}
    >>> nodes, edges = normalize_floor(raw, floor_key="1", floor_label="Floor 1")
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_EDGE_DISTANCE_M = 10.0
UNKNOWN_ROOM_TYPE = "Unknown"

RawFloor = dict[str, Any]


class FloorSchemaError(ValueError):
    """Raised when a raw floor payload cannot be decoded."""


@dataclass(frozen=True, slots=True)
class Node:
    """Room or circulation point on one floor."""

    id: str
    name: str
    room_type: str
    area: float | None
    floor: str
    floor_label: str


@dataclass(frozen=True, slots=True)
class Edge:
    """Walkable connection between two nodes."""

    source: str
    target: str
    bidirectional: bool = True
    distance: float = DEFAULT_EDGE_DISTANCE_M


_LABEL_SPLIT = re.compile(r"\r?\n|\s+[-–—]\s+")


def _require_list(container: dict[str, Any], key: str, context: str) -> list[Any]:
    value = container.get(key)
    if not isinstance(value, list):
        raise FloorSchemaError(f"{context} must include a '{key}' list")
    return value


def _require_str(record: dict[str, Any], keys: tuple[str, ...], context: str) -> str:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    raise FloorSchemaError(f"{context} is missing required field '{keys[0]}'")


def _first_present(record: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _positive_float(value: Any, field_name: str, context: str) -> float:
    if isinstance(value, bool):
        raise FloorSchemaError(f"{context}.{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise FloorSchemaError(f"{context}.{field_name} must be a number") from exc
    if not math.isfinite(number) or number <= 0:
        raise FloorSchemaError(f"{context}.{field_name} must be > 0")
    return number


def _optional_bool(value: Any, field_name: str, context: str) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise FloorSchemaError(f"{context}.{field_name} must be a boolean")
    return value


def _optional_area(value: Any, context: str) -> float | None:
    if value is None or value == "":
        return None
    return _positive_float(value, "area", context)


def _edge_distance(value: Any, context: str, default_distance: float) -> float:
    if value is None or value == "":
        return float(default_distance)
    return _positive_float(value, "distance", context)


def derive_name(
    node_id: str,
    name: Any = None,
    label_raw: Any = None,
    label: Any = None,
) -> str:
    """Derive a display name for a node.

    Precedence: explicit name, first non-empty segment of a multi-line or
    dash-delimited raw label (ignoring a segment that only repeats the id),
    text after the first token of a generic label, else an empty string.
    """
    if name is not None and str(name).strip():
        return str(name).strip()

    if label_raw is not None:
        for segment in _LABEL_SPLIT.split(str(label_raw)):
            segment = segment.strip()
            if segment and segment.lower() != node_id.lower():
                return segment

    if label is not None:
        parts = str(label).strip().split(None, 1)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()

    return ""


def _normalize_graph_export(
    raw: RawFloor,
    floor_key: str,
    floor_label: str,
    default_distance: float,
) -> tuple[list[Node], list[Edge]]:
    """Decode the floor-plan exporter shape: ``{"graph": {"nodes", "edges"}}``."""
    graph = raw.get("graph")
    if not isinstance(graph, dict):
        raise FloorSchemaError(f"floor {floor_key}: 'graph' must be an object")

    nodes: list[Node] = []
    for idx, item in enumerate(_require_list(graph, "nodes", f"floor {floor_key} graph")):
        context = f"floor {floor_key} node[{idx}]"
        if not isinstance(item, dict):
            raise FloorSchemaError(f"{context} must be an object")
        node_id = _require_str(item, ("id",), context)
        nodes.append(
            Node(
                id=node_id,
                name=derive_name(node_id, item.get("name"), item.get("label_raw"), item.get("label")),
                room_type=str(item.get("room_type") or UNKNOWN_ROOM_TYPE),
                area=_optional_area(item.get("area_m2"), context),
                floor=floor_key,
                floor_label=floor_label,
            )
        )

    edges: list[Edge] = []
    for idx, item in enumerate(_require_list(graph, "edges", f"floor {floor_key} graph")):
        context = f"floor {floor_key} edge[{idx}]"
        if not isinstance(item, dict):
            raise FloorSchemaError(f"{context} must be an object")
        bidirectional = _optional_bool(item.get("bidirectional"), "bidirectional", context)
        edges.append(
            Edge(
                source=_require_str(item, ("source",), context),
                target=_require_str(item, ("target",), context),
                bidirectional=True if bidirectional is None else bidirectional,
                distance=_edge_distance(item.get("distance_m"), context, default_distance),
            )
        )

    return nodes, edges


def _normalize_flat(
    raw: RawFloor,
    floor_key: str,
    floor_label: str,
    default_distance: float,
) -> tuple[list[Node], list[Edge]]:
    """Decode the flat shape: top-level ``nodes``/``edges`` with aliased field names."""
    nodes: list[Node] = []
    for idx, item in enumerate(_require_list(raw, "nodes", f"floor {floor_key}")):
        context = f"floor {floor_key} node[{idx}]"
        if not isinstance(item, dict):
            raise FloorSchemaError(f"{context} must be an object")
        node_id = _require_str(item, ("id",), context)
        room_type = _first_present(item, ("type", "room_type"))
        nodes.append(
            Node(
                id=node_id,
                name=derive_name(node_id, item.get("name"), item.get("label_raw"), item.get("label")),
                room_type=str(room_type) if room_type not in (None, "") else UNKNOWN_ROOM_TYPE,
                area=_optional_area(_first_present(item, ("area", "area_m2")), context),
                floor=floor_key,
                floor_label=floor_label,
            )
        )

    edges: list[Edge] = []
    for idx, item in enumerate(_require_list(raw, "edges", f"floor {floor_key}")):
        context = f"floor {floor_key} edge[{idx}]"
        if not isinstance(item, dict):
            raise FloorSchemaError(f"{context} must be an object")

        bidirectional = _optional_bool(item.get("bidirectional"), "bidirectional", context)
        directed = _optional_bool(item.get("directed"), "directed", context)
        if bidirectional is None:
            bidirectional = True if directed is None else not directed

        edges.append(
            Edge(
                source=_require_str(item, ("source", "from"), context),
                target=_require_str(item, ("target", "to"), context),
                bidirectional=bidirectional,
                distance=_edge_distance(
                    _first_present(item, ("distance", "distance_m")),
                    context,
                    default_distance,
                ),
            )
        )

    return nodes, edges


SchemaAdapter = Callable[[RawFloor, str, str, float], tuple[list[Node], list[Edge]]]

SCHEMA_ADAPTERS: dict[str, SchemaAdapter] = {
    "graph_export": _normalize_graph_export,
    "flat": _normalize_flat,
}


def detect_schema(raw: RawFloor) -> str:
    """Return the adapter name for a raw floor payload."""
    if not isinstance(raw, dict):
        raise FloorSchemaError("Floor payload must be a JSON object")

    declared = raw.get("schema")
    if declared is not None:
        if declared not in SCHEMA_ADAPTERS:
            raise FloorSchemaError(f"Unknown floor schema '{declared}'")
        return str(declared)

    if "graph" in raw:
        return "graph_export"
    if "nodes" in raw or "edges" in raw:
        return "flat"
    raise FloorSchemaError("Floor payload must include node and edge collections")


def normalize_floor(
    raw: RawFloor,
    floor_key: str,
    floor_label: str,
    default_distance: float = DEFAULT_EDGE_DISTANCE_M,
) -> tuple[list[Node], list[Edge]]:
    """Normalize one floor payload into canonical nodes and edges.

    Args:
        raw: Floor payload in any known schema.
        floor_key: Floor key stamped onto every node.
        floor_label: Human-readable floor name stamped onto every node.
        default_distance: Edge distance used when the payload omits one.

    Returns:
        Tuple of (nodes, edges) in payload order.

    Raises:
        FloorSchemaError: If required collections or fields are missing or invalid.
    """
    adapter = SCHEMA_ADAPTERS[detect_schema(raw)]
    return adapter(raw, str(floor_key), str(floor_label), default_distance)
