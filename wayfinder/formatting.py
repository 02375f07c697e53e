"""Text rendering of routes and building summaries for language-model callers."""

from __future__ import annotations

from collections import Counter

from wayfinder.building_graph import BuildingGraph
from wayfinder.pathfinding import PathResult

PATH_NOT_FOUND = "PATH_NOT_FOUND: No valid path exists between these locations."


def _meters(value: float) -> str:
    return f"{value:g}m"


def format_path_for_ai(result: PathResult) -> str:
    """Render a path result as a deterministic plain-text block."""
    if not result.found:
        return PATH_NOT_FOUND

    floor_labels: list[str] = []
    for detail in result.path_details:
        if detail.floor_label not in floor_labels:
            floor_labels.append(detail.floor_label)

    lines = [
        "PATH_FOUND:",
        f"- Total distance: {round(result.total_distance)} meters",
        f"- Number of steps: {len(result.steps)}",
    ]
    if result.crosses_floors:
        lines.append(f"- Crosses floors: yes ({' -> '.join(floor_labels)})")
    else:
        lines.append(f"- Crosses floors: no ({floor_labels[0]})")

    lines.extend(["", "ROUTE:"])
    for idx, step in enumerate(result.steps, start=1):
        marker = "[FLOOR CHANGE] " if step.is_floor_change else ""
        lines.append(
            f"{idx}. {marker}From {step.from_id} ({step.from_type}, {step.from_floor_label}) "
            f"-> {step.to_id} ({step.to_type}, {step.to_floor_label}) - {_meters(step.distance)}"
        )

    lines.extend(["", "ROOMS PASSED:"])
    for room in result.path_details:
        area = f" ({room.area:g}m²)" if room.area is not None else ""
        lines.append(f"- {room.id}: {room.room_type}{area} [{room.floor_label}]")

    return "\n".join(lines) + "\n"


def building_summary(graph: BuildingGraph) -> str:
    """Summarize room counts per floor and per room type."""
    nodes = list(graph.nodes.values())
    per_floor = Counter(node.floor for node in nodes)
    per_type = Counter(node.room_type for node in nodes)

    lines = [
        f"Building summary: {graph.name}",
        f"- Floors: {len(graph.floors)}",
        f"- Total rooms: {len(nodes)}",
        f"- Room types: {', '.join(sorted(per_type))}",
        "",
        "Rooms per floor:",
    ]
    for floor in graph.floors:
        lines.append(f"- {floor.label} ({floor.key}): {per_floor.get(floor.key, 0)}")

    lines.extend(["", "Room counts by type:"])
    for room_type in sorted(per_type):
        lines.append(f"- {room_type}: {per_type[room_type]}")

    return "\n".join(lines) + "\n"
