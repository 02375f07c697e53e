"""FastAPI routes exposing room lookup and multi-floor routing over the building graph.

The graph is built once at startup. `POST /reload` rebuilds it from the data
directory and swaps the shared reference in a single assignment, so concurrent
readers only ever see a complete graph.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from wayfinder.building_graph import BuildingGraph
from wayfinder.config import get_settings
from wayfinder.floor_schema import Node
from wayfinder.formatting import building_summary, format_path_for_ai
from wayfinder.loader import load_building
from wayfinder.logger import get_logger, set_log_level
from wayfinder.pathfinding import PathResult, find_shortest_path
from wayfinder.room_queries import (
    find_nearest_of_type,
    find_nearest_of_type_same_floor,
    find_room,
    get_all_floors,
    get_all_room_types,
    get_all_rooms,
    get_floor_for_room,
    get_floor_label,
    get_rooms_by_type,
    get_rooms_by_type_on_floor,
    get_rooms_on_floor,
)

logger = get_logger(__name__)


@dataclass
class ServiceState:
    """Holds the current immutable building graph."""

    graph: BuildingGraph | None = None
    data_dir: Path | None = None
    reload_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


STATE = ServiceState()


class PathRequest(BaseModel):
    """Request payload for room-to-room routing."""

    start_room_id: str = Field(..., min_length=1)
    goal_room_id: str = Field(..., min_length=1)


class NearestRequest(BaseModel):
    """Request payload for nearest-facility search."""

    start_room_id: str = Field(..., min_length=1)
    room_type: str = Field(..., min_length=1)
    same_floor: bool = True


class RouteResponse(BaseModel):
    """Structured route plus its text rendering."""

    result: dict[str, Any]
    route_text: str


def reload_building(data_dir: str | Path | None = None) -> BuildingGraph:
    """Rebuild the graph and swap it in once fully constructed."""
    with STATE.reload_lock:
        source = data_dir if data_dir is not None else STATE.data_dir
        graph = load_building(source)
        STATE.graph = graph
        if data_dir is not None:
            STATE.data_dir = Path(data_dir)
    return graph


def _graph_or_400() -> BuildingGraph:
    """Get current building graph or raise 400."""
    graph = STATE.graph
    if graph is None:
        raise HTTPException(status_code=400, detail="No building graph loaded yet")
    return graph


def _serialize_room(node: Node) -> dict[str, Any]:
    return asdict(node)


def _route_response(result: PathResult) -> RouteResponse:
    return RouteResponse(result=result.to_dict(), route_text=format_path_for_ai(result))


def create_app(load_on_startup: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    set_log_level(settings.log_level)

    if load_on_startup and STATE.graph is None:
        reload_building(STATE.data_dir or settings.data_dir)

    app = FastAPI(title="Wayfinder API", version="1.0.0")

    raw_origins = settings.cors_origins
    if raw_origins == "*":
        cors_origins = ["*"]
        allow_credentials = False
    else:
        cors_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        allow_credentials = True

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, Any]:
        graph = STATE.graph
        return {
            "status": "ok",
            "version": app.version,
            "building": graph.name if graph is not None else None,
            "room_count": len(graph.nodes) if graph is not None else 0,
        }

    @app.get("/floors")
    async def get_floors() -> dict[str, Any]:
        """Return floors in building order with room counts."""
        graph = _graph_or_400()
        return {
            "building": graph.name,
            "floors": [
                {
                    "key": floor.key,
                    "label": get_floor_label(graph, floor.key),
                    "room_count": len(get_rooms_on_floor(graph, floor.key)),
                }
                for floor in get_all_floors(graph)
            ],
        }

    @app.get("/rooms")
    async def get_rooms(
        floor: str | None = Query(default=None),
        room_type: str | None = Query(default=None, alias="type"),
        q: str | None = Query(default=None),
    ) -> dict[str, Any]:
        """Return rooms, optionally filtered by floor, type, or free-text query."""
        graph = _graph_or_400()

        if floor is not None and floor not in {f.key for f in graph.floors}:
            raise HTTPException(status_code=404, detail=f"Floor '{floor}' was not found")

        if q:
            rooms = find_room(graph, q)
            if floor is not None:
                rooms = [room for room in rooms if room.floor == floor]
        elif room_type and floor is not None:
            rooms = get_rooms_by_type_on_floor(graph, room_type, floor)
        elif room_type:
            rooms = get_rooms_by_type(graph, room_type)
        elif floor is not None:
            rooms = get_rooms_on_floor(graph, floor)
        else:
            rooms = get_all_rooms(graph)

        return {"building": graph.name, "rooms": [_serialize_room(room) for room in rooms]}

    @app.get("/room-types")
    async def get_room_types() -> dict[str, Any]:
        graph = _graph_or_400()
        return {"room_types": get_all_room_types(graph)}

    @app.get("/rooms/{room_id}/floor")
    async def get_room_floor(room_id: str) -> dict[str, Any]:
        """Return floor key and label for one room."""
        graph = _graph_or_400()
        floor = get_floor_for_room(graph, room_id)
        if floor is None:
            raise HTTPException(status_code=404, detail=f"Room '{room_id}' was not found")
        return {"room_id": room_id, "floor": floor, "floor_label": get_floor_label(graph, floor)}

    @app.post("/find-path", response_model=RouteResponse)
    async def find_path(payload: PathRequest) -> RouteResponse:
        """Compute shortest room-to-room route across floors."""
        graph = _graph_or_400()

        for label, room_id in (("start", payload.start_room_id), ("goal", payload.goal_room_id)):
            if graph.resolve_id(room_id) is None:
                raise HTTPException(status_code=404, detail=f"{label}_room_id '{room_id}' was not found")

        result = find_shortest_path(graph, payload.start_room_id, payload.goal_room_id)
        if not result.found:
            raise HTTPException(status_code=404, detail="No route found")
        return _route_response(result)

    @app.post("/nearest", response_model=RouteResponse)
    async def nearest(payload: NearestRequest) -> RouteResponse:
        """Route to the nearest room of a type, preferring the start floor when requested."""
        graph = _graph_or_400()

        if graph.resolve_id(payload.start_room_id) is None:
            raise HTTPException(status_code=404, detail=f"start_room_id '{payload.start_room_id}' was not found")

        if payload.same_floor:
            result = find_nearest_of_type_same_floor(graph, payload.start_room_id, payload.room_type)
        else:
            result = find_nearest_of_type(graph, payload.start_room_id, payload.room_type)

        if result is None:
            raise HTTPException(status_code=404, detail=f"No reachable room of type '{payload.room_type}'")
        return _route_response(result)

    @app.get("/summary")
    async def summary() -> dict[str, Any]:
        graph = _graph_or_400()
        return {"building": graph.name, "summary": building_summary(graph)}

    @app.post("/reload")
    def reload() -> dict[str, Any]:
        """Rebuild the building graph from the configured data directory."""
        try:
            graph = reload_building()
        except FileNotFoundError as exc:
            raise HTTPException(status_code=400, detail=f"Building reload failed: {exc}") from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Building reload failed: {exc}") from exc
        except Exception as exc:  # pragma: no cover - safety net
            logger.exception("Unexpected building reload error")
            raise HTTPException(status_code=500, detail=f"Unexpected building reload error: {exc}") from exc

        return {
            "message": "Building reloaded successfully",
            "building": graph.name,
            "floor_count": len(graph.floors),
            "room_count": len(graph.nodes),
        }

    return app
