"""Pytest global fixtures and test isolation hooks."""

from __future__ import annotations

from typing import Any

import pytest

from wayfinder.api import STATE
from wayfinder.building_graph import BuildingGraph, Floor, FloorSource, build_building_graph, stairwell
from wayfinder.config import BUNDLED_DATA_DIR
from wayfinder.loader import load_building


@pytest.fixture(autouse=True)
def reset_service_state() -> None:
    """Reset in-memory API state before each test."""
    STATE.graph = None
    STATE.data_dir = None


def _floor_one() -> dict[str, Any]:
    return {
        "graph": {
            "nodes": [
                {"id": "1A010", "label_raw": "1A010\nOffice", "room_type": "Office", "area_m2": 20},
                {"id": "1K041", "label_raw": "1K041\nStairwell", "room_type": "Stairwell"},
            ],
            "edges": [{"source": "1A010", "target": "1K041", "bidirectional": True, "distance_m": 5}],
        }
    }


def _floor_two() -> dict[str, Any]:
    return {
        "nodes": [
            {"id": "2K041", "label": "2K041 Stairwell", "type": "Stairwell"},
            {"id": "2A020", "label": "2A020 Seminar Room", "type": "Seminar Room", "area": 45},
        ],
        "edges": [{"from": "2K041", "to": "2A020", "distance": 8}],
    }


@pytest.fixture()
def two_floor_sources() -> list[FloorSource]:
    """Two floors in different schemas joined only by stairwell K041."""
    return [
        FloorSource(floor=Floor(key="1", label="Floor 1"), raw=_floor_one()),
        FloorSource(floor=Floor(key="2", label="Floor 2"), raw=_floor_two()),
    ]


@pytest.fixture()
def two_floor_graph(two_floor_sources: list[FloorSource]) -> BuildingGraph:
    return build_building_graph(two_floor_sources, circulation=[stairwell("K041")], name="Test Building")


@pytest.fixture()
def campus_graph() -> BuildingGraph:
    """Bundled three-floor sample building."""
    return load_building(BUNDLED_DATA_DIR)
