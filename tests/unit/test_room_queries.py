"""Unit tests for room lookups and nearest-facility search."""

from __future__ import annotations

import pytest

from wayfinder.building_graph import BuildingGraph, Floor, FloorSource, build_building_graph, stairwell
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


def test_find_room_matches_id_name_and_type(campus_graph: BuildingGraph) -> None:
    expected = {
        node.id
        for node in campus_graph.nodes.values()
        if any("wc" in value.lower() for value in (node.id, node.name, node.room_type))
    }

    found = {node.id for node in find_room(campus_graph, "wc")}

    assert found == expected == {"1W030", "2W030", "3W030"}


def test_find_room_by_name_and_id_fragment(campus_graph: BuildingGraph) -> None:
    assert [n.id for n in find_room(campus_graph, "secretariat")] == ["1A020"]
    assert {n.id for n in find_room(campus_graph, "a02")} == {"1A020", "2A020"}
    assert find_room(campus_graph, "observatory") == []


def test_blank_query_matches_nothing(campus_graph: BuildingGraph) -> None:
    assert find_room(campus_graph, "") == []
    assert find_room(campus_graph, "   ") == []
    assert get_rooms_by_type(campus_graph, " ") == []


def test_rooms_by_type_is_case_insensitive_substring(campus_graph: BuildingGraph) -> None:
    assert {n.id for n in get_rooms_by_type(campus_graph, "stair")} == {"1K041", "2K041", "3K041"}
    assert [n.id for n in get_rooms_by_type_on_floor(campus_graph, "STAIRWELL", "2")] == ["2K041"]
    assert get_rooms_by_type_on_floor(campus_graph, "Library", "1") == []


def test_all_room_types_sorted_and_distinct(campus_graph: BuildingGraph) -> None:
    assert get_all_room_types(campus_graph) == [
        "Corridor",
        "Entrance",
        "Lecture Hall",
        "Library",
        "Lift Lobby",
        "Meeting Room",
        "Office",
        "Seminar Room",
        "Stairwell",
        "Unknown",
        "WC",
    ]


def test_floor_projections(campus_graph: BuildingGraph) -> None:
    assert len(get_all_rooms(campus_graph)) == 18
    assert {n.id for n in get_rooms_on_floor(campus_graph, "3")} == {"3K041", "3C001", "3M010", "3W030"}
    assert [f.key for f in get_all_floors(campus_graph)] == ["1", "2", "3"]


def test_floor_lookup_helpers(campus_graph: BuildingGraph) -> None:
    assert get_floor_for_room(campus_graph, "2b050") == "2"
    assert get_floor_for_room(campus_graph, "ZZZ999") is None
    assert get_floor_label(campus_graph, "1") == "Ground Floor"
    assert get_floor_label(campus_graph, "9") == "9"


def test_nearest_of_type_picks_minimum_distance(campus_graph: BuildingGraph) -> None:
    result = find_nearest_of_type(campus_graph, "2A020", "wc")

    assert result is not None
    assert result.path[-1] == "2W030"
    assert result.total_distance == pytest.approx(17.0)


def test_nearest_of_type_without_candidates_returns_none(campus_graph: BuildingGraph) -> None:
    assert find_nearest_of_type(campus_graph, "1A010", "Swimming Pool") is None
    assert find_nearest_of_type_same_floor(campus_graph, "1A010", "Swimming Pool") is None


def test_nearest_of_type_with_unknown_start_returns_none(campus_graph: BuildingGraph) -> None:
    assert find_nearest_of_type(campus_graph, "ZZZ999", "WC") is None
    assert find_nearest_of_type_same_floor(campus_graph, "ZZZ999", "WC") is None


def test_same_floor_falls_back_to_other_floors(campus_graph: BuildingGraph) -> None:
    result = find_nearest_of_type_same_floor(campus_graph, "3M010", "library")

    assert result is not None
    assert result.path[-1] == "2B050"
    assert result.crosses_floors is True
    assert result.total_distance == pytest.approx(41.0)


def test_same_floor_candidate_wins_over_closer_cross_floor_room() -> None:
    """A reachable same-floor match is preferred even when a cross-floor one is nearer."""
    floor_one = FloorSource(
        floor=Floor(key="1", label="Floor 1"),
        raw={
            "nodes": [{"id": "1A", "type": "Office"}, {"id": "1K041", "type": "Stairwell"}, {"id": "1W", "type": "WC"}],
            "edges": [
                {"from": "1A", "to": "1K041", "distance": 1},
                {"from": "1A", "to": "1W", "distance": 50},
            ],
        },
    )
    floor_two = FloorSource(
        floor=Floor(key="2", label="Floor 2"),
        raw={
            "nodes": [{"id": "2K041", "type": "Stairwell"}, {"id": "2W", "type": "WC"}],
            "edges": [{"from": "2K041", "to": "2W", "distance": 1}],
        },
    )
    graph = build_building_graph([floor_one, floor_two], circulation=[stairwell("K041")])

    same_floor = find_nearest_of_type_same_floor(graph, "1A", "WC")
    anywhere = find_nearest_of_type(graph, "1A", "WC")

    assert same_floor is not None and anywhere is not None
    assert same_floor.path[-1] == "1W"
    assert same_floor.crosses_floors is False
    assert anywhere.path[-1] == "2W"
    assert anywhere.total_distance == pytest.approx(17.0)


def test_same_floor_unreachable_candidate_falls_back() -> None:
    floor_one = FloorSource(
        floor=Floor(key="1", label="Floor 1"),
        raw={
            "nodes": [{"id": "1A"}, {"id": "1K041"}, {"id": "1W", "type": "WC"}],
            "edges": [{"from": "1A", "to": "1K041", "distance": 2}],
        },
    )
    floor_two = FloorSource(
        floor=Floor(key="2", label="Floor 2"),
        raw={"nodes": [{"id": "2K041"}, {"id": "2W", "type": "WC"}], "edges": [{"from": "2K041", "to": "2W"}]},
    )
    graph = build_building_graph([floor_one, floor_two], circulation=[stairwell("K041")])

    result = find_nearest_of_type_same_floor(graph, "1A", "WC")

    assert result is not None
    assert result.path == ["1A", "1K041", "2K041", "2W"]
    assert result.total_distance == pytest.approx(27.0)
