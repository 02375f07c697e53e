"""Load a building from a manifest plus per-floor JSON files.

Manifest (``building.json``) schema:
    {
      "name": "Campus Building",
      "floors": [{"key": "1", "label": "Floor 1", "file": "floor1.json"}],
      "vertical_circulation": [
        {"suffix": "K041", "kind": "stairwell"},
        {"suffix": "L010", "kind": "lift", "weight": 10}
      ]
    }

Floors are listed lowest first; that order drives inter-floor linking.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from wayfinder.building_graph import (
    LIFT,
    STAIRWELL,
    BuildingGraph,
    Floor,
    FloorSource,
    VerticalCirculation,
    build_building_graph,
)
from wayfinder.config import Settings, get_settings
from wayfinder.logger import get_logger

logger = get_logger(__name__)

MANIFEST_NAME = "building.json"


class FloorEntry(BaseModel):
    """Manifest entry for one floor file."""

    key: str = Field(..., min_length=1)
    label: str | None = None
    file: str = Field(..., min_length=1)

    @field_validator("key", mode="before")
    @classmethod
    def coerce_key(cls, value: Any) -> Any:
        """Accept numeric floor keys such as ``2``."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CirculationEntry(BaseModel):
    """Manifest entry for a stairwell or lift-lobby suffix."""

    suffix: str = Field(..., min_length=1)
    kind: Literal["stairwell", "lift"] = STAIRWELL
    weight: float | None = Field(default=None, gt=0)


class BuildingManifest(BaseModel):
    name: str = "Building"
    floors: list[FloorEntry] = Field(..., min_length=1)
    vertical_circulation: list[CirculationEntry] = Field(default_factory=list)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Missing building data file: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} must be valid JSON") from exc


def parse_manifest(raw: Any) -> BuildingManifest:
    """Validate a decoded manifest payload."""
    try:
        return BuildingManifest.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid building manifest: {exc}") from exc


def circulation_from_manifest(manifest: BuildingManifest, settings: Settings) -> list[VerticalCirculation]:
    """Resolve manifest circulation entries, filling weights from settings."""
    default_weights = {STAIRWELL: settings.stairwell_weight, LIFT: settings.lift_weight}
    return [
        VerticalCirculation(
            suffix=entry.suffix,
            kind=entry.kind,
            weight=entry.weight if entry.weight is not None else default_weights[entry.kind],
        )
        for entry in manifest.vertical_circulation
    ]


def load_building(data_dir: str | Path | None = None, settings: Settings | None = None) -> BuildingGraph:
    """Build the building graph from a data directory.

    Args:
        data_dir: Directory containing ``building.json`` and floor files.
            Defaults to the configured data directory.
        settings: Runtime settings; defaults to process settings.

    Returns:
        Assembled BuildingGraph.

    Raises:
        FileNotFoundError: If the manifest or a floor file is missing.
        ValueError: If the manifest or any floor payload is invalid.
    """
    settings = settings or get_settings()
    root = Path(data_dir) if data_dir is not None else settings.data_dir

    manifest = parse_manifest(_read_json(root / MANIFEST_NAME))

    sources = [
        FloorSource(
            floor=Floor(key=entry.key, label=entry.label or f"Floor {entry.key}"),
            raw=_read_json(root / entry.file),
        )
        for entry in manifest.floors
    ]

    logger.info("Loading building data", extra={"data_dir": str(root), "floor_files": len(sources)})

    return build_building_graph(
        sources,
        circulation=circulation_from_manifest(manifest, settings),
        name=manifest.name,
        default_edge_distance=settings.default_edge_distance_m,
    )
