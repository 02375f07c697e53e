"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

BUNDLED_DATA_DIR = Path(__file__).resolve().parent / "data"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{raw}'") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved once per process."""

    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("WAYFINDER_DATA_DIR", "").strip() or BUNDLED_DATA_DIR)
    )
    default_edge_distance_m: float = field(
        default_factory=lambda: _env_float("WAYFINDER_DEFAULT_EDGE_DISTANCE_M", 10.0)
    )
    stairwell_weight: float = field(default_factory=lambda: _env_float("WAYFINDER_STAIRWELL_WEIGHT", 15.0))
    lift_weight: float = field(default_factory=lambda: _env_float("WAYFINDER_LIFT_WEIGHT", 10.0))
    log_level: str = field(default_factory=lambda: os.getenv("WAYFINDER_LOG_LEVEL", "INFO").upper())
    cors_origins: str = field(default_factory=lambda: os.getenv("WAYFINDER_CORS_ORIGINS", "*").strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
