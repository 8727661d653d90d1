"""
Seed data loader.

The store can be pre-populated from a local JSON file (default:
`data/seed/alerts.json`) holding unsafe zones, weather alerts and disaster alerts.
We validate it into typed Pydantic models so the store can assume a consistent
shape.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import TypeAdapter

from safesphere.core.env import resolve_project_path
from safesphere.domain.models import DisasterAlert, UnsafeZone, WeatherAlert

logger = logging.getLogger(__name__)

_ZONES_ADAPTER = TypeAdapter(list[UnsafeZone])
_WEATHER_ADAPTER = TypeAdapter(list[WeatherAlert])
_DISASTER_ADAPTER = TypeAdapter(list[DisasterAlert])


@dataclass
class SeedData:
    unsafe_zones: list[UnsafeZone] = field(default_factory=list)
    weather_alerts: list[WeatherAlert] = field(default_factory=list)
    disaster_alerts: list[DisasterAlert] = field(default_factory=list)


def load_seed(path: str | Path) -> SeedData:
    """Load and validate a seed JSON file; a missing file yields empty seed data."""
    resolved = resolve_project_path(path)
    if not resolved.is_file():
        logger.info("Seed file %s not found; starting with an empty store", resolved)
        return SeedData()
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid seed root object in {resolved}; expected a mapping.")
    return SeedData(
        unsafe_zones=_ZONES_ADAPTER.validate_python(payload.get("unsafe_zones") or []),
        weather_alerts=_WEATHER_ADAPTER.validate_python(payload.get("weather_alerts") or []),
        disaster_alerts=_DISASTER_ADAPTER.validate_python(payload.get("disaster_alerts") or []),
    )
