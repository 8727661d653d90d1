# src/safesphere/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/safesphere/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `SAFESPHERE_CONFIG_PATH` (replaces the packaged defaults)
- a small whitelist of environment variables (`SAFESPHERE_LOG_LEVEL`, `SAFESPHERE_SEED_PATH`)

Design rule:
- Tuning knobs (radii, thresholds, speeds) live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from safesphere.core.env import load_dotenv_if_present
from safesphere.scoring.route_safety import RouteScoringConfig


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `safesphere.config`."""
    text = resources.files("safesphere.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "SafeSphere"
    timezone: str = "UTC"
    log_level: str = "INFO"


class StorageSettings(BaseModel):
    seed_path: str = "data/seed/alerts.json"


class ProximitySettings(BaseModel):
    km_per_degree: float = Field(111.0, gt=0)


class RadiusSettings(BaseModel):
    default_radius_km: float = Field(10, gt=0)
    max_radius_km: float = Field(500, gt=0)

    @model_validator(mode="after")
    def _validate_default_within_max(self) -> "RadiusSettings":
        if self.default_radius_km > self.max_radius_km:
            raise ValueError("default_radius_km must not exceed max_radius_km")
        return self


class DisasterAlertSettings(RadiusSettings):
    default_radius_km: float = Field(100, gt=0)
    max_radius_km: float = Field(1000, gt=0)
    critical_severities: list[str] = Field(default_factory=lambda: ["Extreme", "Severe"])
    recent_limit: int = Field(10, ge=0)


class RoutingSettings(BaseModel):
    search_radius_km: float = Field(10, gt=0)
    safe_distance_m: float = Field(5000, gt=0)
    unsafe_distance_m: float = Field(100, ge=0)
    average_speed_mps: float = Field(15, gt=0)
    nearby_zones_limit: int = Field(5, ge=0)

    @model_validator(mode="after")
    def _validate_thresholds(self) -> "RoutingSettings":
        if self.unsafe_distance_m > self.safe_distance_m:
            raise ValueError("routing.unsafe_distance_m must not exceed routing.safe_distance_m")
        return self

    def scoring_config(self) -> RouteScoringConfig:
        return RouteScoringConfig(
            safe_distance_m=self.safe_distance_m,
            unsafe_distance_m=self.unsafe_distance_m,
            average_speed_mps=self.average_speed_mps,
            nearby_zones_limit=self.nearby_zones_limit,
        )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    proximity: ProximitySettings = Field(default_factory=ProximitySettings)
    unsafe_zones: RadiusSettings = Field(default_factory=lambda: RadiusSettings(default_radius_km=10, max_radius_km=500))
    weather_alerts: RadiusSettings = Field(default_factory=lambda: RadiusSettings(default_radius_km=50, max_radius_km=500))
    disaster_alerts: DisasterAlertSettings = Field(default_factory=DisasterAlertSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Only the variables below are honored.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("SAFESPHERE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    seed_path = os.getenv("SAFESPHERE_SEED_PATH")
    if seed_path:
        data.setdefault("storage", {})["seed_path"] = seed_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SAFESPHERE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
