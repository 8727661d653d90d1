"""
Route safety scoring.

Given an origin, a destination and the unsafe zones near the route, produce the
route geometry, a distance/duration estimate and a 0..100 safety score.

Current product rules:
- The route polyline is just [origin, destination]; no routing engine is involved.
- The score depends only on the closest (route point, zone center) pair:
    closest > safe distance (5 km)    -> 100
    closest < unsafe distance (100 m) -> 0
    otherwise                          -> closest / safe distance * 100
  No zones at all -> 100.
- `unsafe_zones_avoided` is always 0 because no avoidance routing is performed.
- Duration assumes a constant average speed (15 m/s, about 54 km/h).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from safesphere.core.geo import GeoPoint, HasLatLon, haversine_m, validate_point
from safesphere.scoring.composite import SCORE_MAX, SCORE_MIN, clamp_score

Z = TypeVar("Z")


@dataclass(frozen=True)
class RouteScoringConfig:
    safe_distance_m: float = 5000.0
    unsafe_distance_m: float = 100.0
    average_speed_mps: float = 15.0
    nearby_zones_limit: int = 5

    def __post_init__(self) -> None:
        if self.safe_distance_m <= 0:
            raise ValueError("safe_distance_m must be > 0")
        if self.unsafe_distance_m < 0 or self.unsafe_distance_m > self.safe_distance_m:
            raise ValueError("unsafe_distance_m must be within [0, safe_distance_m]")
        if self.average_speed_mps <= 0:
            raise ValueError("average_speed_mps must be > 0")
        if self.nearby_zones_limit < 0:
            raise ValueError("nearby_zones_limit must be >= 0")


@dataclass(frozen=True)
class RouteScore(Generic[Z]):
    coordinates: list[GeoPoint]
    distance_m: float
    duration_s: int
    safety_score: float
    unsafe_zones_avoided: int = 0
    nearby_zones: list[Z] = field(default_factory=list)
    min_zone_distance_m: float | None = None


def _zone_center(zone) -> HasLatLon:
    # Unsafe zones expose `center`; plain points can be passed directly.
    return getattr(zone, "center", zone)


def min_distance_to_zones_m(route: Sequence[HasLatLon], zones: Sequence) -> float | None:
    """Global minimum distance over all (route point, zone center) pairs; None when either is empty."""
    best: float | None = None
    for point in route:
        for zone in zones:
            d = haversine_m(point, _zone_center(zone))
            if best is None or d < best:
                best = d
    return best


def safety_score(route: Sequence[HasLatLon], zones: Sequence, config: RouteScoringConfig | None = None) -> float:
    cfg = config or RouteScoringConfig()
    closest = min_distance_to_zones_m(route, zones)
    if closest is None:
        return SCORE_MAX
    if closest > cfg.safe_distance_m:
        return SCORE_MAX
    if closest < cfg.unsafe_distance_m:
        return SCORE_MIN
    return clamp_score((closest / cfg.safe_distance_m) * 100.0)


def score_route(
    origin: HasLatLon,
    destination: HasLatLon,
    nearby_zones: Sequence[Z],
    *,
    config: RouteScoringConfig | None = None,
) -> RouteScore[Z]:
    """Score the straight origin->destination route against `nearby_zones`.

    Raises:
        GeoValidationError: If either endpoint is out of range.
    """
    cfg = config or RouteScoringConfig()
    validate_point(float(origin.lat), float(origin.lon))
    validate_point(float(destination.lat), float(destination.lon))

    coordinates = [
        GeoPoint(lat=float(origin.lat), lon=float(origin.lon)),
        GeoPoint(lat=float(destination.lat), lon=float(destination.lon)),
    ]
    zones = list(nearby_zones)
    distance = haversine_m(coordinates[0], coordinates[1])

    return RouteScore(
        coordinates=coordinates,
        distance_m=distance,
        duration_s=int(distance / cfg.average_speed_mps),
        safety_score=safety_score(coordinates, zones, cfg),
        unsafe_zones_avoided=0,
        nearby_zones=zones[: cfg.nearby_zones_limit],
        min_zone_distance_m=min_distance_to_zones_m(coordinates, zones),
    )
