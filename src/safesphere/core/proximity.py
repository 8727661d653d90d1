"""
Proximity query: "entities within R km of a point, nearest first".

One algorithm backs every nearby endpoint (unsafe zones, weather alerts, disaster
alerts). Storage only has to answer a coarse bounding-box question; exact distance
filtering and ordering happen here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from safesphere.core.errors import CandidateFetchError
from safesphere.core.geo import (
    KM_PER_DEGREE,
    BoundingBox,
    GeoPoint,
    HasLatLon,
    bounding_box,
    haversine_m,
    validate_point,
    validate_radius_km,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Nearby(Generic[T]):
    """An entity annotated with its great-circle distance from the query point."""

    item: T
    distance_m: float

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0


def _default_location(entity) -> HasLatLon:
    return entity.location


def find_nearby(
    point: HasLatLon,
    radius_km: float,
    fetch_candidates: Callable[[BoundingBox], Iterable[T]],
    is_active: Callable[[T], bool],
    *,
    location_of: Callable[[T], HasLatLon] = _default_location,
    km_per_degree: float = KM_PER_DEGREE,
) -> list[Nearby[T]]:
    """Return the active entities within `radius_km` of `point`, sorted nearest-first.

    `fetch_candidates` is called exactly once with the bounding box. It may return a
    superset of the box; anything outside the box, inactive, or farther than the
    radius is dropped. Ties in distance keep the order the store returned them in.

    Raises:
        GeoValidationError: If the point or radius is invalid.
        CandidateFetchError: If `fetch_candidates` raises.
    """
    lat = float(point.lat)
    lon = float(point.lon)
    validate_point(lat, lon)
    validate_radius_km(float(radius_km))

    origin = GeoPoint(lat=lat, lon=lon)
    box = bounding_box(origin, float(radius_km), km_per_degree=km_per_degree)
    try:
        candidates = list(fetch_candidates(box))
    except Exception as e:
        logger.exception("Candidate fetch failed for (%.5f, %.5f) r=%skm", lat, lon, radius_km)
        raise CandidateFetchError(f"Could not search entities near ({lat}, {lon})") from e

    max_distance_m = float(radius_km) * 1000.0
    results: list[Nearby[T]] = []
    for entity in candidates:
        loc = location_of(entity)
        if not box.contains(float(loc.lat), float(loc.lon)):
            continue
        if not is_active(entity):
            continue
        d = haversine_m(origin, loc)
        if d > max_distance_m:
            continue
        results.append(Nearby(item=entity, distance_m=d))

    # list.sort is stable, so equal distances keep store order.
    results.sort(key=lambda n: n.distance_m)
    logger.debug(
        "find_nearby (%.5f, %.5f) r=%skm: candidates=%d results=%d",
        lat,
        lon,
        radius_km,
        len(candidates),
        len(results),
    )
    return results
