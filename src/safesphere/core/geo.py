from __future__ import annotations
from dataclasses import dataclass
from math import asin, cos, degrees, isfinite, pi, sin, sqrt
from typing import Protocol

from safesphere.core.errors import GeoValidationError

"""
Geospatial helpers.

Every "nearby X" query and the route scorer go through this module, so the numeric
behavior (Earth radius, 111 km per degree, Haversine) is defined exactly once.
"""

EARTH_RADIUS_M = 6_371_000
KM_PER_DEGREE = 111.0

# Below this cosine a latitude is treated as a pole (longitude span unbounded).
_POLE_COS_EPSILON = 1e-12


class HasLatLon(Protocol):
    lat: float
    lon: float


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def to_radians(deg: float) -> float:
    return deg * pi / 180.0


def haversine_m(a: HasLatLon, b: HasLatLon) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = to_radians(a.lat)
    lat2 = to_radians(b.lat)
    dlat = to_radians(b.lat - a.lat)
    dlon = to_radians(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))


def validate_point(lat: float, lon: float) -> None:
    """Raise `GeoValidationError` unless (lat, lon) is a finite in-range coordinate."""
    if not (isfinite(lat) and isfinite(lon)):
        raise GeoValidationError(f"Coordinates must be finite, got ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise GeoValidationError(f"Latitude must be between -90 and 90, got {lat}")
    if not -180.0 <= lon <= 180.0:
        raise GeoValidationError(f"Longitude must be between -180 and 180, got {lon}")


def validate_radius_km(radius_km: float) -> None:
    if not isfinite(radius_km) or radius_km <= 0:
        raise GeoValidationError(f"Radius must be a positive number of kilometers, got {radius_km}")


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle used as a coarse pre-filter.

    Longitude bounds may fall outside [-180, 180] when the box crosses the
    antimeridian; `contains` wraps them. Storage backends that cannot express a
    wrapped range should fetch by latitude only when `crosses_antimeridian` is set.
    """

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_lng < -180.0 or self.max_lng > 180.0

    @property
    def spans_all_longitudes(self) -> bool:
        return self.max_lng - self.min_lng >= 360.0

    def contains(self, lat: float, lon: float) -> bool:
        if not self.min_lat <= lat <= self.max_lat:
            return False
        if self.spans_all_longitudes:
            return True
        if self.min_lng <= lon <= self.max_lng:
            return True
        if self.min_lng < -180.0 and lon >= self.min_lng + 360.0:
            return True
        if self.max_lng > 180.0 and lon <= self.max_lng - 360.0:
            return True
        return False


def bounding_box(center: HasLatLon, radius_km: float, *, km_per_degree: float = KM_PER_DEGREE) -> BoundingBox:
    """Return a box guaranteed to contain every point within `radius_km` of `center`.

    Uses the `radius / 111 km` rule of thumb, widened to the exact spherical
    longitude bound where that is larger (high latitudes, large radii). When the
    circle reaches a pole the longitude range is unbounded.
    """
    lat = float(center.lat)
    lon = float(center.lon)
    lat_range = radius_km / km_per_degree

    min_lat = max(-90.0, lat - lat_range)
    max_lat = min(90.0, lat + lat_range)

    cos_lat = cos(to_radians(lat))
    angular = (radius_km * 1000.0) / EARTH_RADIUS_M
    if lat + lat_range >= 90.0 or lat - lat_range <= -90.0 or cos_lat <= _POLE_COS_EPSILON:
        return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=-180.0, max_lng=180.0)

    lng_range = radius_km / (km_per_degree * cos_lat)
    ratio = sin(min(angular, pi / 2)) / cos_lat
    if angular >= pi / 2 or ratio >= 1.0:
        return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=-180.0, max_lng=180.0)
    lng_range = max(lng_range, degrees(asin(ratio)))

    if lng_range >= 180.0:
        return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=-180.0, max_lng=180.0)
    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=lon - lng_range, max_lng=lon + lng_range)
