from __future__ import annotations

import math

import pytest
from hypothesis import given, settings, strategies as st

from safesphere.core.errors import GeoValidationError
from safesphere.core.geo import (
    EARTH_RADIUS_M,
    GeoPoint,
    bounding_box,
    haversine_m,
    validate_point,
    validate_radius_km,
)

NYC = GeoPoint(lat=40.7128, lon=-74.0060)
LA = GeoPoint(lat=34.0522, lon=-118.2437)

lats = st.floats(min_value=-90, max_value=90, allow_nan=False, allow_infinity=False)
lons = st.floats(min_value=-180, max_value=180, allow_nan=False, allow_infinity=False)
points = st.builds(GeoPoint, lat=lats, lon=lons)


def _destination(origin: GeoPoint, distance_m: float, bearing_deg: float) -> GeoPoint:
    # Forward great-circle formula; longitude normalized back into [-180, 180].
    ang = distance_m / EARTH_RADIUS_M
    lat1 = math.radians(origin.lat)
    lon1 = math.radians(origin.lon)
    brg = math.radians(bearing_deg)
    lat2 = math.asin(math.sin(lat1) * math.cos(ang) + math.cos(lat1) * math.sin(ang) * math.cos(brg))
    lon2 = lon1 + math.atan2(
        math.sin(brg) * math.sin(ang) * math.cos(lat1),
        math.cos(ang) - math.sin(lat1) * math.sin(lat2),
    )
    lon = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return GeoPoint(lat=math.degrees(lat2), lon=lon)


def test_haversine_nyc_to_la_matches_known_distance():
    d = haversine_m(NYC, LA)
    assert d == pytest.approx(3_935_000, rel=0.01)


def test_haversine_zero_for_identical_points():
    assert haversine_m(NYC, NYC) == 0.0


def test_haversine_antipodal_points_is_half_circumference():
    d = haversine_m(GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=180.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M)


@given(a=points, b=points)
def test_haversine_is_symmetric_and_non_negative(a, b):
    d = haversine_m(a, b)
    assert d >= 0
    assert d == pytest.approx(haversine_m(b, a), abs=1e-6)


@given(a=points, b=points, c=points)
def test_haversine_triangle_inequality(a, b, c):
    assert haversine_m(a, c) <= haversine_m(a, b) + haversine_m(b, c) + 1.0


def test_validate_point_rejects_out_of_range_and_non_finite():
    with pytest.raises(GeoValidationError):
        validate_point(91.0, 0.0)
    with pytest.raises(GeoValidationError):
        validate_point(0.0, -180.5)
    with pytest.raises(GeoValidationError):
        validate_point(float("nan"), 0.0)
    validate_point(-90.0, 180.0)


def test_geo_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_radius_km(0)


@pytest.mark.parametrize("radius", [0, -1, float("inf"), float("nan")])
def test_validate_radius_rejects_non_positive_or_non_finite(radius):
    with pytest.raises(GeoValidationError):
        validate_radius_km(radius)


def test_bounding_box_uses_km_per_degree_rule_for_latitude():
    box = bounding_box(GeoPoint(lat=10.0, lon=20.0), 111.0)
    assert box.min_lat == pytest.approx(9.0)
    assert box.max_lat == pytest.approx(11.0)
    assert box.min_lng < 19.0
    assert box.max_lng > 21.0


def test_bounding_box_near_pole_spans_all_longitudes():
    box = bounding_box(GeoPoint(lat=89.5, lon=0.0), 100.0)
    assert box.spans_all_longitudes
    assert box.max_lat == 90.0
    assert box.contains(89.9, 179.0)
    assert box.contains(89.9, -179.0)


def test_bounding_box_at_pole_does_not_divide_by_zero():
    box = bounding_box(GeoPoint(lat=-90.0, lon=0.0), 1.0)
    assert box.spans_all_longitudes
    assert box.min_lat == -90.0


def test_bounding_box_wraps_across_antimeridian():
    center = GeoPoint(lat=0.0, lon=179.9)
    box = bounding_box(center, 50.0)
    assert box.crosses_antimeridian
    assert box.contains(0.0, -179.9)
    assert box.contains(0.0, 179.95)
    assert not box.contains(0.0, 0.0)
    assert not box.contains(0.0, -179.0)


@settings(max_examples=200)
@given(
    center=st.builds(
        GeoPoint,
        lat=st.floats(min_value=-85, max_value=85),
        lon=lons,
    ),
    radius_km=st.floats(min_value=0.1, max_value=2000),
    fraction=st.floats(min_value=0.0, max_value=0.999),
    bearing=st.floats(min_value=0.0, max_value=360.0),
)
def test_bounding_box_contains_every_point_within_radius(center, radius_km, fraction, bearing):
    target = _destination(center, radius_km * 1000.0 * fraction, bearing)
    box = bounding_box(center, radius_km)
    assert box.contains(target.lat, target.lon)
