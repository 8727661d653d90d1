from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from safesphere.domain.models import GeoPoint
from safesphere.storage.codec import decode_coordinates, encode_coordinates


def test_encode_uses_lat_lng_objects():
    text = encode_coordinates([GeoPoint(lat=25.0478, lon=121.517), GeoPoint(lat=-1.5, lon=0.0)])
    assert json.loads(text) == [{"lat": 25.0478, "lng": 121.517}, {"lat": -1.5, "lng": 0.0}]
    assert " " not in text


def test_decode_preserves_points_and_order():
    points = [GeoPoint(lat=37.7749, lon=-122.4194), GeoPoint(lat=37.8044, lon=-122.2712), GeoPoint(lat=0.1, lon=0.2)]
    assert decode_coordinates(encode_coordinates(points)) == points


@pytest.mark.parametrize("text", [None, "", "   "])
def test_decode_blank_is_empty(text):
    assert decode_coordinates(text) == []


@pytest.mark.parametrize("text", ['{"lat": 1, "lng": 2}', '[{"lat": 1}]', '[{"lat": 91, "lng": 0}]', "not json"])
def test_decode_rejects_malformed_payloads(text):
    with pytest.raises(ValidationError):
        decode_coordinates(text)
