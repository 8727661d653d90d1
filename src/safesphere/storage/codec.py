"""
Route coordinate codec.

Routes persist their polyline as a JSON array of `{"lat": .., "lng": ..}` objects,
the shape the mobile client already consumes. Floats are written with `repr`
precision, so decoding an encoded list gives back the same points in the same order.
"""

from __future__ import annotations

import json
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from safesphere.core.geo import HasLatLon
from safesphere.domain.models import GeoPoint


class RoutePoint(BaseModel):
    """Wire shape of a single polyline vertex."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


_ROUTE_POINTS_ADAPTER = TypeAdapter(list[RoutePoint])


def encode_coordinates(points: Iterable[HasLatLon]) -> str:
    payload = [{"lat": float(p.lat), "lng": float(p.lon)} for p in points]
    return json.dumps(payload, separators=(",", ":"))


def decode_coordinates(text: str | None) -> list[GeoPoint]:
    """Decode a stored polyline; empty/blank input decodes to an empty list.

    Raises:
        pydantic.ValidationError: If the JSON does not describe a list of points.
    """
    if not text or not text.strip():
        return []
    points = _ROUTE_POINTS_ADAPTER.validate_json(text)
    return [GeoPoint(lat=p.lat, lon=p.lng) for p in points]
