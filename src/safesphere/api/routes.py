"""
API routes.

Endpoints (all JSON):
- `/api/zones/unsafe/...`: report, look up, update, confirm and search unsafe zones
- `/api/weather/alerts...`: nearby weather alerts, expiry sync
- `/api/disasters/...`: nearby disaster alerts, statistics, confirmation
- `/api/routes/...`: plan, fetch, complete and delete safe routes

Error mapping:
- invalid input (ValueError, incl. GeoValidationError) -> 400 VALIDATION_ERROR
- unknown id -> 404 NOT_FOUND
- storage failure -> 500 STORAGE_ERROR
- anything else -> 500 INTERNAL_ERROR
A search that matches nothing is a 200 with an empty list.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from fastapi import APIRouter, HTTPException, Response, status

from safesphere.config.settings import get_settings
from safesphere.core.errors import CandidateFetchError, NotFoundError
from safesphere.domain.models import (
    DisasterAlertView,
    DisasterStatistics,
    GeoPoint,
    NearbyUnsafeZone,
    SafeRoute,
    SafeRouteRequest,
    SafeRouteResult,
    UnsafeZone,
    UnsafeZoneReport,
    UnsafeZoneUpdate,
    WeatherAlertView,
)
from safesphere.services import alerts as alert_service
from safesphere.services import routes as route_service
from safesphere.services import zones as zone_service
from safesphere.storage.loader import load_seed
from safesphere.storage.store import AlertStore

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _store() -> AlertStore:
    settings = get_settings()
    return AlertStore(load_seed(settings.storage.seed_path))


@contextmanager
def _http_errors() -> Iterator[None]:
    try:
        yield
    except HTTPException:
        raise
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": str(e)}) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)}) from e
    except CandidateFetchError as e:
        raise HTTPException(status_code=500, detail={"code": "STORAGE_ERROR", "message": str(e)}) from e
    except Exception as e:
        logger.exception("Unhandled error")
        raise HTTPException(status_code=500, detail={"code": "INTERNAL_ERROR", "message": str(e)}) from e


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


# ---- Unsafe zones ----


@router.get("/api/zones/unsafe/nearby", response_model=list[NearbyUnsafeZone])
def get_nearby_unsafe_zones(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
    minimum_severity: str | None = None,
) -> list[NearbyUnsafeZone]:
    """Return active unsafe zones near a location, nearest first."""
    with _http_errors():
        return zone_service.nearby_unsafe_zones(
            _store(),
            GeoPoint(lat=latitude, lon=longitude),
            radius_km=radius_km,
            minimum_severity=minimum_severity,
            settings=get_settings(),
        )


@router.get("/api/zones/unsafe/active", response_model=list[UnsafeZone])
def get_active_unsafe_zones() -> list[UnsafeZone]:
    with _http_errors():
        return zone_service.active_unsafe_zones(_store())


@router.post("/api/zones/unsafe", response_model=UnsafeZone, status_code=status.HTTP_201_CREATED)
def post_unsafe_zone(report: UnsafeZoneReport, user_id: int | None = None) -> UnsafeZone:
    """Report a new unsafe zone."""
    with _http_errors():
        return zone_service.report_unsafe_zone(_store(), report, user_id=user_id)


@router.get("/api/zones/unsafe/{zone_id}", response_model=UnsafeZone)
def get_unsafe_zone(zone_id: int) -> UnsafeZone:
    with _http_errors():
        return _store().get_unsafe_zone(zone_id)


@router.patch("/api/zones/unsafe/{zone_id}", response_model=UnsafeZone)
def patch_unsafe_zone(zone_id: int, update: UnsafeZoneUpdate) -> UnsafeZone:
    with _http_errors():
        return zone_service.update_unsafe_zone(_store(), zone_id, update)


@router.post("/api/zones/unsafe/{zone_id}/confirm", status_code=status.HTTP_204_NO_CONTENT)
def post_confirm_unsafe_zone(zone_id: int) -> Response:
    with _http_errors():
        zone_service.confirm_unsafe_zone(_store(), zone_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/api/zones/unsafe/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unsafe_zone(zone_id: int) -> Response:
    with _http_errors():
        zone_service.delete_unsafe_zone(_store(), zone_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- Weather alerts ----


@router.get("/api/weather/alerts", response_model=list[WeatherAlertView])
def get_weather_alerts(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
    minimum_severity: str | None = None,
) -> list[WeatherAlertView]:
    """Return current weather alerts near a location, nearest first."""
    with _http_errors():
        return alert_service.nearby_weather_alerts(
            _store(),
            GeoPoint(lat=latitude, lon=longitude),
            radius_km=radius_km,
            minimum_severity=minimum_severity,
            settings=get_settings(),
        )


@router.post("/api/weather/alerts/sync")
def post_weather_alerts_sync() -> dict:
    with _http_errors():
        return {"deactivated": alert_service.sync_weather_alerts(_store())}


# ---- Disaster alerts ----


@router.get("/api/disasters/alerts", response_model=list[DisasterAlertView])
def get_disaster_alerts(
    latitude: float,
    longitude: float,
    radius_km: float | None = None,
    disaster_type: str | None = None,
    minimum_severity: str | None = None,
) -> list[DisasterAlertView]:
    """Return current disaster alerts near a location, nearest first."""
    with _http_errors():
        return alert_service.nearby_disaster_alerts(
            _store(),
            GeoPoint(lat=latitude, lon=longitude),
            radius_km=radius_km,
            disaster_type=disaster_type,
            minimum_severity=minimum_severity,
            settings=get_settings(),
        )


@router.get("/api/disasters/statistics", response_model=DisasterStatistics)
def get_disaster_statistics() -> DisasterStatistics:
    with _http_errors():
        return alert_service.disaster_statistics(_store(), settings=get_settings())


@router.post("/api/disasters/alerts/{alert_id}/confirm", status_code=status.HTTP_204_NO_CONTENT)
def post_confirm_disaster_alert(alert_id: int) -> Response:
    with _http_errors():
        _store().confirm_disaster_alert(alert_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- Safe routes ----


@router.post("/api/routes/safe", response_model=SafeRouteResult)
def post_safe_route(request: SafeRouteRequest, user_id: int) -> SafeRouteResult:
    """Score and store a route between two points."""
    with _http_errors():
        return route_service.plan_safe_route(_store(), request, user_id=user_id, settings=get_settings())


@router.get("/api/routes/user/{user_id}", response_model=list[SafeRoute])
def get_user_routes(user_id: int, active_only: bool = False) -> list[SafeRoute]:
    with _http_errors():
        return route_service.user_routes(_store(), user_id, active_only=active_only)


@router.get("/api/routes/{route_id}", response_model=SafeRoute)
def get_route(route_id: int) -> SafeRoute:
    with _http_errors():
        return route_service.get_route(_store(), route_id)


@router.patch("/api/routes/{route_id}/complete", response_model=SafeRoute)
def patch_complete_route(route_id: int) -> SafeRoute:
    with _http_errors():
        return route_service.complete_route(_store(), route_id)


@router.delete("/api/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_route(route_id: int) -> Response:
    with _http_errors():
        route_service.delete_route(_store(), route_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
