from __future__ import annotations

# Safe-route orchestration.
# - proximity query: unsafe zones around the origin (routing.search_radius_km)
# - scoring: straight-line route vs. those zones
# - storage: persist the scored route; completion only flips is_active/completed_at

import logging
from datetime import datetime

from safesphere.config.settings import Settings, get_settings
from safesphere.core.proximity import find_nearby
from safesphere.domain.models import GeoPoint, SafeRoute, SafeRouteRequest, SafeRouteResult, UnsafeZone
from safesphere.scoring.route_safety import RouteScore, score_route
from safesphere.storage.store import AlertStore

logger = logging.getLogger(__name__)


def score_between(
    store: AlertStore,
    origin: GeoPoint,
    destination: GeoPoint,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> RouteScore[UnsafeZone]:
    """Score the straight route against the active zones around its origin (nothing is stored)."""
    settings = settings or get_settings()
    now = now or store.now()
    cfg = settings.routing

    nearby = find_nearby(
        origin,
        cfg.search_radius_km,
        store.unsafe_zones_in_box,
        lambda z: z.is_active(now),
        km_per_degree=settings.proximity.km_per_degree,
    )
    return score_route(origin, destination, [n.item for n in nearby], config=cfg.scoring_config())


def plan_safe_route(
    store: AlertStore,
    request: SafeRouteRequest,
    *,
    user_id: int,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> SafeRouteResult:
    now = now or store.now()
    scored = score_between(store, request.origin, request.destination, settings=settings, now=now)

    route = store.add_route(
        SafeRoute(
            id=0,
            user_id=user_id,
            origin=request.origin,
            destination=request.destination,
            coordinates=[GeoPoint(lat=p.lat, lon=p.lon) for p in scored.coordinates],
            distance_m=scored.distance_m,
            duration_s=scored.duration_s,
            safety_score=scored.safety_score,
            unsafe_zones_avoided=scored.unsafe_zones_avoided,
            is_active=True,
            created_at=now,
        )
    )
    logger.info(
        "Route %d created for user %d: score=%.1f distance=%.0fm zones=%d",
        route.id,
        user_id,
        route.safety_score,
        route.distance_m,
        len(scored.nearby_zones),
    )
    return SafeRouteResult(**route.model_dump(), nearby_unsafe_zones=scored.nearby_zones)


def get_route(store: AlertStore, route_id: int) -> SafeRoute:
    return store.get_route(route_id)


def user_routes(store: AlertStore, user_id: int, *, active_only: bool = False) -> list[SafeRoute]:
    return store.routes_for_user(user_id, active_only=active_only)


def complete_route(store: AlertStore, route_id: int, *, now: datetime | None = None) -> SafeRoute:
    route = store.complete_route(route_id, now or store.now())
    logger.info("Route %d completed", route_id)
    return route


def delete_route(store: AlertStore, route_id: int) -> None:
    store.delete_route(route_id)
