"""
Weather and disaster alert retrieval.

Both domains share the proximity query; each applies its own severity vocabulary
and its own per-request decorations:
- weather: distance in km + whole minutes until expiry,
- disaster: distance in km + whether the requester is inside the affected radius,
  optional case-insensitive disaster-type filter.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from safesphere.config.settings import Settings, get_settings
from safesphere.core.proximity import find_nearby
from safesphere.core.time import minutes_until
from safesphere.domain.models import DisasterAlertView, DisasterStatistics, GeoPoint, WeatherAlertView
from safesphere.domain.severity import filter_disaster_alerts, filter_weather_alerts
from safesphere.services.zones import effective_radius_km
from safesphere.storage.store import AlertStore

logger = logging.getLogger(__name__)


def nearby_weather_alerts(
    store: AlertStore,
    point: GeoPoint,
    *,
    radius_km: float | None = None,
    minimum_severity: str | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> list[WeatherAlertView]:
    settings = settings or get_settings()
    now = now or store.now()
    radius = effective_radius_km(radius_km, settings.weather_alerts)

    nearby = find_nearby(
        point,
        radius,
        store.weather_alerts_in_box,
        lambda a: a.is_current(now),
        km_per_degree=settings.proximity.km_per_degree,
    )
    views = [
        WeatherAlertView(
            **n.item.model_dump(),
            distance_km=n.distance_km,
            minutes_until_expiry=minutes_until(n.item.expires_at, now) if n.item.expires_at else None,
        )
        for n in nearby
    ]
    return filter_weather_alerts(views, minimum_severity)


def nearby_disaster_alerts(
    store: AlertStore,
    point: GeoPoint,
    *,
    radius_km: float | None = None,
    disaster_type: str | None = None,
    minimum_severity: str | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> list[DisasterAlertView]:
    settings = settings or get_settings()
    now = now or store.now()
    radius = effective_radius_km(radius_km, settings.disaster_alerts)

    nearby = find_nearby(
        point,
        radius,
        store.disaster_alerts_in_box,
        lambda a: a.is_current(now),
        km_per_degree=settings.proximity.km_per_degree,
    )
    views: list[DisasterAlertView] = []
    for n in nearby:
        affected = n.item.affected_radius_km
        views.append(
            DisasterAlertView(
                **n.item.model_dump(),
                distance_km=n.distance_km,
                is_user_in_affected_area=affected is not None and n.distance_km <= affected,
            )
        )

    if disaster_type:
        wanted = disaster_type.casefold()
        views = [v for v in views if v.disaster_type.casefold() == wanted]
    return filter_disaster_alerts(views, minimum_severity)


def disaster_statistics(
    store: AlertStore,
    *,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> DisasterStatistics:
    settings = settings or get_settings()
    cfg = settings.disaster_alerts
    alerts = store.current_disaster_alerts(now or store.now())
    critical = set(cfg.critical_severities)
    return DisasterStatistics(
        total_active_alerts=len(alerts),
        critical_alerts=sum(1 for a in alerts if a.severity in critical),
        alerts_by_type=dict(Counter(a.disaster_type for a in alerts)),
        alerts_by_severity=dict(Counter(a.severity for a in alerts)),
        recent_alerts=alerts[: cfg.recent_limit],
    )


def sync_weather_alerts(store: AlertStore, *, now: datetime | None = None) -> int:
    """Deactivate weather alerts whose expiry has passed; returns how many were deactivated."""
    logger.info("Starting weather alerts sync")
    count = store.deactivate_expired_weather_alerts(now or store.now())
    logger.info("Weather alerts sync completed: deactivated=%d", count)
    return count
