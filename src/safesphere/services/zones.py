"""
Unsafe-zone service.

Reporting, confirming and updating user-reported unsafe zones, plus the
"zones near me" query (proximity + zone severity vocabulary).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from safesphere.config.settings import RadiusSettings, Settings, get_settings
from safesphere.core.errors import GeoValidationError
from safesphere.core.proximity import find_nearby
from safesphere.domain.models import (
    GeoPoint,
    NearbyUnsafeZone,
    UnsafeZone,
    UnsafeZoneReport,
    UnsafeZoneUpdate,
)
from safesphere.domain.severity import filter_unsafe_zones
from safesphere.storage.store import AlertStore

logger = logging.getLogger(__name__)


def effective_radius_km(radius_km: float | None, cfg: RadiusSettings) -> float:
    """Apply the configured default and upper bound to a requested search radius."""
    radius = float(cfg.default_radius_km if radius_km is None else radius_km)
    if radius > cfg.max_radius_km:
        raise GeoValidationError(f"Radius must be at most {cfg.max_radius_km:g} km, got {radius:g}")
    return radius


def report_unsafe_zone(
    store: AlertStore,
    report: UnsafeZoneReport,
    *,
    user_id: int | None = None,
    now: datetime | None = None,
) -> UnsafeZone:
    now = now or store.now()
    expires_at = now + timedelta(hours=report.expires_in_hours) if report.expires_in_hours else None
    zone = UnsafeZone(
        id=0,
        name=report.name,
        description=report.description,
        center=report.center,
        radius_m=report.radius_m,
        severity=report.severity,
        threat_type=report.threat_type,
        status="Active",
        created_at=now,
        expires_at=expires_at,
        reported_by_user_id=user_id,
        # The reporter counts as the first confirmation.
        confirmation_count=1,
        additional_info=report.additional_info,
    )
    created = store.add_unsafe_zone(zone)
    logger.info("Unsafe zone %d reported (%s, %s)", created.id, created.threat_type, created.severity)
    return created


def nearby_unsafe_zones(
    store: AlertStore,
    point: GeoPoint,
    *,
    radius_km: float | None = None,
    minimum_severity: str | None = None,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> list[NearbyUnsafeZone]:
    """Active zones within the radius, nearest first, annotated with their distance in meters."""
    settings = settings or get_settings()
    now = now or store.now()
    radius = effective_radius_km(radius_km, settings.unsafe_zones)

    nearby = find_nearby(
        point,
        radius,
        store.unsafe_zones_in_box,
        lambda z: z.is_active(now),
        km_per_degree=settings.proximity.km_per_degree,
    )
    views = [NearbyUnsafeZone(**n.item.model_dump(), distance_from_user_m=n.distance_m) for n in nearby]
    return filter_unsafe_zones(views, minimum_severity)


def active_unsafe_zones(store: AlertStore, *, now: datetime | None = None) -> list[UnsafeZone]:
    return store.active_unsafe_zones(now or store.now())


def update_unsafe_zone(store: AlertStore, zone_id: int, update: UnsafeZoneUpdate) -> UnsafeZone:
    changes = update.model_dump(exclude_none=True)
    if not changes:
        return store.get_unsafe_zone(zone_id)
    updated = store.patch_unsafe_zone(zone_id, changes)
    logger.info("Unsafe zone %d updated: %s", zone_id, sorted(changes))
    return updated


def confirm_unsafe_zone(store: AlertStore, zone_id: int) -> UnsafeZone:
    return store.confirm_unsafe_zone(zone_id)


def delete_unsafe_zone(store: AlertStore, zone_id: int) -> None:
    store.delete_unsafe_zone(zone_id)
    logger.info("Unsafe zone %d deleted", zone_id)


def expired_unsafe_zones(store: AlertStore, *, now: datetime | None = None) -> list[UnsafeZone]:
    """Zones still marked Active although their expiry has passed.

    TODO: run this from a periodic sweep that calls `store.update_zone_status(id, "Expired")`;
    until then status stays Active and only nearby queries treat these zones as inactive.
    """
    return store.expired_unsafe_zones(now or store.now())
