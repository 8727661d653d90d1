"""
Process-local alert store.

Holds unsafe zones, weather alerts, disaster alerts and safe routes in memory and
answers the coarse bounding-box questions the proximity query asks. It stands in
for the relational store of a full deployment; everything above it only depends
on the method names here.

Safe routes keep their polyline encoded (see `safesphere.storage.codec`), the way
a row-based store would, and are decoded on read.

FastAPI runs sync endpoints in a thread pool, so mutations are serialized with a lock
and reads iterate over a snapshot taken under the same lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from safesphere.core.errors import NotFoundError
from safesphere.core.geo import BoundingBox
from safesphere.core.time import utcnow
from safesphere.domain.models import DisasterAlert, SafeRoute, UnsafeZone, WeatherAlert, ZoneStatus
from safesphere.storage.codec import decode_coordinates, encode_coordinates
from safesphere.storage.loader import SeedData

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _Table(Generic[M]):
    """Id-keyed rows with monotonically increasing id assignment."""

    def __init__(self, resource: str):
        self._resource = resource
        self._rows: dict[int, M] = {}
        self._next_id = 1

    def insert(self, row: M, *, keep_id: bool = False) -> M:
        if keep_id:
            row_id = int(getattr(row, "id"))
            if row_id in self._rows:
                raise ValueError(f"Duplicate {self._resource.lower()} id in seed data: {row_id}")
        else:
            row_id = self._next_id
            row = row.model_copy(update={"id": row_id})
        self._rows[row_id] = row
        self._next_id = max(self._next_id, row_id + 1)
        return row

    def get(self, row_id: int) -> M:
        try:
            return self._rows[row_id]
        except KeyError:
            raise NotFoundError(self._resource, row_id) from None

    def put(self, row: M) -> M:
        row_id = int(getattr(row, "id"))
        self.get(row_id)
        self._rows[row_id] = row
        return row

    def delete(self, row_id: int) -> None:
        self.get(row_id)
        del self._rows[row_id]

    def values(self) -> list[M]:
        return list(self._rows.values())


@dataclass(frozen=True)
class _StoredRoute:
    route: SafeRoute
    coordinates_json: str


class AlertStore:
    def __init__(self, seed: SeedData | None = None, *, clock: Callable[[], datetime] = utcnow):
        self._lock = threading.Lock()
        self._clock = clock
        self._zones: _Table[UnsafeZone] = _Table("Unsafe zone")
        self._weather: _Table[WeatherAlert] = _Table("Weather alert")
        self._disasters: _Table[DisasterAlert] = _Table("Disaster alert")
        self._routes: dict[int, _StoredRoute] = {}
        self._next_route_id = 1

        if seed:
            for zone in seed.unsafe_zones:
                self._zones.insert(zone, keep_id=True)
            for alert in seed.weather_alerts:
                self._weather.insert(alert, keep_id=True)
            for alert in seed.disaster_alerts:
                self._disasters.insert(alert, keep_id=True)
            logger.info(
                "Store seeded: zones=%d weather=%d disasters=%d",
                len(seed.unsafe_zones),
                len(seed.weather_alerts),
                len(seed.disaster_alerts),
            )

    def now(self) -> datetime:
        return self._clock()

    def _snapshot(self, table: _Table[M]) -> list[M]:
        with self._lock:
            return table.values()

    # ---- Unsafe zones ----

    def add_unsafe_zone(self, zone: UnsafeZone) -> UnsafeZone:
        with self._lock:
            return self._zones.insert(zone)

    def get_unsafe_zone(self, zone_id: int) -> UnsafeZone:
        return self._zones.get(zone_id)

    def all_unsafe_zones(self) -> list[UnsafeZone]:
        return sorted(self._snapshot(self._zones), key=lambda z: z.created_at, reverse=True)

    def active_unsafe_zones(self, now: datetime) -> list[UnsafeZone]:
        return [z for z in self.all_unsafe_zones() if z.is_active(now)]

    def unsafe_zones_in_box(self, box: BoundingBox) -> list[UnsafeZone]:
        return [z for z in self._snapshot(self._zones) if box.contains(z.center.lat, z.center.lon)]

    def patch_unsafe_zone(self, zone_id: int, changes: dict[str, Any]) -> UnsafeZone:
        """Apply field changes to the stored zone; the read and the write happen under one lock."""
        with self._lock:
            zone = self._zones.get(zone_id)
            return self._zones.put(zone.model_copy(update=changes))

    def confirm_unsafe_zone(self, zone_id: int) -> UnsafeZone:
        with self._lock:
            zone = self._zones.get(zone_id)
            return self._zones.put(zone.model_copy(update={"confirmation_count": zone.confirmation_count + 1}))

    def update_zone_status(self, zone_id: int, status: ZoneStatus) -> UnsafeZone:
        with self._lock:
            zone = self._zones.get(zone_id)
            return self._zones.put(zone.model_copy(update={"status": status}))

    def expired_unsafe_zones(self, now: datetime) -> list[UnsafeZone]:
        """Zones still marked Active whose expiry has passed."""
        return [z for z in self._snapshot(self._zones) if z.status == "Active" and z.is_expired(now)]

    def delete_unsafe_zone(self, zone_id: int) -> None:
        with self._lock:
            self._zones.delete(zone_id)

    # ---- Weather alerts ----

    def add_weather_alert(self, alert: WeatherAlert) -> WeatherAlert:
        with self._lock:
            return self._weather.insert(alert)

    def get_weather_alert(self, alert_id: int) -> WeatherAlert:
        return self._weather.get(alert_id)

    def current_weather_alerts(self, now: datetime) -> list[WeatherAlert]:
        alerts = [a for a in self._snapshot(self._weather) if a.is_current(now)]
        return sorted(alerts, key=lambda a: a.issued_at, reverse=True)

    def weather_alerts_in_box(self, box: BoundingBox) -> list[WeatherAlert]:
        return [a for a in self._snapshot(self._weather) if box.contains(a.location.lat, a.location.lon)]

    def deactivate_expired_weather_alerts(self, now: datetime) -> int:
        with self._lock:
            expired = [
                a for a in self._weather.values() if a.is_active and a.expires_at is not None and a.expires_at <= now
            ]
            for alert in expired:
                self._weather.put(alert.model_copy(update={"is_active": False}))
            return len(expired)

    # ---- Disaster alerts ----

    def add_disaster_alert(self, alert: DisasterAlert) -> DisasterAlert:
        with self._lock:
            return self._disasters.insert(alert)

    def current_disaster_alerts(self, now: datetime) -> list[DisasterAlert]:
        alerts = [a for a in self._snapshot(self._disasters) if a.is_current(now)]
        return sorted(alerts, key=lambda a: a.issued_at, reverse=True)

    def disaster_alerts_in_box(self, box: BoundingBox) -> list[DisasterAlert]:
        return [a for a in self._snapshot(self._disasters) if box.contains(a.location.lat, a.location.lon)]

    def confirm_disaster_alert(self, alert_id: int) -> DisasterAlert:
        with self._lock:
            alert = self._disasters.get(alert_id)
            update = {"confirmation_count": alert.confirmation_count + 1, "updated_at": self.now()}
            return self._disasters.put(alert.model_copy(update=update))

    # ---- Safe routes ----

    def _load_route(self, stored: _StoredRoute) -> SafeRoute:
        return stored.route.model_copy(update={"coordinates": decode_coordinates(stored.coordinates_json)})

    def _get_stored_route(self, route_id: int) -> _StoredRoute:
        try:
            return self._routes[route_id]
        except KeyError:
            raise NotFoundError("Route", route_id) from None

    def add_route(self, route: SafeRoute) -> SafeRoute:
        with self._lock:
            route_id = self._next_route_id
            self._next_route_id += 1
            stored = _StoredRoute(
                route=route.model_copy(update={"id": route_id, "coordinates": []}),
                coordinates_json=encode_coordinates(route.coordinates),
            )
            self._routes[route_id] = stored
        return self._load_route(stored)

    def get_route(self, route_id: int) -> SafeRoute:
        return self._load_route(self._get_stored_route(route_id))

    def routes_for_user(self, user_id: int, *, active_only: bool = False) -> list[SafeRoute]:
        with self._lock:
            stored = list(self._routes.values())
        routes = [
            self._load_route(s)
            for s in stored
            if s.route.user_id == user_id and (s.route.is_active or not active_only)
        ]
        return sorted(routes, key=lambda r: r.created_at, reverse=True)

    def complete_route(self, route_id: int, now: datetime) -> SafeRoute:
        with self._lock:
            stored = self._get_stored_route(route_id)
            done = _StoredRoute(
                route=stored.route.model_copy(update={"is_active": False, "completed_at": now}),
                coordinates_json=stored.coordinates_json,
            )
            self._routes[route_id] = done
        return self._load_route(done)

    def delete_route(self, route_id: int) -> None:
        with self._lock:
            self._get_stored_route(route_id)
            del self._routes[route_id]
