"""
Domain models (Pydantic).

These types are the contract between layers:
- stored entities (`UnsafeZone`, `WeatherAlert`, `DisasterAlert`, `SafeRoute`),
- request payloads (`UnsafeZoneReport`, `UnsafeZoneUpdate`, `SafeRouteRequest`),
- response views that decorate an entity with per-request values (distance,
  minutes until expiry, affected-area flag, nearby zones).

Timestamps are always timezone-aware; naive inputs are treated as UTC.
Severity fields are plain strings: ranking is lenient about unknown
values (see `safesphere.domain.severity`), so validation must not reject them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from safesphere.core.time import ensure_utc

ZoneStatus = Literal["Active", "Resolved", "Expired"]
DisasterStatus = Literal["Active", "Resolved", "Monitoring"]
ThreatType = Literal["Crime", "Accident", "Natural", "Construction", "Other"]


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


def _aware(value: datetime | None) -> datetime | None:
    return ensure_utc(value) if value is not None else None


class UnsafeZone(BaseModel):
    """A circular area users reported as unsafe."""

    id: int
    name: str = Field(..., max_length=200)
    description: str = Field("", max_length=500)
    center: GeoPoint
    radius_m: float = Field(500, gt=0)
    severity: str = "Medium"
    threat_type: ThreatType = "Other"
    status: ZoneStatus = "Active"
    created_at: datetime
    expires_at: datetime | None = None
    reported_by_user_id: int | None = None
    confirmation_count: int = Field(0, ge=0)
    additional_info: str | None = Field(None, max_length=1000)

    @field_validator("created_at", "expires_at")
    @classmethod
    def _normalize_times(cls, value: datetime | None) -> datetime | None:
        return _aware(value)

    @property
    def location(self) -> GeoPoint:
        return self.center

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        """Active status and not past its expiry (status itself is not auto-transitioned)."""
        return self.status == "Active" and not self.is_expired(now)


class WeatherAlert(BaseModel):
    """A weather alert pinned to a location."""

    id: int
    location_name: str = Field(..., max_length=100)
    location: GeoPoint
    weather_condition: str = Field(..., max_length=50)
    description: str = Field("", max_length=200)
    temperature_c: float | None = None
    severity: str = "Info"
    external_alert_id: str | None = None
    issued_at: datetime
    expires_at: datetime | None = None
    is_active: bool = True
    additional_info: str | None = None
    data_source: str | None = None

    @field_validator("issued_at", "expires_at")
    @classmethod
    def _normalize_times(cls, value: datetime | None) -> datetime | None:
        return _aware(value)

    def is_current(self, now: datetime) -> bool:
        return self.is_active and (self.expires_at is None or self.expires_at > now)


class DisasterAlert(BaseModel):
    """A disaster/emergency alert with an optional affected radius."""

    id: int
    title: str = Field(..., max_length=200)
    description: str = Field("", max_length=1000)
    disaster_type: str = Field(..., max_length=50)
    affected_area: str = Field("", max_length=200)
    location: GeoPoint
    affected_radius_km: float | None = Field(None, gt=0)
    severity: str = "Moderate"
    status: DisasterStatus = "Active"
    issued_at: datetime
    updated_at: datetime | None = None
    expires_at: datetime | None = None
    external_alert_id: str | None = None
    source: str | None = None
    confirmation_count: int = Field(0, ge=0)
    safety_instructions: str | None = None
    emergency_contact_info: str | None = None

    @field_validator("issued_at", "updated_at", "expires_at")
    @classmethod
    def _normalize_times(cls, value: datetime | None) -> datetime | None:
        return _aware(value)

    def is_current(self, now: datetime) -> bool:
        return self.status == "Active" and (self.expires_at is None or self.expires_at > now)


class SafeRoute(BaseModel):
    """A scored route between two points, kept for history and completion tracking."""

    id: int
    user_id: int
    origin: GeoPoint
    destination: GeoPoint
    coordinates: list[GeoPoint] = Field(default_factory=list)
    distance_m: float = Field(..., ge=0)
    duration_s: int = Field(..., ge=0)
    safety_score: float = Field(..., ge=0, le=100)
    unsafe_zones_avoided: int = Field(0, ge=0)
    is_active: bool = True
    created_at: datetime
    completed_at: datetime | None = None
    notes: str | None = Field(None, max_length=1000)

    @field_validator("created_at", "completed_at")
    @classmethod
    def _normalize_times(cls, value: datetime | None) -> datetime | None:
        return _aware(value)


class UnsafeZoneReport(BaseModel):
    """User payload for reporting a new unsafe zone."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=500)
    center: GeoPoint
    radius_m: float = Field(500, ge=50, le=10_000)
    severity: str = Field("Medium", max_length=50)
    threat_type: ThreatType = "Other"
    expires_in_hours: int | None = Field(None, gt=0)
    additional_info: str | None = Field(None, max_length=1000)


class UnsafeZoneUpdate(BaseModel):
    status: ZoneStatus | None = None
    confirmation_count: int | None = Field(None, ge=0)
    additional_info: str | None = Field(None, max_length=1000)


class SafeRouteRequest(BaseModel):
    origin: GeoPoint
    destination: GeoPoint
    transport_mode: str | None = Field("driving", max_length=20)
    avoid_highways: bool = False


class NearbyUnsafeZone(UnsafeZone):
    distance_from_user_m: float | None = None


class WeatherAlertView(WeatherAlert):
    distance_km: float | None = None
    minutes_until_expiry: int | None = None


class DisasterAlertView(DisasterAlert):
    distance_km: float | None = None
    is_user_in_affected_area: bool = False


class SafeRouteResult(SafeRoute):
    """A stored route plus the unsafe zones considered while scoring it."""

    nearby_unsafe_zones: list[UnsafeZone] = Field(default_factory=list)


class DisasterStatistics(BaseModel):
    total_active_alerts: int = 0
    critical_alerts: int = 0
    alerts_by_type: dict[str, int] = Field(default_factory=dict)
    alerts_by_severity: dict[str, int] = Field(default_factory=dict)
    recent_alerts: list[DisasterAlert] = Field(default_factory=list)
