"""
Time parsing and timezone normalization.

Alert expiry compares stored timestamps against "now", so every timestamp in the
system is timezone-aware. Naive values are interpreted as UTC, matching how the
store writes them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_tz(dt: datetime, tz_name: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `tz_name` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(tz_name))
    return dt


def ensure_utc(dt: datetime) -> datetime:
    return ensure_tz(dt, "UTC")


def parse_datetime(value: str, tz_name: str = "UTC") -> datetime:
    """Parse an ISO-8601 datetime string and ensure tzinfo is present.

    Accepts a trailing `Z` (UTC). Naive values get `tz_name` attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, tz_name)


def minutes_until(expires_at: datetime, now: datetime) -> int:
    """Whole minutes from `now` until `expires_at`, never negative."""
    minutes = (expires_at - now).total_seconds() / 60.0
    return int(max(0.0, minutes))
