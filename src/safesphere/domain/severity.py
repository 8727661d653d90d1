"""
Severity vocabularies and minimum-severity filtering.

Each alert domain has its own ordered vocabulary. They look similar ("Severe"
exists in two of them, "High" in two) but rank differently, so each domain keeps
its own enum + rank table and the filter is always called with the table of the
domain being filtered.

Policy:
- an unknown severity string ranks as 1 (the lowest tier) instead of raising;
- an empty/missing minimum severity disables filtering.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Mapping, TypeVar

T = TypeVar("T")

DEFAULT_RANK = 1


class WeatherSeverity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    SEVERE = "Severe"
    EXTREME = "Extreme"


class DisasterSeverity(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    SEVERE = "Severe"
    EXTREME = "Extreme"


class ZoneSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


WEATHER_SEVERITY_RANKS: Mapping[str, int] = {
    WeatherSeverity.INFO.value: 1,
    WeatherSeverity.WARNING.value: 2,
    WeatherSeverity.SEVERE.value: 3,
    WeatherSeverity.EXTREME.value: 4,
}

DISASTER_SEVERITY_RANKS: Mapping[str, int] = {
    DisasterSeverity.LOW.value: 1,
    DisasterSeverity.MODERATE.value: 2,
    DisasterSeverity.HIGH.value: 3,
    DisasterSeverity.SEVERE.value: 4,
    DisasterSeverity.EXTREME.value: 5,
}

ZONE_SEVERITY_RANKS: Mapping[str, int] = {
    ZoneSeverity.LOW.value: 1,
    ZoneSeverity.MEDIUM.value: 2,
    ZoneSeverity.HIGH.value: 3,
    ZoneSeverity.CRITICAL.value: 4,
}


def severity_rank(value: str | Enum | None, ranks: Mapping[str, int]) -> int:
    """Look up the ordinal rank of `value`, defaulting to the lowest tier."""
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return DEFAULT_RANK
    return ranks.get(str(value), DEFAULT_RANK)


def _default_severity(item) -> str:
    return item.severity


def filter_by_severity(
    items: Iterable[T],
    minimum_severity: str | Enum | None,
    *,
    ranks: Mapping[str, int],
    severity_of: Callable[[T], str] = _default_severity,
) -> list[T]:
    """Keep items whose severity ranks at or above `minimum_severity` (order preserved)."""
    items = list(items)
    if isinstance(minimum_severity, Enum):
        minimum_severity = minimum_severity.value
    if not minimum_severity:
        return items
    min_rank = severity_rank(minimum_severity, ranks)
    return [it for it in items if severity_rank(severity_of(it), ranks) >= min_rank]


def filter_weather_alerts(items: Iterable[T], minimum_severity: str | None, **kwargs) -> list[T]:
    return filter_by_severity(items, minimum_severity, ranks=WEATHER_SEVERITY_RANKS, **kwargs)


def filter_disaster_alerts(items: Iterable[T], minimum_severity: str | None, **kwargs) -> list[T]:
    return filter_by_severity(items, minimum_severity, ranks=DISASTER_SEVERITY_RANKS, **kwargs)


def filter_unsafe_zones(items: Iterable[T], minimum_severity: str | None, **kwargs) -> list[T]:
    return filter_by_severity(items, minimum_severity, ranks=ZONE_SEVERITY_RANKS, **kwargs)
