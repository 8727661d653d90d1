from __future__ import annotations

from dataclasses import dataclass

import pytest

from safesphere.domain.severity import (
    DEFAULT_RANK,
    DISASTER_SEVERITY_RANKS,
    WEATHER_SEVERITY_RANKS,
    ZONE_SEVERITY_RANKS,
    DisasterSeverity,
    WeatherSeverity,
    filter_by_severity,
    filter_disaster_alerts,
    filter_unsafe_zones,
    filter_weather_alerts,
    severity_rank,
)


@dataclass
class Item:
    name: str
    severity: str


def _names(items):
    return [i.name for i in items]


def test_rank_tables_are_strictly_ordered():
    assert [WEATHER_SEVERITY_RANKS[s.value] for s in WeatherSeverity] == [1, 2, 3, 4]
    assert [DISASTER_SEVERITY_RANKS[s.value] for s in DisasterSeverity] == [1, 2, 3, 4, 5]
    assert ZONE_SEVERITY_RANKS["Critical"] > ZONE_SEVERITY_RANKS["High"] > ZONE_SEVERITY_RANKS["Medium"]


def test_same_label_ranks_differently_per_domain():
    assert severity_rank("Severe", WEATHER_SEVERITY_RANKS) == 3
    assert severity_rank("Severe", DISASTER_SEVERITY_RANKS) == 4


@pytest.mark.parametrize("value", ["Catastrophic", "", None, "severe"])
def test_unknown_severity_ranks_lowest(value):
    assert severity_rank(value, WEATHER_SEVERITY_RANKS) == DEFAULT_RANK == 1


def test_weather_filter_keeps_at_or_above_minimum_in_input_order():
    items = [Item("a", "Extreme"), Item("b", "Info"), Item("c", "Severe"), Item("d", "Warning")]
    assert _names(filter_weather_alerts(items, "Severe")) == ["a", "c"]
    assert _names(filter_weather_alerts(items, "Warning")) == ["a", "c", "d"]


@pytest.mark.parametrize("minimum", [None, ""])
def test_empty_minimum_returns_everything(minimum):
    items = [Item("a", "Info"), Item("b", "Bogus")]
    assert _names(filter_weather_alerts(items, minimum)) == ["a", "b"]


def test_unknown_item_severity_only_passes_lowest_threshold():
    items = [Item("known", "High"), Item("odd", "Apocalyptic")]
    assert _names(filter_disaster_alerts(items, "Moderate")) == ["known"]
    assert _names(filter_disaster_alerts(items, "Low")) == ["known", "odd"]


def test_unknown_minimum_behaves_like_lowest_tier():
    items = [Item("a", "Low"), Item("b", "High")]
    assert _names(filter_unsafe_zones(items, "Whatever")) == ["a", "b"]


def test_filter_accepts_enum_minimum_and_custom_accessor():
    items = [("x", "Extreme"), ("y", "Moderate")]
    out = filter_by_severity(
        items,
        DisasterSeverity.SEVERE,
        ranks=DISASTER_SEVERITY_RANKS,
        severity_of=lambda pair: pair[1],
    )
    assert out == [("x", "Extreme")]


def test_zone_filter_uses_zone_vocabulary():
    items = [Item("a", "Critical"), Item("b", "Medium"), Item("c", "Low")]
    assert _names(filter_unsafe_zones(items, "Medium")) == ["a", "b"]
