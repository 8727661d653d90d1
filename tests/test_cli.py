from __future__ import annotations

import json

import pytest

from safesphere.cli import build_parser, main

SEED = {
    "unsafe_zones": [
        {
            "id": 1,
            "name": "Alley",
            "center": {"lat": 25.0480, "lon": 121.5172},
            "severity": "High",
            "created_at": "2026-01-01T00:00:00Z",
        }
    ],
    "weather_alerts": [
        {
            "id": 1,
            "location_name": "Taipei",
            "location": {"lat": 25.05, "lon": 121.52},
            "weather_condition": "Typhoon",
            "severity": "Extreme",
            "issued_at": "2026-01-15T10:00:00Z",
            "expires_at": "2026-01-15T13:00:00Z",
        }
    ],
    "disaster_alerts": [
        {
            "id": 1,
            "title": "River flood",
            "disaster_type": "Flood",
            "location": {"lat": 25.06, "lon": 121.52},
            "affected_radius_km": 5,
            "severity": "Extreme",
            "issued_at": "2026-01-15T10:00:00Z",
        }
    ],
}


@pytest.fixture
def seed_path(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED), encoding="utf-8")
    return str(path)


def test_parser_requires_a_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_zones_json(seed_path, capsys):
    rc = main(["zones", "--lat", "25.0478", "--lon", "121.5170", "--seed", seed_path, "--json"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert [z["name"] for z in data] == ["Alley"]


def test_weather_text_output_includes_expiry(seed_path, capsys):
    argv = ["weather", "--lat", "25.0478", "--lon", "121.5170", "--seed", seed_path, "--at", "2026-01-15T12:00:00Z"]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "Typhoon" in out
    assert "expires_in=60min" in out


def test_disasters_stats(seed_path, capsys):
    assert main(["disasters", "--stats", "--seed", seed_path, "--at", "2026-01-15T12:00:00Z"]) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats["critical_alerts"] == 1


def test_disasters_nearby_flags_affected_area(seed_path, capsys):
    argv = ["disasters", "--lat", "25.0478", "--lon", "121.5170", "--type", "FLOOD", "--seed", seed_path]
    assert main(argv) == 0
    assert "inside the affected area" in capsys.readouterr().out


def test_route_summary(seed_path, capsys):
    argv = [
        "route",
        "--origin-lat", "25.0478",
        "--origin-lon", "121.5170",
        "--dest-lat", "25.0330",
        "--dest-lon", "121.5654",
        "--seed", seed_path,
    ]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert out.startswith("safety=0.0")
    assert "Alley" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["zones", "--lat", "95", "--lon", "121.5"],
        ["weather", "--lat", "25.0", "--lon", "181"],
        ["disasters", "--lat", "-91", "--lon", "121.5"],
        ["route", "--origin-lat", "25.0", "--origin-lon", "121.5", "--dest-lat", "25.1", "--dest-lon", "200"],
    ],
)
def test_out_of_range_coordinates_exit_with_usage_error(seed_path, capsys, argv):
    rc = main([*argv, "--seed", seed_path])
    assert rc == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "safesphere: error: 1 validation error" in captured.err
