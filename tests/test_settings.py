from __future__ import annotations

import pytest
from pydantic import ValidationError

from safesphere.config.settings import RadiusSettings, RoutingSettings, get_logging_config, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    # get_settings is cached process-wide; env-driven tests need a clean slate on both sides.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults():
    settings = get_settings()
    assert settings.app.timezone == "UTC"
    assert settings.storage.seed_path == "data/seed/alerts.json"
    assert settings.proximity.km_per_degree == 111.0
    assert (settings.unsafe_zones.default_radius_km, settings.unsafe_zones.max_radius_km) == (10, 500)
    assert (settings.weather_alerts.default_radius_km, settings.weather_alerts.max_radius_km) == (50, 500)
    assert (settings.disaster_alerts.default_radius_km, settings.disaster_alerts.max_radius_km) == (100, 1000)
    assert settings.disaster_alerts.critical_severities == ["Extreme", "Severe"]
    assert settings.routing.search_radius_km == 10


def test_routing_settings_build_scoring_config():
    cfg = get_settings().routing.scoring_config()
    assert cfg.safe_distance_m == 5000
    assert cfg.unsafe_distance_m == 100
    assert cfg.average_speed_mps == 15
    assert cfg.nearby_zones_limit == 5


def test_env_overrides_log_level_and_seed_path(monkeypatch):
    monkeypatch.setenv("SAFESPHERE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SAFESPHERE_SEED_PATH", "/tmp/other-seed.json")
    settings = get_settings()
    assert settings.app.log_level == "DEBUG"
    assert settings.storage.seed_path == "/tmp/other-seed.json"


def test_config_path_replaces_packaged_defaults(monkeypatch, tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("unsafe_zones:\n  default_radius_km: 2\n  max_radius_km: 20\n", encoding="utf-8")
    monkeypatch.setenv("SAFESPHERE_CONFIG_PATH", str(path))

    settings = get_settings()

    assert settings.unsafe_zones.max_radius_km == 20
    # Sections missing from the file fall back to model defaults.
    assert settings.weather_alerts.default_radius_km == 50


def test_config_path_with_non_mapping_root_is_rejected(monkeypatch, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SAFESPHERE_CONFIG_PATH", str(path))
    with pytest.raises(ValueError, match="expected a mapping"):
        get_settings()


def test_default_radius_must_not_exceed_max():
    with pytest.raises(ValidationError):
        RadiusSettings(default_radius_km=600, max_radius_km=500)


def test_routing_thresholds_must_be_ordered():
    with pytest.raises(ValidationError):
        RoutingSettings(safe_distance_m=50, unsafe_distance_m=100)


def test_logging_config_is_dictconfig_shaped():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]
