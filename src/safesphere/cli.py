"""
SafeSphere CLI entrypoint.

This CLI is intended for quick local checks against the seed data without the HTTP API.
It delegates all query logic to `safesphere.services`.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from pydantic import BaseModel

from safesphere.config.settings import get_settings
from safesphere.core.logging import configure_logging
from safesphere.core.time import parse_datetime
from safesphere.domain.models import GeoPoint
from safesphere.scoring.explain import one_line_summary
from safesphere.services import alerts as alert_service
from safesphere.services import routes as route_service
from safesphere.services import zones as zone_service
from safesphere.storage.loader import load_seed
from safesphere.storage.store import AlertStore


def _build_store(args: argparse.Namespace) -> AlertStore:
    settings = get_settings()
    return AlertStore(load_seed(args.seed or settings.storage.seed_path))


def _now(args: argparse.Namespace):
    if not args.at:
        return None
    return parse_datetime(args.at, get_settings().app.timezone)


def _print_models(items: list[BaseModel]) -> None:
    print(json.dumps([i.model_dump(mode="json") for i in items], ensure_ascii=False, indent=2))


def _cmd_zones(args: argparse.Namespace) -> int:
    """Handle the `zones` subcommand."""
    store = _build_store(args)
    zones = zone_service.nearby_unsafe_zones(
        store,
        GeoPoint(lat=args.lat, lon=args.lon),
        radius_km=args.radius_km,
        minimum_severity=args.min_severity,
        settings=get_settings(),
        now=_now(args),
    )
    if args.json:
        _print_models(zones)
        return 0
    for i, z in enumerate(zones, start=1):
        print(f"{i:>2}. {z.name} [{z.severity}/{z.threat_type}] {z.distance_from_user_m:.0f}m")
    return 0


def _cmd_weather(args: argparse.Namespace) -> int:
    store = _build_store(args)
    alerts = alert_service.nearby_weather_alerts(
        store,
        GeoPoint(lat=args.lat, lon=args.lon),
        radius_km=args.radius_km,
        minimum_severity=args.min_severity,
        settings=get_settings(),
        now=_now(args),
    )
    if args.json:
        _print_models(alerts)
        return 0
    for i, a in enumerate(alerts, start=1):
        expiry = f" expires_in={a.minutes_until_expiry}min" if a.minutes_until_expiry is not None else ""
        print(f"{i:>2}. {a.location_name}: {a.weather_condition} [{a.severity}] {a.distance_km:.1f}km{expiry}")
    return 0


def _cmd_disasters(args: argparse.Namespace) -> int:
    store = _build_store(args)
    settings = get_settings()
    if args.stats:
        stats = alert_service.disaster_statistics(store, settings=settings, now=_now(args))
        print(json.dumps(stats.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0
    if args.lat is None or args.lon is None:
        raise SystemExit("disasters: --lat and --lon are required unless --stats is given")

    alerts = alert_service.nearby_disaster_alerts(
        store,
        GeoPoint(lat=args.lat, lon=args.lon),
        radius_km=args.radius_km,
        disaster_type=args.type,
        minimum_severity=args.min_severity,
        settings=settings,
        now=_now(args),
    )
    if args.json:
        _print_models(alerts)
        return 0
    for i, a in enumerate(alerts, start=1):
        inside = " (you are inside the affected area)" if a.is_user_in_affected_area else ""
        print(f"{i:>2}. {a.title} [{a.disaster_type}/{a.severity}] {a.distance_km:.1f}km{inside}")
    return 0


def _cmd_route(args: argparse.Namespace) -> int:
    store = _build_store(args)
    scored = route_service.score_between(
        store,
        GeoPoint(lat=args.origin_lat, lon=args.origin_lon),
        GeoPoint(lat=args.dest_lat, lon=args.dest_lon),
        settings=get_settings(),
        now=_now(args),
    )
    if args.json:
        payload = {
            "coordinates": [{"lat": p.lat, "lng": p.lon} for p in scored.coordinates],
            "distance_m": scored.distance_m,
            "duration_s": scored.duration_s,
            "safety_score": scored.safety_score,
            "unsafe_zones_avoided": scored.unsafe_zones_avoided,
            "nearby_unsafe_zones": [z.model_dump(mode="json") for z in scored.nearby_zones],
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0
    print(one_line_summary(scored))
    for z in scored.nearby_zones:
        print(f"    - {z.name} [{z.severity}/{z.threat_type}]")
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--seed", type=str, default=None, help="Seed JSON path (defaults to storage.seed_path)")
    p.add_argument("--at", type=str, default=None, help="Evaluate at this ISO datetime instead of now")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")


def _add_location(p: argparse.ArgumentParser, *, required: bool = True) -> None:
    p.add_argument("--lat", required=required, type=float, default=None)
    p.add_argument("--lon", required=required, type=float, default=None)
    p.add_argument("--radius-km", type=float, default=None, help="Search radius; omit for the configured default")
    p.add_argument("--min-severity", type=str, default=None)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the SafeSphere CLI."""
    parser = argparse.ArgumentParser(prog="safesphere")
    parser.add_argument("--log-level", type=str, default=None, help="Override app.log_level (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    z = sub.add_parser("zones", help="Active unsafe zones near a location, nearest first.")
    _add_location(z)
    _add_common(z)
    z.set_defaults(func=_cmd_zones)

    w = sub.add_parser("weather", help="Current weather alerts near a location.")
    _add_location(w)
    _add_common(w)
    w.set_defaults(func=_cmd_weather)

    d = sub.add_parser("disasters", help="Current disaster alerts near a location, or statistics.")
    _add_location(d, required=False)
    d.add_argument("--type", type=str, default=None, help="Disaster type filter (case-insensitive)")
    d.add_argument("--stats", action="store_true", help="Print active-alert statistics instead")
    _add_common(d)
    d.set_defaults(func=_cmd_disasters)

    r = sub.add_parser("route", help="Score the straight route between two points.")
    r.add_argument("--origin-lat", required=True, type=float)
    r.add_argument("--origin-lon", required=True, type=float)
    r.add_argument("--dest-lat", required=True, type=float)
    r.add_argument("--dest-lon", required=True, type=float)
    _add_common(r)
    r.set_defaults(func=_cmd_route)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m safesphere.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ValueError as e:
        # Out-of-range coordinates, radii and malformed seed files.
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
