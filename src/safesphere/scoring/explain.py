"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of scored routes.
"""

from __future__ import annotations

from safesphere.scoring.route_safety import RouteScore


def one_line_summary(score: RouteScore) -> str:
    """Render a compact single-line summary for a route score."""
    parts = [
        f"safety={score.safety_score:.1f}",
        f"distance={score.distance_m / 1000.0:.2f}km",
        f"duration={score.duration_s // 60}min",
        f"zones={len(score.nearby_zones)}",
    ]
    if score.min_zone_distance_m is not None:
        parts.append(f"closest_zone={score.min_zone_distance_m:.0f}m")
    return " | ".join(parts)
