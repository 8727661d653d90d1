"""
Shared scoring utilities.

- `clamp`: keep a value within a closed range
- `clamp_score`: keep a safety score within 0..100 for stable UI/output
"""

from __future__ import annotations

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp a number into the [lo, hi] range."""
    return max(lo, min(hi, float(x)))


def clamp_score(x: float) -> float:
    return clamp(x, SCORE_MIN, SCORE_MAX)
