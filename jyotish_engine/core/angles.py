# jyotish_engine/core/angles.py
from __future__ import annotations

import math
from typing import Any

from jyotish_engine.core.errors import InvalidLongitudeError

SIGN_SPAN = 30.0

SIGN_NAMES = [
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]


def norm360(x: float) -> float:
    x = float(x) % 360.0
    # float modulo can round a tiny negative up to exactly 360.0
    if x >= 360.0:
        return 0.0
    return x if x >= 0 else x + 360.0


def require_longitude(value: Any, label: str = "longitude") -> float:
    """Coerce to float, rejecting None / NaN / infinities."""
    if value is None or isinstance(value, bool):
        raise InvalidLongitudeError(f"{label} is missing")
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidLongitudeError(f"{label} is not a number: {value!r}") from e
    if not math.isfinite(v):
        raise InvalidLongitudeError(f"{label} is not finite: {value!r}")
    return v


def circular_distance(a: float, b: float) -> float:
    """Shortest arc between two longitudes, 0..180."""
    diff = abs(float(a) - float(b)) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def sign_index(lon: float) -> int:
    return int(norm360(lon) // SIGN_SPAN)  # 0..11
