# jyotish_engine/core/houses.py
"""
Ascendant and equal-house cusps (mean obliquity, GMST from UT).
"""
from __future__ import annotations

import math
from typing import List

from jyotish_engine.config import DEFAULT_CONFIG
from jyotish_engine.core.angles import SIGN_SPAN, norm360, require_longitude
from jyotish_engine.core.errors import OutOfRangeError
from jyotish_engine.core.jd import julian_centuries


# ---------------------------------------------------------
# Obliquity of the ecliptic (mean) in degrees (Meeus)
# ---------------------------------------------------------
def mean_obliquity_deg(jd_ut: float) -> float:
    T = julian_centuries(jd_ut)
    eps0 = 84381.448 - 46.8150 * T - 0.00059 * (T * T) + 0.001813 * (T * T * T)
    return eps0 / 3600.0


# ---------------------------------------------------------
# Greenwich mean sidereal time (deg) + local sidereal
# ---------------------------------------------------------
def gmst_deg(jd_ut: float) -> float:
    T = julian_centuries(jd_ut)
    gmst = (
        280.46061837
        + 360.98564736629 * (jd_ut - DEFAULT_CONFIG.j2000)
        + 0.000387933 * (T * T)
        - (T * T * T) / 38710000.0
    )
    return norm360(gmst)


def lst_deg(jd_ut: float, lon_deg_east: float) -> float:
    return norm360(gmst_deg(jd_ut) + lon_deg_east)


def ascendant_tropical_deg(jd_ut: float, lat_deg: float, lon_deg_east: float) -> float:
    """
    asc = atan2(cos θ, -(sin θ cos ε + tan φ sin ε))
    θ = LST, φ = latitude, ε = obliquity. Undefined at the poles.
    """
    if not (-90.0 < float(lat_deg) < 90.0):
        raise OutOfRangeError(f"latitude must be inside (-90, 90), got {lat_deg}")

    theta = math.radians(lst_deg(jd_ut, require_longitude(lon_deg_east, "geographic longitude")))
    phi = math.radians(lat_deg)
    eps = math.radians(mean_obliquity_deg(jd_ut))

    y = math.cos(theta)
    x = -(math.sin(theta) * math.cos(eps) + math.tan(phi) * math.sin(eps))
    return norm360(math.degrees(math.atan2(y, x)))


def equal_house_cusps(asc_deg: float) -> List[float]:
    # 12 cusps: 1st = asc, then +30°
    return [norm360(asc_deg + i * SIGN_SPAN) for i in range(12)]


def house_of(lon: float, asc_deg: float) -> int:
    """Equal-house number 1..12 of a longitude."""
    return int(norm360(lon - asc_deg) // SIGN_SPAN) + 1
