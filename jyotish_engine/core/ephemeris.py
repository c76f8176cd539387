# jyotish_engine/core/ephemeris.py
"""
Tropical geocentric longitudes for the nine grahas.

MeanEphemeris     analytic series, no data files (arc-minute class accuracy
                  near the present, degrading far from J2000)
SkyfieldEphemeris NASA JPL kernel through skyfield, loaded lazily

Rahu is the mean lunar node; Ketu is Rahu + 180.
"""
from __future__ import annotations

import logging
import math
import threading
from typing import Dict, List, Optional, Protocol, Tuple

from skyfield import almanac
from skyfield.api import load, wgs84
from skyfield.framelib import ecliptic_frame

from jyotish_engine.core.angles import norm360
from jyotish_engine.core.errors import InvalidIntervalError, UnknownPlanetError
from jyotish_engine.core.jd import julian_centuries

logger = logging.getLogger(__name__)

GRAHAS: List[str] = ["Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu"]

# step for the central-difference speed, in days (1 minute)
SPEED_STEP = 1.0 / 1440.0


class EphemerisProvider(Protocol):
    def longitude_of(self, body: str, jd_ut: float) -> float: ...

    def velocity_of(self, body: str, jd_ut: float) -> float: ...


def _wrap180(d: float) -> float:
    if d > 180.0:
        d -= 360.0
    if d < -180.0:
        d += 360.0
    return d


def central_difference(fn, jd_ut: float, step: float = SPEED_STEP) -> float:
    """deg/day from longitudes at jd +/- step, unwrapped across 0/360."""
    d = _wrap180(fn(jd_ut + step) - fn(jd_ut - step))
    return d / (2.0 * step)


# ---------------------------------------------------------
# Mean Lunar Node (Rahu) tropical longitude (Meeus)
# ---------------------------------------------------------
def mean_lunar_node_tropical_deg(jd_ut: float) -> float:
    T = julian_centuries(jd_ut)
    Om = (
        125.04452
        - 1934.136261 * T
        + 0.0020708 * (T * T)
        + (T * T * T) / 450000.0
    )
    return norm360(Om)


def sun_longitude_and_radius(jd_ut: float) -> Tuple[float, float]:
    """Geometric longitude (deg) and radius vector (AU), Meeus ch. 25."""
    T = julian_centuries(jd_ut)
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
    M = math.radians(357.52911 + 35999.05029 * T - 0.0001537 * T * T)
    e = 0.016708634 - 0.000042037 * T - 0.0000001267 * T * T

    C = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
        + (0.019993 - 0.000101 * T) * math.sin(2 * M)
        + 0.000289 * math.sin(3 * M)
    )
    v = M + math.radians(C)
    R = (1.000001018 * (1 - e * e)) / (1 + e * math.cos(v))
    return norm360(L0 + C), R


# main periodic terms of the lunar longitude, Meeus table 47.A
# (D, M, M', F, coefficient in 1e-6 deg)
_MOON_TERMS = [
    (0, 0, 1, 0, 6288774),
    (2, 0, -1, 0, 1274027),
    (2, 0, 0, 0, 658314),
    (0, 0, 2, 0, 213618),
    (0, 1, 0, 0, -185116),
    (0, 0, 0, 2, -114332),
    (2, 0, -2, 0, 58793),
    (2, -1, -1, 0, 57066),
    (2, 0, 1, 0, 53322),
    (2, -1, 0, 0, 45758),
    (0, 1, -1, 0, -40923),
    (1, 0, 0, 0, -34720),
    (0, 1, 1, 0, -30383),
    (2, 0, 0, -2, 15327),
    (0, 0, 1, 2, -12528),
    (0, 0, 1, -2, 10980),
    (4, 0, -1, 0, 10675),
    (0, 0, 3, 0, 10034),
    (4, 0, -2, 0, 8548),
    (2, 1, -1, 0, -7888),
    (2, 1, 0, 0, -6766),
    (1, 0, -1, 0, -5163),
    (1, 1, 0, 0, 4987),
    (2, -1, 1, 0, 4036),
    (2, 0, 2, 0, 3994),
    (4, 0, 0, 0, 3861),
    (2, 0, -3, 0, 3665),
    (0, 1, -2, 0, -2689),
]


def moon_longitude_deg(jd_ut: float) -> float:
    T = julian_centuries(jd_ut)
    Lp = 218.3164477 + 481267.88123421 * T - 0.0015786 * T * T + T ** 3 / 538841.0
    D = math.radians(297.8501921 + 445267.1114034 * T - 0.0018819 * T * T + T ** 3 / 545868.0)
    M = math.radians(357.5291092 + 35999.0502909 * T - 0.0001536 * T * T + T ** 3 / 24490000.0)
    Mp = math.radians(134.9633964 + 477198.8675055 * T + 0.0087414 * T * T + T ** 3 / 69699.0)
    F = math.radians(93.2720950 + 483202.0175233 * T - 0.0036539 * T * T - T ** 3 / 3526000.0)
    E = 1.0 - 0.002516 * T - 0.0000074 * T * T

    sl = 0.0
    for d, m, mp, f, coeff in _MOON_TERMS:
        term = coeff * math.sin(d * D + m * M + mp * Mp + f * F)
        if abs(m) == 1:
            term *= E
        elif abs(m) == 2:
            term *= E * E
        sl += term

    return norm360(Lp + sl / 1_000_000.0)


# Meeus table 33.a style mean elements:
# L, a, e, i, node, arg. of perihelion; angular terms are (value, rate per century)
_ELEMENTS: Dict[str, Dict[str, Tuple[float, float]]] = {
    "Mercury": {
        "L": (252.2509, 149474.0722), "a": (0.387098, 0.0), "e": (0.205636, -0.00005),
        "i": (7.0050, -0.0059), "node": (48.3313, 1.1861), "w": (29.1241, 1.7001),
    },
    "Venus": {
        "L": (181.9798, 58517.8160), "a": (0.723330, 0.0), "e": (0.006773, -0.00005),
        "i": (3.3947, -0.0008), "node": (76.6799, 0.9011), "w": (131.5794, 1.4080),
    },
    "Mars": {
        "L": (355.4333, 19140.2993), "a": (1.523688, 0.0), "e": (0.093405, 0.000092),
        "i": (1.8497, -0.0007), "node": (49.5574, 0.7721), "w": (286.5016, 0.0193),
    },
    "Jupiter": {
        "L": (34.3515, 3034.9057), "a": (5.202561, 0.0), "e": (0.048498, 0.000163),
        "i": (1.3030, -0.0019), "node": (100.4542, 1.0298), "w": (273.8777, 0.3314),
    },
    "Saturn": {
        "L": (50.0774, 1222.1138), "a": (9.554747, 0.0), "e": (0.055546, -0.000347),
        "i": (2.4886, -0.0037), "node": (113.6634, 0.8765), "w": (339.3939, 0.3396),
    },
}


def _solve_kepler(M: float, e: float, iterations: int = 10) -> float:
    E = M + e * math.sin(M)
    for _ in range(iterations):
        E = E - (E - e * math.sin(E) - M) / (1 - e * math.cos(E))
    return E


def _heliocentric(planet: str, T: float) -> Tuple[float, float, float]:
    """(longitude deg, latitude deg, radius AU)"""
    el = {k: v0 + v1 * T for k, (v0, v1) in _ELEMENTS[planet].items()}
    M = math.radians(norm360(el["L"] - el["w"] - el["node"]))
    e = el["e"]
    E = _solve_kepler(M, e)

    v = 2.0 * math.atan2(math.sqrt(1 + e) * math.sin(E / 2), math.sqrt(1 - e) * math.cos(E / 2))
    r = el["a"] * (1 - e * math.cos(E))

    u = v + math.radians(el["w"])
    i = math.radians(el["i"])
    lat = math.asin(math.sin(i) * math.sin(u))
    lon = math.atan2(math.sin(u) * math.cos(i), math.cos(u)) + math.radians(el["node"])
    return norm360(math.degrees(lon)), math.degrees(lat), r


def planet_longitude_deg(planet: str, jd_ut: float) -> float:
    """Geocentric longitude: planet vector minus Earth vector (Earth = Sun + 180)."""
    T = julian_centuries(jd_ut)
    l, b, r = _heliocentric(planet, T)
    sun_lon, sun_r = sun_longitude_and_radius(jd_ut)
    l0 = math.radians(sun_lon + 180.0)

    lr, br = math.radians(l), math.radians(b)
    x = r * math.cos(br) * math.cos(lr) - sun_r * math.cos(l0)
    y = r * math.cos(br) * math.sin(lr) - sun_r * math.sin(l0)
    return norm360(math.degrees(math.atan2(y, x)))


class MeanEphemeris:
    """Analytic positions; needs no kernel, so it works offline and in tests."""

    name = "mean"

    def longitude_of(self, body: str, jd_ut: float) -> float:
        jd_ut = float(jd_ut)
        if body == "Sun":
            return sun_longitude_and_radius(jd_ut)[0]
        if body == "Moon":
            return moon_longitude_deg(jd_ut)
        if body == "Rahu":
            return mean_lunar_node_tropical_deg(jd_ut)
        if body == "Ketu":
            return norm360(mean_lunar_node_tropical_deg(jd_ut) + 180.0)
        if body in _ELEMENTS:
            return planet_longitude_deg(body, jd_ut)
        raise UnknownPlanetError(f"no ephemeris for '{body}'")

    def velocity_of(self, body: str, jd_ut: float) -> float:
        return central_difference(lambda t: self.longitude_of(body, t), float(jd_ut))


class SkyfieldEphemeris:
    """
    Apparent ecliptic-of-date longitudes from a JPL kernel. The kernel and the
    timescale are loaded once, on first use.
    """

    name = "skyfield"

    BODIES = {
        "Sun": "sun",
        "Moon": "moon",
        "Mercury": "mercury",
        "Venus": "venus",
        "Mars": "mars barycenter",
        "Jupiter": "jupiter barycenter",
        "Saturn": "saturn barycenter",
    }

    def __init__(self, kernel_file: str = "de440s.bsp"):
        self.kernel_file = kernel_file
        self._ts = None
        self._eph = None
        self._lock = threading.Lock()

    def _ensure_loaded(self):
        with self._lock:
            if self._ts is None or self._eph is None:
                logger.info("loading ephemeris kernel %s", self.kernel_file)
                self._ts = load.timescale()
                self._eph = load(self.kernel_file)
        return self._ts, self._eph

    def _time(self, jd_ut: float):
        ts, _ = self._ensure_loaded()
        return ts.ut1_jd(float(jd_ut))

    def longitude_of(self, body: str, jd_ut: float) -> float:
        if body == "Rahu":
            return mean_lunar_node_tropical_deg(jd_ut)
        if body == "Ketu":
            return norm360(mean_lunar_node_tropical_deg(jd_ut) + 180.0)
        key = self.BODIES.get(body)
        if key is None:
            raise UnknownPlanetError(f"no ephemeris for '{body}'")

        _, eph = self._ensure_loaded()
        t = self._time(jd_ut)
        astrometric = eph["earth"].at(t).observe(eph[key]).apparent()
        _, lon, _ = astrometric.frame_latlon(ecliptic_frame)
        return norm360(lon.degrees)

    def velocity_of(self, body: str, jd_ut: float) -> float:
        return central_difference(lambda t: self.longitude_of(body, t), float(jd_ut))

    def sunrise_sunset(self, jd_ut: float, latitude: float, longitude: float) -> Tuple[float, float]:
        """
        First sunrise at or after jd_ut - 0.5 and the following sunset, as UT JDs.
        """
        ts, eph = self._ensure_loaded()
        topos = wgs84.latlon(latitude_degrees=float(latitude), longitude_degrees=float(longitude))
        f = almanac.sunrise_sunset(eph, topos)

        t0 = ts.ut1_jd(float(jd_ut) - 0.5)
        t1 = ts.ut1_jd(float(jd_ut) + 1.5)
        times, events = almanac.find_discrete(t0, t1, f)

        sunrise: Optional[float] = None
        for ti, ev in zip(times, events):
            if bool(ev) and sunrise is None:
                sunrise = float(ti.ut1)
            elif not bool(ev) and sunrise is not None:
                return sunrise, float(ti.ut1)

        raise InvalidIntervalError(f"no sunrise/sunset pair near JD {jd_ut} at ({latitude}, {longitude})")


def build_ephemeris(kind: str, kernel_file: str = "de440s.bsp") -> EphemerisProvider:
    if kind == "skyfield":
        return SkyfieldEphemeris(kernel_file)
    if kind == "mean":
        return MeanEphemeris()
    raise ValueError(f"unknown ephemeris kind: {kind!r}")
