# jyotish_engine/core/shadbala.py
"""
Six-fold planetary strength (Shadbala), in Virupas.

    total = sthana + dig + kala + drig + naisargika + cheshta
    pinda = total / 60

The positional and temporal terms are the simplified forms: exaltation
proximity plus a flat baseline, and day/night affinity plus lunar phase plus a
flat baseline. Several classical sub-terms are not modelled.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from jyotish_engine.core.angles import circular_distance, norm360, require_longitude
from jyotish_engine.core.errors import InvalidLongitudeError, UnknownPlanetError
from jyotish_engine.core.models import BirthContext, ShadbalaBreakdown, ShadbalaResult

logger = logging.getLogger(__name__)

VIRUPAS_PER_RUPA = 60.0

EXALTATION_POINTS: Dict[str, float] = {
    "Sun": 10.0, "Moon": 33.0, "Mars": 298.0, "Mercury": 165.0,
    "Jupiter": 95.0, "Venus": 357.0, "Saturn": 200.0,
}

NAISARGIKA_BALA: Dict[str, float] = {
    "Sun": 60.00, "Moon": 51.43, "Venus": 42.86, "Jupiter": 34.29,
    "Mercury": 25.71, "Mars": 17.14, "Saturn": 8.57,
}

# favoured house cusp (0-based): 1st, 4th, 7th, 10th
DIG_CUSP_INDEX: Dict[str, int] = {
    "Jupiter": 0, "Mercury": 0,
    "Moon": 3, "Venus": 3,
    "Saturn": 6,
    "Sun": 9, "Mars": 9,
}

AVERAGE_VELOCITY: Dict[str, float] = {
    "Mars": 0.5, "Mercury": 1.2, "Jupiter": 0.08, "Venus": 1.2, "Saturn": 0.03,
}

DAY_STRONG = ("Sun", "Jupiter", "Venus", "Mercury")
NIGHT_STRONG = ("Moon", "Mars", "Saturn", "Mercury")

BENEFICS = ("Jupiter", "Venus", "Moon", "Mercury")

STHANA_BASELINE = 30.0
KALA_BASELINE = 15.0
LUMINARY_CHESHTA = 30.0

PLANETS: List[str] = list(EXALTATION_POINTS)


def _falloff(diff: float) -> float:
    return (180.0 - diff) / 3.0


def sthana_bala(planet: str, lon: float) -> float:
    return _falloff(circular_distance(lon, EXALTATION_POINTS[planet])) + STHANA_BASELINE


def dig_bala(planet: str, lon: float, cusps: Sequence[float]) -> float:
    target = cusps[DIG_CUSP_INDEX[planet]]
    return _falloff(circular_distance(lon, target))


def kala_bala(planet: str, sun_lon: float, moon_lon: float, is_day_birth: bool) -> float:
    if is_day_birth:
        nathonnata = 60.0 if planet in DAY_STRONG else 0.0
    else:
        nathonnata = 60.0 if planet in NIGHT_STRONG else 0.0

    phase = norm360(moon_lon - sun_lon)
    if phase > 180.0:
        phase = 360.0 - phase
    paksha = phase / 3.0

    return nathonnata + paksha + KALA_BASELINE


def aspect_strength(diff: float) -> float:
    """
    Piecewise-linear drishti value over the aspecting separation, zero
    outside [30, 300].
    """
    if diff < 30.0 or diff > 300.0:
        return 0.0
    if diff <= 60.0:
        return (diff - 30.0) / 2.0
    if diff <= 90.0:
        return 15.0 + (diff - 60.0)
    if diff <= 120.0:
        return 45.0 - (diff - 90.0) * 1.5
    if diff <= 180.0:
        return (diff - 150.0) * 2.0
    return 60.0 - (diff - 180.0) / 2.0


def drig_bala(planet: str, lon: float, longitudes: Mapping[str, float]) -> float:
    total = 0.0
    for other, other_lon in longitudes.items():
        if other == planet:
            continue
        val = aspect_strength(norm360(lon - float(other_lon)))
        total += (val if other in BENEFICS else -val) / 4.0
    return total


def cheshta_bala(planet: str, velocity: Optional[float]) -> float:
    if planet in ("Sun", "Moon"):
        return LUMINARY_CHESHTA
    if velocity is None:
        raise UnknownPlanetError(f"velocity for '{planet}' is required for Cheshta Bala")
    if velocity < 0:
        return 60.0
    avg = AVERAGE_VELOCITY.get(planet, 1.0)
    return min(60.0, max(0.0, 60.0 - (velocity / avg) * 30.0))


def _check_cusps(cusps: Sequence[float]) -> List[float]:
    if cusps is None or len(cusps) != 12:
        raise InvalidLongitudeError("cusps must hold 12 house longitudes")
    return [norm360(require_longitude(c, f"cusp {i + 1}")) for i, c in enumerate(cusps)]


def shadbala(
    planet: str,
    longitudes: Mapping[str, float],
    moon_lon: float,
    sun_lon: float,
    cusps: Sequence[float],
    birth: BirthContext,
) -> ShadbalaResult:
    if planet not in EXALTATION_POINTS:
        raise UnknownPlanetError(f"no Shadbala tables for '{planet}'")
    if planet not in longitudes:
        raise UnknownPlanetError(f"longitude for '{planet}' is missing")

    lons = {k: norm360(require_longitude(v, f"{k} longitude")) for k, v in longitudes.items()}
    lon = lons[planet]
    moon = norm360(require_longitude(moon_lon, "moon longitude"))
    sun = norm360(require_longitude(sun_lon, "sun longitude"))
    cusp_list = _check_cusps(cusps)

    breakdown = ShadbalaBreakdown(
        sthana=sthana_bala(planet, lon),
        dig=dig_bala(planet, lon, cusp_list),
        kala=kala_bala(planet, sun, moon, birth.is_day_birth),
        drig=drig_bala(planet, lon, lons),
        naisargika=NAISARGIKA_BALA[planet],
        cheshta=cheshta_bala(planet, birth.velocity),
    )
    total = (
        breakdown.sthana + breakdown.dig + breakdown.kala
        + breakdown.drig + breakdown.naisargika + breakdown.cheshta
    )
    return ShadbalaResult(
        planet=planet,
        breakdown=breakdown,
        total_virupas=total,
        pinda=total / VIRUPAS_PER_RUPA,
    )


def shadbala_all(
    longitudes: Mapping[str, float],
    velocities: Mapping[str, float],
    cusps: Sequence[float],
    is_day_birth: bool,
) -> Dict[str, ShadbalaResult]:
    """
    Shadbala for each classical planet present in `longitudes`, strongest first.
    """
    if "Sun" not in longitudes or "Moon" not in longitudes:
        raise UnknownPlanetError("Sun and Moon longitudes are required")

    results = []
    for planet in PLANETS:
        if planet not in longitudes:
            logger.debug("shadbala: skipping %s (no longitude)", planet)
            continue
        birth = BirthContext(is_day_birth=is_day_birth, velocity=velocities.get(planet))
        results.append(
            shadbala(planet, longitudes, longitudes["Moon"], longitudes["Sun"], cusps, birth)
        )

    results.sort(key=lambda r: r.total_virupas, reverse=True)
    return {r.planet: r for r in results}
