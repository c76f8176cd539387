# jyotish_engine/core/varga.py
"""
Divisional (varga) charts.

Each sign of 30° is cut into N sectors of 30/N degrees. The generic rule maps
sector k of source sign s to sign (s*N + k) mod 12; Hora, Drekkana, Navamsa
and Dashamsa use their own starting signs instead.
"""
from __future__ import annotations

from typing import Dict, Mapping

from jyotish_engine.core.angles import SIGN_NAMES, SIGN_SPAN, norm360, require_longitude
from jyotish_engine.core.errors import OutOfRangeError
from jyotish_engine.core.models import VargaPosition

DIVISION_NAMES: Dict[int, str] = {
    1: "Rasi",
    2: "Hora",
    3: "Drekkana",
    4: "Chaturthamsa",
    7: "Saptamsa",
    9: "Navamsa",
    10: "Dashamsa",
    12: "Dwadasamsa",
    16: "Shodasamsa",
    20: "Vimsamsa",
    24: "Chaturvimsamsa",
    27: "Saptavimsamsa",
    30: "Trimsamsa",
    40: "Khavedamsa",
    45: "Akshavedamsa",
    60: "Shashtiamsa",
}

# Navamsa start sign per source sign: Aries, Sagittarius, Leo repeating
NAVAMSA_START = [0, 8, 4, 0, 8, 4, 0, 8, 4, 0, 8, 4]

LEO = 4
CANCER = 3

MAX_DIVISION = 300


def _target_sign(source: int, arc: float, sector: int, division: int) -> int:
    if division == 2:
        # index 0, 2, 4 ... are the odd signs (Aries, Gemini, ...)
        odd_sign = source % 2 == 0
        first_half = arc <= 15.0
        if odd_sign:
            return LEO if first_half else CANCER
        return CANCER if first_half else LEO

    if division == 3:
        return (source + sector * 4) % 12

    if division == 9:
        return (NAVAMSA_START[source] + sector) % 12

    if division == 10:
        start = source if source % 2 == 0 else (source + 8) % 12
        return (start + sector) % 12

    return (source * division + sector) % 12


def varga_position(longitude: float, division: int) -> VargaPosition:
    if isinstance(division, bool) or int(division) != division:
        raise OutOfRangeError(f"division must be an integer, got {division!r}")
    division = int(division)
    if not (1 <= division <= MAX_DIVISION):
        raise OutOfRangeError(f"division {division} outside 1..{MAX_DIVISION}")

    lon = norm360(require_longitude(longitude))
    source = int(lon // SIGN_SPAN)
    arc = lon - source * SIGN_SPAN
    varga_arc = SIGN_SPAN / division
    sector = min(int(arc // varga_arc), division - 1)

    target = _target_sign(source, arc, sector, division)
    within = (arc - sector * varga_arc) * division

    return VargaPosition(
        division=division,
        target_sign=target,
        sign_name=SIGN_NAMES[target],
        degrees_in_sign=min(max(within, 0.0), SIGN_SPAN),
    )


def varga_chart(longitudes: Mapping[str, float], division: int) -> Dict[str, VargaPosition]:
    return {name: varga_position(lon, division) for name, lon in longitudes.items()}


def division_name(division: int) -> str:
    return DIVISION_NAMES.get(int(division), f"D{int(division)}")
