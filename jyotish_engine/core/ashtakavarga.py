# jyotish_engine/core/ashtakavarga.py
"""
Bhinna Ashtakavarga: benefic points contributed to each of the 12 signs by
the 7 classical planets and the Ascendant, for one target planet.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping

from jyotish_engine.core.angles import SIGN_SPAN, norm360, require_longitude
from jyotish_engine.core.errors import OutOfRangeError, UnknownPlanetError, UnsupportedPlanetError
from jyotish_engine.core.models import AshtakavargaGrid

logger = logging.getLogger(__name__)

ASC = "Asc"

CLASSICAL_PLANETS = ["Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn"]

# benefic houses counted from each reference point, per target planet
ASHTAKAVARGA_RULES: Dict[str, Dict[str, List[int]]] = {
    "Sun": {
        "Sun": [1, 2, 4, 7, 8, 9, 10, 11],
        "Moon": [3, 6, 10, 11],
        "Mars": [1, 2, 4, 7, 8, 9, 10, 11],
        "Mercury": [3, 5, 6, 9, 10, 11, 12],
        "Jupiter": [5, 6, 9, 11],
        "Venus": [6, 7, 12],
        "Saturn": [1, 2, 4, 7, 8, 9, 10, 11],
        ASC: [3, 4, 6, 10, 11, 12],
    },
    "Moon": {
        "Sun": [3, 6, 7, 8, 10, 11],
        "Moon": [1, 3, 6, 7, 10, 11],
        "Mars": [2, 3, 5, 6, 9, 10, 11],
        "Mercury": [1, 3, 4, 5, 7, 8, 10, 11],
        "Jupiter": [1, 4, 7, 8, 10, 11, 12],
        "Venus": [3, 4, 5, 7, 9, 10, 11],
        "Saturn": [3, 5, 6, 11],
        ASC: [3, 6, 10, 11],
    },
    "Mars": {
        "Sun": [3, 5, 6, 10, 11],
        "Moon": [3, 6, 11],
        "Mars": [1, 2, 4, 7, 8, 10, 11],
        "Mercury": [3, 5, 6, 11],
        "Jupiter": [6, 10, 11, 12],
        "Venus": [6, 8, 11, 12],
        "Saturn": [1, 4, 7, 8, 9, 10, 11],
        ASC: [1, 3, 6, 10, 11],
    },
    "Mercury": {
        "Sun": [5, 6, 9, 11, 12],
        "Moon": [2, 4, 6, 8, 10, 11],
        "Mars": [1, 2, 4, 7, 8, 9, 10, 11],
        "Mercury": [1, 3, 5, 6, 9, 10, 11, 12],
        "Jupiter": [6, 8, 11, 12],
        "Venus": [1, 2, 3, 4, 5, 8, 9, 11],
        "Saturn": [1, 2, 4, 7, 8, 9, 10, 11],
        ASC: [1, 2, 4, 6, 8, 10, 11],
    },
    "Jupiter": {
        "Sun": [1, 2, 3, 4, 7, 8, 9, 10, 11],
        "Moon": [2, 5, 7, 9, 11],
        "Mars": [1, 2, 4, 7, 8, 10, 11],
        "Mercury": [1, 2, 4, 5, 6, 9, 10, 11],
        "Jupiter": [1, 2, 3, 4, 7, 8, 10, 11],
        "Venus": [2, 5, 6, 9, 10, 11],
        "Saturn": [3, 5, 6, 12],
        ASC: [1, 2, 4, 5, 6, 7, 9, 10, 11],
    },
    "Venus": {
        "Sun": [8, 11, 12],
        "Moon": [1, 2, 3, 4, 5, 8, 9, 11, 12],
        "Mars": [3, 5, 6, 9, 11, 12],
        "Mercury": [3, 5, 6, 9, 11],
        "Jupiter": [5, 8, 9, 10, 11],
        "Venus": [1, 2, 3, 4, 5, 8, 9, 10, 11],
        "Saturn": [3, 4, 5, 8, 9, 10, 11],
        ASC: [1, 2, 3, 4, 5, 8, 9, 11],
    },
    "Saturn": {
        "Sun": [1, 2, 4, 7, 8, 10, 11],
        "Moon": [3, 6, 11],
        "Mars": [3, 5, 6, 10, 11, 12],
        "Mercury": [6, 8, 9, 10, 11, 12],
        "Jupiter": [5, 6, 11, 12],
        "Venus": [6, 11, 12],
        "Saturn": [3, 5, 6, 11],
        ASC: [1, 3, 4, 6, 10, 11],
    },
}


def _sign_number(lon: float) -> int:
    """1..12, Aries = 1."""
    return int(norm360(lon) // SIGN_SPAN) + 1


def ashtakavarga(target_planet: str, longitudes: Mapping[str, float], ascendant_sign: int) -> AshtakavargaGrid:
    rules = ASHTAKAVARGA_RULES.get(target_planet)
    if rules is None:
        raise UnsupportedPlanetError(f"no Ashtakavarga rules for '{target_planet}'")

    if isinstance(ascendant_sign, bool) or int(ascendant_sign) != ascendant_sign or not (1 <= ascendant_sign <= 12):
        raise OutOfRangeError(f"ascendant sign must be 1..12, got {ascendant_sign!r}")

    bins = [0] * 12
    for source, benefic_houses in rules.items():
        if source == ASC:
            source_sign = int(ascendant_sign)
        else:
            if source not in longitudes:
                raise UnknownPlanetError(f"longitude for '{source}' is required for {target_planet} Ashtakavarga")
            source_sign = _sign_number(require_longitude(longitudes[source], f"{source} longitude"))

        for house in benefic_houses:
            bins[(source_sign + house - 2) % 12] += 1

    return AshtakavargaGrid(planet=target_planet, bins=bins)


def sarvashtakavarga(longitudes: Mapping[str, float], ascendant_sign: int) -> AshtakavargaGrid:
    """Element-wise sum of the seven planetary grids."""
    total = [0] * 12
    for planet in CLASSICAL_PLANETS:
        grid = ashtakavarga(planet, longitudes, ascendant_sign)
        total = [a + b for a, b in zip(total, grid.bins)]
    logger.debug("sarvashtakavarga total=%d", sum(total))
    return AshtakavargaGrid(planet="Sarva", bins=total)
