# jyotish_engine/core/ayanamsa.py
"""
Linear precession model (tropical -> sidereal), anchored at J2000.

    ayanamsa(jd) = base + rate_per_century * (jd - J2000) / 36525

base and rate come from EngineConfig; the KP preset shifts the base by
-0.1015 degrees (see jyotish_engine.config.AYANAMSA_PRESETS).
"""
from __future__ import annotations

from jyotish_engine.config import DEFAULT_CONFIG, EngineConfig
from jyotish_engine.core.angles import norm360, require_longitude
from jyotish_engine.core.jd import julian_centuries


def ayanamsa(jd: float, config: EngineConfig = DEFAULT_CONFIG) -> float:
    return config.ayanamsa_base_degrees + config.ayanamsa_rate_per_century * julian_centuries(jd, config)


def sidereal_longitude(tropical_longitude: float, jd: float, config: EngineConfig = DEFAULT_CONFIG) -> float:
    lon = require_longitude(tropical_longitude, "tropical longitude")
    return norm360(lon - ayanamsa(jd, config))
