# jyotish_engine/core/engine.py
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from jyotish_engine.config import DEFAULT_CONFIG, EngineConfig, normalize_ayanamsa_name, with_ayanamsa
from jyotish_engine.core import ashtakavarga as _ashtakavarga
from jyotish_engine.core import dasha as _dasha
from jyotish_engine.core import muhurta as _muhurta
from jyotish_engine.core import panchang as _panchang
from jyotish_engine.core import shadbala as _shadbala
from jyotish_engine.core import varga as _varga
from jyotish_engine.core.angles import norm360, sign_index
from jyotish_engine.core.ayanamsa import ayanamsa, sidereal_longitude
from jyotish_engine.core.ephemeris import GRAHAS, EphemerisProvider, MeanEphemeris
from jyotish_engine.core.houses import ascendant_tropical_deg, equal_house_cusps, house_of
from jyotish_engine.core.jd import jd_to_iso, to_julian_day
from jyotish_engine.core.models import (
    AshtakavargaGrid,
    BirthChart,
    BirthContext,
    DashaPeriod,
    DashaTimeline,
    MuhurtaWindows,
    NakshatraInfo,
    Panchang,
    PlanetPos,
    ShadbalaResult,
    VargaPosition,
)
from jyotish_engine.core.nakshatra import nakshatra_of

logger = logging.getLogger(__name__)


class JyotishEngine:
    """
    Single entry point over the calculators.

    This class:
    - Holds an immutable EngineConfig and an ephemeris provider
    - Delegates every operation to the pure module functions
    - Has no per-call state, so one instance serves concurrent callers
    """

    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        ephemeris: Optional[EphemerisProvider] = None,
        ayanamsa_name: str = "LAHIRI",
    ):
        self.config = config
        self.ephemeris = ephemeris or MeanEphemeris()
        # preset already applied to config.ayanamsa_base_degrees
        self.ayanamsa_name = normalize_ayanamsa_name(ayanamsa_name)

    # ─────────────────────────────────────────────
    # Time / reference frame
    # ─────────────────────────────────────────────

    def to_julian_day(self, year, month, day, hour=0, minute=0, second=0.0, tz_offset_hours=0.0) -> float:
        return to_julian_day(year, month, day, hour, minute, second, tz_offset_hours, config=self.config)

    def ayanamsa(self, jd: float) -> float:
        return ayanamsa(jd, self.config)

    def sidereal_longitude(self, tropical_longitude: float, jd: float) -> float:
        return sidereal_longitude(tropical_longitude, jd, self.config)

    def nakshatra_of(self, moon_longitude: float) -> NakshatraInfo:
        return nakshatra_of(moon_longitude)

    # ─────────────────────────────────────────────
    # Calculators
    # ─────────────────────────────────────────────

    def panchang(self, sun_lon: float, moon_lon: float, jd: float) -> Panchang:
        return _panchang.compute_panchang(sun_lon, moon_lon, jd)

    def muhurta_windows(self, sunrise_jd: float, sunset_jd: float, jd: float) -> MuhurtaWindows:
        return _muhurta.muhurta_windows(sunrise_jd, sunset_jd, jd)

    def muhurta_at(self, jd_ut: float, latitude: float, longitude: float) -> Optional[MuhurtaWindows]:
        """
        Day windows for the place, with sunrise/sunset taken from the ephemeris.
        None when the provider cannot compute rise and set times.
        """
        rise_set = getattr(self.ephemeris, "sunrise_sunset", None)
        if rise_set is None:
            return None
        sunrise, sunset = rise_set(jd_ut, latitude, longitude)
        return _muhurta.muhurta_windows(sunrise, sunset, sunrise)

    def varga_position(self, longitude: float, division: int) -> VargaPosition:
        return _varga.varga_position(longitude, division)

    def varga_chart(self, longitudes: Mapping[str, float], division: int) -> Dict[str, VargaPosition]:
        return _varga.varga_chart(longitudes, division)

    def ashtakavarga(self, target_planet: str, longitudes: Mapping[str, float], ascendant_sign: int) -> AshtakavargaGrid:
        return _ashtakavarga.ashtakavarga(target_planet, longitudes, ascendant_sign)

    def sarvashtakavarga(self, longitudes: Mapping[str, float], ascendant_sign: int) -> AshtakavargaGrid:
        return _ashtakavarga.sarvashtakavarga(longitudes, ascendant_sign)

    def shadbala(
        self,
        planet: str,
        longitudes: Mapping[str, float],
        moon_lon: float,
        sun_lon: float,
        cusps: Sequence[float],
        birth: BirthContext,
    ) -> ShadbalaResult:
        return _shadbala.shadbala(planet, longitudes, moon_lon, sun_lon, cusps, birth)

    def shadbala_all(
        self,
        longitudes: Mapping[str, float],
        velocities: Mapping[str, float],
        cusps: Sequence[float],
        is_day_birth: bool,
    ) -> Dict[str, ShadbalaResult]:
        return _shadbala.shadbala_all(longitudes, velocities, cusps, is_day_birth)

    # ─────────────────────────────────────────────
    # Dasha
    # ─────────────────────────────────────────────

    def dasha_timeline(
        self,
        system_key,
        moon_longitude: float,
        birth_jd: float,
        horizon_years: Optional[float] = None,
        levels: Optional[int] = None,
    ) -> DashaTimeline:
        return _dasha.dasha_timeline(system_key, moon_longitude, birth_jd, horizon_years, self.config, levels)

    def subdivide(self, system_key, lord: str, start_jd: float, end_jd: float, level: int = 1,
                  levels: Optional[int] = None) -> List[DashaPeriod]:
        return _dasha.subdivide(system_key, lord, start_jd, end_jd, level, levels, self.config)

    def current_periods(self, timeline: DashaTimeline, jd: float) -> List[DashaPeriod]:
        return _dasha.current_periods(timeline, jd)

    # ─────────────────────────────────────────────
    # Birth chart
    # ─────────────────────────────────────────────

    def birth_chart(
        self,
        jd_ut: float,
        latitude: float,
        longitude: float,
        ayanamsa_name: Optional[str] = None,
    ) -> BirthChart:
        """
        Sidereal positions of the nine grahas, the ascendant and equal-house
        cusps. Day birth = Sun above the horizon (houses 7-12).
        """
        config = self.config if ayanamsa_name is None else with_ayanamsa(self.config, ayanamsa_name)
        ay = ayanamsa(jd_ut, config)

        asc_sid = norm360(ascendant_tropical_deg(jd_ut, latitude, longitude) - ay)
        cusps = equal_house_cusps(asc_sid)

        planets: Dict[str, PlanetPos] = {}
        for name in GRAHAS:
            tropical = self.ephemeris.longitude_of(name, jd_ut)
            sid = norm360(tropical - ay)
            planets[name] = PlanetPos(
                name=name,
                lon=tropical,
                lon_sidereal=sid,
                speed_lon=self.ephemeris.velocity_of(name, jd_ut),
                sign=sign_index(sid) + 1,
                nakshatra=nakshatra_of(sid),
            )

        sun_house = house_of(planets["Sun"].lon_sidereal, asc_sid)
        logger.debug("birth_chart jd=%.5f asc=%.4f sun_house=%d", jd_ut, asc_sid, sun_house)

        return BirthChart(
            jd_ut=jd_ut,
            utc_iso=jd_to_iso(jd_ut),
            ayanamsa=normalize_ayanamsa_name(ayanamsa_name) if ayanamsa_name else self.ayanamsa_name,
            ayanamsa_deg=ay,
            ascendant_sidereal=asc_sid,
            ascendant_sign=sign_index(asc_sid) + 1,
            cusps_sidereal=cusps,
            planets=planets,
            is_day_birth=sun_house >= 7,
        )

    @staticmethod
    def sidereal_longitudes(chart: BirthChart, names: Sequence[str] = _shadbala.PLANETS) -> Dict[str, float]:
        return {n: chart.planets[n].lon_sidereal for n in names if n in chart.planets}
