# jyotish_engine/core/models.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# -------------------------------------------------
# Time
# -------------------------------------------------
class CivilMoment(_Frozen):
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float
    tz_offset_hours: float = 0.0


# -------------------------------------------------
# Nakshatra / Panchang
# -------------------------------------------------
class NakshatraInfo(_Frozen):
    index: int = Field(..., ge=0, le=26)
    name: str
    pada: int = Field(..., ge=1, le=4)
    fraction_consumed: float = Field(..., ge=0.0, le=1.0)


class NamedIndex(_Frozen):
    index: int
    name: str


class TithiInfo(_Frozen):
    index: int          # 1..30
    name: str
    paksha: str         # waxing | waning
    paksha_name: str    # Shukla | Krishna


class Panchang(_Frozen):
    tithi: TithiInfo
    vara: str
    nakshatra: NakshatraInfo
    yoga: NamedIndex
    karana: NamedIndex


# -------------------------------------------------
# Muhurta
# -------------------------------------------------
class TimeWindow(_Frozen):
    start_jd: float
    end_jd: float


class MuhurtaWindows(_Frozen):
    rahu_kaal: TimeWindow
    gulika_kaal: TimeWindow
    yamaganda_kaal: TimeWindow
    abhijit: TimeWindow


# -------------------------------------------------
# Varga / Ashtakavarga / Shadbala
# -------------------------------------------------
class VargaPosition(_Frozen):
    division: int
    target_sign: int          # 0..11
    sign_name: str
    degrees_in_sign: float    # 0..30


class AshtakavargaGrid(_Frozen):
    planet: str
    bins: List[int]           # 12 bins, Aries first

    @property
    def total(self) -> int:
        return sum(self.bins)


class ShadbalaBreakdown(_Frozen):
    sthana: float
    dig: float
    kala: float
    drig: float
    naisargika: float
    cheshta: float


class ShadbalaResult(_Frozen):
    planet: str
    breakdown: ShadbalaBreakdown
    total_virupas: float
    pinda: float


class BirthContext(_Frozen):
    is_day_birth: bool
    velocity: Optional[float] = None   # deg/day; negative = retrograde


# -------------------------------------------------
# Dasha
# -------------------------------------------------
class DashaPeriod(_Frozen):
    lord: str
    level: int                # 0 maha, 1 antar, 2 pratyantar
    start_jd: float
    end_jd: float
    duration_years: float     # actual span (first period may be truncated)
    full_years: float         # tabulated duration of this lord
    start_iso: str
    end_iso: str
    children: List["DashaPeriod"] = Field(default_factory=list)


class DashaTimeline(_Frozen):
    system: str
    birth_jd: float
    horizon_years: float
    nakshatra: NakshatraInfo
    periods: List[DashaPeriod]


# -------------------------------------------------
# Location / ephemeris
# -------------------------------------------------
class Location(_Frozen):
    name: str
    state: Optional[str] = None
    latitude: float
    longitude: float
    tz: str = "Asia/Kolkata"
    timezone_offset_hours: float = 5.5


class PlanetPos(_Frozen):
    name: str
    lon: float            # tropical ecliptic longitude (0-360)
    lon_sidereal: float
    speed_lon: float      # deg/day (approx)
    sign: int
    nakshatra: NakshatraInfo


class BirthChart(_Frozen):
    jd_ut: float
    utc_iso: str
    ayanamsa: str
    ayanamsa_deg: float
    ascendant_sidereal: float
    ascendant_sign: int   # 1..12
    cusps_sidereal: List[float]
    planets: Dict[str, PlanetPos]
    is_day_birth: bool


DashaPeriod.model_rebuild()
