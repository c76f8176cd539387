# jyotish_engine/core/panchang.py
from __future__ import annotations

import math

from jyotish_engine.core.angles import norm360, require_longitude
from jyotish_engine.core.models import NamedIndex, Panchang, TithiInfo
from jyotish_engine.core.nakshatra import NAKSHATRA_SPAN, nakshatra_of

TITHI_SPAN = 12.0
KARANA_SPAN = 6.0

VAARA_EN = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

TITHI_NAMES = [
    "Prathama", "Dwitiya", "Tritiya", "Chaturthi", "Panchami", "Shasthi",
    "Saptami", "Ashtami", "Navami", "Dashami", "Ekadashi", "Dwadashi",
    "Trayodashi", "Chaturdashi",
]

YOGA_NAMES = [
    "Vishkumbha", "Priti", "Ayushman", "Saubhagya", "Sobhana", "Atiganda",
    "Sukarma", "Dhriti", "Shula", "Ganda", "Vriddhi", "Dhruva", "Vyaghata",
    "Harshana", "Vajra", "Siddhi", "Vyatipata", "Variyan", "Parigha",
    "Shiva", "Siddha", "Sadhya", "Subha", "Sukla", "Brahma", "Indra", "Vaidhriti",
]

FIRST_KARANA = "Kintughna"
REPEATING_KARANAS = ["Bava", "Balava", "Kaulava", "Taitila", "Gara", "Vanija", "Vishti"]
# half-tithi slots 57, 58, 59
SPECIAL_LAST = ["Shakuni", "Chatushpada", "Naga"]
SPECIAL_LAST_START = 57


def weekday_index(jd: float) -> int:
    """0 = Sunday."""
    return int(math.floor(float(jd) + 1.5)) % 7


def vara(jd: float) -> str:
    return VAARA_EN[weekday_index(jd)]


def tithi(sun_lon: float, moon_lon: float) -> TithiInfo:
    d0 = norm360(moon_lon - sun_lon)
    idx = min(int(math.floor(d0 / TITHI_SPAN)) + 1, 30)
    waxing = d0 < 180.0

    within = (idx - 1) % 15
    if within == 14:
        name = "Purnima" if waxing else "Amavasya"
    else:
        name = TITHI_NAMES[within]

    return TithiInfo(
        index=idx,
        name=name,
        paksha="waxing" if waxing else "waning",
        paksha_name="Shukla" if waxing else "Krishna",
    )


def yoga(sun_lon: float, moon_lon: float) -> NamedIndex:
    y0 = norm360(sun_lon + moon_lon)
    idx = min(int(math.floor(y0 / NAKSHATRA_SPAN)), 26)
    return NamedIndex(index=idx + 1, name=YOGA_NAMES[idx])


def karana_name(value: int) -> str:
    """
    value = floor(moon-sun elongation / 6), 0..59.
    Slot 0 is unique, 57..59 are fixed, the rest cycle through seven.
    """
    if value == 0:
        return FIRST_KARANA
    if value >= SPECIAL_LAST_START:
        return SPECIAL_LAST[min(value - SPECIAL_LAST_START, len(SPECIAL_LAST) - 1)]
    return REPEATING_KARANAS[(value - 1) % 7]


def karana(sun_lon: float, moon_lon: float) -> NamedIndex:
    d0 = norm360(moon_lon - sun_lon)
    value = int(math.floor(d0 / KARANA_SPAN))
    return NamedIndex(index=value + 1, name=karana_name(value))


def compute_panchang(sun_lon: float, moon_lon: float, jd: float) -> Panchang:
    """
    Five limbs of the day from sidereal Sun / Moon longitudes and a Julian Day.
    """
    sun = norm360(require_longitude(sun_lon, "sun longitude"))
    moon = norm360(require_longitude(moon_lon, "moon longitude"))

    return Panchang(
        tithi=tithi(sun, moon),
        vara=vara(jd),
        nakshatra=nakshatra_of(moon),
        yoga=yoga(sun, moon),
        karana=karana(sun, moon),
    )
