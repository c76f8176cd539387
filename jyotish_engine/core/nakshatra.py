# jyotish_engine/core/nakshatra.py
"""
Nakshatra helpers
- Sidereal longitude assumed, already normalised to [0, 360)
- Returns nakshatra index, pada and the fraction of the mansion consumed
"""
from jyotish_engine.core.angles import require_longitude
from jyotish_engine.core.errors import OutOfRangeError
from jyotish_engine.core.models import NakshatraInfo

# 27 Nakshatras (each 13°20')
NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0  # 3°20'

NAKSHATRA_NAMES = [
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni",
    "Uttara Phalguni", "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha",
    "Jyeshtha", "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishta", "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada", "Revati",
]


def require_normalized(lon, label: str = "longitude") -> float:
    v = require_longitude(lon, label)
    if not (0.0 <= v < 360.0):
        raise OutOfRangeError(f"{label} {v} is not normalised into [0, 360)")
    return v


def nakshatra_of(moon_lon: float) -> NakshatraInfo:
    lon = require_normalized(moon_lon, "moon longitude")

    # scale first so exact star boundaries land on whole numbers
    x = lon * 27.0 / 360.0
    index = min(int(x), 26)
    fraction = min(max(x - index, 0.0), 1.0)

    pada = min(int(fraction * 4.0) + 1, 4)

    return NakshatraInfo(
        index=index,
        name=NAKSHATRA_NAMES[index],
        pada=pada,
        fraction_consumed=fraction,
    )


def pada_position(moon_lon: float):
    """
    Returns (total_pada_index 0..107, fraction consumed within that pada).
    """
    lon = require_normalized(moon_lon, "moon longitude")
    x = lon * 108.0 / 360.0
    total = min(int(x), 107)
    return total, min(max(x - total, 0.0), 1.0)
