# jyotish_engine/core/geo.py
"""
City registry for birth-place resolution (Indian cities, IST).

resolve("Bombay")              -> Mumbai (alias)
resolve("hubballi")            -> Hubballi-Dharwad (substring, shortest name wins)
nearest(28.6, 77.2)            -> (Delhi, km)
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple

from jyotish_engine.core.errors import InvalidLongitudeError, LocationNotFoundError
from jyotish_engine.core.models import Location

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_OFFSET_HOURS = 5.5
EARTH_RADIUS_KM = 6371.0088

STATES = [
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh",
    "Goa", "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka",
    "Kerala", "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya", "Mizoram",
    "Nagaland", "Odisha", "Punjab", "Rajasthan", "Sikkim", "Tamil Nadu",
    "Telangana", "Tripura", "Uttar Pradesh", "Uttarakhand", "West Bengal",
    "Andaman and Nicobar Islands", "Chandigarh", "Dadra and Nagar Haveli and Daman and Diu",
    "Delhi", "Jammu and Kashmir", "Ladakh", "Lakshadweep", "Puducherry",
]

# (name, index into STATES, lat, lon, aliases)
CITIES = [
    ("Mumbai", 13, 19.0760, 72.8777, ["Bombay"]),
    ("Delhi", 31, 28.6139, 77.2090, ["New Delhi", "NCR"]),
    ("Bengaluru", 10, 12.9716, 77.5946, ["Bangalore"]),
    ("Hyderabad", 23, 17.3850, 78.4867, []),
    ("Ahmedabad", 6, 23.0225, 72.5714, []),
    ("Chennai", 22, 13.0827, 80.2707, ["Madras"]),
    ("Kolkata", 27, 22.5726, 88.3639, ["Calcutta"]),
    ("Surat", 6, 21.1702, 72.8311, []),
    ("Pune", 13, 18.5204, 73.8567, []),
    ("Jaipur", 20, 26.9124, 75.7873, []),
    ("Lucknow", 25, 26.8467, 80.9462, []),
    ("Kanpur", 25, 26.4499, 80.3319, []),
    ("Nagpur", 13, 21.1458, 79.0882, []),
    ("Indore", 12, 22.7196, 75.8577, []),
    ("Thane", 13, 19.2183, 72.9781, []),
    ("Bhopal", 12, 23.2599, 77.4126, []),
    ("Visakhapatnam", 0, 17.6868, 83.2185, ["Vizag"]),
    ("Pimpri-Chinchwad", 13, 18.6298, 73.7997, []),
    ("Patna", 3, 25.5941, 85.1376, []),
    ("Vadodara", 6, 22.3072, 73.1812, ["Baroda"]),
    ("Ghaziabad", 25, 28.6692, 77.4538, []),
    ("Ludhiana", 19, 30.9010, 75.8573, []),
    ("Agra", 25, 27.1767, 78.0081, []),
    ("Nashik", 13, 19.9975, 73.7898, []),
    ("Faridabad", 7, 28.4089, 77.3178, []),
    ("Meerut", 25, 28.9845, 77.7064, []),
    ("Rajkot", 6, 22.3039, 70.8022, []),
    ("Kalyan-Dombivli", 13, 19.2403, 73.1305, []),
    ("Vasai-Virar", 13, 19.3919, 72.8397, []),
    ("Varanasi", 25, 25.3176, 82.9739, ["Benares", "Kashi"]),
    ("Srinagar", 32, 34.0837, 74.7973, []),
    ("Aurangabad", 13, 19.8762, 75.3433, ["Sambhajinagar"]),
    ("Dhanbad", 9, 23.7957, 86.4304, []),
    ("Amritsar", 19, 31.6340, 74.8723, []),
    ("Navi Mumbai", 13, 19.0330, 73.0297, []),
    ("Allahabad", 25, 25.4358, 81.8463, ["Prayagraj"]),
    ("Ranchi", 9, 23.3441, 85.3096, []),
    ("Howrah", 27, 22.5769, 88.3186, []),
    ("Jabalpur", 12, 23.1667, 79.9333, []),
    ("Gwalior", 12, 26.2124, 78.1772, []),
    ("Vijayawada", 0, 16.5062, 80.6480, []),
    ("Jodhpur", 20, 26.2389, 73.0243, []),
    ("Madurai", 22, 9.9252, 78.1198, []),
    ("Raipur", 4, 21.2514, 81.6296, []),
    ("Kota", 20, 25.2138, 75.8648, []),
    ("Guwahati", 2, 26.1445, 91.7362, []),
    ("Chandigarh", 29, 30.7333, 76.7794, []),
    ("Solapur", 13, 17.6599, 75.9064, []),
    ("Hubballi-Dharwad", 10, 15.3647, 75.1240, []),
    ("Bareilly", 25, 28.3670, 79.4304, []),
    ("Moradabad", 25, 28.8350, 78.7733, []),
    ("Mysore", 10, 12.2958, 76.6394, ["Mysuru"]),
    ("Gurgaon", 7, 28.4595, 77.0266, ["Gurugram"]),
    ("Aligarh", 25, 27.8974, 78.0880, []),
    ("Jalandhar", 19, 31.3260, 75.5762, []),
    ("Tiruchirappalli", 22, 10.8505, 78.7047, ["Trichy"]),
    ("Bhubaneswar", 17, 20.2961, 85.8245, []),
    ("Salem", 22, 11.6643, 78.1460, []),
    ("Mira-Bhayandar", 13, 19.2813, 72.8557, []),
    ("Warangal", 23, 17.9689, 79.5941, []),
    ("Guntur", 0, 16.3067, 80.4365, []),
    ("Bhiwandi", 13, 19.2813, 73.0483, []),
    ("Saharanpur", 25, 29.9640, 77.5460, []),
    ("Gorakhpur", 25, 26.7606, 83.3731, []),
    ("Bikaner", 20, 28.0229, 73.3119, []),
    ("Amravati", 13, 20.9374, 77.7796, []),
    ("Noida", 25, 28.5355, 77.3910, []),
    ("Jamshedpur", 9, 22.8046, 86.2029, []),
    ("Bhilai", 4, 21.1938, 81.3509, []),
    ("Cuttack", 17, 20.4625, 85.8830, []),
    ("Firozabad", 25, 27.1513, 78.3953, []),
    ("Kochi", 11, 9.9312, 76.2673, ["Cochin"]),
    ("Nellore", 0, 14.4426, 79.9865, []),
    ("Bhavnagar", 6, 21.7645, 72.1519, []),
    ("Dehradun", 26, 30.3165, 78.0322, []),
    ("Durgapur", 27, 23.5204, 87.3119, []),
    ("Asansol", 27, 23.6739, 86.9405, []),
    ("Rourkela", 17, 22.2604, 84.8536, []),
    ("Nanded", 13, 19.1383, 77.3210, []),
    ("Kolhapur", 13, 16.7050, 74.2433, []),
    ("Ajmer", 20, 26.4499, 74.6399, []),
    ("Gulbarga", 10, 17.3297, 76.8343, ["Kalaburagi"]),
    ("Jamnagar", 6, 22.4707, 70.0577, []),
    ("Ujjain", 12, 23.1760, 75.7885, []),
    ("Loni", 25, 28.7500, 77.2833, []),
    ("Siliguri", 27, 26.7271, 88.3953, []),
    ("Jhansi", 25, 25.4484, 78.5685, []),
    ("Ulhasnagar", 13, 19.2215, 73.1645, []),
    ("Jammu", 32, 32.7266, 74.8570, []),
    ("Sangli-Miraj & Kupwad", 13, 16.8524, 74.5815, []),
    ("Mangalore", 10, 12.9141, 74.8560, ["Mangaluru"]),
    ("Erode", 22, 11.3410, 77.7172, []),
    ("Belgaum", 10, 15.8497, 74.4977, ["Belagavi"]),
    ("Ambattur", 22, 13.1143, 80.1482, []),
    ("Tirunelveli", 22, 8.7139, 77.7567, []),
    ("Malegaon", 13, 20.5517, 74.5089, []),
    ("Gaya", 3, 24.7914, 85.0002, []),
    ("Jalgaon", 13, 21.0077, 75.5626, []),
    ("Udaipur", 20, 24.5854, 73.7125, []),
    ("Maheshtala", 27, 22.5085, 88.2530, []),
]

# approximate bounding box: south, north, west, east
INDIA_BOUNDS = (6.7, 37.6, 68.1, 97.4)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dlat = p2 - p1
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_india(lat: float, lon: float) -> bool:
    south, north, west, east = INDIA_BOUNDS
    return south <= lat <= north and west <= lon <= east


class LocationResolver:
    """
    In-memory registry keyed by lower-cased name and alias. Read-only after
    construction, so one instance can be shared.
    """

    def __init__(self, cities=CITIES):
        self._registry: Dict[str, Location] = {}
        self._cities: List[Location] = []
        for name, state_idx, lat, lon, aliases in cities:
            loc = Location(
                name=name,
                state=STATES[state_idx],
                latitude=lat,
                longitude=lon,
                tz=DEFAULT_TIMEZONE,
                timezone_offset_hours=DEFAULT_OFFSET_HOURS,
            )
            self._cities.append(loc)
            self._registry[name.lower()] = loc
            for alias in aliases:
                self._registry[alias.lower()] = loc

    def __len__(self) -> int:
        return len(self._cities)

    def find(self, query: str, state: Optional[str] = None) -> Optional[Location]:
        if not isinstance(query, str) or not query.strip():
            raise LocationNotFoundError("empty city query")

        q = query.strip().lower()
        state_l = state.strip().lower() if state else None

        def _state_ok(loc: Location) -> bool:
            return state_l is None or (loc.state or "").lower() == state_l

        hit = self._registry.get(q)
        if hit is not None and _state_ok(hit):
            return hit

        candidates = [
            loc for key, loc in self._registry.items()
            if (q in key or key in q) and _state_ok(loc)
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda loc: len(loc.name))

    def resolve(self, query: str, state: Optional[str] = None) -> Location:
        loc = self.find(query, state)
        if loc is None:
            logger.info("location not found: query=%r state=%r", query, state)
            raise LocationNotFoundError(f"no city matches {query!r}" + (f" in {state}" if state else ""))
        return loc

    def nearest(self, lat: float, lon: float) -> Tuple[Location, float]:
        try:
            lat, lon = float(lat), float(lon)
        except (TypeError, ValueError) as e:
            raise InvalidLongitudeError("latitude and longitude must be numeric") from e
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidLongitudeError("latitude and longitude must be finite")

        best = min(self._cities, key=lambda c: haversine_km(lat, lon, c.latitude, c.longitude))
        return best, haversine_km(lat, lon, best.latitude, best.longitude)

    def filter_by_state(self, state: str) -> List[Location]:
        s = (state or "").strip().lower()
        return [c for c in self._cities if (c.state or "").lower() == s]
