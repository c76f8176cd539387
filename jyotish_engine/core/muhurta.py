# jyotish_engine/core/muhurta.py
from __future__ import annotations

import math
from typing import Sequence

from jyotish_engine.core.errors import InvalidIntervalError
from jyotish_engine.core.models import MuhurtaWindows, TimeWindow
from jyotish_engine.core.panchang import weekday_index

# which eighth of daylight, indexed by weekday (0 = Sunday)
RAHU_SEQ = [7, 1, 6, 4, 5, 2, 3]
GULIKA_SEQ = [6, 5, 4, 3, 2, 1, 0]
YAMAGANDA_SEQ = [4, 3, 2, 1, 0, 6, 5]

# Abhijit = 8th of the 15 daytime muhurtas (around local noon)
DAY_MUHURTAS = 15
ABHIJIT_INDEX = 7


def _slot(sunrise_jd: float, part: float, index: int) -> TimeWindow:
    start = sunrise_jd + part * index
    return TimeWindow(start_jd=start, end_jd=sunrise_jd + part * (index + 1))


def _window(sunrise_jd: float, part: float, seq: Sequence[int], day_idx: int) -> TimeWindow:
    return _slot(sunrise_jd, part, seq[day_idx])


def muhurta_windows(sunrise_jd: float, sunset_jd: float, jd: float) -> MuhurtaWindows:
    sunrise_jd = float(sunrise_jd)
    sunset_jd = float(sunset_jd)
    if not (math.isfinite(sunrise_jd) and math.isfinite(sunset_jd)) or sunset_jd <= sunrise_jd:
        raise InvalidIntervalError(f"sunset ({sunset_jd}) must be after sunrise ({sunrise_jd})")

    day_len = sunset_jd - sunrise_jd
    part = day_len / 8.0
    day_idx = weekday_index(jd)

    return MuhurtaWindows(
        rahu_kaal=_window(sunrise_jd, part, RAHU_SEQ, day_idx),
        gulika_kaal=_window(sunrise_jd, part, GULIKA_SEQ, day_idx),
        yamaganda_kaal=_window(sunrise_jd, part, YAMAGANDA_SEQ, day_idx),
        abhijit=_slot(sunrise_jd, day_len / DAY_MUHURTAS, ABHIJIT_INDEX),
    )
