# jyotish_engine/core/jd.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from jyotish_engine.config import DEFAULT_CONFIG, EngineConfig
from jyotish_engine.core.errors import InvalidDateError
from jyotish_engine.core.models import CivilMoment

SECONDS_PER_DAY = 86400.0

# one full Gregorian cycle: 400 years == 146097 days
_GREGORIAN_CYCLE_DAYS = 146097
_GREGORIAN_CYCLE_YEARS = 400


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def julian_centuries(jd: float, config: EngineConfig = DEFAULT_CONFIG) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (float(jd) - config.j2000) / 36525.0


def _validate(
    year: int, month: int, day: int, hour: int, minute: int, second: float, config: EngineConfig
) -> None:
    if not (config.min_year <= year <= config.max_year):
        raise InvalidDateError(f"year {year} outside supported range {config.min_year}..{config.max_year}")
    if not (1 <= month <= 12):
        raise InvalidDateError(f"month {month} outside 1..12")
    if not (1 <= day <= 31):
        raise InvalidDateError(f"day {day} outside 1..31")
    if day > days_in_month(year, month):
        raise InvalidDateError(f"day {day} does not exist in {year:04d}-{month:02d}")
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise InvalidDateError(f"invalid time {hour}:{minute}:{second}")


def to_julian_day(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
    tz_offset_hours: float = 0.0,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Local civil time + signed UTC offset (hours, fractional allowed) -> UTC Julian Day.

    Proleptic Gregorian day number (Fliegel / Van Flandern), origin at noon.
    The offset is removed after the day number is built; JD is linear in time,
    so this equals converting to UTC first and works outside datetime's range.
    """
    _validate(year, month, day, hour, minute, second, config)
    if not math.isfinite(float(tz_offset_hours)) or abs(float(tz_offset_hours)) > 18:
        raise InvalidDateError(f"timezone offset {tz_offset_hours} outside -18..+18 hours")

    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    jdn = day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045

    decimal_hours = hour + minute / 60.0 + float(second) / 3600.0
    decimal_hours_utc = decimal_hours - float(tz_offset_hours)
    return jdn + (decimal_hours_utc - 12.0) / 24.0


def _calendar_from_day_number(jdn: int) -> Tuple[int, int, int]:
    """Integer Julian Day Number -> proleptic Gregorian (year, month, day)."""
    # shift by whole 400-year cycles so the integer algorithm stays non-negative
    a = jdn + 32044
    year_shift = 0
    if a < 0:
        cycles = (-a) // _GREGORIAN_CYCLE_DAYS + 1
        a += cycles * _GREGORIAN_CYCLE_DAYS
        year_shift = cycles * _GREGORIAN_CYCLE_YEARS

    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153

    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + m // 10 - year_shift
    return year, month, day


def from_julian_day(jd: float, tz_offset_hours: float = 0.0) -> CivilMoment:
    """
    Inverse of to_julian_day: UTC JD -> civil date/time at the given offset.
    """
    local_jd = float(jd) + float(tz_offset_hours) / 24.0

    z = local_jd + 0.5
    jdn = math.floor(z)
    secs = round((z - jdn) * SECONDS_PER_DAY, 6)
    if secs >= SECONDS_PER_DAY:
        jdn += 1
        secs -= SECONDS_PER_DAY

    year, month, day = _calendar_from_day_number(int(jdn))

    hour = int(secs // 3600)
    minute = int((secs - hour * 3600) // 60)
    second = secs - hour * 3600 - minute * 60

    return CivilMoment(
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        tz_offset_hours=float(tz_offset_hours),
    )


def jd_to_iso(jd: float) -> str:
    """
    UTC JD -> "YYYY-MM-DDTHH:MM:SSZ", rounded to the whole second.
    Negative (astronomical) years keep their sign.
    """
    total = int(round((float(jd) + 0.5) * SECONDS_PER_DAY))
    jdn, secs = divmod(total, int(SECONDS_PER_DAY))
    year, month, day = _calendar_from_day_number(jdn)
    hh, rem = divmod(secs, 3600)
    mm, ss = divmod(rem, 60)
    y = f"{year:04d}" if year >= 0 else f"-{abs(year):04d}"
    return f"{y}-{month:02d}-{day:02d}T{hh:02d}:{mm:02d}:{ss:02d}Z"


def zone_offset_hours(tz: str, datetime_local: Optional[datetime] = None) -> float:
    """
    IANA zone name -> UTC offset in hours at the given naive local datetime
    (DST-aware; fold=0 on ambiguous wall times).
    """
    try:
        zone = ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidDateError(f"Unknown IANA time zone '{tz}'") from e

    dt_local = datetime_local or datetime.now()
    off = dt_local.replace(tzinfo=zone, fold=0).utcoffset()
    if off is None:
        raise InvalidDateError(f"time zone '{tz}' returned no UTC offset")
    return off.total_seconds() / 3600.0


def local_iso_to_julian_day(
    datetime_local: str,
    tz_offset_hours: Optional[float] = None,
    tz: Optional[str] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Tuple[float, float]:
    """
    Input:  datetime_local like "2025-12-31T10:30:00"
            either a numeric offset or an IANA zone like "Asia/Kolkata"
    Output: (jd_ut, offset_hours_used)
    """
    try:
        dt_local = datetime.fromisoformat(datetime_local)
    except (TypeError, ValueError) as e:
        raise InvalidDateError(f"Invalid datetime_local '{datetime_local}'") from e

    if dt_local.tzinfo is not None:
        offset = dt_local.utcoffset().total_seconds() / 3600.0
        dt_local = dt_local.replace(tzinfo=None)
    elif tz_offset_hours is not None:
        offset = float(tz_offset_hours)
    elif tz:
        offset = zone_offset_hours(tz, dt_local)
    else:
        offset = 0.0

    jd = to_julian_day(
        dt_local.year,
        dt_local.month,
        dt_local.day,
        dt_local.hour,
        dt_local.minute,
        dt_local.second + dt_local.microsecond / 1e6,
        tz_offset_hours=offset,
        config=config,
    )
    return jd, offset


def now_julian_day() -> float:
    now = datetime.now(timezone.utc)
    return to_julian_day(now.year, now.month, now.day, now.hour, now.minute, now.second + now.microsecond / 1e6)
