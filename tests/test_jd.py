# tests/test_jd.py
from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jyotish_engine.core.errors import InvalidDateError
from jyotish_engine.core.jd import (
    days_in_month,
    from_julian_day,
    jd_to_iso,
    julian_centuries,
    local_iso_to_julian_day,
    to_julian_day,
)


def test_j2000_epoch() -> None:
    assert to_julian_day(2000, 1, 1, 12) == pytest.approx(2451545.0, abs=1e-9)


def test_julian_centuries() -> None:
    assert julian_centuries(2451545.0) == 0.0
    assert julian_centuries(2451545.0 + 36525.0) == 1.0
    # J1900.0
    assert julian_centuries(2415020.0) == -1.0


def test_offset_is_subtracted() -> None:
    # 17:30 IST == 12:00 UT
    assert to_julian_day(2000, 1, 1, 17, 30, 0, 5.5) == pytest.approx(2451545.0, abs=1e-9)
    assert to_julian_day(2000, 1, 1, 7, 0, 0, -5.0) == pytest.approx(2451545.0, abs=1e-9)


def test_gregorian_reform_day_is_proleptic() -> None:
    assert to_julian_day(1582, 10, 15) == pytest.approx(2299160.5, abs=1e-9)


def test_leap_rules() -> None:
    assert days_in_month(2024, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    to_julian_day(2024, 2, 29)
    with pytest.raises(InvalidDateError):
        to_julian_day(1900, 2, 29)


@pytest.mark.parametrize(
    "args",
    [
        (2023, 13, 1),
        (2023, 0, 1),
        (2023, 2, 30),
        (2023, 4, 31),
        (2023, 1, 0),
        (6000, 1, 1),
        (-6000, 1, 1),
        (2023, 1, 1, 24),
        (2023, 1, 1, 10, 60),
        (2023, 1, 1, 10, 0, 60),
    ],
)
def test_invalid_calendar_fields(args) -> None:
    with pytest.raises(InvalidDateError):
        to_julian_day(*args)


def test_offset_out_of_range() -> None:
    with pytest.raises(InvalidDateError):
        to_julian_day(2000, 1, 1, 0, 0, 0, 19)


def test_iso_formatting() -> None:
    assert jd_to_iso(2451545.0) == "2000-01-01T12:00:00Z"
    assert jd_to_iso(to_julian_day(1990, 1, 1, 0, 0, 59.6)) == "1990-01-01T00:01:00Z"


def test_iso_far_past() -> None:
    assert jd_to_iso(to_julian_day(-1000, 3, 1)) == "-1000-03-01T00:00:00Z"
    assert jd_to_iso(to_julian_day(-4800, 6, 15, 6)) == "-4800-06-15T06:00:00Z"
    assert jd_to_iso(to_julian_day(-5000, 6, 15, 6)) == "-5000-06-15T06:00:00Z"


def test_local_iso_with_iana_zone() -> None:
    jd, offset = local_iso_to_julian_day("2000-01-01T17:30:00", tz="Asia/Kolkata")
    assert offset == 5.5
    assert jd == pytest.approx(2451545.0, abs=1e-9)


def test_local_iso_explicit_offset_wins() -> None:
    jd, offset = local_iso_to_julian_day("2000-01-01T12:00:00", tz_offset_hours=0.0, tz="Asia/Kolkata")
    assert offset == 0.0
    assert jd == pytest.approx(2451545.0, abs=1e-9)


def test_local_iso_rejects_garbage() -> None:
    with pytest.raises(InvalidDateError):
        local_iso_to_julian_day("yesterday")
    with pytest.raises(InvalidDateError):
        local_iso_to_julian_day("2000-01-01T12:00:00", tz="Mars/Olympus_Mons")


@st.composite
def civil_moments(draw):
    year = draw(st.integers(min_value=-5000, max_value=5000))
    month = draw(st.integers(min_value=1, max_value=12))
    day = draw(st.integers(min_value=1, max_value=days_in_month(year, month)))
    hour = draw(st.integers(min_value=0, max_value=23))
    minute = draw(st.integers(min_value=0, max_value=59))
    second = draw(st.integers(min_value=0, max_value=59))
    offset = draw(st.sampled_from([0.0, 5.5, -3.5, 9.0, 5.75]))
    return year, month, day, hour, minute, second, offset


@given(civil_moments())
def test_round_trip(moment) -> None:
    year, month, day, hour, minute, second, offset = moment
    jd = to_julian_day(year, month, day, hour, minute, second, offset)
    back = from_julian_day(jd, offset)

    jd2 = to_julian_day(back.year, back.month, back.day, back.hour, back.minute, back.second, offset)
    assert jd2 == pytest.approx(jd, abs=1e-8)
    assert back.tz_offset_hours == offset


@given(st.integers(min_value=0, max_value=86399))
def test_from_julian_day_time_of_day(seconds) -> None:
    jd = 2451544.5 + seconds / 86400.0
    m = from_julian_day(jd)
    assert (m.year, m.month, m.day) == (2000, 1, 1)
    assert m.hour * 3600 + m.minute * 60 + m.second == pytest.approx(seconds, abs=1e-3)
