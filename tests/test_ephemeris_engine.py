# tests/test_ephemeris_engine.py
from __future__ import annotations

import math

import pytest

from jyotish_engine.config import AYANAMSA_PRESETS, DEFAULT_CONFIG
from jyotish_engine.core.angles import norm360
from jyotish_engine.core.ephemeris import (
    GRAHAS,
    MeanEphemeris,
    SkyfieldEphemeris,
    build_ephemeris,
    central_difference,
    moon_longitude_deg,
    sun_longitude_and_radius,
)
from jyotish_engine.core.errors import InvalidIntervalError, OutOfRangeError, UnknownPlanetError
from jyotish_engine.core.houses import (
    ascendant_tropical_deg,
    equal_house_cusps,
    house_of,
    lst_deg,
    mean_obliquity_deg,
)


# ─────────────────────────────────────────────────────────────────────────────
# Analytic ephemeris
# ─────────────────────────────────────────────────────────────────────────────

def test_sun_against_meeus_example() -> None:
    # Meeus example 25.a: 1992-10-13 0h TD
    lon, r = sun_longitude_and_radius(2448908.5)
    assert lon == pytest.approx(199.90988, abs=0.01)
    assert r == pytest.approx(0.99766, abs=1e-4)


def test_moon_against_meeus_example() -> None:
    # Meeus example 47.a: 1992-04-12 0h TD
    assert moon_longitude_deg(2448724.5) == pytest.approx(133.162655, abs=0.05)


def test_nodes_are_opposite() -> None:
    eph = MeanEphemeris()
    jd = 2451545.0
    rahu = eph.longitude_of("Rahu", jd)
    ketu = eph.longitude_of("Ketu", jd)
    assert norm360(ketu - rahu) == pytest.approx(180.0)
    assert rahu == pytest.approx(125.04452, abs=1e-6)


def test_velocities() -> None:
    eph = MeanEphemeris()
    jd = 2451545.0
    assert 0.9 < eph.velocity_of("Sun", jd) < 1.1
    assert 11.0 < eph.velocity_of("Moon", jd) < 16.0
    assert eph.velocity_of("Rahu", jd) == pytest.approx(-1934.136261 / 36525.0, rel=1e-3)


def test_central_difference_unwraps() -> None:
    # a body crossing 0° Aries at 1°/day
    speed = central_difference(lambda t: norm360(t - 10.0), 10.0)
    assert speed == pytest.approx(1.0)


def test_every_graha_is_covered() -> None:
    eph = MeanEphemeris()
    for body in GRAHAS:
        assert 0.0 <= eph.longitude_of(body, 2451545.0) < 360.0
    with pytest.raises(UnknownPlanetError):
        eph.longitude_of("Pluto", 2451545.0)


def test_build_ephemeris() -> None:
    assert isinstance(build_ephemeris("mean"), MeanEphemeris)
    # kernel is only opened on first use
    assert isinstance(build_ephemeris("skyfield", "de421.bsp"), SkyfieldEphemeris)
    with pytest.raises(ValueError):
        build_ephemeris("swiss")


# ─────────────────────────────────────────────────────────────────────────────
# Houses
# ─────────────────────────────────────────────────────────────────────────────

def test_obliquity_at_j2000() -> None:
    assert mean_obliquity_deg(2451545.0) == pytest.approx(23.4392911, abs=1e-6)


@pytest.mark.parametrize("lon_east", [0.0, 77.2, 200.0])
def test_ascendant_at_equator(lon_east) -> None:
    jd = 2451545.0
    theta = math.radians(lst_deg(jd, lon_east))
    eps = math.radians(mean_obliquity_deg(jd))
    expected = norm360(math.degrees(math.atan2(math.cos(theta), -math.sin(theta) * math.cos(eps))))
    assert ascendant_tropical_deg(jd, 0.0, lon_east) == pytest.approx(expected)


def test_ascendant_leads_midheaven() -> None:
    # the rising degree is roughly a quadrant ahead of the LST
    jd = 2451545.0
    asc = ascendant_tropical_deg(jd, 28.6, 77.2)
    ahead = norm360(asc - lst_deg(jd, 77.2))
    assert 45.0 < ahead < 135.0


@pytest.mark.parametrize("lat", [90.0, -90.0, 95.0])
def test_ascendant_rejects_poles(lat) -> None:
    with pytest.raises(OutOfRangeError):
        ascendant_tropical_deg(2451545.0, lat, 0.0)


def test_equal_houses() -> None:
    cusps = equal_house_cusps(350.0)
    assert cusps[0] == 350.0
    assert cusps[1] == pytest.approx(20.0)
    assert house_of(355.0, 350.0) == 1
    assert house_of(349.0, 350.0) == 12
    assert house_of(170.0, 350.0) == 7


# ─────────────────────────────────────────────────────────────────────────────
# Engine facade
# ─────────────────────────────────────────────────────────────────────────────

def test_birth_chart(engine) -> None:
    jd = engine.to_julian_day(1990, 1, 1, 12, 0, 0, 5.5)
    chart = engine.birth_chart(jd, 28.6139, 77.2090)

    assert set(chart.planets) == set(GRAHAS)
    assert chart.ayanamsa == "LAHIRI"
    assert chart.ayanamsa_deg == pytest.approx(engine.ayanamsa(jd))
    assert len(chart.cusps_sidereal) == 12
    assert chart.cusps_sidereal[0] == pytest.approx(chart.ascendant_sidereal)
    assert 1 <= chart.ascendant_sign <= 12
    # local noon: the Sun is above the horizon
    assert chart.is_day_birth

    sun = chart.planets["Sun"]
    assert sun.lon_sidereal == pytest.approx(norm360(sun.lon - chart.ayanamsa_deg))
    assert sun.sign == int(sun.lon_sidereal // 30) + 1
    assert chart.planets["Rahu"].speed_lon < 0


def test_birth_chart_with_preset(engine) -> None:
    jd = 2447893.0
    lahiri = engine.birth_chart(jd, 19.07, 72.88)
    kp = engine.birth_chart(jd, 19.07, 72.88, ayanamsa_name="kp")
    assert kp.ayanamsa == "KP"
    assert kp.ayanamsa_deg - lahiri.ayanamsa_deg == pytest.approx(AYANAMSA_PRESETS["KP"])


def test_engine_pipeline(engine) -> None:
    jd = engine.to_julian_day(1990, 1, 1, 12)
    chart = engine.birth_chart(jd, 13.08, 80.27)
    lons = engine.sidereal_longitudes(chart)
    assert set(lons) == {"Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn"}

    sarva = engine.sarvashtakavarga(lons, chart.ascendant_sign)
    assert sarva.total == 337

    tl = engine.dasha_timeline("VIMSHOTTARI", lons["Moon"], jd, horizon_years=30, levels=2)
    assert tl.nakshatra == engine.nakshatra_of(lons["Moon"])
    assert tl.periods[0].start_jd == jd


def test_engine_uses_its_config() -> None:
    from jyotish_engine.core.engine import JyotishEngine

    cfg = DEFAULT_CONFIG.model_copy(update={"dasha_levels": 1})
    tl = JyotishEngine(config=cfg).dasha_timeline("VIMSHOTTARI", 10.0, 2451545.0, horizon_years=20)
    assert all(p.children == [] for p in tl.periods)


class _Instant:
    def __init__(self, jd: float) -> None:
        self.ut1 = jd


class _FakeTimescale:
    def ut1_jd(self, jd: float) -> _Instant:
        return _Instant(jd)


def _skyfield_without_kernel(monkeypatch, events):
    from jyotish_engine.core import ephemeris as ephemeris_module

    monkeypatch.setattr(ephemeris_module.almanac, "sunrise_sunset", lambda eph, topos: "sun-is-up")
    monkeypatch.setattr(
        ephemeris_module.almanac,
        "find_discrete",
        lambda t0, t1, f: ([_Instant(jd) for jd, _ in events], [up for _, up in events]),
    )
    eph = SkyfieldEphemeris("de421.bsp")
    eph._ts, eph._eph = _FakeTimescale(), object()
    return eph


def test_skyfield_sunrise_sunset(monkeypatch) -> None:
    # a sunset before the first sunrise is ignored
    eph = _skyfield_without_kernel(
        monkeypatch, [(2451544.9, False), (2451545.25, True), (2451545.75, False), (2451546.25, True)]
    )
    assert eph.sunrise_sunset(2451545.5, 28.6, 77.2) == (2451545.25, 2451545.75)


def test_skyfield_sunrise_sunset_polar_day(monkeypatch) -> None:
    eph = _skyfield_without_kernel(monkeypatch, [])
    with pytest.raises(InvalidIntervalError):
        eph.sunrise_sunset(2451545.5, 78.2, 15.6)


def test_engine_muhurta_at(engine, monkeypatch) -> None:
    from jyotish_engine.core.engine import JyotishEngine

    # the analytic series has no rise/set times
    assert engine.muhurta_at(2451545.0, 28.6, 77.2) is None

    eph = _skyfield_without_kernel(monkeypatch, [(2451545.25, True), (2451545.75, False)])
    windows = JyotishEngine(ephemeris=eph).muhurta_at(2451545.0, 28.6, 77.2)
    # Saturday: Rahu Kaal is the fourth eighth of daylight
    assert windows.rahu_kaal.start_jd == pytest.approx(2451545.25 + 3 * 0.0625)
    assert windows.abhijit.start_jd == pytest.approx(2451545.25 + 7 * 0.5 / 15)
