# tests/test_strength.py
from __future__ import annotations

import pytest

from jyotish_engine.core.ashtakavarga import ASHTAKAVARGA_RULES, ashtakavarga, sarvashtakavarga
from jyotish_engine.core.errors import (
    InvalidLongitudeError,
    OutOfRangeError,
    UnknownPlanetError,
    UnsupportedPlanetError,
)
from jyotish_engine.core.models import BirthContext
from jyotish_engine.core.shadbala import aspect_strength, cheshta_bala, shadbala, shadbala_all

ALL_ARIES = {p: 0.0 for p in ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn")}


# ─────────────────────────────────────────────────────────────────────────────
# Ashtakavarga
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("target", sorted(ASHTAKAVARGA_RULES))
def test_grid_total_matches_rules(target, sample_longitudes, ascendant_sign) -> None:
    grid = ashtakavarga(target, sample_longitudes, ascendant_sign)
    expected = sum(len(houses) for houses in ASHTAKAVARGA_RULES[target].values())
    assert grid.total == expected
    assert len(grid.bins) == 12


def test_sarva_total(sample_longitudes, ascendant_sign) -> None:
    sarva = sarvashtakavarga(sample_longitudes, ascendant_sign)
    assert sarva.planet == "Sarva"
    assert sarva.total == 337


def test_everything_in_aries() -> None:
    grid = ashtakavarga("Sun", ALL_ARIES, 1)
    # house 1 from Sun, Mars and Saturn
    assert grid.bins[0] == 3
    # house 11 from every source except Venus
    assert grid.bins[10] == 7


def test_unsupported_target(sample_longitudes) -> None:
    with pytest.raises(UnsupportedPlanetError):
        ashtakavarga("Rahu", sample_longitudes, 1)


@pytest.mark.parametrize("asc", [0, 13, 2.5, True])
def test_bad_ascendant_sign(asc, sample_longitudes) -> None:
    with pytest.raises(OutOfRangeError):
        ashtakavarga("Sun", sample_longitudes, asc)


def test_missing_source(sample_longitudes) -> None:
    del sample_longitudes["Mars"]
    with pytest.raises(UnknownPlanetError):
        ashtakavarga("Sun", sample_longitudes, 1)


# ─────────────────────────────────────────────────────────────────────────────
# Shadbala
# ─────────────────────────────────────────────────────────────────────────────

def test_sun_breakdown(classical_longitudes, equal_cusps) -> None:
    res = shadbala(
        "Sun",
        classical_longitudes,
        classical_longitudes["Moon"],
        classical_longitudes["Sun"],
        equal_cusps,
        BirthContext(is_day_birth=True),
    )
    b = res.breakdown
    assert b.sthana == pytest.approx(30.0 + 65.5 / 3.0)
    assert b.dig == pytest.approx(74.5 / 3.0)
    assert b.kala == pytest.approx(60.0 + 64.7 / 3.0 + 15.0)
    assert b.drig == pytest.approx(-18.0625)
    assert b.naisargika == 60.0
    assert b.cheshta == 30.0

    parts = b.sthana + b.dig + b.kala + b.drig + b.naisargika + b.cheshta
    assert res.total_virupas == pytest.approx(parts)
    assert res.pinda == pytest.approx(parts / 60.0)


def test_night_birth_drops_day_affinity(classical_longitudes, equal_cusps) -> None:
    args = ("Sun", classical_longitudes, classical_longitudes["Moon"], classical_longitudes["Sun"], equal_cusps)
    day = shadbala(*args, BirthContext(is_day_birth=True))
    night = shadbala(*args, BirthContext(is_day_birth=False))
    assert day.breakdown.kala - night.breakdown.kala == pytest.approx(60.0)


def test_cheshta() -> None:
    assert cheshta_bala("Moon", None) == 30.0
    assert cheshta_bala("Mars", -0.2) == 60.0
    assert cheshta_bala("Mars", 0.5) == pytest.approx(30.0)
    assert cheshta_bala("Jupiter", 0.2) == 0.0
    with pytest.raises(UnknownPlanetError):
        cheshta_bala("Saturn", None)


@pytest.mark.parametrize(
    "diff,value",
    [
        (10.0, 0.0),
        (60.0, 15.0),
        (90.0, 45.0),
        (120.0, 0.0),
        (180.0, 60.0),
        (240.0, 30.0),
        (300.0, 0.0),
        (310.0, 0.0),
    ],
)
def test_aspect_strength_curve(diff, value) -> None:
    assert aspect_strength(diff) == pytest.approx(value)


def test_shadbala_errors(classical_longitudes, equal_cusps) -> None:
    birth = BirthContext(is_day_birth=True, velocity=0.1)
    with pytest.raises(UnknownPlanetError):
        shadbala("Rahu", classical_longitudes, 0.0, 0.0, equal_cusps, birth)
    with pytest.raises(InvalidLongitudeError):
        shadbala("Mars", classical_longitudes, 0.0, 0.0, equal_cusps[:11], birth)


def test_ranking_strongest_first(classical_longitudes, equal_cusps) -> None:
    velocities = {"Mars": 0.6, "Mercury": -0.4, "Jupiter": 0.1, "Venus": 1.1, "Saturn": 0.02}
    results = shadbala_all(classical_longitudes, velocities, equal_cusps, is_day_birth=True)

    assert set(results) == set(classical_longitudes)
    totals = [r.total_virupas for r in results.values()]
    assert totals == sorted(totals, reverse=True)


def test_ranking_needs_velocities(classical_longitudes, equal_cusps) -> None:
    with pytest.raises(UnknownPlanetError):
        shadbala_all(classical_longitudes, {}, equal_cusps, is_day_birth=False)
