# tests/test_geo.py
from __future__ import annotations

import pytest

from jyotish_engine.core.errors import InvalidLongitudeError, LocationNotFoundError
from jyotish_engine.core.geo import CITIES, LocationResolver, haversine_km, is_within_india


@pytest.fixture(scope="module")
def resolver():
    return LocationResolver()


@pytest.mark.parametrize(
    "query,name",
    [
        ("Mumbai", "Mumbai"),
        ("bombay", "Mumbai"),
        ("  New Delhi ", "Delhi"),
        ("Bangalore", "Bengaluru"),
        ("madras", "Chennai"),
    ],
)
def test_exact_and_alias(resolver, query, name) -> None:
    loc = resolver.resolve(query)
    assert loc.name == name
    assert loc.tz == "Asia/Kolkata"
    assert loc.timezone_offset_hours == 5.5


def test_substring_match(resolver) -> None:
    assert resolver.resolve("hyderab").name == "Hyderabad"


def test_state_filter(resolver) -> None:
    assert resolver.resolve("Pune", state="maharashtra").state == "Maharashtra"
    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Pune", state="Kerala")

    names = {c.name for c in resolver.filter_by_state("Maharashtra")}
    assert {"Mumbai", "Pune"} <= names


def test_not_found(resolver) -> None:
    assert resolver.find("Atlantis") is None
    with pytest.raises(LocationNotFoundError):
        resolver.resolve("Atlantis")
    with pytest.raises(LocationNotFoundError):
        resolver.resolve("   ")


def test_nearest(resolver) -> None:
    loc, km = resolver.nearest(28.62, 77.21)
    assert loc.name == "Delhi"
    assert km < 5.0

    with pytest.raises(InvalidLongitudeError):
        resolver.nearest("north", 77.0)
    with pytest.raises(InvalidLongitudeError):
        resolver.nearest(float("nan"), 77.0)


def test_registry_size(resolver) -> None:
    assert len(resolver) == len(CITIES)


def test_haversine() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 0.0) == 0.0
    # one degree of arc along the equator
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.19, abs=0.05)
    # Mumbai to Delhi is roughly 1150 km great-circle
    assert haversine_km(19.0760, 72.8777, 28.6139, 77.2090) == pytest.approx(1150, abs=20)


def test_within_india() -> None:
    assert is_within_india(19.07, 72.88)
    assert not is_within_india(51.5, -0.12)
