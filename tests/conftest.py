# tests/conftest.py
"""
Pytest configuration.

- Registers Hypothesis profiles for local dev and CI.
- Forces the analytic ephemeris so no JPL kernel is downloaded.
- Shares a sample chart (sidereal longitudes) across modules.
"""
from __future__ import annotations

import os

import pytest
from hypothesis import HealthCheck, settings

os.environ.setdefault("JYOTISH_EPHEMERIS", "mean")
os.environ.setdefault("JYOTISH_LOG_LEVEL", "WARNING")


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=150,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Shared data
# ──────────────────────────────────────────────────────────────────────────────

# 1990-01-01 12:00 UT, sidereal
SAMPLE_LONGITUDES = {
    "Sun": 255.5,
    "Moon": 320.2,
    "Mars": 45.1,
    "Mercury": 240.8,
    "Jupiter": 120.4,
    "Venus": 290.3,
    "Saturn": 280.9,
    "Rahu": 310.2,
    "Ketu": 130.2,
}
SAMPLE_ASCENDANT_SIGN = 9


@pytest.fixture
def ascendant_sign():
    return SAMPLE_ASCENDANT_SIGN


@pytest.fixture
def sample_longitudes():
    return dict(SAMPLE_LONGITUDES)


@pytest.fixture
def classical_longitudes():
    return {k: v for k, v in SAMPLE_LONGITUDES.items() if k not in ("Rahu", "Ketu")}


@pytest.fixture
def equal_cusps():
    # ascendant at 0° Sagittarius
    return [(240.0 + 30.0 * i) % 360.0 for i in range(12)]


@pytest.fixture
def engine():
    from jyotish_engine.core.engine import JyotishEngine

    return JyotishEngine()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    import main

    return TestClient(main.app)
