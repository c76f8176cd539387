# jyotish_engine/core/dasha_systems.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from jyotish_engine.core.errors import UnsupportedDashaSystemError


class DashaSystem(str, Enum):
    VIMSHOTTARI = "VIMSHOTTARI"
    ASHTOTTARI = "ASHTOTTARI"
    YOGINI = "YOGINI"
    SHODASHOTTARI = "SHODASHOTTARI"
    DWISAPTATI = "DWISAPTATI"
    PANCHOTTARI = "PANCHOTTARI"
    DWADASHOTTARI = "DWADASHOTTARI"
    CHATURVIMSATI = "CHATURVIMSATI"
    SHATTRIMSHAT = "SHATTRIMSHAT"
    KALACHAKRA = "KALACHAKRA"


class DashaSystemConfig(BaseModel):
    """
    Planet-keyed scheme: lords cycle in `lords` order with the tabulated
    `durations` (years). The Moon's nakshatra, shifted back by the scheme
    offset, picks the first lord.
    """

    model_config = ConfigDict(frozen=True)

    key: DashaSystem
    total_cycle_years: float
    lords: Tuple[str, ...]
    durations: Tuple[float, ...]
    starting_nakshatra_offset: int = 0
    # schemes whose starting nakshatra is fixed regardless of the generic offset
    nakshatra_offset_override: Optional[int] = None

    @model_validator(mode="after")
    def _check_cycle(self) -> "DashaSystemConfig":
        if len(self.lords) != len(self.durations) or not self.lords:
            raise ValueError(f"{self.key.value}: lords and durations must be non-empty and the same length")
        if any(d <= 0 for d in self.durations):
            raise ValueError(f"{self.key.value}: durations must be positive")
        if len(set(self.lords)) != len(self.lords):
            raise ValueError(f"{self.key.value}: lords must be unique")
        if abs(sum(self.durations) - self.total_cycle_years) > 1e-9:
            raise ValueError(
                f"{self.key.value}: durations sum to {sum(self.durations)}, expected {self.total_cycle_years}"
            )
        return self

    @property
    def effective_offset(self) -> int:
        if self.nakshatra_offset_override is not None:
            return self.nakshatra_offset_override
        return self.starting_nakshatra_offset

    def years_of(self, lord: str) -> float:
        return self.durations[self.lords.index(lord)]

    def next_lord(self, lord: str) -> str:
        i = self.lords.index(lord)
        return self.lords[(i + 1) % len(self.lords)]


class KalachakraConfig(BaseModel):
    """
    Sign-keyed scheme: one of four fixed nine-sign Savya sequences is picked
    from the Moon's pada; each sign runs for its tabulated years.
    """

    model_config = ConfigDict(frozen=True)

    key: DashaSystem = DashaSystem.KALACHAKRA
    sign_durations: Dict[str, float]
    savya_sequences: Tuple[Tuple[str, ...], ...]

    @model_validator(mode="after")
    def _check_sequences(self) -> "KalachakraConfig":
        if len(self.savya_sequences) != 4:
            raise ValueError("KALACHAKRA needs exactly four Savya sequences")
        for seq in self.savya_sequences:
            if len(seq) != 9:
                raise ValueError("each Savya sequence must hold nine signs")
            missing = [s for s in seq if s not in self.sign_durations]
            if missing:
                raise ValueError(f"no duration for signs {missing}")
        return self


VIMSHOTTARI = DashaSystemConfig(
    key=DashaSystem.VIMSHOTTARI,
    total_cycle_years=120,
    lords=("Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury"),
    durations=(7, 20, 6, 10, 7, 18, 16, 19, 17),
)

ASHTOTTARI = DashaSystemConfig(
    key=DashaSystem.ASHTOTTARI,
    total_cycle_years=108,
    lords=("Sun", "Moon", "Mars", "Mercury", "Saturn", "Jupiter", "Rahu", "Venus"),
    durations=(6, 15, 8, 17, 10, 19, 12, 21),
    starting_nakshatra_offset=2,
)

YOGINI = DashaSystemConfig(
    key=DashaSystem.YOGINI,
    total_cycle_years=36,
    lords=(
        "Mangala (Sun)", "Pingala (Moon)", "Dhanya (Jupiter)", "Bhramari (Mars)",
        "Bhadrika (Mercury)", "Ulka (Saturn)", "Siddha (Venus)", "Sankata (Rahu)",
    ),
    durations=(1, 2, 3, 4, 5, 6, 7, 8),
)

SHODASHOTTARI = DashaSystemConfig(
    key=DashaSystem.SHODASHOTTARI,
    total_cycle_years=116,
    lords=("Sun", "Mars", "Jupiter", "Saturn", "Ketu", "Moon", "Mercury", "Venus"),
    durations=(11, 12, 13, 14, 15, 16, 17, 18),
    starting_nakshatra_offset=11,
)

DWISAPTATI = DashaSystemConfig(
    key=DashaSystem.DWISAPTATI,
    total_cycle_years=72,
    lords=("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu"),
    durations=(9, 9, 9, 9, 9, 9, 9, 9),
    starting_nakshatra_offset=7,
)

PANCHOTTARI = DashaSystemConfig(
    key=DashaSystem.PANCHOTTARI,
    total_cycle_years=105,
    lords=("Sun", "Mercury", "Saturn", "Mars", "Venus", "Jupiter", "Rahu"),
    durations=(12, 13, 14, 15, 16, 17, 18),
    starting_nakshatra_offset=12,
)

DWADASHOTTARI = DashaSystemConfig(
    key=DashaSystem.DWADASHOTTARI,
    total_cycle_years=112,
    lords=("Sun", "Jupiter", "Ketu", "Mercury", "Rahu", "Mars", "Saturn", "Venus"),
    durations=(7, 9, 11, 13, 15, 17, 19, 21),
    nakshatra_offset_override=13,
)

# nine equal lords of 24/9 years
CHATURVIMSATI = DashaSystemConfig(
    key=DashaSystem.CHATURVIMSATI,
    total_cycle_years=24,
    lords=("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu"),
    durations=tuple([24.0 / 9.0] * 9),
)

SHATTRIMSHAT = DashaSystemConfig(
    key=DashaSystem.SHATTRIMSHAT,
    total_cycle_years=36,
    lords=("Moon", "Sun", "Jupiter", "Mars", "Mercury", "Saturn", "Venus", "Rahu"),
    durations=(1, 2, 3, 4, 5, 6, 7, 8),
    nakshatra_offset_override=3,
)

KALACHAKRA = KalachakraConfig(
    sign_durations={
        "Aries": 7, "Taurus": 16, "Gemini": 9, "Cancer": 21, "Leo": 5, "Virgo": 9,
        "Libra": 16, "Scorpio": 7, "Sagittarius": 10, "Capricorn": 4, "Aquarius": 4, "Pisces": 10,
    },
    savya_sequences=(
        ("Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo", "Libra", "Scorpio", "Sagittarius"),
        ("Capricorn", "Aquarius", "Pisces", "Scorpio", "Libra", "Virgo", "Cancer", "Leo", "Gemini"),
        ("Taurus", "Aries", "Sagittarius", "Capricorn", "Aquarius", "Pisces", "Scorpio", "Libra", "Virgo"),
        ("Cancer", "Leo", "Gemini", "Taurus", "Aries", "Sagittarius", "Capricorn", "Aquarius", "Pisces"),
    ),
)

PLANETARY_SYSTEMS: Dict[DashaSystem, DashaSystemConfig] = {
    cfg.key: cfg
    for cfg in (
        VIMSHOTTARI, ASHTOTTARI, YOGINI, SHODASHOTTARI, DWISAPTATI,
        PANCHOTTARI, DWADASHOTTARI, CHATURVIMSATI, SHATTRIMSHAT,
    )
}


def resolve_system(key) -> DashaSystem:
    """Accepts a DashaSystem or a case-insensitive name."""
    if isinstance(key, DashaSystem):
        return key
    s = str(key or "").strip().upper()
    try:
        return DashaSystem(s)
    except ValueError as e:
        raise UnsupportedDashaSystemError(f"Unsupported dasha system: {key!r}") from e


def planetary_config(key) -> DashaSystemConfig:
    if isinstance(key, DashaSystemConfig):
        return key
    system = resolve_system(key)
    cfg = PLANETARY_SYSTEMS.get(system)
    if cfg is None:
        raise UnsupportedDashaSystemError(f"{system.value} is not a planet-keyed dasha system")
    return cfg
