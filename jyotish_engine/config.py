# jyotish_engine/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """
    Immutable numeric constants shared by every calculator.
    Built once and passed into the computations; never mutated.
    """

    model_config = ConfigDict(frozen=True)

    sidereal_year_days: float = 365.25636
    j2000: float = 2451545.0

    # linear precession model, anchored at J2000
    ayanamsa_base_degrees: float = 23.85710278
    ayanamsa_rate_per_century: float = 50.27 / 3600.0

    min_year: int = -5000
    max_year: int = 5000

    default_horizon_years: float = 120.0
    max_horizon_years: float = 1000.0
    # Mahadasha / Antardasha / Pratyantardasha
    dasha_levels: int = Field(default=3, ge=1, le=3)


DEFAULT_CONFIG = EngineConfig()

# KP = Lahiri - 0.1015
AYANAMSA_PRESETS: Dict[str, float] = {
    "LAHIRI": 0.0,
    "KP": -0.1015,
}


def normalize_ayanamsa_name(v: object) -> str:
    s = str(v or "LAHIRI").strip().upper()
    if s in ["KP", "K"]:
        return "KP"
    return "LAHIRI"


def with_ayanamsa(config: EngineConfig, name: object) -> EngineConfig:
    """Copy of `config` whose base is the Lahiri base shifted by the named preset."""
    preset = AYANAMSA_PRESETS[normalize_ayanamsa_name(name)]
    return config.model_copy(update={"ayanamsa_base_degrees": DEFAULT_CONFIG.ayanamsa_base_degrees + preset})


class Settings(BaseSettings):
    """
    Service settings, read from JYOTISH_* environment variables or a .env file.
    """

    model_config = SettingsConfigDict(env_prefix="JYOTISH_", env_file=".env", extra="ignore")

    app_name: str = "jyotish-engine"
    log_level: str = Field(default="INFO", description="Root logging level")

    ephemeris: str = Field(default="mean", description="mean | skyfield")
    ephemeris_file: str = Field(default="de440s.bsp", description="JPL kernel for skyfield")

    ayanamsa: str = Field(default="LAHIRI", description="LAHIRI | KP")
    horizon_years: float = Field(default=120.0, gt=0, le=1000.0)

    cors_origins: str = Field(default="*", description="Comma-separated origins, or *")

    @field_validator("ephemeris")
    @classmethod
    def _check_ephemeris(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("mean", "skyfield"):
            raise ValueError(f"ephemeris must be 'mean' or 'skyfield', got {v!r}")
        return v

    @field_validator("ayanamsa")
    @classmethod
    def _check_ayanamsa(cls, v: str) -> str:
        return normalize_ayanamsa_name(v)

    @property
    def cors_origin_list(self) -> list:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def engine_config(self) -> EngineConfig:
        return with_ayanamsa(EngineConfig(default_horizon_years=self.horizon_years), self.ayanamsa)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
