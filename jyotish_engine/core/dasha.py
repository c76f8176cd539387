# jyotish_engine/core/dasha.py
"""
Dasha timelines for the planet-keyed schemes and Kalachakra.

Planet-keyed schemes:
- first lord from the Moon's nakshatra (shifted by the scheme offset)
- first Mahadasha truncated by the fraction of the nakshatra already consumed
- Mahadashas follow the lord cycle until the horizon is passed
- every period splits into len(lords) children, restarting at its own lord:
      child_days = parent_days * (child_full_years / total_cycle_years)
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional

from jyotish_engine.config import DEFAULT_CONFIG, EngineConfig
from jyotish_engine.core.angles import norm360, require_longitude
from jyotish_engine.core.dasha_systems import (
    KALACHAKRA,
    DashaSystem,
    DashaSystemConfig,
    planetary_config,
    resolve_system,
)
from jyotish_engine.core.errors import InvalidDateError, InvalidIntervalError, UnknownPlanetError
from jyotish_engine.core.jd import jd_to_iso
from jyotish_engine.core.models import DashaPeriod, DashaTimeline
from jyotish_engine.core.nakshatra import nakshatra_of, pada_position

logger = logging.getLogger(__name__)

LEVEL_NAMES = ("mahadasha", "antardasha", "pratyantardasha")


def _make_period(
    lord: str,
    level: int,
    start_jd: float,
    end_jd: float,
    full_years: float,
    config: EngineConfig,
    children: Optional[List[DashaPeriod]] = None,
) -> DashaPeriod:
    return DashaPeriod(
        lord=lord,
        level=level,
        start_jd=start_jd,
        end_jd=end_jd,
        duration_years=(end_jd - start_jd) / config.sidereal_year_days,
        full_years=full_years,
        start_iso=jd_to_iso(start_jd),
        end_iso=jd_to_iso(end_jd),
        children=children or [],
    )


def _levels(levels: Optional[int], config: EngineConfig) -> int:
    n = config.dasha_levels if levels is None else int(levels)
    if not (1 <= n <= len(LEVEL_NAMES)):
        raise InvalidIntervalError(f"levels must be 1..{len(LEVEL_NAMES)}, got {levels!r}")
    return n


def subdivide(
    system,
    lord: str,
    start_jd: float,
    end_jd: float,
    level: int = 1,
    levels: Optional[int] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[DashaPeriod]:
    """
    Children of the period [start_jd, end_jd] ruled by `lord`, at depth `level`
    (1 = Antardasha, 2 = Pratyantardasha). Recurses until `levels` depths
    exist. The same rule produces every depth.
    """
    cfg = planetary_config(system)
    if lord not in cfg.lords:
        raise UnknownPlanetError(f"'{lord}' is not a lord of {cfg.key.value}")
    if not (math.isfinite(start_jd) and math.isfinite(end_jd)) or end_jd <= start_jd:
        raise InvalidIntervalError(f"end ({end_jd}) must be after start ({start_jd})")

    n_levels = _levels(levels, config)
    if isinstance(level, bool) or not isinstance(level, int) or not (1 <= level <= n_levels):
        raise InvalidIntervalError(f"level must be 1..{n_levels}, got {level!r}")
    if level == n_levels:
        return []

    parent_days = end_jd - start_jd
    out: List[DashaPeriod] = []
    cur_start = start_jd
    child_lord = lord

    for idx in range(len(cfg.lords)):
        full = cfg.years_of(child_lord)
        cur_end = cur_start + parent_days * (full / cfg.total_cycle_years)

        # force exact end on last item
        if idx == len(cfg.lords) - 1:
            cur_end = end_jd

        grandchildren = subdivide(cfg.key, child_lord, cur_start, cur_end, level + 1, n_levels, config) \
            if cur_end > cur_start else []
        out.append(_make_period(child_lord, level, cur_start, cur_end, full, config, grandchildren))

        cur_start = cur_end
        child_lord = cfg.next_lord(child_lord)

    return out


def _planetary_timeline(
    cfg: DashaSystemConfig,
    moon_lon: float,
    birth_jd: float,
    horizon_years: float,
    n_levels: int,
    config: EngineConfig,
) -> DashaTimeline:
    nak = nakshatra_of(moon_lon)
    adjusted = (nak.index - cfg.effective_offset + 27) % 27
    lord_idx = adjusted % len(cfg.lords)

    end_goal = birth_jd + horizon_years * config.sidereal_year_days
    periods: List[DashaPeriod] = []
    cur = birth_jd
    first = True

    while cur < end_goal:
        lord = cfg.lords[lord_idx]
        full = cfg.durations[lord_idx]
        years = (1.0 - nak.fraction_consumed) * full if first else full
        end = cur + years * config.sidereal_year_days

        if end > cur:
            children = subdivide(cfg, lord, cur, end, 1, n_levels, config)
            periods.append(_make_period(lord, 0, cur, end, full, config, children))
            cur = end

        lord_idx = (lord_idx + 1) % len(cfg.lords)
        first = False

    logger.debug(
        "dasha %s: nakshatra=%s first=%s mahadashas=%d levels=%d",
        cfg.key.value, nak.name, periods[0].lord if periods else None, len(periods), n_levels,
    )
    return DashaTimeline(
        system=cfg.key.value,
        birth_jd=birth_jd,
        horizon_years=horizon_years,
        nakshatra=nak,
        periods=periods,
    )


def _kalachakra_timeline(
    moon_lon: float,
    birth_jd: float,
    horizon_years: float,
    config: EngineConfig,
) -> DashaTimeline:
    total_padas, fraction = pada_position(moon_lon)
    cycle = (total_padas // 9) % 4
    sequence = KALACHAKRA.savya_sequences[cycle]

    periods: List[DashaPeriod] = []
    cur = birth_jd
    for i, sign in enumerate(sequence):
        full = KALACHAKRA.sign_durations[sign]
        years = full * (1.0 - fraction) if i == 0 else full
        end = cur + years * config.sidereal_year_days
        if end > cur:
            periods.append(_make_period(sign, 0, cur, end, full, config))
            cur = end

    logger.debug("dasha KALACHAKRA: pada=%d cycle=%d first=%s", total_padas, cycle, sequence[0])
    return DashaTimeline(
        system=DashaSystem.KALACHAKRA.value,
        birth_jd=birth_jd,
        horizon_years=horizon_years,
        nakshatra=nakshatra_of(moon_lon),
        periods=periods,
    )


def dasha_timeline(
    system_key,
    moon_longitude: float,
    birth_jd: float,
    horizon_years: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    levels: Optional[int] = None,
) -> DashaTimeline:
    system = resolve_system(system_key)

    lon = norm360(require_longitude(moon_longitude, "moon longitude"))

    if isinstance(birth_jd, bool) or not isinstance(birth_jd, (int, float)) or not math.isfinite(birth_jd):
        raise InvalidDateError(f"birth JD must be a finite number, got {birth_jd!r}")
    birth_jd = float(birth_jd)

    horizon = config.default_horizon_years if horizon_years is None else float(horizon_years)
    if not math.isfinite(horizon) or horizon <= 0:
        raise InvalidIntervalError(f"horizon must be positive, got {horizon_years!r}")
    if horizon > config.max_horizon_years:
        raise InvalidIntervalError(f"horizon {horizon} exceeds {config.max_horizon_years} years")

    if system is DashaSystem.KALACHAKRA:
        return _kalachakra_timeline(lon, birth_jd, horizon, config)

    return _planetary_timeline(planetary_config(system), lon, birth_jd, horizon, _levels(levels, config), config)


def current_periods(timeline: DashaTimeline, jd: float) -> List[DashaPeriod]:
    """
    The chain [Mahadasha, Antardasha, ...] running at `jd`, outermost first.
    Empty when `jd` lies outside the timeline.
    """
    chain: List[DashaPeriod] = []
    nodes = timeline.periods
    while nodes:
        hit = next((p for p in nodes if p.start_jd <= jd < p.end_jd), None)
        if hit is None:
            break
        chain.append(hit)
        nodes = hit.children
    return chain
