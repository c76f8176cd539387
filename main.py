# main.py
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from jyotish_engine.config import DEFAULT_CONFIG, get_settings
from jyotish_engine.core.ashtakavarga import CLASSICAL_PLANETS
from jyotish_engine.core.dasha_systems import DashaSystem
from jyotish_engine.core.engine import JyotishEngine
from jyotish_engine.core.ephemeris import build_ephemeris
from jyotish_engine.core.errors import JyotishError, LocationNotFoundError
from jyotish_engine.core.geo import LocationResolver
from jyotish_engine.core.jd import jd_to_iso, local_iso_to_julian_day, now_julian_day
from jyotish_engine.core.models import BirthContext, MuhurtaWindows
from jyotish_engine.core.varga import division_name

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("jyotish_engine.service")


# -------------------------------------------------
# App
# -------------------------------------------------
app = FastAPI(title="Jyotish Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache()
def get_engine() -> JyotishEngine:
    s = get_settings()
    return JyotishEngine(
        config=s.engine_config(),
        ephemeris=build_ephemeris(s.ephemeris, s.ephemeris_file),
        ayanamsa_name=s.ayanamsa,
    )


@lru_cache()
def get_resolver() -> LocationResolver:
    return LocationResolver()


@app.exception_handler(JyotishError)
async def jyotish_exception_handler(request: Request, exc: JyotishError):
    status = 404 if isinstance(exc, LocationNotFoundError) else 422
    logger.warning("%s on %s: %s", exc.code, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": exc.code, "message": str(exc)})


# -------------------------------------------------
# Startup warm-up (loads the JPL kernel before the first request)
# -------------------------------------------------
@app.on_event("startup")
def _startup_warm():
    if settings.ephemeris != "skyfield":
        return
    try:
        get_engine().ephemeris.longitude_of("Sun", now_julian_day())
        logger.info("startup warm ok")
    except (OSError, ValueError) as e:
        logger.warning("startup warm failed: %s", e)


# -------------------------------------------------
# Health
# -------------------------------------------------
@app.get("/health")
def health():
    return {"ok": True, "service": settings.app_name, "ephemeris": settings.ephemeris, "ayanamsa": settings.ayanamsa}


# -------------------------------------------------
# Request models
# -------------------------------------------------
class JDReq(BaseModel):
    # "2025-12-28T08:30:00"
    datetimeLocal: str = Field(..., description="Local datetime ISO string")
    tz: Optional[str] = Field(None, description="IANA timezone, e.g. Asia/Kolkata")
    tzOffsetHours: Optional[float] = Field(None, description="Fixed UTC offset; wins over tz")


class SiderealReq(BaseModel):
    tropicalLon: float
    jd: float


class NakshatraReq(BaseModel):
    moonLon: float


class PanchangReq(BaseModel):
    sunLon: float
    moonLon: float
    jd: float


class MuhurtaReq(BaseModel):
    sunriseJd: float
    sunsetJd: float
    jd: float


class VargaReq(BaseModel):
    longitudes: Dict[str, float]
    division: int = 9


class AshtakavargaReq(BaseModel):
    longitudes: Dict[str, float]
    ascendantSign: int = Field(..., description="1..12, Aries = 1")
    target: Optional[str] = Field(None, description="One planet; omit for all seven plus the total")


class ShadbalaReq(BaseModel):
    longitudes: Dict[str, float]
    velocities: Dict[str, float] = Field(default_factory=dict)
    cusps: List[float]
    isDayBirth: bool
    planet: Optional[str] = None


class ChartReq(BaseModel):
    datetimeLocal: str
    tz: Optional[str] = None
    tzOffsetHours: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    place: Optional[str] = Field(None, description="City name; fills lat/lon/tz when given")
    ayanamsa: Optional[str] = None


class DashaTimelineReq(BaseModel):
    system: str = DashaSystem.VIMSHOTTARI.value
    moonLon: float
    birthJd: float
    horizonYears: Optional[float] = Field(None, gt=0, le=DEFAULT_CONFIG.max_horizon_years)
    levels: Optional[int] = None


class DashaSubdivideReq(BaseModel):
    system: str = DashaSystem.VIMSHOTTARI.value
    lord: str
    startJd: float
    endJd: float
    level: int = Field(1, ge=1, le=2, description="1 = Antardasha, 2 = Pratyantardasha")
    levels: Optional[int] = None


class DashaCurrentReq(BaseModel):
    system: str = DashaSystem.VIMSHOTTARI.value
    moonLon: float
    birthJd: float
    jd: Optional[float] = Field(None, description="Defaults to now")


# -------------------------------------------------
# Astro APIs
# -------------------------------------------------
@app.post("/api/astro/jd")
def astro_jd(req: JDReq, engine: JyotishEngine = Depends(get_engine)):
    jd, offset = local_iso_to_julian_day(req.datetimeLocal, req.tzOffsetHours, req.tz, engine.config)
    return {"jd_ut": jd, "tz_offset_hours": offset, "utc_iso": jd_to_iso(jd)}


@app.post("/api/astro/sidereal")
def astro_sidereal(req: SiderealReq, engine: JyotishEngine = Depends(get_engine)):
    return {
        "ayanamsa": engine.ayanamsa_name,
        "ayanamsa_deg": engine.ayanamsa(req.jd),
        "sidereal_lon": engine.sidereal_longitude(req.tropicalLon, req.jd),
    }


@app.post("/api/astro/nakshatra")
def astro_nakshatra(req: NakshatraReq, engine: JyotishEngine = Depends(get_engine)):
    return engine.nakshatra_of(req.moonLon)


@app.post("/api/astro/panchang")
def astro_panchang(req: PanchangReq, engine: JyotishEngine = Depends(get_engine)):
    return engine.panchang(req.sunLon, req.moonLon, req.jd)


def _windows_with_iso(windows: Optional[MuhurtaWindows]) -> Optional[Dict[str, Any]]:
    if windows is None:
        return None
    out: Dict[str, Any] = {}
    for name, w in windows.model_dump().items():
        out[name] = {**w, "start_iso": jd_to_iso(w["start_jd"]), "end_iso": jd_to_iso(w["end_jd"])}
    return out


@app.post("/api/astro/muhurta")
def astro_muhurta(req: MuhurtaReq, engine: JyotishEngine = Depends(get_engine)):
    return _windows_with_iso(engine.muhurta_windows(req.sunriseJd, req.sunsetJd, req.jd))


@app.post("/api/astro/varga")
def astro_varga(req: VargaReq, engine: JyotishEngine = Depends(get_engine)):
    return {
        "division": req.division,
        "name": division_name(req.division),
        "positions": engine.varga_chart(req.longitudes, req.division),
    }


@app.post("/api/astro/ashtakavarga")
def astro_ashtakavarga(req: AshtakavargaReq, engine: JyotishEngine = Depends(get_engine)):
    if req.target:
        grid = engine.ashtakavarga(req.target, req.longitudes, req.ascendantSign)
        return {"planet": grid.planet, "bins": grid.bins, "total": grid.total}

    grids = {p: engine.ashtakavarga(p, req.longitudes, req.ascendantSign) for p in CLASSICAL_PLANETS}
    sarva = engine.sarvashtakavarga(req.longitudes, req.ascendantSign)
    return {
        "planets": {p: {"bins": g.bins, "total": g.total} for p, g in grids.items()},
        "sarva": {"bins": sarva.bins, "total": sarva.total},
    }


@app.post("/api/astro/shadbala")
def astro_shadbala(req: ShadbalaReq, engine: JyotishEngine = Depends(get_engine)):
    if req.planet:
        birth = BirthContext(is_day_birth=req.isDayBirth, velocity=req.velocities.get(req.planet))
        sun = req.longitudes.get("Sun")
        moon = req.longitudes.get("Moon")
        return engine.shadbala(req.planet, req.longitudes, moon, sun, req.cusps, birth)

    results = engine.shadbala_all(req.longitudes, req.velocities, req.cusps, req.isDayBirth)
    return {"ranking": list(results), "results": results}


@app.post("/api/astro/chart")
def astro_chart(
    req: ChartReq,
    engine: JyotishEngine = Depends(get_engine),
    resolver: LocationResolver = Depends(get_resolver),
):
    lat, lon, tz = req.lat, req.lon, req.tz
    location = None
    if req.place:
        location = resolver.resolve(req.place)
        lat, lon = location.latitude, location.longitude
        tz = tz or location.tz
    if lat is None or lon is None:
        raise LocationNotFoundError("either place or lat/lon is required")

    jd_ut, offset = local_iso_to_julian_day(req.datetimeLocal, req.tzOffsetHours, tz, engine.config)
    chart = engine.birth_chart(jd_ut, lat, lon, req.ayanamsa)

    sun = chart.planets["Sun"].lon_sidereal
    moon = chart.planets["Moon"].lon_sidereal
    return {
        "location": location,
        "tz_offset_hours": offset,
        "chart": chart,
        "panchang": engine.panchang(sun, moon, jd_ut),
        "muhurta": _windows_with_iso(engine.muhurta_at(jd_ut, lat, lon)),
    }


# -------------------------------------------------
# Dasha APIs
# -------------------------------------------------
@app.post("/api/dasha/timeline")
def dasha_timeline(req: DashaTimelineReq, engine: JyotishEngine = Depends(get_engine)):
    return engine.dasha_timeline(req.system, req.moonLon, req.birthJd, req.horizonYears, req.levels)


@app.post("/api/dasha/subdivide")
def dasha_subdivide(req: DashaSubdivideReq, engine: JyotishEngine = Depends(get_engine)):
    children = engine.subdivide(req.system, req.lord, req.startJd, req.endJd, req.level, req.levels)
    return {"system": req.system.strip().upper(), "lord": req.lord, "children": children}


@app.post("/api/dasha/current")
def dasha_current(req: DashaCurrentReq, engine: JyotishEngine = Depends(get_engine)):
    timeline = engine.dasha_timeline(req.system, req.moonLon, req.birthJd)
    jd = req.jd if req.jd is not None else now_julian_day()
    chain = engine.current_periods(timeline, jd)
    return {
        "system": timeline.system,
        "jd": jd,
        "periods": [p.model_copy(update={"children": []}) for p in chain],
    }


# -------------------------------------------------
# Geo APIs
# -------------------------------------------------
@app.get("/api/geo/resolve")
def geo_resolve(q: str, state: Optional[str] = None, resolver: LocationResolver = Depends(get_resolver)):
    return resolver.resolve(q, state)


@app.get("/api/geo/nearest")
def geo_nearest(lat: float, lon: float, resolver: LocationResolver = Depends(get_resolver)):
    city, km = resolver.nearest(lat, lon)
    return {"city": city, "distance": km, "unit": "km"}


@app.get("/api/geo/state/{state}")
def geo_state(state: str, resolver: LocationResolver = Depends(get_resolver)):
    return {"state": state, "cities": resolver.filter_by_state(state)}
