"""
birth_chart.py
==============
Main birth chart generator.

Orchestrates the time scale, ephemeris, position, house, lunar calendar,
divisional chart and dasha modules into one immutable BirthChart.

Usage:
    from jataka_engine import BirthInput, compute_birth_chart

    chart = compute_birth_chart(BirthInput(
        year=1990, month=1, day=15, hour=8, minute=30,
        utc_offset=-5.0,
        latitude=40.7128, longitude=-74.0060,
        house_system="placidus", ayanamsa="lahiri",
    ))
    chart.planet("Sun").sign        # "Capricorn"
    chart.divisional_chart(9)       # computed on first access
    chart.dasha.period_at(now)      # (maha dasha, antardasha)
    chart.to_dict()                 # JSON-ready document
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import structlog

from ..config import Settings, get_settings
from ..core.angles import dms
from ..core.constants import Planet
from ..core.dasha import DashaPeriod, DashaTimeline, dasha_from_moon
from ..core.divisional_charts import (SUPPORTED_DIVISIONS, DivisionalChart,
                                      DivisionalPosition, Division,
                                      compute_divisional_chart)
from ..core.ephemeris import EphemerisProvider, get_provider
from ..core.houses import Ascendant, HouseSet, acompute_houses, assign_houses
from ..core.panchang import LunarCalendarSnapshot, compute_lunar_calendar
from ..core.positions import PlanetPosition, acompute_positions
from ..core.timescale import BirthInput, EphemerisMoment, ephemeris_moment

logger = structlog.get_logger(__name__)

PRECISION = 6


@dataclass(frozen=True)
class BirthChart:
    birth:     BirthInput
    moment:    EphemerisMoment
    ascendant: Ascendant
    planets:   Tuple[PlanetPosition, ...]
    houses:    HouseSet
    lunar:     LunarCalendarSnapshot
    divisions: Tuple[Division, ...] = SUPPORTED_DIVISIONS
    dasha_horizon_years: float = 120.0
    # Lazily filled with divisional charts and the dasha timeline.
    _cache: Dict = field(default_factory=dict, init=False, repr=False,
                         compare=False, hash=False)

    def planet(self, planet) -> PlanetPosition:
        planet = Planet(planet)
        return next(p for p in self.planets if p.planet is planet)

    @property
    def degraded(self) -> bool:
        return self.houses.degraded

    def divisional_chart(self, division) -> DivisionalChart:
        division = Division.parse(division)
        key = ("division", division)
        if key not in self._cache:
            self._cache[key] = compute_divisional_chart(self.ascendant, self.planets, division)
        return self._cache[key]

    @property
    def divisional_charts(self) -> Mapping[Division, DivisionalChart]:
        return MappingProxyType({d: self.divisional_chart(d) for d in self.divisions})

    @property
    def dasha(self) -> DashaTimeline:
        if "dasha" not in self._cache:
            moon = self.planet(Planet.MOON)
            self._cache["dasha"] = dasha_from_moon(
                moon.sidereal_longitude, self.moment.utc, self.dasha_horizon_years
            )
        return self._cache["dasha"]

    def to_dict(self) -> dict:
        birth, moment = self.birth, self.moment
        return {
            "meta": {
                "input": {
                    "date": f"{birth.year:04d}-{birth.month:02d}-{birth.day:02d}",
                    "time": f"{birth.hour:02d}:{birth.minute:02d}:{birth.second:02d}",
                    "utc_offset": birth.utc_offset,
                    "timezone": birth.timezone,
                    "latitude": birth.latitude,
                    "longitude": birth.longitude,
                    "ayanamsa": birth.ayanamsa.value,
                    "house_system": birth.house_system.value,
                },
                "utc": moment.utc.isoformat(),
                "julian_day_ut": round(moment.julian_day_ut, PRECISION),
                "julian_day": round(moment.julian_day, PRECISION),
                "delta_t": round(moment.delta_t, 3),
                "ayanamsa": round(moment.ayanamsa, PRECISION),
                "houses_degraded": self.houses.degraded,
                "degraded_reason": self.houses.degraded_reason,
            },
            "ascendant": ascendant_to_dict(self.ascendant),
            "planets": {str(p.planet): planet_to_dict(p) for p in self.planets},
            "houses": [
                {
                    "house": c.number,
                    "sidereal_longitude": round(c.longitude, PRECISION),
                    "sign": c.sign,
                    "degree": _dms(c.degree_in_sign),
                    "ruler": str(c.ruler),
                    "planets": [str(p) for p in c.planets],
                }
                for c in self.houses.cusps
            ],
            "lunar_calendar": {
                "tithi": self.lunar.tithi,
                "tithi_name": self.lunar.tithi_name,
                "paksha": self.lunar.paksha.value,
                "karana": self.lunar.karana,
                "yoga": self.lunar.yoga,
            },
            "divisional_charts": {
                str(d): divisional_chart_to_dict(chart)
                for d, chart in self.divisional_charts.items()
            },
            "dasha": dasha_to_dict(self.dasha),
        }


# ── Serialization ──────────────────────────────────────────────

def _dms(degrees: float) -> dict:
    d, m, s = dms(degrees)
    return {"degrees": d, "minutes": m, "seconds": s}


def ascendant_to_dict(asc: Ascendant) -> dict:
    return {
        "sidereal_longitude": round(asc.longitude, PRECISION),
        "tropical_longitude": round(asc.tropical_longitude, PRECISION),
        "sign": asc.sign,
        "degree": _dms(asc.degree_in_sign),
        "nakshatra": asc.nakshatra,
        "nakshatra_pada": asc.nakshatra_pada,
    }


def planet_to_dict(p: PlanetPosition) -> dict:
    return {
        "sidereal_longitude": round(p.sidereal_longitude, PRECISION),
        "tropical_longitude": round(p.longitude, PRECISION),
        "latitude": round(p.latitude, PRECISION),
        "speed": round(p.speed, PRECISION),
        "distance": round(p.distance, PRECISION),
        "sign": p.sign,
        "degree": _dms(p.degree_in_sign),
        "nakshatra": p.nakshatra,
        "nakshatra_pada": p.nakshatra_pada,
        "nakshatra_lord": str(p.nakshatra_lord),
        "house": p.house,
        "dispositor": str(p.dispositor),
        "is_retrograde": p.is_retrograde,
        "is_exalted": p.is_exalted,
        "is_debilitated": p.is_debilitated,
        "is_benefic": p.is_benefic,
        "is_malefic": p.is_malefic,
    }


def _divisional_position(pos: DivisionalPosition) -> dict:
    return {"sign": pos.sign, "sign_index": pos.sign_index,
            "degree": _dms(pos.degree_in_sign), "house": pos.house}


def divisional_chart_to_dict(chart: DivisionalChart) -> dict:
    return {
        "division": chart.division.value,
        "label": chart.label,
        "ascendant": _divisional_position(chart.ascendant),
        "planets": {str(p): _divisional_position(pos) for p, pos in chart.positions.items()},
    }


def period_to_dict(period: DashaPeriod, with_sub_periods: bool = True) -> dict:
    out = {
        "lord": str(period.lord),
        "start": period.start.isoformat(),
        "end": period.end.isoformat(),
        "duration_years": round(period.duration_years, PRECISION),
    }
    if with_sub_periods and period.level == 1:
        out["sub_periods"] = [period_to_dict(s, False) for s in period.sub_periods()]
    return out


def dasha_to_dict(timeline: DashaTimeline, on: Optional[datetime] = None) -> dict:
    out = {
        "system": "Vimshottari",
        "balance_years": round(timeline.balance_years, PRECISION),
        "periods": [period_to_dict(p) for p in timeline.periods],
    }
    if on is not None:
        active = timeline.period_at(on)
        out["current"] = None if active is None else {
            "maha_dasha": period_to_dict(active[0], False),
            "antardasha": period_to_dict(active[1], False) if active[1] else None,
        }
    return out


# ── Generator ──────────────────────────────────────────────────

async def acompute_birth_chart(birth: BirthInput,
                               provider: Optional[EphemerisProvider] = None,
                               settings: Optional[Settings] = None) -> BirthChart:
    """
    Compute a complete birth chart.

    Input is validated before any ephemeris call. Every adapter call runs in
    a worker thread, the planet queries concurrently; if any fails the chart is abandoned with
    EphemerisUnavailable. A failed house system yields a chart whose
    `houses.degraded` is True.
    """
    settings = settings or get_settings()
    birth.validate()
    moment = ephemeris_moment(birth)
    if provider is None:
        provider = get_provider(settings.ephemeris_backend, settings.ephe_path)

    positions = await acompute_positions(provider, moment.julian_day_ut, moment.ayanamsa)
    houses = await acompute_houses(provider, moment, birth)
    houses, positions = assign_houses(houses, positions)

    sun = next(p for p in positions if p.planet is Planet.SUN)
    moon = next(p for p in positions if p.planet is Planet.MOON)
    lunar = compute_lunar_calendar(sun.sidereal_longitude, moon.sidereal_longitude)

    chart = BirthChart(
        birth=birth,
        moment=moment,
        ascendant=houses.ascendant,
        planets=positions,
        houses=houses,
        lunar=lunar,
        divisions=tuple(Division.parse(d) for d in settings.divisions),
        dasha_horizon_years=settings.dasha_horizon_years,
    )
    logger.info("chart.computed", utc=moment.utc.isoformat(),
                ayanamsa=birth.ayanamsa.value, house_system=birth.house_system.value,
                ascendant=houses.ascendant.sign, degraded=houses.degraded)
    return chart


def compute_birth_chart(birth: BirthInput,
                        provider: Optional[EphemerisProvider] = None,
                        settings: Optional[Settings] = None) -> BirthChart:
    """Synchronous wrapper around acompute_birth_chart."""
    return asyncio.run(acompute_birth_chart(birth, provider, settings))
