"""
positions.py
============
Raw tropical ephemeris output → sidereal planet placements.

For each of the eight queried bodies the adapter is called once, all calls
running concurrently in worker threads and joined before any reduction.
Ketu is derived from Rahu afterwards.

Per planet:
  sidereal   = (tropical − ayanamsa) mod 360
  sign       = floor(sidereal / 30)
  nakshatra  = floor(sidereal / 13°20')
  pada       = floor((sidereal mod 13°20') / 3°20') + 1
  retrograde = speed < 0
  exalted / debilitated  within ±5° of the fixed reference degree
  benefic    natural benefic, or placed in one of its friendly signs
  malefic    natural malefic
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import structlog

from .angles import (angular_distance, degree_in_sign, dms, nakshatra_index,
                     nakshatra_pada, normalize, sign_index, to_sidereal)
from .constants import (DEBILITATION_DEGREES, DIGNITY_ORB, EXALTATION_DEGREES,
                        FRIENDLY_SIGNS, NAKSHATRA_LORDS, NAKSHATRAS,
                        NATURAL_TEMPERAMENT, PLANETS, QUERIED_PLANETS,
                        SIGN_LORDS, SIGNS, Planet, Temperament)
from .ephemeris import EphemerisProvider, RawPosition
from ..errors import EphemerisUnavailable

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PlanetPosition:
    planet:             Planet
    longitude:          float      # tropical, as delivered by the adapter
    latitude:           float
    speed:              float      # deg/day
    distance:           float      # AU
    sidereal_longitude: float
    sign_index:         int
    degree_in_sign:     float
    nakshatra_index:    int
    nakshatra_pada:     int
    is_retrograde:      bool
    is_exalted:         bool
    is_debilitated:     bool
    is_benefic:         bool
    is_malefic:         bool
    dispositor:         Planet
    house:              int = 0    # set by houses.place_planets

    @property
    def sign(self) -> str:
        return SIGNS[self.sign_index]

    @property
    def nakshatra(self) -> str:
        return NAKSHATRAS[self.nakshatra_index]

    @property
    def nakshatra_lord(self) -> Planet:
        return NAKSHATRA_LORDS[self.nakshatra_index]

    @property
    def dms(self) -> Tuple[int, int, int]:
        return dms(self.degree_in_sign)


# ── Classification ─────────────────────────────────────────────

def is_exalted(planet: Planet, sidereal_longitude: float) -> bool:
    ref = EXALTATION_DEGREES.get(planet)
    return ref is not None and angular_distance(sidereal_longitude, ref) <= DIGNITY_ORB


def is_debilitated(planet: Planet, sidereal_longitude: float) -> bool:
    ref = DEBILITATION_DEGREES.get(planet)
    return ref is not None and angular_distance(sidereal_longitude, ref) <= DIGNITY_ORB


def temperament(planet: Planet, sign: int) -> Tuple[bool, bool]:
    """(is_benefic, is_malefic) for a planet placed in `sign`."""
    nature = NATURAL_TEMPERAMENT[planet]
    benefic = nature is Temperament.BENEFIC or sign in FRIENDLY_SIGNS.get(planet, ())
    return benefic, nature is Temperament.MALEFIC


# ── Reduction ──────────────────────────────────────────────────

def reduce_position(planet: Planet, raw: RawPosition, ayanamsa: float,
                    retrograde: bool = None) -> PlanetPosition:
    """Build the sidereal placement for one raw tropical position."""
    planet = Planet(planet)
    sidereal = to_sidereal(raw.longitude, ayanamsa)
    sign = sign_index(sidereal)
    benefic, malefic = temperament(planet, sign)
    return PlanetPosition(
        planet=planet,
        longitude=normalize(raw.longitude),
        latitude=raw.latitude,
        speed=raw.speed,
        distance=raw.distance,
        sidereal_longitude=sidereal,
        sign_index=sign,
        degree_in_sign=degree_in_sign(sidereal),
        nakshatra_index=nakshatra_index(sidereal),
        nakshatra_pada=nakshatra_pada(sidereal),
        is_retrograde=raw.speed < 0 if retrograde is None else retrograde,
        is_exalted=is_exalted(planet, sidereal),
        is_debilitated=is_debilitated(planet, sidereal),
        is_benefic=benefic,
        is_malefic=malefic,
        dispositor=SIGN_LORDS[sign],
    )


def derive_ketu(rahu: RawPosition, moon: RawPosition, ayanamsa: float) -> PlanetPosition:
    """Ketu sits exactly opposite Rahu.

    Latitude is mirrored, speed and distance are Rahu's. Ketu's retrograde
    flag is the inverse of the Moon's.
    """
    opposite = RawPosition(
        longitude=normalize(rahu.longitude + 180.0),
        latitude=-rahu.latitude,
        speed=rahu.speed,
        distance=rahu.distance,
    )
    return reduce_position(Planet.KETU, opposite, ayanamsa,
                           retrograde=not (moon.speed < 0))


def reduce_positions(raw: Mapping[Planet, RawPosition],
                     ayanamsa: float) -> Tuple[PlanetPosition, ...]:
    """All nine placements, in canonical planet order."""
    reduced = {p: reduce_position(p, raw[p], ayanamsa) for p in QUERIED_PLANETS}
    reduced[Planet.KETU] = derive_ketu(raw[Planet.RAHU], raw[Planet.MOON], ayanamsa)
    return tuple(reduced[p] for p in PLANETS)


# ── Adapter fan-out ────────────────────────────────────────────

def _query(provider: EphemerisProvider, planet: Planet, jd_ut: float) -> RawPosition:
    try:
        return provider.get_position(planet, jd_ut)
    except Exception as e:
        logger.error("ephemeris.failed", planet=str(planet), jd_ut=jd_ut, error=str(e))
        raise EphemerisUnavailable(str(planet), str(e)) from e


async def fetch_raw_positions(provider: EphemerisProvider,
                              jd_ut: float) -> Dict[Planet, RawPosition]:
    """Query every non-derived planet concurrently; the first failure aborts."""
    results = await asyncio.gather(*(
        asyncio.to_thread(_query, provider, planet, jd_ut)
        for planet in QUERIED_PLANETS
    ))
    return dict(zip(QUERIED_PLANETS, results))


async def acompute_positions(provider: EphemerisProvider, jd_ut: float,
                             ayanamsa: float) -> Tuple[PlanetPosition, ...]:
    raw = await fetch_raw_positions(provider, jd_ut)
    return reduce_positions(raw, ayanamsa)
