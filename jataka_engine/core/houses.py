"""
houses.py
=========
Ascendant, house cusps and house placement.

Primary path: the adapter's `get_cusps` for the requested house system,
converted to sidereal with the chart ayanamsa. Whole Sign houses are laid
out from the sign of the *sidereal* ascendant, so house 1 is always the
rising sign of the sidereal zodiac.

The primary result is rejected when the adapter raises ProviderError
(e.g. Placidus/Koch above the polar circle) or when the cusps do not split
the circle into twelve ordered, non-overlapping arcs. Equal houses from an
ascendant proxy are substituted and the HouseSet is flagged `degraded`.

Placement: planet is in house h iff its longitude lies in
[cusp[h], cusp[h+1]) going forward around the circle.

Source: Holden, J.H. (1994). "A History of Horoscopic Astrology"
"""

import asyncio
import warnings
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

import structlog

from .angles import (degree_in_sign, dms, nakshatra_index, nakshatra_pada,
                     normalize, sign_index, to_sidereal)
from .constants import NAKSHATRAS, SIGN_LORDS, SIGN_SPAN, SIGNS, HouseSystem, Planet
from .ephemeris import EphemerisProvider, RawCusps
from .positions import PlanetPosition
from .timescale import BirthInput, EphemerisMoment
from ..errors import HouseComputationDegraded, HousePlacementError, ProviderError

logger = structlog.get_logger(__name__)

TROPICAL_YEAR_DAYS = 365.2422
PARTITION_TOLERANCE = 1e-6


# ── Data ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Ascendant:
    longitude:          float    # sidereal
    tropical_longitude: float
    sign_index:         int
    degree_in_sign:     float
    nakshatra_index:    int
    nakshatra_pada:     int

    @property
    def sign(self) -> str:
        return SIGNS[self.sign_index]

    @property
    def nakshatra(self) -> str:
        return NAKSHATRAS[self.nakshatra_index]

    @property
    def dms(self) -> Tuple[int, int, int]:
        return dms(self.degree_in_sign)


@dataclass(frozen=True)
class HouseCusp:
    number:         int          # 1..12
    longitude:      float        # sidereal
    sign_index:     int
    degree_in_sign: float
    ruler:          Planet
    planets:        Tuple[Planet, ...] = ()

    @property
    def sign(self) -> str:
        return SIGNS[self.sign_index]


@dataclass(frozen=True)
class HouseSet:
    ascendant:       Ascendant
    cusps:           Tuple[HouseCusp, ...]
    house_system:    HouseSystem
    degraded:        bool = False
    degraded_reason: Optional[str] = None

    @property
    def longitudes(self) -> Tuple[float, ...]:
        return tuple(c.longitude for c in self.cusps)

    def house_of(self, longitude: float) -> int:
        return house_index(self.longitudes, longitude)

    def cusp(self, number: int) -> HouseCusp:
        return self.cusps[number - 1]


def make_ascendant(tropical: float, ayanamsa: float) -> Ascendant:
    sidereal = to_sidereal(tropical, ayanamsa)
    return Ascendant(
        longitude=sidereal,
        tropical_longitude=normalize(tropical),
        sign_index=sign_index(sidereal),
        degree_in_sign=degree_in_sign(sidereal),
        nakshatra_index=nakshatra_index(sidereal),
        nakshatra_pada=nakshatra_pada(sidereal),
    )


def make_cusps(longitudes: Sequence[float]) -> Tuple[HouseCusp, ...]:
    cusps = []
    for number, lon in enumerate(longitudes, start=1):
        sign = sign_index(lon)
        cusps.append(HouseCusp(number=number, longitude=lon, sign_index=sign,
                               degree_in_sign=degree_in_sign(lon),
                               ruler=SIGN_LORDS[sign]))
    return tuple(cusps)


# ── Partition & placement ──────────────────────────────────────

def _arc(start: float, end: float) -> float:
    return (end - start) % 360.0


def is_circular_partition(longitudes: Sequence[float]) -> bool:
    """Twelve cusps, each arc non-empty, arcs adding to exactly one turn."""
    if len(longitudes) != 12:
        return False
    arcs = [_arc(longitudes[i], longitudes[(i + 1) % 12]) for i in range(12)]
    if any(a <= PARTITION_TOLERANCE for a in arcs):
        return False
    return abs(sum(arcs) - 360.0) < PARTITION_TOLERANCE


def house_index(longitudes: Sequence[float], longitude: float) -> int:
    """1-based house containing `longitude`. Exactly one arc must match."""
    matches = [
        h + 1 for h in range(12)
        if _arc(longitudes[h], longitude) < _arc(longitudes[h], longitudes[(h + 1) % 12])
    ]
    if len(matches) != 1:
        raise HousePlacementError(
            f"Longitude {longitude:.6f} matched houses {matches}; "
            "cusps are not a circular partition"
        )
    return matches[0]


def place_planets(longitudes: Sequence[float],
                  planets: Sequence[PlanetPosition]) -> Mapping[int, Tuple[Planet, ...]]:
    """House number → planets in it, in the order given. Pure."""
    occupants = {h: [] for h in range(1, 13)}
    for p in planets:
        occupants[house_index(longitudes, p.sidereal_longitude)].append(p.planet)
    return MappingProxyType({h: tuple(ps) for h, ps in occupants.items()})


def assign_houses(houses: HouseSet, planets: Sequence[PlanetPosition]
                  ) -> Tuple[HouseSet, Tuple[PlanetPosition, ...]]:
    """Copies of the house set and planets with occupancy filled in."""
    occupants = place_planets(houses.longitudes, planets)
    house_of = {pl: h for h, pls in occupants.items() for pl in pls}
    placed = tuple(replace(p, house=house_of[p.planet]) for p in planets)
    cusps = tuple(replace(c, planets=occupants[c.number]) for c in houses.cusps)
    return replace(houses, cusps=cusps), placed


# ── House systems ──────────────────────────────────────────────

def whole_sign_longitudes(ascendant: float) -> Tuple[float, ...]:
    start = sign_index(ascendant) * SIGN_SPAN
    return tuple(normalize(start + SIGN_SPAN * i) for i in range(12))


def equal_longitudes(ascendant: float) -> Tuple[float, ...]:
    return tuple(normalize(ascendant + SIGN_SPAN * i) for i in range(12))


def proxy_ascendant(jd_ut: float, longitude: float) -> float:
    """Rough tropical ascendant used only when the house system fails."""
    return normalize(jd_ut * 360.0 / TROPICAL_YEAR_DAYS - longitude / 360.0 * 30.0)


def fallback_houses(moment: EphemerisMoment, birth: BirthInput, reason: str) -> HouseSet:
    ascendant = make_ascendant(proxy_ascendant(moment.julian_day_ut, birth.longitude),
                               moment.ayanamsa)
    logger.warning("houses.degraded", house_system=birth.house_system.value,
                   latitude=birth.latitude, longitude=birth.longitude, reason=reason)
    warnings.warn(HouseComputationDegraded(
        f"{birth.house_system.value} houses unavailable ({reason}); using equal houses"
    ), stacklevel=2)
    return HouseSet(
        ascendant=ascendant,
        cusps=make_cusps(equal_longitudes(ascendant.longitude)),
        house_system=birth.house_system,
        degraded=True,
        degraded_reason=reason,
    )


def compute_houses(provider: EphemerisProvider, moment: EphemerisMoment,
                   birth: BirthInput) -> HouseSet:
    """Sidereal house set for the birth; never raises for a failed system."""
    try:
        raw = provider.get_cusps(moment.julian_day_ut, birth.latitude,
                                 birth.longitude, birth.house_system)
    except ProviderError as e:
        return fallback_houses(moment, birth, str(e))
    return houses_from_cusps(raw, moment, birth)


async def acompute_houses(provider: EphemerisProvider, moment: EphemerisMoment,
                          birth: BirthInput) -> HouseSet:
    """As compute_houses, with the adapter call run in a worker thread."""
    try:
        raw = await asyncio.to_thread(provider.get_cusps, moment.julian_day_ut,
                                      birth.latitude, birth.longitude, birth.house_system)
    except ProviderError as e:
        return fallback_houses(moment, birth, str(e))
    return houses_from_cusps(raw, moment, birth)


def houses_from_cusps(raw: RawCusps, moment: EphemerisMoment, birth: BirthInput) -> HouseSet:
    """Sidereal house set from tropical adapter cusps, or the equal-house fallback."""
    system = birth.house_system
    ascendant = make_ascendant(raw.ascendant, moment.ayanamsa)
    if system is HouseSystem.WHOLE_SIGN:
        longitudes = whole_sign_longitudes(ascendant.longitude)
    else:
        longitudes = tuple(to_sidereal(c, moment.ayanamsa) for c in raw.cusps)

    if not is_circular_partition(longitudes):
        return fallback_houses(moment, birth, "cusps do not partition the circle")

    return HouseSet(ascendant=ascendant, cusps=make_cusps(longitudes), house_system=system)
