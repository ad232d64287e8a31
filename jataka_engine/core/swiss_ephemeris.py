"""
swiss_ephemeris.py
==================
`EphemerisProvider` backed by the Swiss Ephemeris (pyswisseph).

Install with the `swisseph` extra. Positions are tropical; the sidereal
reduction stays in positions.py so both providers are reduced identically.
The Moon's node is the mean node, as with MeeusEphemeris.
"""

from typing import Optional

import swisseph as swe

from .constants import HouseSystem, Planet
from .ephemeris import RawCusps, RawPosition
from ..errors import ProviderError

SWE_BODIES = {
    Planet.SUN:     swe.SUN,
    Planet.MOON:    swe.MOON,
    Planet.MERCURY: swe.MERCURY,
    Planet.VENUS:   swe.VENUS,
    Planet.MARS:    swe.MARS,
    Planet.JUPITER: swe.JUPITER,
    Planet.SATURN:  swe.SATURN,
    Planet.RAHU:    swe.MEAN_NODE,
}


class SwissEphemeris:

    def __init__(self, ephe_path: Optional[str] = None):
        # Without data files swisseph falls back to its built-in Moshier series.
        self.flags = swe.FLG_SWIEPH | swe.FLG_SPEED
        if ephe_path:
            swe.set_ephe_path(ephe_path)
        else:
            self.flags = swe.FLG_MOSEPH | swe.FLG_SPEED

    def get_position(self, planet: Planet, jd_ut: float) -> RawPosition:
        planet = Planet(planet)
        if planet not in SWE_BODIES:
            raise ProviderError(f"{planet} is not computed by the ephemeris")
        try:
            xx, _ = swe.calc_ut(jd_ut, SWE_BODIES[planet], self.flags)
        except swe.Error as e:
            raise ProviderError(f"{planet}: {e}") from e
        return RawPosition(longitude=xx[0] % 360.0, latitude=xx[1],
                           speed=xx[3], distance=xx[2])

    def get_cusps(self, jd_ut: float, latitude: float, longitude: float,
                  house_system: HouseSystem) -> RawCusps:
        system = HouseSystem(house_system)
        try:
            cusps, ascmc = swe.houses_ex(jd_ut, latitude, longitude,
                                         system.code.encode("ascii"))
        except swe.Error as e:
            raise ProviderError(f"{system.value} cusps failed: {e}") from e
        cusps = tuple(cusps)
        # Older pyswisseph releases return 13 entries with index 0 unused.
        if len(cusps) == 13:
            cusps = cusps[1:]
        return RawCusps(ascendant=ascmc[0] % 360.0, midheaven=ascmc[1] % 360.0,
                        cusps=tuple(c % 360.0 for c in cusps))
