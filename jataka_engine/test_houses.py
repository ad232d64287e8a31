"""
test_houses.py
==============
House partition, planet placement and the degraded equal-house path.
"""

import asyncio

import pytest

from jataka_engine.core.constants import HouseSystem, Planet
from jataka_engine.core.ephemeris import MeeusEphemeris, RawCusps, RawPosition
from jataka_engine.core.houses import (acompute_houses, assign_houses, compute_houses, house_index,
                                       is_circular_partition, make_ascendant,
                                       make_cusps, place_planets, proxy_ascendant,
                                       HouseSet)
from jataka_engine.core.positions import reduce_position
from jataka_engine.core.timescale import BirthInput, ephemeris_moment
from jataka_engine.errors import HouseComputationDegraded, HousePlacementError, ProviderError

EQUAL_FROM_ZERO = tuple(30.0 * i for i in range(12))


def planet_at(planet, sidereal):
    return reduce_position(planet, RawPosition(sidereal, 0.0, 1.0, 1.0), 0.0)


class CuspProvider:
    def __init__(self, cusps=None, ascendant=15.0, error=None):
        self.cusps = cusps
        self.ascendant = ascendant
        self.error = error

    def get_position(self, planet, jd_ut):
        raise ProviderError("not used")

    def get_cusps(self, jd_ut, latitude, longitude, house_system):
        if self.error:
            raise self.error
        return RawCusps(ascendant=self.ascendant, midheaven=(self.ascendant + 270.0) % 360.0,
                        cusps=self.cusps)


# ---------------------------------------------------------------------------
# Partition
# ---------------------------------------------------------------------------

def test_equal_cusps_are_a_partition():
    assert is_circular_partition(EQUAL_FROM_ZERO)


def test_wrapping_cusps_are_a_partition():
    assert is_circular_partition(tuple((350.0 + 30.0 * i) % 360.0 for i in range(12)))


@pytest.mark.parametrize("cusps", [
    tuple(0.0 for _ in range(12)),                              # all arcs empty
    EQUAL_FROM_ZERO[:11],                                       # eleven cusps
    (0.0, 60.0, 30.0) + EQUAL_FROM_ZERO[3:],                    # out of order
    (0.0, 30.0, 30.0) + EQUAL_FROM_ZERO[3:],                    # duplicate cusp
])
def test_non_partitions_are_rejected(cusps):
    assert not is_circular_partition(cusps)


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("longitude,house", [
    (0.0, 1), (29.999, 1), (30.0, 2), (185.0, 7), (359.99, 12),
])
def test_house_index_half_open_arcs(longitude, house):
    assert house_index(EQUAL_FROM_ZERO, longitude) == house


def test_house_index_wraps_through_zero():
    cusps = tuple((350.0 + 30.0 * i) % 360.0 for i in range(12))
    assert house_index(cusps, 355.0) == 1
    assert house_index(cusps, 5.0) == 1
    assert house_index(cusps, 20.0) == 2
    assert house_index(cusps, 349.0) == 12


def test_degenerate_cusps_raise():
    with pytest.raises(HousePlacementError):
        house_index(tuple(0.0 for _ in range(12)), 10.0)


def test_place_planets_is_pure_and_exhaustive():
    planets = (planet_at(Planet.SUN, 10.0), planet_at(Planet.MOON, 45.0),
               planet_at(Planet.MARS, 15.0), planet_at(Planet.SATURN, 359.0))
    occupants = place_planets(EQUAL_FROM_ZERO, planets)
    assert set(occupants) == set(range(1, 13))
    assert occupants[1] == (Planet.SUN, Planet.MARS)
    assert occupants[2] == (Planet.MOON,)
    assert occupants[12] == (Planet.SATURN,)
    assert sum(len(v) for v in occupants.values()) == len(planets)
    # inputs untouched
    assert all(p.house == 0 for p in planets)
    with pytest.raises(TypeError):
        occupants[3] = (Planet.VENUS,)


def test_assign_houses_returns_copies():
    houses = HouseSet(ascendant=make_ascendant(5.0, 0.0), cusps=make_cusps(EQUAL_FROM_ZERO),
                      house_system=HouseSystem.EQUAL)
    planets = (planet_at(Planet.SUN, 10.0), planet_at(Planet.JUPITER, 95.0))
    placed_houses, placed = assign_houses(houses, planets)
    assert [p.house for p in placed] == [1, 4]
    assert placed_houses.cusp(4).planets == (Planet.JUPITER,)
    assert houses.cusp(4).planets == ()
    assert placed_houses.cusp(1).ruler is Planet.MARS


# ---------------------------------------------------------------------------
# compute_houses
# ---------------------------------------------------------------------------

DELHI = BirthInput(1990, 6, 15, 10, 30, utc_offset=5.5, latitude=28.6139, longitude=77.2090)


def _birth(**changes):
    fields = dict(year=1990, month=6, day=15, hour=10, minute=30, utc_offset=5.5,
                  latitude=28.6139, longitude=77.2090)
    fields.update(changes)
    return BirthInput(**fields)


@pytest.mark.parametrize("system", list(HouseSystem))
def test_every_system_is_a_partition_at_delhi(system):
    birth = _birth(house_system=system)
    houses = compute_houses(MeeusEphemeris(), ephemeris_moment(birth), birth)
    assert not houses.degraded
    assert houses.house_system is system
    assert len(houses.cusps) == 12
    assert [c.number for c in houses.cusps] == list(range(1, 13))
    assert is_circular_partition(houses.longitudes)


def test_whole_sign_starts_at_sidereal_rising_sign():
    birth = _birth(house_system=HouseSystem.WHOLE_SIGN)
    houses = compute_houses(MeeusEphemeris(), ephemeris_moment(birth), birth)
    assert houses.cusps[0].longitude == pytest.approx(houses.ascendant.sign_index * 30.0)
    assert houses.cusps[0].sign_index == houses.ascendant.sign_index
    assert all(c.degree_in_sign == pytest.approx(0.0, abs=1e-9) for c in houses.cusps)


def test_cusps_are_sidereal():
    birth = _birth(house_system=HouseSystem.EQUAL)
    moment = ephemeris_moment(birth)
    houses = compute_houses(MeeusEphemeris(), moment, birth)
    assert houses.ascendant.longitude == pytest.approx(
        (houses.ascendant.tropical_longitude - moment.ayanamsa) % 360.0)
    assert houses.cusps[0].longitude == pytest.approx(houses.ascendant.longitude)


def test_provider_error_degrades_to_equal_houses():
    moment = ephemeris_moment(DELHI)
    provider = CuspProvider(error=ProviderError("no cusps"))
    with pytest.warns(HouseComputationDegraded):
        houses = compute_houses(provider, moment, DELHI)
    assert houses.degraded
    assert houses.degraded_reason == "no cusps"
    expected_asc = (proxy_ascendant(moment.julian_day_ut, DELHI.longitude) - moment.ayanamsa) % 360.0
    assert houses.ascendant.longitude == pytest.approx(expected_asc)
    for i, cusp in enumerate(houses.cusps):
        assert cusp.longitude == pytest.approx((expected_asc + 30.0 * i) % 360.0)


def test_bad_cusps_degrade_to_equal_houses():
    provider = CuspProvider(cusps=tuple(0.0 for _ in range(12)))
    with pytest.warns(HouseComputationDegraded):
        houses = compute_houses(provider, ephemeris_moment(DELHI), DELHI)
    assert houses.degraded
    assert is_circular_partition(houses.longitudes)


def test_polar_placidus_degrades():
    birth = _birth(latitude=89.999, longitude=0.0)
    with pytest.warns(HouseComputationDegraded):
        houses = compute_houses(MeeusEphemeris(), ephemeris_moment(birth), birth)
    assert houses.degraded
    arcs = [(houses.longitudes[(i + 1) % 12] - houses.longitudes[i]) % 360.0 for i in range(12)]
    assert arcs == pytest.approx([30.0] * 12)


def test_async_houses_match_sync_houses():
    moment = ephemeris_moment(DELHI)
    sync = compute_houses(MeeusEphemeris(), moment, DELHI)
    assert asyncio.run(acompute_houses(MeeusEphemeris(), moment, DELHI)) == sync


def test_async_provider_error_degrades():
    provider = CuspProvider(error=ProviderError("no cusps"))
    with pytest.warns(HouseComputationDegraded):
        houses = asyncio.run(acompute_houses(provider, ephemeris_moment(DELHI), DELHI))
    assert houses.degraded
    assert houses.degraded_reason == "no cusps"
