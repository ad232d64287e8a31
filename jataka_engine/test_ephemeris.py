"""
test_ephemeris.py
=================
Built-in Meeus provider against the worked examples of
"Astronomical Algorithms" and against the adapter contract.
"""

import pytest

from jataka_engine.core.angles import angular_distance
from jataka_engine.core.constants import QUERIED_PLANETS, HouseSystem, Planet
from jataka_engine.core.ephemeris import (AU_KM, MeeusEphemeris, ascendant_for,
                                          get_provider, house_cusps, mean_node,
                                          midheaven_for, moon_position,
                                          nutation_and_obliquity, sun_position)
from jataka_engine.core.timescale import J2000
from jataka_engine.errors import ProviderError

PLANET_TOLERANCE_DEG = 1.0      # ±1° for Keplerian planets vs reference
SERIES_TOLERANCE_DEG = 0.01     # Sun/Moon series vs worked example


def _T(jd_tt):
    return (jd_tt - J2000) / 36525.0


# ---------------------------------------------------------------------------
# Worked examples
# ---------------------------------------------------------------------------

def test_sun_example_25a():
    """1992 October 13.0 TD: apparent λ = 199°.90895, R = 0.99766 AU."""
    T = _T(2448908.5)
    dpsi, _, _ = nutation_and_obliquity(T)
    lon, R = sun_position(T, dpsi)
    assert lon == pytest.approx(199.90895, abs=SERIES_TOLERANCE_DEG)
    assert R == pytest.approx(0.99766, abs=1e-4)


def test_moon_example_47a():
    """1992 April 12.0 TD: λ = 133°.167, β = −3°.229, Δ = 368409.7 km."""
    T = _T(2448724.5)
    dpsi, _, _ = nutation_and_obliquity(T)
    lon, lat, dist = moon_position(T, dpsi)
    assert lon == pytest.approx(133.167265, abs=SERIES_TOLERANCE_DEG)
    assert lat == pytest.approx(-3.229126, abs=SERIES_TOLERANCE_DEG)
    assert dist * AU_KM == pytest.approx(368409.7, abs=5.0)


def test_venus_example_33a():
    """1992 December 20.0 TD: apparent λ = 313°.08."""
    eph = MeeusEphemeris()
    # get_position takes UT; ΔT in 1992 is about 59 s.
    pos = eph.get_position(Planet.VENUS, 2448976.5 - 59.0 / 86400.0)
    assert angular_distance(pos.longitude, 313.08102) < PLANET_TOLERANCE_DEG
    assert pos.distance == pytest.approx(0.910947, abs=0.02)


def test_mean_node_at_j2000():
    assert mean_node(0.0) == pytest.approx(125.0445479, abs=1e-7)


# ---------------------------------------------------------------------------
# Adapter contract
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("planet", QUERIED_PLANETS)
def test_positions_are_normalized(planet):
    pos = MeeusEphemeris().get_position(planet, 2447907.0625)
    assert 0.0 <= pos.longitude < 360.0
    assert pos.distance > 0.0


def test_motion_directions():
    eph = MeeusEphemeris()
    jd = 2451545.0
    sun = eph.get_position(Planet.SUN, jd)
    moon = eph.get_position(Planet.MOON, jd)
    rahu = eph.get_position(Planet.RAHU, jd)
    assert 0.95 < sun.speed < 1.05
    assert 11.0 < moon.speed < 16.0
    assert rahu.speed < 0.0


def test_ketu_is_not_queried():
    with pytest.raises(ProviderError):
        MeeusEphemeris().get_position(Planet.KETU, 2451545.0)


def test_true_node_stays_near_mean_node():
    jd = 2451545.0
    mean = MeeusEphemeris().get_position(Planet.RAHU, jd).longitude
    true = MeeusEphemeris(use_true_node=True).get_position(Planet.RAHU, jd).longitude
    assert angular_distance(mean, true) < 2.0


def test_unknown_backend():
    with pytest.raises(ValueError):
        get_provider("jpl")


# ---------------------------------------------------------------------------
# Houses
# ---------------------------------------------------------------------------

OBLIQUITY = 23.4393


def test_ascendant_and_midheaven_on_the_equator():
    # RAMC 0: the 0° Aries point culminates and 0° Cancer rises.
    assert ascendant_for(90.0, 0.0, OBLIQUITY) == pytest.approx(90.0)
    assert midheaven_for(0.0, OBLIQUITY) == pytest.approx(0.0)
    assert midheaven_for(90.0, OBLIQUITY) == pytest.approx(90.0)


@pytest.mark.parametrize("system", list(HouseSystem))
def test_cusps_are_ordered_at_mid_latitude(system):
    raw = house_cusps(system, 123.4, 40.7, OBLIQUITY)
    assert len(raw.cusps) == 12
    arcs = [(raw.cusps[(i + 1) % 12] - raw.cusps[i]) % 360.0 for i in range(12)]
    assert all(a > 0.0 for a in arcs)
    assert sum(arcs) == pytest.approx(360.0)


@pytest.mark.parametrize("system", [HouseSystem.PLACIDUS, HouseSystem.KOCH,
                                    HouseSystem.PORPHYRY, HouseSystem.REGIOMONTANUS,
                                    HouseSystem.CAMPANUS])
def test_quadrant_systems_share_angles(system):
    raw = house_cusps(system, 200.0, 28.6, OBLIQUITY)
    assert raw.cusps[0] == pytest.approx(raw.ascendant)
    assert raw.cusps[9] == pytest.approx(raw.midheaven)
    assert raw.cusps[6] == pytest.approx((raw.ascendant + 180.0) % 360.0)


def test_quadrant_systems_agree_on_the_equator():
    placidus = house_cusps(HouseSystem.PLACIDUS, 10.0, 0.0, OBLIQUITY).cusps
    regio = house_cusps(HouseSystem.REGIOMONTANUS, 10.0, 0.0, OBLIQUITY).cusps
    campanus = house_cusps(HouseSystem.CAMPANUS, 10.0, 0.0, OBLIQUITY).cusps
    for p, r, c in zip(placidus, regio, campanus):
        assert angular_distance(p, r) < 1e-6
        assert angular_distance(p, c) < 1e-6


def test_equal_and_vehlow_cusps():
    equal = house_cusps(HouseSystem.EQUAL, 50.0, 45.0, OBLIQUITY)
    vehlow = house_cusps(HouseSystem.VEHLOW, 50.0, 45.0, OBLIQUITY)
    for i in range(12):
        assert equal.cusps[i] == pytest.approx((equal.ascendant + 30.0 * i) % 360.0)
        assert vehlow.cusps[i] == pytest.approx((vehlow.ascendant - 15.0 + 30.0 * i) % 360.0)


@pytest.mark.parametrize("system", [HouseSystem.PLACIDUS, HouseSystem.KOCH])
def test_polar_latitude_is_a_provider_error(system):
    with pytest.raises(ProviderError):
        house_cusps(system, 0.0, 80.0, OBLIQUITY)


def test_get_cusps_wraps_polar_failure():
    with pytest.raises(ProviderError):
        MeeusEphemeris().get_cusps(2451545.0, 89.999, 0.0, HouseSystem.PLACIDUS)
