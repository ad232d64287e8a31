"""
test_dasha.py
=============
Vimshottari maha dasha timeline, balance at birth and antardashas.
"""

from datetime import datetime, timedelta, timezone

import pytest

from jataka_engine.core.constants import DASHA_ORDER, DASHA_YEARS, Planet
from jataka_engine.core.dasha import (balance_years, compute_dasha_timeline,
                                      dasha_from_moon, nakshatra_lord, sequence_from)
from jataka_engine.errors import InvalidNakshatra

BIRTH = datetime(1990, 1, 15, 13, 30, tzinfo=timezone.utc)
YEAR = timedelta(days=365.25)
ONE_SECOND = timedelta(seconds=1)


def test_cycle_is_120_years():
    assert sum(DASHA_YEARS.values()) == 120
    assert len(DASHA_ORDER) == 9


@pytest.mark.parametrize("index,lord", [
    (0, Planet.KETU), (1, Planet.VENUS), (8, Planet.MERCURY),
    (9, Planet.KETU), (17, Planet.MERCURY), (26, Planet.MERCURY),
])
def test_nakshatra_lords(index, lord):
    assert nakshatra_lord(index) is lord


@pytest.mark.parametrize("index", [-1, 27, 3.0, "4", True])
def test_invalid_nakshatra(index):
    with pytest.raises(InvalidNakshatra):
        compute_dasha_timeline(index, 0.0, BIRTH)


def test_sequence_wraps():
    assert sequence_from(Planet.MERCURY) == (Planet.MERCURY,) + DASHA_ORDER[:-1]


# ── Balance ────────────────────────────────────────────────────

def test_half_elapsed_ketu_leaves_three_and_a_half_years():
    timeline = compute_dasha_timeline(0, 0.5, BIRTH)
    assert timeline.periods[0].lord is Planet.KETU
    assert timeline.balance_years == pytest.approx(3.5, abs=1e-6)
    assert balance_years(0, 0.5) == pytest.approx(3.5)


def test_balance_decreases_as_nakshatra_is_travelled():
    balances = [balance_years(5, e / 10.0) for e in range(10)]
    assert balances == sorted(balances, reverse=True)
    assert len(set(balances)) == len(balances)
    assert balances[0] == DASHA_YEARS[Planet.RAHU]


def test_out_of_range_elapsed_fraction():
    with pytest.raises(ValueError):
        compute_dasha_timeline(0, 1.0, BIRTH)
    with pytest.raises(ValueError):
        compute_dasha_timeline(0, -0.1, BIRTH)


# ── Timeline ───────────────────────────────────────────────────

def test_full_cycle_is_contiguous():
    timeline = compute_dasha_timeline(3, 0.25, BIRTH)
    assert len(timeline) == 9
    assert timeline.periods[0].start == BIRTH
    assert [p.lord for p in timeline] == list(sequence_from(Planet.MOON))
    for a, b in zip(timeline.periods, timeline.periods[1:]):
        assert a.end == b.start
    # Laid out from the nominal start, so the cycle ends 120 years after it
    assert abs(timeline.end - (timeline.nominal_start + 120 * YEAR)) < ONE_SECOND


def test_nominal_start_precedes_birth():
    timeline = compute_dasha_timeline(0, 0.5, BIRTH)
    assert abs(BIRTH - timeline.nominal_start - 3.5 * YEAR) < ONE_SECOND
    assert timeline.periods[0].nominal_start == timeline.nominal_start


@pytest.mark.parametrize("horizon,count", [(10.0, 2), (120.0, 9), (240.0, 18)])
def test_horizon_controls_period_count(horizon, count):
    timeline = compute_dasha_timeline(0, 0.0, BIRTH, horizon_years=horizon)
    assert len(timeline) == count


def test_horizon_must_be_positive():
    with pytest.raises(ValueError):
        compute_dasha_timeline(0, 0.0, BIRTH, horizon_years=0)


def test_dasha_from_moon():
    # 20° sidereal: Bharani (Venus), a half travelled
    timeline = dasha_from_moon(20.0, BIRTH)
    assert timeline.nakshatra_index == 1
    assert timeline.elapsed_fraction == pytest.approx(0.5)
    assert timeline.periods[0].lord is Planet.VENUS
    assert timeline.balance_years == pytest.approx(10.0, abs=1e-6)


# ── Antardashas ────────────────────────────────────────────────

def test_unclipped_sub_periods():
    timeline = compute_dasha_timeline(0, 0.0, BIRTH)
    ketu = timeline.periods[0]
    subs = ketu.sub_periods()
    assert len(subs) == 9
    assert [s.lord for s in subs] == list(sequence_from(Planet.KETU))
    assert all(s.level == 2 for s in subs)
    assert subs[0].start == ketu.start
    assert subs[-1].end == ketu.end
    assert sum(s.full_years for s in subs) == pytest.approx(7.0)
    # Ketu/Ketu is 7 × 7 / 120 years
    assert subs[0].full_years == pytest.approx(49.0 / 120.0)
    assert subs[0].sub_periods() == ()


def test_clipped_first_period_drops_elapsed_sub_periods():
    timeline = compute_dasha_timeline(0, 0.5, BIRTH)
    subs = timeline.periods[0].sub_periods()
    assert subs[0].start == BIRTH
    assert subs[-1].end == timeline.periods[0].end
    assert len(subs) < 9
    for a, b in zip(subs, subs[1:]):
        assert a.end == b.start


def test_period_at():
    timeline = compute_dasha_timeline(0, 0.0, BIRTH)
    major, sub = timeline.period_at(BIRTH + 8 * YEAR)
    assert major.lord is Planet.VENUS
    assert sub.lord is Planet.VENUS
    assert timeline.period_at(BIRTH - YEAR) is None
    assert timeline.period_at(timeline.end) is None


def test_period_at_reads_naive_moment_as_utc():
    timeline = compute_dasha_timeline(5, 0.3, BIRTH)
    naive = datetime(2000, 1, 1)
    assert timeline.period_at(naive) == timeline.period_at(naive.replace(tzinfo=timezone.utc))
    major, sub = timeline.period_at(naive)
    assert major.lord is Planet.RAHU
    assert sub is not None
    assert timeline.periods[0].contains(naive)


def test_period_at_accepts_other_zones():
    ist = timezone(timedelta(hours=5, minutes=30))
    timeline = compute_dasha_timeline(0, 0.0, BIRTH)
    # 18:59 IST is 13:29 UTC, one minute before birth
    assert timeline.period_at(datetime(1990, 1, 15, 18, 59, tzinfo=ist)) is None
    assert timeline.period_at(datetime(1990, 1, 15, 19, 0, tzinfo=ist))[0].lord is Planet.KETU


def test_naive_birth_is_taken_as_utc():
    timeline = compute_dasha_timeline(0, 0.0, datetime(1990, 1, 15, 13, 30))
    assert timeline.birth == BIRTH
    assert timeline.periods[0].start.tzinfo is not None
    assert timeline.period_at(datetime(1991, 1, 1))[0].lord is Planet.KETU
