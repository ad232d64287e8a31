"""
dasha.py
========
Vimshottari Dasha calculation system.

Vimshottari ("120 years") is the most widely used dasha system in Vedic astrology.
The dasha ruler and starting point are determined by the Moon's nakshatra at birth.

Dasha sequence: Ketu (7) → Venus (20) → Sun (6) → Moon (10) → Mars (7)
                → Rahu (18) → Jupiter (16) → Saturn (19) → Mercury (17)
Total = 120 years

The Moon has already travelled part of its birth nakshatra, so the first
major period is only partly left at birth:

    elapsed = (moon mod 13°20') / 13°20'
    balance = (1 − elapsed) × years(lord)

Periods are laid out from the *nominal* start (birth − elapsed × years) so
every boundary falls where it would have had the period started in full;
the first period is then clipped to begin at birth.

Source: Parashara, B.V. "Brihat Parashara Hora Shastra" (classical text)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional, Tuple

from .constants import (DASHA_CYCLE_YEARS, DASHA_ORDER, DASHA_YEARS,
                        NAKSHATRA_LORDS, NAKSHATRA_SPAN, Planet)
from .timescale import DAYS_PER_YEAR
from ..errors import InvalidNakshatra

DEFAULT_HORIZON_YEARS = float(DASHA_CYCLE_YEARS)


def years_to_delta(years: float) -> timedelta:
    return timedelta(days=years * DAYS_PER_YEAR)


def as_utc(moment: datetime) -> datetime:
    """Aware UTC datetime; a naive moment is taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def sequence_from(lord: Planet) -> Tuple[Planet, ...]:
    """The nine dasha lords in cyclic order, starting at `lord`."""
    idx = DASHA_ORDER.index(Planet(lord))
    return DASHA_ORDER[idx:] + DASHA_ORDER[:idx]


def nakshatra_lord(index: int) -> Planet:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 26:
        raise InvalidNakshatra(index)
    return NAKSHATRA_LORDS[index]


def balance_years(nakshatra_index: int, elapsed_fraction: float) -> float:
    """Years of the first major period still to run at birth."""
    return (1.0 - elapsed_fraction) * DASHA_YEARS[nakshatra_lord(nakshatra_index)]


# ── Periods ────────────────────────────────────────────────────

@dataclass(frozen=True)
class DashaPeriod:
    lord:          Planet
    start:         datetime
    end:           datetime
    nominal_start: datetime      # start had the period not been clipped at birth
    full_years:    float         # nominal length in years
    level:         int = 1       # 1 = maha dasha, 2 = antardasha

    @property
    def duration_years(self) -> float:
        """Years actually covered between start and end."""
        return (self.end - self.start) / timedelta(days=DAYS_PER_YEAR)

    def contains(self, moment: datetime) -> bool:
        return self.start <= as_utc(moment) < self.end

    def sub_periods(self) -> Tuple["DashaPeriod", ...]:
        """Nine antardashas from this period's own lord, clipped to [start, end)."""
        if self.level != 1:
            return ()
        subs = []
        elapsed = 0.0
        lords = sequence_from(self.lord)
        for i, sub_lord in enumerate(lords):
            years = self.full_years * DASHA_YEARS[sub_lord] / DASHA_CYCLE_YEARS
            sub_start = self.nominal_start + years_to_delta(elapsed)
            elapsed += years
            sub_end = (self.end if i == len(lords) - 1
                       else self.nominal_start + years_to_delta(elapsed))
            if sub_end <= self.start:
                continue
            subs.append(DashaPeriod(
                lord=sub_lord,
                start=max(sub_start, self.start),
                end=sub_end,
                nominal_start=sub_start,
                full_years=years,
                level=2,
            ))
        return tuple(subs)


@dataclass(frozen=True)
class DashaTimeline:
    birth:            datetime
    nakshatra_index:  int
    elapsed_fraction: float
    periods:          Tuple[DashaPeriod, ...]

    @property
    def balance_years(self) -> float:
        return self.periods[0].duration_years

    @property
    def nominal_start(self) -> datetime:
        return self.periods[0].nominal_start

    @property
    def end(self) -> datetime:
        return self.periods[-1].end

    def __iter__(self) -> Iterator[DashaPeriod]:
        return iter(self.periods)

    def __len__(self) -> int:
        return len(self.periods)

    def period_at(self, moment: datetime) -> Optional[Tuple[DashaPeriod, Optional[DashaPeriod]]]:
        """
        Active (maha dasha, antardasha) at `moment`, or None outside the timeline.

        A naive `moment` is read as UTC.
        """
        moment = as_utc(moment)
        for period in self.periods:
            if period.contains(moment):
                sub = next((s for s in period.sub_periods() if s.contains(moment)), None)
                return period, sub
        return None


def compute_dasha_timeline(nakshatra_index: int, elapsed_fraction: float,
                           birth: datetime,
                           horizon_years: float = DEFAULT_HORIZON_YEARS) -> DashaTimeline:
    """
    Maha dasha periods from birth until `horizon_years` after the nominal start.

    The first period runs from birth for the remaining balance; the rest
    follow at full length in cyclic order, wrapping as often as needed.
    """
    first_lord = nakshatra_lord(nakshatra_index)
    if not 0.0 <= elapsed_fraction < 1.0:
        raise ValueError(f"elapsed_fraction must be in [0, 1), got {elapsed_fraction}")
    if horizon_years <= 0:
        raise ValueError(f"horizon_years must be positive, got {horizon_years}")
    birth = as_utc(birth)

    nominal_start = birth - years_to_delta(elapsed_fraction * DASHA_YEARS[first_lord])
    horizon_end = nominal_start + years_to_delta(horizon_years)

    periods = []
    lords = sequence_from(first_lord)
    cumulative = 0.0
    i = 0
    while True:
        lord = lords[i % len(lords)]
        period_start = nominal_start + years_to_delta(cumulative)
        if period_start >= horizon_end:
            break
        years = DASHA_YEARS[lord]
        cumulative += years
        periods.append(DashaPeriod(
            lord=lord,
            start=birth if i == 0 else period_start,
            end=nominal_start + years_to_delta(cumulative),
            nominal_start=period_start,
            full_years=float(years),
        ))
        i += 1

    return DashaTimeline(birth=birth, nakshatra_index=nakshatra_index,
                         elapsed_fraction=elapsed_fraction, periods=tuple(periods))


def dasha_from_moon(moon_longitude: float, birth: datetime,
                    horizon_years: float = DEFAULT_HORIZON_YEARS) -> DashaTimeline:
    """Timeline from the Moon's sidereal longitude at birth."""
    index = int(moon_longitude // NAKSHATRA_SPAN) % 27
    elapsed = (moon_longitude % NAKSHATRA_SPAN) / NAKSHATRA_SPAN
    return compute_dasha_timeline(index, elapsed, birth, horizon_years)
