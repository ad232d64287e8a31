"""
timescale.py
============
Civil birth moment → ephemeris time reference and ayanamsa.

  1. Normalize the civil date/time + UTC offset (or IANA zone) to UTC
  2. Julian Day (UT) from the proleptic Gregorian calendar (Meeus Ch. 7)
  3. Delta-T for that day (Espenak & Meeus polynomial expressions)
  4. Julian Day (TT) = UT + ΔT
  5. Ayanamsa = Lahiri base value + fixed per-system offset

Source: Meeus, J. "Astronomical Algorithms" 2nd ed.; Espenak, F. & Meeus, J.
        "Five Millennium Canon of Solar Eclipses" (NASA/TP-2006-214141)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import AyanamsaSystem, HouseSystem, DEFAULT_AYANAMSA, DEFAULT_HOUSE_SYSTEM
from ..errors import InvalidBirthMoment, InvalidLocation

# ── Constants ──────────────────────────────────────────────────
J2000            = 2451545.0
SECONDS_PER_DAY  = 86400.0
DAYS_PER_YEAR    = 365.25

# Lahiri (Chitrapaksha): 23.85045° at J2000, precessing 50.2882"/yr
LAHIRI_J2000 = 23.85045
LAHIRI_RATE  = 50.2882 / 3600.0      # degrees per Julian year


# ── Input ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class BirthInput:
    """Civil birth moment and place. Local wall-clock time."""
    year:         int
    month:        int
    day:          int
    hour:         int = 0
    minute:       int = 0
    second:       int = 0
    latitude:     float = 0.0
    longitude:    float = 0.0        # positive East
    utc_offset:   Optional[float] = None   # hours ahead of UTC (5.5 for IST)
    timezone:     Optional[str] = None     # IANA name, e.g. "America/New_York"
    ayanamsa:     AyanamsaSystem = DEFAULT_AYANAMSA
    house_system: HouseSystem = DEFAULT_HOUSE_SYSTEM

    def __post_init__(self):
        # Accept plain strings for the enums, as the API layer passes them.
        object.__setattr__(self, "ayanamsa", AyanamsaSystem(self.ayanamsa))
        object.__setattr__(self, "house_system", HouseSystem(self.house_system))

    def validate(self) -> None:
        """Raise InvalidLocation / InvalidBirthMoment before any ephemeris work."""
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidLocation(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidLocation(f"Longitude must be between -180 and 180, got {self.longitude}")
        self.to_utc()

    def to_utc(self) -> datetime:
        """The birth moment as an aware UTC datetime."""
        if self.utc_offset is not None and self.timezone is not None:
            raise InvalidBirthMoment("Give either utc_offset or timezone, not both")
        try:
            local = datetime(self.year, self.month, self.day,
                             self.hour, self.minute, self.second)
        except (ValueError, TypeError, OverflowError) as e:
            raise InvalidBirthMoment(f"Invalid birth date/time: {e}") from e

        if self.timezone is not None:
            try:
                zone = ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise InvalidBirthMoment(f"Unknown timezone {self.timezone!r}") from e
            aware = local.replace(tzinfo=zone)
            utc = aware.astimezone(timezone.utc)
            # A wall time inside a DST gap does not survive the round trip.
            if utc.astimezone(zone).replace(tzinfo=None) != local:
                raise InvalidBirthMoment(
                    f"{local.isoformat()} does not exist in {self.timezone} "
                    "(daylight-saving gap)"
                )
            return utc

        offset = self.utc_offset or 0.0
        if not -14.0 <= offset <= 14.0:
            raise InvalidBirthMoment(f"UTC offset out of range: {offset}")
        try:
            return local.replace(tzinfo=timezone(timedelta(hours=offset))).astimezone(timezone.utc)
        except OverflowError as e:
            raise InvalidBirthMoment(f"Birth moment out of range: {e}") from e


# ── Julian Day ─────────────────────────────────────────────────

def gregorian_to_jd(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Meeus Ch. 7, proleptic Gregorian calendar."""
    if month <= 2:
        year -= 1; month += 12
    A = int(year / 100)
    B = 2 - A + int(A / 4)
    return int(365.25*(year+4716)) + int(30.6001*(month+1)) + day + B - 1524.5 + hour/24.0


def datetime_to_jd(moment: datetime) -> float:
    utc = moment.astimezone(timezone.utc)
    hours = utc.hour + utc.minute/60.0 + (utc.second + utc.microsecond/1e6)/3600.0
    return gregorian_to_jd(utc.year, utc.month, utc.day, hours)


# ── Delta-T ────────────────────────────────────────────────────

def delta_t_seconds(year: float) -> float:
    """ΔT = TT − UT in seconds for a decimal year."""
    y = year
    if 1800 <= y < 1860:
        t = y - 1800
        return (13.72 - 0.332447*t + 0.0068612*t**2 + 0.0041116*t**3
                - 0.00037436*t**4 + 0.0000121272*t**5
                - 0.0000001699*t**6 + 0.000000000875*t**7)
    if 1860 <= y < 1900:
        t = y - 1860
        return (7.62 + 0.5737*t - 0.251754*t**2 + 0.01680668*t**3
                - 0.0004473624*t**4 + t**5/233174.0)
    if 1900 <= y < 1920:
        t = y - 1900
        return -2.79 + 1.494119*t - 0.0598939*t**2 + 0.0061966*t**3 - 0.000197*t**4
    if 1920 <= y < 1941:
        t = y - 1920
        return 21.20 + 0.84493*t - 0.076100*t**2 + 0.0020936*t**3
    if 1941 <= y < 1961:
        t = y - 1950
        return 29.07 + 0.407*t - t**2/233.0 + t**3/2547.0
    if 1961 <= y < 1986:
        t = y - 1975
        return 45.45 + 1.067*t - t**2/260.0 - t**3/718.0
    if 1986 <= y < 2005:
        t = y - 2000
        return (63.86 + 0.3345*t - 0.060374*t**2 + 0.0017275*t**3
                + 0.000651814*t**4 + 0.00002373599*t**5)
    if 2005 <= y < 2050:
        t = y - 2000
        return 62.92 + 0.32217*t + 0.005589*t**2
    if 2050 <= y < 2150:
        return -20.0 + 32.0*((y - 1820)/100.0)**2 - 0.5628*(2150 - y)
    u = (y - 1820) / 100.0
    return -20.0 + 32.0*u*u


# ── Ayanamsa ───────────────────────────────────────────────────

def lahiri_ayanamsa(jd: float) -> float:
    return LAHIRI_J2000 + LAHIRI_RATE * (jd - J2000) / DAYS_PER_YEAR


def get_ayanamsa(jd: float, system: AyanamsaSystem = DEFAULT_AYANAMSA) -> float:
    """Ayanamsa in degrees for the Julian Day (TT) and reference system."""
    return lahiri_ayanamsa(jd) + AyanamsaSystem(system).offset


# ── Ephemeris moment ───────────────────────────────────────────

@dataclass(frozen=True)
class EphemerisMoment:
    utc:             datetime
    julian_day_ut:   float
    delta_t:         float          # seconds
    julian_day:      float          # terrestrial (ephemeris) time
    ayanamsa:        float          # degrees
    ayanamsa_system: AyanamsaSystem

    @property
    def centuries(self) -> float:
        """Julian centuries (TT) from J2000."""
        return (self.julian_day - J2000) / 36525.0


def ephemeris_moment(birth: BirthInput) -> EphemerisMoment:
    utc = birth.to_utc()
    jd_ut = datetime_to_jd(utc)
    decimal_year = utc.year + (utc.timetuple().tm_yday - 0.5) / 365.25
    dt = delta_t_seconds(decimal_year)
    jd_tt = jd_ut + dt / SECONDS_PER_DAY
    return EphemerisMoment(
        utc=utc,
        julian_day_ut=jd_ut,
        delta_t=dt,
        julian_day=jd_tt,
        ayanamsa=get_ayanamsa(jd_tt, birth.ayanamsa),
        ayanamsa_system=birth.ayanamsa,
    )
