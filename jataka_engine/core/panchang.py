"""
panchang.py
===========
Lunar-calendar attributes of the birth moment.

  Tithi  — lunar day: each 12° of Moon−Sun elongation (1–30)
  Paksha — waxing (Shukla) for tithis 1–15, waning (Krishna) for 16–30
  Karana — half of the current tithi
  Yoga   — (Sun + Moon) sidereal longitude in 13°20' steps (27 yogas)

Source: Drik Panchang algorithm
"""

from dataclasses import dataclass
from enum import Enum

from .angles import normalize
from .constants import KARANAS, NAKSHATRA_SPAN, NEW_MOON_TITHI, TITHI_NAMES, YOGAS

TITHI_SPAN = 12.0


class Paksha(str, Enum):
    WAXING = "Shukla"
    WANING = "Krishna"


@dataclass(frozen=True)
class LunarCalendarSnapshot:
    tithi:       int       # 1..30
    tithi_name:  str
    paksha:      Paksha
    karana:      str
    yoga:        str
    elongation:  float     # Moon − Sun, degrees

    @property
    def is_waxing(self) -> bool:
        return self.paksha is Paksha.WAXING


def tithi_name(tithi: int) -> str:
    """Name of tithi 1..30. The 15th of each fortnight takes the last entry."""
    position = tithi % 15 or 15
    if position == 15 and tithi > 15:
        return NEW_MOON_TITHI
    return TITHI_NAMES[position - 1]


def compute_lunar_calendar(sun: float, moon: float) -> LunarCalendarSnapshot:
    """Snapshot from sidereal Sun and Moon longitudes (degrees)."""
    angle = normalize(moon - sun)
    tithi = int(angle // TITHI_SPAN) + 1
    karana_index = int((angle % TITHI_SPAN) * 2 // TITHI_SPAN)
    yoga_index = int(normalize(moon + sun) // NAKSHATRA_SPAN) % 27
    return LunarCalendarSnapshot(
        tithi=tithi,
        tithi_name=tithi_name(tithi),
        paksha=Paksha.WANING if tithi > 15 else Paksha.WAXING,
        karana=KARANAS[karana_index],
        yoga=YOGAS[yoga_index],
        elongation=angle,
    )
