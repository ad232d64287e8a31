"""
divisional_charts.py
====================
Divisional (Varga) charts.

Each sign is divided into N equal parts; the part a longitude falls in
(divisionIndex = floor(degree_in_sign × N / 30)) is remapped to a sign by a
rule specific to N:

  D1  — Rasi          identity (general additive rule with index 0)
  D9  — Navamsa       (3 × floor(sign / 3) + index) mod 12
  D10 — Dashamsa      even sign index → index; odd → (index + 9) mod 12
  D12 — Dwadashamsa   index
  D30 — Trimsamsa     bands 0–5, 5–10, 10–18, 18–25, 25–30 → sign +8, +4, +0, +6, +2
  D60 — Shashtiyamsa  index mod 12

The ascendant is transformed the same way. D1 keeps the natal house of each
planet; every other chart places planets in whole-sign houses counted from
its own divisional ascendant.

Source: Parashara BPHS; Sanjay Rath (2002) "Crux of Vedic Astrology"
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Sequence, Union

from .angles import degree_in_sign, dms, sign_index
from .constants import SIGN_SPAN, SIGNS, Planet
from .houses import Ascendant
from .positions import PlanetPosition
from ..errors import UnsupportedDivision


class Division(int, Enum):
    D1  = 1
    D9  = 9
    D10 = 10
    D12 = 12
    D30 = 30
    D60 = 60

    def __str__(self) -> str:
        return self.name

    @property
    def label(self) -> str:
        return DIVISION_LABELS[self]

    def sign_for(self, sign: int, degree: float) -> int:
        """Divisional sign index for a position `degree` into natal `sign`."""
        return DIVISION_RULES[self](sign, degree, division_index(degree, self.value))

    def degree_for(self, degree: float) -> float:
        """Degree within the divisional sign (the part, stretched to 30°)."""
        return (degree * self.value) % SIGN_SPAN

    @classmethod
    def parse(cls, value: Union["Division", int, str]) -> "Division":
        """Accepts 9, "9", "D9" or "d9"; anything unsupported raises UnsupportedDivision."""
        if isinstance(value, cls):
            return value
        factor = None
        if isinstance(value, str):
            text = value.strip().upper()
            if text.startswith("D"):
                text = text[1:]
            if text.isdecimal():
                factor = int(text)
        elif isinstance(value, int) and not isinstance(value, bool):
            factor = value
        try:
            return cls(factor)
        except ValueError:
            raise UnsupportedDivision(value, [d.value for d in cls]) from None


def division_index(degree: float, division: int) -> int:
    return min(int(math.floor(degree * division / SIGN_SPAN)), division - 1)


# ── Sign rules ─────────────────────────────────────────────────

# Trimsamsa bands: (upper bound of band in degrees, sign offset)
TRIMSAMSA_BANDS = ((5.0, 8), (10.0, 4), (18.0, 0), (25.0, 6), (30.0, 2))


def additive_rule(sign: int, degree: float, index: int) -> int:
    return (sign + index) % 12


def navamsa_rule(sign: int, degree: float, index: int) -> int:
    return (3 * (sign // 3) + index) % 12


def dashamsa_rule(sign: int, degree: float, index: int) -> int:
    return index % 12 if sign % 2 == 0 else (index + 9) % 12


def dwadashamsa_rule(sign: int, degree: float, index: int) -> int:
    return index % 12


def trimsamsa_rule(sign: int, degree: float, index: int) -> int:
    for upper, offset in TRIMSAMSA_BANDS:
        if degree < upper:
            return (sign + offset) % 12
    return (sign + TRIMSAMSA_BANDS[-1][1]) % 12


def shashtiyamsa_rule(sign: int, degree: float, index: int) -> int:
    return index % 12


DIVISION_RULES: Mapping[Division, Callable[[int, float, int], int]] = MappingProxyType({
    Division.D1:  additive_rule,
    Division.D9:  navamsa_rule,
    Division.D10: dashamsa_rule,
    Division.D12: dwadashamsa_rule,
    Division.D30: trimsamsa_rule,
    Division.D60: shashtiyamsa_rule,
})

DIVISION_LABELS: Mapping[Division, str] = MappingProxyType({
    Division.D1:  "Main birth chart - all aspects of life",
    Division.D9:  "Navamsa chart - marriage, dharma, and spouse character",
    Division.D10: "Dashamsa chart - career, profession, and public status",
    Division.D12: "Dwadashamsa chart - parents, lineage, and family",
    Division.D30: "Trimsamsa chart - misfortunes, diseases, and challenges",
    Division.D60: "Shashtiyamsa chart - detailed life events and past life karma",
})

SUPPORTED_DIVISIONS = tuple(Division)


# ── Chart ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class DivisionalPosition:
    sign_index:     int
    degree_in_sign: float
    house:          int = 0

    @property
    def sign(self) -> str:
        return SIGNS[self.sign_index]

    @property
    def dms(self):
        return dms(self.degree_in_sign)


@dataclass(frozen=True)
class DivisionalChart:
    division:  Division
    ascendant: DivisionalPosition
    positions: Mapping[Planet, DivisionalPosition]

    @property
    def label(self) -> str:
        return self.division.label

    def __getitem__(self, planet) -> DivisionalPosition:
        return self.positions[Planet(planet)]


def transform(longitude: float, division: Division) -> DivisionalPosition:
    """Divisional sign and degree for one sidereal longitude (house unset)."""
    deg = degree_in_sign(longitude)
    return DivisionalPosition(
        sign_index=division.sign_for(sign_index(longitude), deg),
        degree_in_sign=division.degree_for(deg),
    )


def compute_divisional_chart(ascendant: Ascendant, planets: Sequence[PlanetPosition],
                             division) -> DivisionalChart:
    """Remap the ascendant and every planet into the requested division."""
    division = Division.parse(division)
    lagna = transform(ascendant.longitude, division)
    lagna = DivisionalPosition(lagna.sign_index, lagna.degree_in_sign, house=1)

    positions = {}
    for p in planets:
        pos = transform(p.sidereal_longitude, division)
        if division is Division.D1:
            house = p.house
        else:
            house = (pos.sign_index - lagna.sign_index) % 12 + 1
        positions[p.planet] = DivisionalPosition(pos.sign_index, pos.degree_in_sign, house)

    return DivisionalChart(division=division, ascendant=lagna,
                           positions=MappingProxyType(positions))
