"""
constants.py
============
Fixed lookup tables for the sidereal chart.

Every table here is immutable data keyed by a small enum so it can be
checked on its own, independent of the pipeline that reads it.

Source: Parashara, B.V. "Brihat Parashara Hora Shastra"; Drik Panchang tables.
"""

from enum import Enum
from types import MappingProxyType
from typing import Tuple

# ── Angular constants ──────────────────────────────────────────

SIGN_SPAN      = 30.0
NAKSHATRA_SPAN = 360.0 / 27.0        # 13°20'
PADA_SPAN      = 360.0 / 108.0       # 3°20'
DIGNITY_ORB    = 5.0                 # ± degrees around exaltation/debilitation


# ── Planets ────────────────────────────────────────────────────

class Planet(str, Enum):
    SUN     = "Sun"
    MOON    = "Moon"
    MERCURY = "Mercury"
    VENUS   = "Venus"
    MARS    = "Mars"
    JUPITER = "Jupiter"
    SATURN  = "Saturn"
    RAHU    = "Rahu"
    KETU    = "Ketu"

    def __str__(self) -> str:
        return self.value


PLANETS: Tuple[Planet, ...] = tuple(Planet)

# Ketu is derived from Rahu, never queried from the ephemeris.
QUERIED_PLANETS: Tuple[Planet, ...] = tuple(p for p in Planet if p is not Planet.KETU)


class Temperament(str, Enum):
    BENEFIC = "benefic"
    MALEFIC = "malefic"
    NEUTRAL = "neutral"


NATURAL_TEMPERAMENT = MappingProxyType({
    Planet.SUN:     Temperament.MALEFIC,
    Planet.MOON:    Temperament.BENEFIC,
    Planet.MERCURY: Temperament.NEUTRAL,
    Planet.VENUS:   Temperament.BENEFIC,
    Planet.MARS:    Temperament.MALEFIC,
    Planet.JUPITER: Temperament.BENEFIC,
    Planet.SATURN:  Temperament.MALEFIC,
    Planet.RAHU:    Temperament.MALEFIC,
    Planet.KETU:    Temperament.MALEFIC,
})

# Signs in which a planet counts as a temporal benefic (sign indices).
FRIENDLY_SIGNS = MappingProxyType({
    Planet.SUN:     frozenset({0, 4, 5, 6, 9, 10}),
    Planet.MOON:    frozenset({1, 2, 4, 5, 7, 9}),
    Planet.MARS:    frozenset({0, 3, 4, 7, 8, 10}),
    Planet.JUPITER: frozenset({0, 2, 4, 5, 8, 9}),
    Planet.VENUS:   frozenset({1, 2, 3, 5, 6, 9}),
})

# Exaltation / debilitation reference degrees (sidereal longitude).
EXALTATION_DEGREES = MappingProxyType({
    Planet.SUN:     10.0,
    Planet.MOON:    33.0,
    Planet.MARS:    298.0,
    Planet.MERCURY: 165.0,
    Planet.JUPITER: 95.0,
    Planet.VENUS:   357.0,
    Planet.SATURN:  203.0,
    Planet.RAHU:    68.0,
    Planet.KETU:    248.0,
})

DEBILITATION_DEGREES = MappingProxyType({
    Planet.SUN:     190.0,
    Planet.MOON:    213.0,
    Planet.MARS:    118.0,
    Planet.MERCURY: 345.0,
    Planet.JUPITER: 275.0,
    Planet.VENUS:   177.0,
    Planet.SATURN:  23.0,
    Planet.RAHU:    248.0,
    Planet.KETU:    68.0,
})


# ── Signs ──────────────────────────────────────────────────────

SIGNS = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

SIGN_LORDS: Tuple[Planet, ...] = (
    Planet.MARS, Planet.VENUS, Planet.MERCURY, Planet.MOON,
    Planet.SUN, Planet.MERCURY, Planet.VENUS, Planet.MARS,
    Planet.JUPITER, Planet.SATURN, Planet.SATURN, Planet.JUPITER,
)


# ── Nakshatras ─────────────────────────────────────────────────

NAKSHATRAS = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni", "Uttara Phalguni",
    "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana", "Dhanishtha",
    "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada", "Revati",
)


# ── Vimshottari dasha ──────────────────────────────────────────

DASHA_ORDER: Tuple[Planet, ...] = (
    Planet.KETU, Planet.VENUS, Planet.SUN, Planet.MOON, Planet.MARS,
    Planet.RAHU, Planet.JUPITER, Planet.SATURN, Planet.MERCURY,
)

DASHA_YEARS = MappingProxyType({
    Planet.KETU:    7,
    Planet.VENUS:   20,
    Planet.SUN:     6,
    Planet.MOON:    10,
    Planet.MARS:    7,
    Planet.RAHU:    18,
    Planet.JUPITER: 16,
    Planet.SATURN:  19,
    Planet.MERCURY: 17,
})

DASHA_CYCLE_YEARS = 120

# Nakshatra index → dasha lord: the nine-lord cycle repeated three times.
NAKSHATRA_LORDS: Tuple[Planet, ...] = DASHA_ORDER * 3


# ── Lunar calendar ─────────────────────────────────────────────

TITHI_NAMES = (
    "Pratipada", "Dvitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dvadashi", "Trayodashi", "Chaturdashi", "Purnima",
)

# The 15th tithi of the waning fortnight is the new moon.
NEW_MOON_TITHI = "Amavasya"

KARANAS = (
    "Bava", "Balava", "Kaulava", "Taitila", "Garija", "Vanija",
    "Vishti", "Shakuni", "Chatushpada", "Nagava", "Kimstughna",
)

YOGAS = (
    "Vishkumbha", "Preeti", "Ayushman", "Saubhagya", "Shobhana",
    "Atiganda", "Sukarma", "Dhriti", "Shula", "Ganda",
    "Vriddhi", "Dhruva", "Vyaghata", "Harshana", "Vajra",
    "Siddhi", "Vyatipata", "Variyana", "Parigha", "Shiva",
    "Siddha", "Sadhya", "Shubha", "Shukla", "Brahma",
    "Indra", "Vaidhriti",
)


# ── Reference systems ──────────────────────────────────────────

class AyanamsaSystem(str, Enum):
    LAHIRI        = "lahiri"
    RAMAN         = "raman"
    KRISHNAMURTI  = "krishnamurti"
    FAGAN_BRADLEY = "fagan_bradley"
    YUKTESHWAR    = "yukteshwar"

    @property
    def offset(self) -> float:
        """Constant offset (degrees) from the Lahiri base value."""
        return AYANAMSA_OFFSETS[self]


AYANAMSA_OFFSETS = MappingProxyType({
    AyanamsaSystem.LAHIRI:        0.0,
    AyanamsaSystem.RAMAN:        -1.0,
    AyanamsaSystem.KRISHNAMURTI: -0.1,
    AyanamsaSystem.FAGAN_BRADLEY: -0.2,
    AyanamsaSystem.YUKTESHWAR:   -0.3,
})


class HouseSystem(str, Enum):
    PLACIDUS      = "placidus"
    KOCH          = "koch"
    PORPHYRY      = "porphyry"
    REGIOMONTANUS = "regiomontanus"
    CAMPANUS      = "campanus"
    EQUAL         = "equal"
    VEHLOW        = "vehlow"
    WHOLE_SIGN    = "whole_sign"

    @property
    def code(self) -> str:
        """Single-letter code used by Swiss Ephemeris."""
        return HOUSE_SYSTEM_CODES[self]


HOUSE_SYSTEM_CODES = MappingProxyType({
    HouseSystem.PLACIDUS:      "P",
    HouseSystem.KOCH:          "K",
    HouseSystem.PORPHYRY:      "O",
    HouseSystem.REGIOMONTANUS: "R",
    HouseSystem.CAMPANUS:      "C",
    HouseSystem.EQUAL:         "E",
    HouseSystem.VEHLOW:        "V",
    HouseSystem.WHOLE_SIGN:    "W",
})

DEFAULT_HOUSE_SYSTEM = HouseSystem.PLACIDUS
DEFAULT_AYANAMSA     = AyanamsaSystem.LAHIRI
