# Jataka Engine - Core modules
from .constants import AyanamsaSystem, HouseSystem, Planet
from .ephemeris import EphemerisProvider, MeeusEphemeris, RawCusps, RawPosition, get_provider
from .timescale import BirthInput, EphemerisMoment, ephemeris_moment, get_ayanamsa
from .positions import PlanetPosition, reduce_positions
from .houses import Ascendant, HouseCusp, HouseSet, compute_houses, place_planets
from .panchang import LunarCalendarSnapshot, Paksha, compute_lunar_calendar
from .divisional_charts import Division, DivisionalChart, compute_divisional_chart
from .dasha import DashaPeriod, DashaTimeline, compute_dasha_timeline, dasha_from_moon

__all__ = [
    "AyanamsaSystem", "HouseSystem", "Planet",
    "EphemerisProvider", "MeeusEphemeris", "RawCusps", "RawPosition", "get_provider",
    "BirthInput", "EphemerisMoment", "ephemeris_moment", "get_ayanamsa",
    "PlanetPosition", "reduce_positions",
    "Ascendant", "HouseCusp", "HouseSet", "compute_houses", "place_planets",
    "LunarCalendarSnapshot", "Paksha", "compute_lunar_calendar",
    "Division", "DivisionalChart", "compute_divisional_chart",
    "DashaPeriod", "DashaTimeline", "compute_dasha_timeline", "dasha_from_moon",
]
