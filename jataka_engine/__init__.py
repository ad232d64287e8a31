"""
Jataka Engine
=============
Sidereal (Vedic) birth chart calculation engine.

Quick start:
    from jataka_engine import BirthInput, compute_birth_chart

    chart = compute_birth_chart(BirthInput(
        year=1990, month=1, day=15, hour=8, minute=30,
        utc_offset=-5.0,
        latitude=40.7128,
        longitude=-74.0060,
    ))
"""

from .core.timescale import BirthInput
from .errors import (ChartError, EphemerisUnavailable, HouseComputationDegraded,
                     HousePlacementError, InvalidBirthMoment, InvalidLocation,
                     InvalidNakshatra, ProviderError, UnsupportedDivision)
from .tools.birth_chart import BirthChart, acompute_birth_chart, compute_birth_chart

__version__ = "1.0.0"
__all__ = [
    "BirthInput", "BirthChart", "compute_birth_chart", "acompute_birth_chart",
    "ChartError", "InvalidBirthMoment", "InvalidLocation", "EphemerisUnavailable",
    "ProviderError", "UnsupportedDivision", "InvalidNakshatra",
    "HousePlacementError", "HouseComputationDegraded",
]
