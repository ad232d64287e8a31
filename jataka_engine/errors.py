"""
errors.py
=========
Error taxonomy for chart computation.

Validation errors (bad moment, bad location) are raised before any ephemeris
call is made. `EphemerisUnavailable` aborts the whole chart; there is never a
partial result. `HouseComputationDegraded` is a warning, not an error: the
chart is still returned, with its house set flagged as degraded.
"""

from typing import Optional


class ChartError(Exception):
    """Base class for every error raised by the engine."""


class InvalidBirthMoment(ChartError):
    """The civil date/time cannot be normalized to a single UTC instant."""


class InvalidLocation(ChartError):
    """Latitude or longitude is outside its valid range."""


class ProviderError(ChartError):
    """Raised by an ephemeris adapter when it cannot produce a result."""


class EphemerisUnavailable(ChartError):
    """The ephemeris adapter failed for one of the requested planets."""

    def __init__(self, planet: str, reason: Optional[str] = None):
        self.planet = planet
        self.reason = reason
        message = f"Ephemeris unavailable for {planet}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnsupportedDivision(ChartError, ValueError):
    """The requested divisional chart factor is not in the supported set."""

    def __init__(self, division, supported=()):
        self.division = division
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported divisional chart: {division!r}. "
            f"Supported: {', '.join(f'D{d}' for d in self.supported)}"
        )


class InvalidNakshatra(ChartError, ValueError):
    """Nakshatra index outside 0–26."""

    def __init__(self, index):
        self.index = index
        super().__init__(f"Nakshatra index must be in [0, 26], got {index!r}")


class HousePlacementError(ChartError):
    """A planet matched zero or several house arcs; the cusps are not a partition."""


class HouseComputationDegraded(UserWarning):
    """The primary house method failed and equal houses were substituted."""
