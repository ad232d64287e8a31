"""
angles.py
=========
Small angle helpers shared by the position, house and divisional modules.
"""

import math
from typing import Tuple

from .constants import NAKSHATRA_SPAN, PADA_SPAN, SIGN_SPAN

DEG = math.pi / 180.0
RAD = 180.0 / math.pi


def normalize(angle: float) -> float:
    """Normalize angle to [0, 360)."""
    lon = ((angle % 360.0) + 360.0) % 360.0
    # -1e-17 % 360 rounds to 360.0 in floating point
    return 0.0 if lon >= 360.0 else lon


def to_sidereal(tropical: float, ayanamsa: float) -> float:
    return normalize(tropical - ayanamsa)


def sign_index(longitude: float) -> int:
    return int(math.floor(longitude / SIGN_SPAN)) % 12


def degree_in_sign(longitude: float) -> float:
    return longitude - SIGN_SPAN * sign_index(longitude)


def nakshatra_index(longitude: float) -> int:
    return int(math.floor(longitude / NAKSHATRA_SPAN)) % 27


def nakshatra_pada(longitude: float) -> int:
    return int(math.floor((longitude % NAKSHATRA_SPAN) / PADA_SPAN)) % 4 + 1


def angular_distance(a: float, b: float) -> float:
    """Shortest distance between two longitudes, in [0, 180]."""
    diff = abs(normalize(a) - normalize(b))
    return 360.0 - diff if diff > 180.0 else diff


def dms(degrees: float) -> Tuple[int, int, int]:
    """Split a non-negative angle into whole degrees, minutes and seconds.

    Truncates rather than rounds so 29.99999° never displays as 30°0'0".
    """
    total = int(math.floor(degrees * 3600.0 + 1e-9))
    d, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return d, m, s


def format_dms(degrees: float) -> str:
    d, m, s = dms(degrees)
    return f"{d}°{m:02d}'{s:02d}\""
