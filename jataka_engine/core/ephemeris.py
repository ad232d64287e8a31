"""
ephemeris.py  —  Ephemeris adapter contract + built-in Meeus provider
=====================================================================
The chart pipeline never computes raw positions itself. It talks to an
`EphemerisProvider`:

    get_position(planet, jd_ut)                       -> RawPosition
    get_cusps(jd_ut, latitude, longitude, system)     -> RawCusps

Both return TROPICAL values and raise ProviderError on failure.

`MeeusEphemeris` is the default provider. It uses Jean Meeus
"Astronomical Algorithms" 2nd ed.:
  Sun       Ch. 25 (geocentric directly)
  Moon      Ch. 47 (geocentric directly, 60-term longitude/distance series)
  Planets   Keplerian mean elements → heliocentric (l, b, r), minus Earth's
            vector → geocentric; main Jupiter/Saturn perturbation terms
  Node      Ch. 47 mean ascending node (true node optional)
  Houses    Ch. 13-14 ascendant/MC, plus the quadrant house systems

Accuracy: Sun and Moon within ~0.01°. The planets use mean elements with
only the largest Jupiter/Saturn terms, so they drift by up to ~0.5° near
2000 and ~1.5° (Mars ~2°) a century either side; retrograde flags are
unreliable within a few days of a station. Use the `swisseph` extra
(JATAKA_EPHEMERIS_BACKEND=swisseph) when planet degrees or retrograde
status matter.
Speeds are central differences over one day.

`SwissEphemeris` (swiss_ephemeris.py) implements the same contract on top of
pyswisseph for full precision.
"""

import math
from dataclasses import dataclass
from typing import Protocol, Tuple

import structlog

from .angles import DEG, RAD, normalize
from .constants import HouseSystem, Planet
from .timescale import J2000, SECONDS_PER_DAY, delta_t_seconds
from ..errors import ProviderError

logger = structlog.get_logger(__name__)

AU_KM = 149597870.7


# ── Contract ───────────────────────────────────────────────────

@dataclass(frozen=True)
class RawPosition:
    """Tropical geocentric position as delivered by a provider."""
    longitude: float
    latitude:  float
    speed:     float      # degrees per day, negative when retrograde
    distance:  float      # AU


@dataclass(frozen=True)
class RawCusps:
    """Tropical ascendant, midheaven and twelve cusps (cusps[0] = house 1)."""
    ascendant: float
    midheaven: float
    cusps:     Tuple[float, ...]


class EphemerisProvider(Protocol):
    def get_position(self, planet: Planet, jd_ut: float) -> RawPosition:
        ...

    def get_cusps(self, jd_ut: float, latitude: float, longitude: float,
                  house_system: HouseSystem) -> RawCusps:
        ...


def get_provider(backend: str = "meeus", ephe_path: str = None) -> EphemerisProvider:
    """Build the provider named in configuration."""
    if backend == "meeus":
        return MeeusEphemeris()
    if backend == "swisseph":
        from .swiss_ephemeris import SwissEphemeris
        return SwissEphemeris(ephe_path=ephe_path)
    raise ValueError(f"Unknown ephemeris backend: {backend!r}")


# ── Helpers ────────────────────────────────────────────────────

def _r(x):
    return x * DEG


def _d(x):
    return x * RAD


def _centuries(jd_tt: float) -> float:
    return (jd_tt - J2000) / 36525.0


def ut_to_tt(jd_ut: float) -> float:
    year = 2000.0 + (jd_ut - J2000) / 365.25
    return jd_ut + delta_t_seconds(year) / SECONDS_PER_DAY


# ── Nutation & Obliquity (Meeus Ch. 22) ────────────────────────

def nutation_and_obliquity(T: float) -> Tuple[float, float, float]:
    """Returns (dpsi_arcsec, deps_arcsec, true_obliquity_deg)."""
    omega = normalize(125.04452 - 1934.136261*T + 0.0020708*T*T)
    L0    = normalize(280.4664567 + 360007.6982779*T)
    Lm    = normalize(218.3165085 + 481267.8813398*T)

    dpsi  = (-17.20 - 0.1742*T)*math.sin(_r(omega))
    dpsi += -1.32 * math.sin(_r(2*L0))
    dpsi += -0.23 * math.sin(_r(2*Lm))
    dpsi +=  0.21 * math.sin(_r(2*omega))

    deps  = ( 9.20 + 0.0897*T)*math.cos(_r(omega))
    deps +=  0.57 * math.cos(_r(2*L0))
    deps +=  0.10 * math.cos(_r(2*Lm))
    deps += -0.09 * math.cos(_r(2*omega))

    eps0 = (23.0 + 26.0/60 + 21.448/3600
            - (46.8150*T + 0.00059*T*T - 0.001813*T*T*T)/3600.0)
    return dpsi, deps, eps0 + deps/3600.0


# ── Sun (Meeus Ch. 25) ─────────────────────────────────────────

def sun_geometric(T: float) -> Tuple[float, float]:
    """True geometric longitude (deg) and radius vector (AU)."""
    L0  = normalize(280.46646 + 36000.76983*T + 0.0003032*T*T)
    M   = normalize(357.52911 + 35999.05029*T - 0.0001537*T*T)
    M_r = _r(M)
    e   = 0.016708634 - 0.000042037*T - 0.0000001267*T*T

    C = ((1.914602 - 0.004817*T - 0.000014*T*T)*math.sin(M_r)
         + (0.019993 - 0.000101*T)*math.sin(2*M_r)
         + 0.000289*math.sin(3*M_r))

    v = normalize(M + C)
    R = (1.000001018*(1 - e*e)) / (1 + e*math.cos(_r(v)))
    return normalize(L0 + C), R


def sun_position(T: float, dpsi: float) -> Tuple[float, float]:
    """Apparent longitude (deg) and radius (AU)."""
    true_lon, R = sun_geometric(T)
    return normalize(true_lon + dpsi/3600.0 - 20.4898/3600.0), R


# ── Moon (Meeus Ch. 47) ────────────────────────────────────────

# (D, M, M', F, Σl, Σr): Table 47.A
_MOON_LR = (
    (0, 0, 1, 0, 6288774, -20905355), (2, 0, -1, 0, 1274027, -3699111),
    (2, 0, 0, 0, 658314, -2955968),   (0, 0, 2, 0, 213618, -569925),
    (0, 1, 0, 0, -185116, 48888),     (0, 0, 0, 2, -114332, -3149),
    (2, 0, -2, 0, 58793, 246158),     (2, -1, -1, 0, 57066, -152138),
    (2, 0, 1, 0, 53322, -170733),     (2, -1, 0, 0, 45758, -204586),
    (0, 1, -1, 0, -40923, -129620),   (1, 0, 0, 0, -34720, 108743),
    (0, 1, 1, 0, -30383, 104755),     (2, 0, 0, -2, 15327, 10321),
    (0, 0, 1, 2, -12528, 0),          (0, 0, 1, -2, 10980, 79661),
    (4, 0, -1, 0, 10675, -34782),     (0, 0, 3, 0, 10034, -23210),
    (4, 0, -2, 0, 8548, -21636),      (2, 1, -1, 0, -7888, 24208),
    (2, 1, 0, 0, -6766, 30824),       (1, 0, -1, 0, -5163, -8379),
    (1, 1, 0, 0, 4987, -16675),       (2, -1, 1, 0, 4036, -12831),
    (2, 0, 2, 0, 3994, -10445),       (4, 0, 0, 0, 3861, -11650),
    (2, 0, -3, 0, 3665, 14403),       (0, 1, -2, 0, -2689, -7003),
    (2, 0, -1, 2, -2602, 0),          (2, -1, -2, 0, 2390, 10056),
    (1, 0, 1, 0, -2348, 6322),        (2, -2, 0, 0, 2236, -9884),
    (0, 1, 2, 0, -2120, 5751),        (0, 2, 0, 0, -2069, 0),
    (2, -2, -1, 0, 2048, -4950),      (2, 0, 1, -2, -1773, 4130),
    (2, 0, 0, 2, -1595, 0),           (4, -1, -1, 0, 1215, -3958),
    (0, 0, 2, 2, -1110, 0),           (3, 0, -1, 0, -892, 3258),
    (2, 1, 1, 0, -810, 2616),         (4, -1, -2, 0, 759, -1897),
    (0, 2, -1, 0, -713, -2117),       (2, 2, -1, 0, -700, 2354),
    (2, 1, -2, 0, 691, 0),            (2, -1, 0, -2, 596, 0),
    (4, 0, 1, 0, 549, -1423),         (0, 0, 4, 0, 537, -1117),
    (4, -1, 0, 0, 520, -1571),        (1, 0, -2, 0, -487, -1739),
    (2, 1, 0, -2, -399, 0),           (0, 0, 2, -2, -381, -4421),
    (1, 1, 1, 0, 351, 0),             (3, 0, -2, 0, -340, 0),
    (4, 0, -3, 0, 330, 0),            (2, -1, 2, 0, 327, 0),
    (0, 2, 1, 0, -323, 1165),         (1, 1, -1, 0, 299, 0),
    (2, 0, 3, 0, 294, 0),             (2, 0, -1, -2, 0, 8752),
)

# (D, M, M', F, Σb): Table 47.B
_MOON_B = (
    (0, 0, 0, 1, 5128122), (0, 0, 1, 1, 280602),  (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237), (2, 0, -1, 1, 55413),  (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),   (0, 0, 2, 1, 17198),   (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),   (2, -1, 0, -1, 8216),  (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),    (2, 1, 0, -1, -3359),  (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),   (2, -1, -1, -1, 2065), (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),  (0, 1, 0, 1, -1794),   (0, 0, 0, 3, -1749),
    (0, 1, -1, 1, -1565),  (1, 0, 0, 1, -1491),   (0, 1, 1, 1, -1475),
    (0, 1, 1, -1, -1410),  (0, 1, 0, -1, -1344),  (1, 0, 0, -1, -1335),
    (0, 0, 3, 1, 1107),    (4, 0, 0, -1, 1021),   (4, 0, -1, 1, 833),
)


def _moon_arguments(T: float) -> Tuple[float, float, float, float, float]:
    """(L', D, M, M', F) in degrees."""
    Lp = normalize(218.3164477 + 481267.88123421*T - 0.0015786*T*T + T**3/538841.0)
    D  = normalize(297.8501921 + 445267.1114034*T - 0.0018819*T*T + T**3/545868.0)
    M  = normalize(357.5291092 + 35999.0502909*T - 0.0001536*T*T + T**3/24490000.0)
    Mp = normalize(134.9633964 + 477198.8675055*T + 0.0087414*T*T + T**3/69699.0)
    F  = normalize(93.2720950 + 483202.0175233*T - 0.0036539*T*T - T**3/3526000.0)
    return Lp, D, M, Mp, F


def moon_position(T: float, dpsi: float) -> Tuple[float, float, float]:
    """Returns (apparent_longitude_deg, latitude_deg, distance_AU)."""
    Lp, D, M, Mp, F = _moon_arguments(T)
    E = 1.0 - 0.002516*T - 0.0000074*T*T

    sl = sr = 0.0
    for d, m, mp, f, cl, cr in _MOON_LR:
        arg = _r(d*D + m*M + mp*Mp + f*F)
        ecc = E ** abs(m)
        sl += cl * ecc * math.sin(arg)
        sr += cr * ecc * math.cos(arg)

    sb = 0.0
    for d, m, mp, f, cb in _MOON_B:
        sb += cb * E ** abs(m) * math.sin(_r(d*D + m*M + mp*Mp + f*F))

    A1 = _r(normalize(119.75 + 131.849*T))
    A2 = _r(normalize(53.09 + 479264.290*T))
    A3 = _r(normalize(313.45 + 481266.484*T))
    sl += 3958*math.sin(A1) + 1962*math.sin(_r(Lp - F)) + 318*math.sin(A2)
    sb += (-2235*math.sin(_r(Lp)) + 382*math.sin(A3)
           + 175*math.sin(A1 - _r(F)) + 175*math.sin(A1 + _r(F))
           + 127*math.sin(_r(Lp - Mp)) - 115*math.sin(_r(Lp + Mp)))

    longitude = normalize(Lp + sl/1_000_000.0 + dpsi/3600.0)
    latitude  = sb / 1_000_000.0
    distance  = (385000.56 + sr/1000.0) / AU_KM
    return longitude, latitude, distance


# ── Lunar node (Meeus Ch. 47) ──────────────────────────────────

def mean_node(T: float) -> float:
    return normalize(125.0445479 - 1934.1362891*T + 0.0020754*T*T
                     + T**3/467441.0 - T**4/60616000.0)


def true_node(T: float) -> float:
    _, D, M, Mp, F = _moon_arguments(T)
    return normalize(mean_node(T)
                     - 1.4979*math.sin(_r(2*(D - F)))
                     - 0.1500*math.sin(_r(M))
                     - 0.1226*math.sin(_r(2*D))
                     + 0.1176*math.sin(_r(2*F))
                     - 0.0801*math.sin(_r(2*(Mp - F))))


# ── Planets: mean orbital elements (Meeus Table 31.A, J2000 ecliptic) ──
#
#   L  mean longitude          a  semi-major axis (AU)
#   e  eccentricity            i  inclination
#   Om longitude of asc. node  w  argument of perihelion
# Each angular element is (value_at_J2000, rate_per_century).

@dataclass(frozen=True)
class OrbitalElements:
    L:  Tuple[float, float]
    a:  float
    e:  Tuple[float, float]
    i:  Tuple[float, float]
    Om: Tuple[float, float]
    w:  Tuple[float, float]

    def at(self, T: float):
        def lin(p):
            return p[0] + p[1]*T
        return (normalize(lin(self.L)), self.a, lin(self.e), lin(self.i),
                normalize(lin(self.Om)), normalize(lin(self.w)))


ORBITAL_ELEMENTS = {
    Planet.MERCURY: OrbitalElements(L=(252.2509, 149474.0722), a=0.387098,
                                    e=(0.205636, -0.00005), i=(7.0050, -0.0059),
                                    Om=(48.3313, 1.1861), w=(29.1241, 1.7001)),
    Planet.VENUS:   OrbitalElements(L=(181.9798, 58517.8160), a=0.723330,
                                    e=(0.006773, -0.00005), i=(3.3947, -0.0008),
                                    Om=(76.6799, 0.9011), w=(54.8910, 0.5070)),
    Planet.MARS:    OrbitalElements(L=(355.4333, 19140.2993), a=1.523688,
                                    e=(0.093405, 0.000092), i=(1.8497, -0.0007),
                                    Om=(49.5574, 0.7721), w=(286.5016, 0.0193)),
    Planet.JUPITER: OrbitalElements(L=(34.3515, 3034.9057), a=5.202561,
                                    e=(0.048498, 0.000163), i=(1.3030, -0.0019),
                                    Om=(100.4542, 1.0298), w=(273.8777, 0.3314)),
    Planet.SATURN:  OrbitalElements(L=(50.0774, 1222.1138), a=9.554747,
                                    e=(0.055546, -0.000347), i=(2.4886, -0.0037),
                                    Om=(113.6634, 0.8765), w=(339.3939, 0.3396)),
}


def _mean_anomaly(planet: Planet, T: float) -> float:
    L, _, _, _, Om, w = ORBITAL_ELEMENTS[planet].at(T)
    return normalize(L - w - Om)


def _heliocentric(planet: Planet, T: float) -> Tuple[float, float, float]:
    """Heliocentric ecliptic (l, b, r) from Keplerian elements."""
    L, a, e, i, Om, w = ORBITAL_ELEMENTS[planet].at(T)
    M_r = _r(normalize(L - w - Om))

    E = M_r + e*math.sin(M_r)*(1 + e*math.cos(M_r))
    for _ in range(10):
        E = E - (E - e*math.sin(E) - M_r)/(1 - e*math.cos(E))
    v = _d(2*math.atan2(math.sqrt(1+e)*math.sin(E/2),
                        math.sqrt(1-e)*math.cos(E/2)))
    r = a*(1 - e*math.cos(E))

    u  = _r(normalize(v + w))        # argument of latitude
    bh = _d(math.asin(math.sin(_r(i))*math.sin(u)))
    lh = normalize(_d(math.atan2(math.sin(u)*math.cos(_r(i)), math.cos(u))) + Om)

    # Great-inequality perturbations (heliocentric)
    if planet in (Planet.JUPITER, Planet.SATURN):
        Mj = _mean_anomaly(Planet.JUPITER, T)
        Ms = _mean_anomaly(Planet.SATURN, T)

        def s(x):
            return math.sin(_r(x))

        def c(x):
            return math.cos(_r(x))

        if planet is Planet.JUPITER:
            lh += (-0.332*s(2*Mj - 5*Ms - 67.6) - 0.056*s(2*Mj - 2*Ms + 21)
                   + 0.042*s(3*Mj - 5*Ms + 21) - 0.036*s(Mj - 2*Ms)
                   + 0.022*c(Mj - Ms) + 0.023*s(2*Mj - 3*Ms + 52)
                   - 0.016*s(Mj - 5*Ms - 69))
        else:
            lh += (0.812*s(2*Mj - 5*Ms - 67.6) - 0.229*c(2*Mj - 4*Ms - 2)
                   + 0.119*s(Mj - 2*Ms - 3) + 0.046*s(2*Mj - 6*Ms - 69)
                   + 0.014*s(Mj - 3*Ms + 32))
            bh += -0.020*c(2*Mj - 4*Ms - 2) + 0.018*s(2*Mj - 6*Ms - 49)
        lh = normalize(lh)

    return lh, bh, r


def _helio_to_geo(L_planet, B_planet, R_planet,
                  L_earth, B_earth, R_earth) -> Tuple[float, float, float]:
    """Heliocentric planet + Earth → geocentric (longitude, latitude, distance AU)."""
    x = R_planet*math.cos(_r(B_planet))*math.cos(_r(L_planet)) \
      - R_earth *math.cos(_r(B_earth)) *math.cos(_r(L_earth))
    y = R_planet*math.cos(_r(B_planet))*math.sin(_r(L_planet)) \
      - R_earth *math.cos(_r(B_earth)) *math.sin(_r(L_earth))
    z = R_planet*math.sin(_r(B_planet)) \
      - R_earth *math.sin(_r(B_earth))

    Delta = math.sqrt(x*x + y*y + z*z)
    lam   = normalize(_d(math.atan2(y, x)))
    beta  = _d(math.atan2(z, math.sqrt(x*x + y*y)))
    return lam, beta, Delta


# ── Sidereal time & house cusps (Meeus Ch. 12-14) ──────────────

def gmst(jd_ut: float) -> float:
    """Greenwich Mean Sidereal Time in degrees. Meeus Eq. 12.4."""
    T  = (jd_ut - J2000) / 36525.0
    th = 280.46061837 + 360.98564736629*(jd_ut - J2000) + 0.000387933*T*T - T*T*T/38710000.0
    return normalize(th)


def local_sidereal_time(jd_ut: float, longitude: float,
                        dpsi: float, obliquity: float) -> float:
    """Local apparent sidereal time (degrees); longitude positive East."""
    equation_of_equinoxes = dpsi * math.cos(_r(obliquity)) / 3600.0
    return normalize(gmst(jd_ut) + equation_of_equinoxes + longitude)


def ascendant_for(oblique_ascension: float, pole: float, obliquity: float) -> float:
    """Ecliptic point rising at the given oblique ascension and pole height.

    With oblique_ascension = RAMC + 90 and pole = geographic latitude this
    is the ascendant. House systems that project from a different pole or
    equator point reuse it for their intermediate cusps.
    """
    ramc = _r(oblique_ascension - 90.0)
    e = _r(obliquity)
    y = math.cos(ramc)
    x = -(math.sin(ramc)*math.cos(e) + math.tan(_r(pole))*math.sin(e))
    return normalize(_d(math.atan2(y, x)))


def midheaven_for(ramc: float, obliquity: float) -> float:
    r = _r(ramc)
    return normalize(_d(math.atan2(math.sin(r), math.cos(r)*math.cos(_r(obliquity)))))


def _placidus_cusp(ramc: float, latitude: float, obliquity: float,
                   fraction: float, above_horizon: bool) -> float:
    """Iteratively solve a Placidus cusp by trisecting the semi-arc."""
    e = _r(obliquity)
    tan_phi = math.tan(_r(latitude))

    def ra_for(lon):
        dec = math.asin(math.sin(e)*math.sin(_r(lon)))
        dsa = _d(math.acos(-tan_phi*math.tan(dec)))
        if above_horizon:
            return ramc + fraction*dsa
        return ramc + 180.0 - fraction*(180.0 - dsa)

    def lon_for(ra):
        return normalize(_d(math.atan2(math.sin(_r(ra)), math.cos(_r(ra))*math.cos(e))))

    ra = ramc + (90.0*fraction if above_horizon else 180.0 - 90.0*fraction)
    lon = lon_for(ra)
    for _ in range(50):
        new_lon = lon_for(ra_for(lon))
        if abs((new_lon - lon + 180.0) % 360.0 - 180.0) < 1e-9:
            break
        lon = new_lon
    return new_lon


def _quadrant_cusps(h10, h11, h12, h1, h2, h3) -> Tuple[float, ...]:
    first_half = (h1, h2, h3, normalize(h10 + 180.0),
                  normalize(h11 + 180.0), normalize(h12 + 180.0))
    return first_half + tuple(normalize(c + 180.0) for c in first_half)


def house_cusps(system: HouseSystem, ramc: float, latitude: float,
                obliquity: float) -> RawCusps:
    """Tropical cusps for one of the eight supported house systems."""
    asc = ascendant_for(ramc + 90.0, latitude, obliquity)
    mc  = midheaven_for(ramc, obliquity)
    phi = latitude

    if system in (HouseSystem.PLACIDUS, HouseSystem.KOCH) \
            and abs(phi) >= 90.0 - obliquity:
        raise ProviderError(
            f"{system.value} cusps are undefined at latitude {phi:.3f}° "
            "(circumpolar ecliptic)"
        )

    if system is HouseSystem.PLACIDUS:
        h11 = _placidus_cusp(ramc, phi, obliquity, 1/3, True)
        h12 = _placidus_cusp(ramc, phi, obliquity, 2/3, True)
        h2  = _placidus_cusp(ramc, phi, obliquity, 2/3, False)
        h3  = _placidus_cusp(ramc, phi, obliquity, 1/3, False)
        cusps = _quadrant_cusps(mc, h11, h12, asc, h2, h3)

    elif system is HouseSystem.KOCH:
        sin_a = math.sin(_r(mc))*math.sin(_r(obliquity))/math.cos(_r(phi))
        sin_a = max(-1.0, min(1.0, sin_a))
        cos_a = math.sqrt(1.0 - sin_a*sin_a)
        c = _d(math.atan(math.tan(_r(phi))/cos_a))
        ad3 = _d(math.asin(math.sin(_r(c))*sin_a)) / 3.0
        cusps = _quadrant_cusps(
            mc,
            ascendant_for(ramc + 30 - 2*ad3, phi, obliquity),
            ascendant_for(ramc + 60 - ad3, phi, obliquity),
            asc,
            ascendant_for(ramc + 120 + ad3, phi, obliquity),
            ascendant_for(ramc + 150 + 2*ad3, phi, obliquity),
        )

    elif system is HouseSystem.PORPHYRY:
        q = normalize(asc - mc)
        r = 180.0 - q
        cusps = _quadrant_cusps(mc, normalize(mc + q/3), normalize(mc + 2*q/3),
                                asc, normalize(asc + r/3), normalize(asc + 2*r/3))

    elif system is HouseSystem.REGIOMONTANUS:
        tan_phi = math.tan(_r(phi))
        fh1 = _d(math.atan(tan_phi*0.5))
        fh2 = _d(math.atan(tan_phi*math.cos(_r(30.0))))
        cusps = _quadrant_cusps(
            mc,
            ascendant_for(ramc + 30, fh1, obliquity),
            ascendant_for(ramc + 60, fh2, obliquity),
            asc,
            ascendant_for(ramc + 120, fh2, obliquity),
            ascendant_for(ramc + 150, fh1, obliquity),
        )

    elif system is HouseSystem.CAMPANUS:
        fh1 = _d(math.asin(math.sin(_r(phi))/2.0))
        fh2 = _d(math.asin(math.sqrt(3.0)/2.0*math.sin(_r(phi))))
        cos_phi = math.cos(_r(phi))
        if cos_phi == 0.0:
            raise ProviderError("Campanus cusps are undefined at the geographic pole")
        xh1 = _d(math.atan(math.sqrt(3.0)/cos_phi))
        xh2 = _d(math.atan(1.0/math.sqrt(3.0)/cos_phi))
        cusps = _quadrant_cusps(
            mc,
            ascendant_for(ramc + 90 - xh1, fh1, obliquity),
            ascendant_for(ramc + 90 - xh2, fh2, obliquity),
            asc,
            ascendant_for(ramc + 90 + xh2, fh2, obliquity),
            ascendant_for(ramc + 90 + xh1, fh1, obliquity),
        )

    elif system is HouseSystem.EQUAL:
        cusps = tuple(normalize(asc + 30.0*i) for i in range(12))

    elif system is HouseSystem.VEHLOW:
        cusps = tuple(normalize(asc - 15.0 + 30.0*i) for i in range(12))

    elif system is HouseSystem.WHOLE_SIGN:
        start = math.floor(asc / 30.0) * 30.0
        cusps = tuple(normalize(start + 30.0*i) for i in range(12))

    else:
        raise ProviderError(f"Unsupported house system: {system!r}")

    return RawCusps(ascendant=asc, midheaven=mc, cusps=cusps)


# ── Provider ───────────────────────────────────────────────────

class MeeusEphemeris:
    """Analytic low-precision ephemeris. Stateless and thread-safe."""

    def __init__(self, use_true_node: bool = False):
        self.use_true_node = use_true_node

    def _longitude_latitude_distance(self, planet: Planet,
                                     jd_ut: float) -> Tuple[float, float, float]:
        T = _centuries(ut_to_tt(jd_ut))
        dpsi, _, _ = nutation_and_obliquity(T)

        if planet is Planet.SUN:
            lon, R = sun_position(T, dpsi)
            return lon, 0.0, R
        if planet is Planet.MOON:
            return moon_position(T, dpsi)
        if planet is Planet.RAHU:
            node = true_node(T) if self.use_true_node else mean_node(T)
            return normalize(node + dpsi/3600.0), 0.0, 0.00257
        if planet in ORBITAL_ELEMENTS:
            earth_l, earth_r = sun_geometric(T)
            lh, bh, r = _heliocentric(planet, T)
            lon, lat, dist = _helio_to_geo(lh, bh, r, normalize(earth_l + 180.0), 0.0, earth_r)
            return normalize(lon + dpsi/3600.0), lat, dist
        raise ProviderError(f"{planet} is not computed by the ephemeris")

    def get_position(self, planet: Planet, jd_ut: float) -> RawPosition:
        planet = Planet(planet)
        try:
            lon, lat, dist = self._longitude_latitude_distance(planet, jd_ut)
            before, _, _ = self._longitude_latitude_distance(planet, jd_ut - 0.5)
            after, _, _  = self._longitude_latitude_distance(planet, jd_ut + 0.5)
        except (ValueError, ZeroDivisionError, OverflowError) as e:
            raise ProviderError(f"{planet}: {e}") from e
        speed = (after - before + 180.0) % 360.0 - 180.0
        return RawPosition(longitude=lon, latitude=lat, speed=speed, distance=dist)

    def get_cusps(self, jd_ut: float, latitude: float, longitude: float,
                  house_system: HouseSystem) -> RawCusps:
        T = _centuries(ut_to_tt(jd_ut))
        dpsi, _, obliquity = nutation_and_obliquity(T)
        ramc = local_sidereal_time(jd_ut, longitude, dpsi, obliquity)
        try:
            return house_cusps(HouseSystem(house_system), ramc, latitude, obliquity)
        except (ValueError, ZeroDivisionError) as e:
            logger.debug("ephemeris.cusps_failed", system=str(house_system),
                         latitude=latitude, error=str(e))
            raise ProviderError(f"{house_system.value} cusps failed: {e}") from e
