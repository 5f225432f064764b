"""
Geodetic <-> geocentric (earth-centred, earth-fixed) conversion

The geodetic -> geocentric direction is closed form. The reverse uses the
non-iterative method of Toms (1996) with one Bowring correction, accurate to
well below a millimetre for terrestrial heights.
"""

import math
from typing import Final, NamedTuple

# =============================================================================
# CONSTANTS (Toms, 1996)
# =============================================================================

# Initial vertical component estimate factor
AD_C: Final[float] = 1.0026000

# cos(67.5 degrees): switch between the two height formulas
COS_67P5: Final[float] = 0.38268343236508977


# =============================================================================
# TYPES
# =============================================================================


class Geocentric(NamedTuple):
    """Earth-centred cartesian coordinates in metres."""

    x: float
    y: float
    z: float


class Geodetic(NamedTuple):
    """Longitude and latitude in radians, ellipsoidal height in metres."""

    lam: float
    phi: float
    height: float


# =============================================================================
# CONVERSIONS
# =============================================================================


def geodetic_to_geocentric(lam: float, phi: float, height: float, a: float, es: float) -> Geocentric:
    """
    Convert geodetic coordinates to geocentric cartesian coordinates.

    Args:
        lam: Longitude (radians)
        phi: Latitude (radians)
        height: Height above the ellipsoid (metres)
        a: Semi-major axis (metres)
        es: Eccentricity squared

    Returns:
        Geocentric(x toward the prime meridian, y toward 90E, z toward north)
    """
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    rn = a / math.sqrt(1.0 - es * sin_phi * sin_phi)
    return Geocentric(
        (rn + height) * cos_phi * math.cos(lam),
        (rn + height) * cos_phi * math.sin(lam),
        (rn * (1.0 - es) + height) * sin_phi,
    )


def geocentric_to_geodetic(x: float, y: float, z: float, a: float, es: float) -> Geodetic:
    """
    Convert geocentric cartesian coordinates back to geodetic coordinates.

    Args:
        x, y, z: Geocentric coordinates (metres)
        a: Semi-major axis (metres)
        es: Eccentricity squared

    Returns:
        Geodetic(longitude, latitude, height)
    """
    b = a * math.sqrt(1.0 - es)
    ep2 = (a * a - b * b) / (b * b) if b > 0.0 else 0.0

    w2 = x * x + y * y
    w = math.sqrt(w2)
    t0 = z * AD_C
    s0 = math.sqrt(t0 * t0 + w2)
    if s0 == 0.0:
        # earth centre: latitude undefined, report the north pole
        return Geodetic(0.0, math.pi / 2.0, -b)
    sin_b0 = t0 / s0
    cos_b0 = w / s0
    t1 = z + b * ep2 * sin_b0 * sin_b0 * sin_b0
    total = w - a * es * cos_b0 * cos_b0 * cos_b0
    s1 = math.sqrt(t1 * t1 + total * total)
    sin_p1 = t1 / s1
    cos_p1 = total / s1

    lam = math.atan2(y, x)
    phi = math.atan(sin_p1 / cos_p1) if cos_p1 != 0.0 else math.copysign(math.pi / 2.0, sin_p1)

    rn = a / math.sqrt(1.0 - es * sin_p1 * sin_p1)
    if cos_p1 >= COS_67P5:
        height = w / cos_p1 - rn
    elif cos_p1 <= -COS_67P5:
        height = w / -cos_p1 - rn
    else:
        height = z / sin_p1 + rn * (es - 1.0)

    return Geodetic(lam, phi, height)
