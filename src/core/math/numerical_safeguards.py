"""
Numerical Safeguards: guarded trigonometry for map projections

Projection formulas feed results of earlier floating point steps into asin,
acos, sqrt and atan2. Rounding can push an argument a hair outside the
function's domain (|v| = 1 + 1e-16), which must not turn into a NaN or a
ValueError. This module provides:
- Angle constants and tolerances shared by every family
- Guarded inverse trigonometry (aasin, aacos, asqrt, aatan2)
- Longitude normalisation (adjlon)
- Finite-value checks and validators

CRITICAL INVARIANTS:
1. Arguments within ONE_TOL of the domain are clamped, never rejected
2. Arguments beyond ONE_TOL raise OutOfDomain, never return NaN
3. adjlon always returns a value in [-pi, pi]
"""

import math
from typing import Final

from src.core.errors import OutOfDomain

# =============================================================================
# ANGLE CONSTANTS
# =============================================================================

HALFPI: Final[float] = math.pi / 2.0
FORTPI: Final[float] = math.pi / 4.0
TWOPI: Final[float] = 2.0 * math.pi

DEG_TO_RAD: Final[float] = math.pi / 180.0
RAD_TO_DEG: Final[float] = 180.0 / math.pi

# adjlon leaves values up to this magnitude untouched (slightly above pi so
# that +-180 degrees survive a degree -> radian round trip)
SPI: Final[float] = 3.14159265359

# =============================================================================
# TOLERANCES
# =============================================================================

# Generic "is zero / is on the pole" tolerance used by most families
EPS10: Final[float] = 1e-10

# Tolerance on |phi| - pi/2 at the projection boundary
EPS12: Final[float] = 1e-12

# aasin/aacos accept |v| up to this value and clamp it to 1
ONE_TOL: Final[float] = 1.00000000000001

# aatan2 returns 0 when both arguments are below this magnitude
ATOL: Final[float] = 1e-50


# =============================================================================
# GUARDED INVERSE TRIGONOMETRY
# =============================================================================


def aasin(v: float) -> float:
    """
    asin tolerant to rounding just outside [-1, 1].

    Args:
        v: Sine value

    Returns:
        asin(v), or +-pi/2 when 1 <= |v| <= ONE_TOL

    Raises:
        OutOfDomain: If |v| > ONE_TOL

    Examples:
        >>> aasin(1.0 + 1e-15) == HALFPI
        True
    """
    av = abs(v)
    if av >= 1.0:
        if av > ONE_TOL:
            raise OutOfDomain(f"asin argument out of range: {v!r}")
        return -HALFPI if v < 0.0 else HALFPI
    return math.asin(v)


def aacos(v: float) -> float:
    """
    acos tolerant to rounding just outside [-1, 1].

    Raises:
        OutOfDomain: If |v| > ONE_TOL
    """
    av = abs(v)
    if av >= 1.0:
        if av > ONE_TOL:
            raise OutOfDomain(f"acos argument out of range: {v!r}")
        return math.pi if v < 0.0 else 0.0
    return math.acos(v)


def asqrt(v: float) -> float:
    """sqrt that maps non-positive arguments to 0."""
    return 0.0 if v <= 0.0 else math.sqrt(v)


def aatan2(n: float, d: float) -> float:
    """atan2 that returns 0 when both arguments vanish."""
    if abs(n) < ATOL and abs(d) < ATOL:
        return 0.0
    return math.atan2(n, d)


# =============================================================================
# LONGITUDE NORMALISATION
# =============================================================================


def adjlon(lon: float) -> float:
    """
    Reduce a longitude to the range [-pi, pi].

    Args:
        lon: Longitude in radians (any magnitude)

    Returns:
        Equivalent longitude in [-pi, pi]

    Examples:
        >>> round(adjlon(3 * math.pi / 2), 12) == round(-math.pi / 2, 12)
        True
        >>> adjlon(1.0)
        1.0
    """
    if abs(lon) <= SPI:
        return lon
    lon += math.pi
    lon -= TWOPI * math.floor(lon / TWOPI)
    lon -= math.pi
    return lon


# =============================================================================
# VALIDATION
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True if value is finite (not NaN, not Inf)."""
    return math.isfinite(value)


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp value into [min_value, max_value]."""
    return max(min_value, min(value, max_value))


def validate_finite(value: float, name: str) -> None:
    """
    Raise OutOfDomain if value is NaN or Inf.

    Args:
        value: Checked value
        name: Name used in the error message
    """
    if not is_valid_float(value):
        raise OutOfDomain(f"{name} must be a finite number, got {value}")


def validate_latitude(phi: float, name: str = "latitude") -> None:
    """
    Validation that a latitude lies within [-pi/2, pi/2] (with EPS10 slack).

    Raises:
        ValueError: If |phi| exceeds pi/2 + EPS10 or is not finite
    """
    if not is_valid_float(phi):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {phi}")

    if abs(phi) > HALFPI + EPS10:
        raise ValueError(f"{name} must be within +-90 degrees, got {phi * RAD_TO_DEG:.6f}")
