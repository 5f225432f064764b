"""
Ellipsoidal series and auxiliary latitude functions

All functions work on the unit ellipsoid (semi-major axis 1); callers scale
by `a`. Iterative solvers carry an explicit iteration cap and tolerance and
raise DidNotConverge instead of looping.

Functions:
- MeridianArc: meridian distance series and its iterative inverse
- msfn: m = cos(phi) / sqrt(1 - es sin^2 phi)
- qsfn: authalic q(phi) used by equal-area families
- tsfn: isometric t(phi) used by conformal families
- phi2: latitude from t (conformal inverse)
- authalic_phi: latitude from q (equal-area inverse)
"""

import math
from dataclasses import dataclass, field
from typing import Final

from src.core.errors import DidNotConverge
from src.core.math.numerical_safeguards import HALFPI

# =============================================================================
# MERIDIAN ARC COEFFICIENTS
# =============================================================================

_C00: Final[float] = 1.0
_C02: Final[float] = 0.25
_C04: Final[float] = 0.046875
_C06: Final[float] = 0.01953125
_C08: Final[float] = 0.01068115234375
_C22: Final[float] = 0.75
_C44: Final[float] = 0.46875
_C46: Final[float] = 0.01302083333333333333
_C48: Final[float] = 0.00712076822916666666
_C66: Final[float] = 0.36458333333333333333
_C68: Final[float] = 0.00569661458333333333
_C88: Final[float] = 0.3076171875

# Inverse meridian arc: Newton iteration
MLFN_MAX_ITER: Final[int] = 10
MLFN_TOL: Final[float] = 1e-11

# phi2 (conformal latitude inverse)
PHI2_MAX_ITER: Final[int] = 15
PHI2_TOL: Final[float] = 1e-10

# authalic latitude inverse
AUTHALIC_MAX_ITER: Final[int] = 15
AUTHALIC_TOL: Final[float] = 1e-10

# Below this eccentricity the ellipsoid is treated as a sphere in qsfn
QSFN_EPS: Final[float] = 1e-7


# =============================================================================
# MERIDIAN ARC
# =============================================================================


@dataclass(frozen=True)
class MeridianArc:
    """
    Meridian distance from the equator on the unit ellipsoid.

    Coefficients are computed once for a given eccentricity squared.

    Examples:
        >>> arc = MeridianArc(0.0)
        >>> arc.distance(0.5) == 0.5
        True
    """

    es: float
    coefficients: tuple[float, float, float, float, float] = field(init=False)

    def __post_init__(self):
        es = self.es
        t = es * es
        en0 = _C00 - es * (_C02 + es * (_C04 + es * (_C06 + es * _C08)))
        en1 = es * (_C22 - es * (_C04 + es * (_C06 + es * _C08)))
        en2 = t * (_C44 - es * (_C46 + es * _C48))
        t *= es
        en3 = t * (_C66 - es * _C68)
        en4 = t * es * _C88
        object.__setattr__(self, "coefficients", (en0, en1, en2, en3, en4))

    def distance(self, phi: float, sinphi: float | None = None, cosphi: float | None = None) -> float:
        """
        Meridian arc length from the equator to latitude phi.

        Args:
            phi: Latitude in radians
            sinphi: sin(phi) if already known
            cosphi: cos(phi) if already known

        Returns:
            Arc length on the unit ellipsoid
        """
        if sinphi is None:
            sinphi = math.sin(phi)
        if cosphi is None:
            cosphi = math.cos(phi)
        en0, en1, en2, en3, en4 = self.coefficients
        cphi = cosphi * sinphi
        sphi = sinphi * sinphi
        return en0 * phi - cphi * (en1 + sphi * (en2 + sphi * (en3 + sphi * en4)))

    def latitude(
        self,
        arc: float,
        max_iterations: int = MLFN_MAX_ITER,
        tolerance: float = MLFN_TOL,
    ) -> float:
        """
        Inverse of distance(): latitude whose meridian arc equals `arc`.

        Raises:
            DidNotConverge: If the Newton step is still above tolerance
                after max_iterations
        """
        k = 1.0 / (1.0 - self.es)
        phi = arc
        for _ in range(max_iterations):
            s = math.sin(phi)
            t = 1.0 - self.es * s * s
            step = (self.distance(phi, s, math.cos(phi)) - arc) * (t * math.sqrt(t)) * k
            phi -= step
            if abs(step) < tolerance:
                return phi
        raise DidNotConverge(
            f"inverse meridian arc did not converge after {max_iterations} iterations",
            iterations=max_iterations,
        )


# =============================================================================
# AUXILIARY FUNCTIONS
# =============================================================================


def msfn(sinphi: float, cosphi: float, es: float) -> float:
    """Parallel radius factor m(phi) on the unit ellipsoid."""
    return cosphi / math.sqrt(1.0 - es * sinphi * sinphi)


def qsfn(sinphi: float, e: float, one_es: float) -> float:
    """
    Authalic function q(phi).

    Args:
        sinphi: sin(phi)
        e: First eccentricity
        one_es: 1 - e^2

    Returns:
        q(phi); 2 sin(phi) on the sphere
    """
    if e >= QSFN_EPS:
        con = e * sinphi
        return one_es * (sinphi / (1.0 - con * con) - (0.5 / e) * math.log((1.0 - con) / (1.0 + con)))
    return sinphi + sinphi


def tsfn(phi: float, sinphi: float, e: float) -> float:
    """Isometric function t(phi) used by Mercator and Lambert conformal."""
    sinphi *= e
    return math.tan(0.5 * (HALFPI - phi)) / math.pow((1.0 - sinphi) / (1.0 + sinphi), 0.5 * e)


def phi2(
    ts: float,
    e: float,
    max_iterations: int = PHI2_MAX_ITER,
    tolerance: float = PHI2_TOL,
) -> float:
    """
    Latitude from the isometric function value ts (inverse of tsfn).

    Raises:
        DidNotConverge: If no fixed point is reached within max_iterations
    """
    half_e = 0.5 * e
    phi = HALFPI - 2.0 * math.atan(ts)
    for _ in range(max_iterations):
        con = e * math.sin(phi)
        dphi = HALFPI - 2.0 * math.atan(ts * math.pow((1.0 - con) / (1.0 + con), half_e)) - phi
        phi += dphi
        if abs(dphi) <= tolerance:
            return phi
    raise DidNotConverge(
        f"conformal latitude did not converge after {max_iterations} iterations",
        iterations=max_iterations,
    )


def authalic_phi(
    qs: float,
    e: float,
    one_es: float,
    max_iterations: int = AUTHALIC_MAX_ITER,
    tolerance: float = AUTHALIC_TOL,
) -> float:
    """
    Latitude from the authalic function value qs (inverse of qsfn).

    Raises:
        DidNotConverge: If the correction is still above tolerance after
            max_iterations
    """
    phi = math.asin(max(-1.0, min(1.0, 0.5 * qs)))
    if e < QSFN_EPS:
        return phi
    for _ in range(max_iterations):
        sinpi = math.sin(phi)
        cospi = math.cos(phi)
        con = e * sinpi
        com = 1.0 - con * con
        dphi = 0.5 * com * com / cospi * (
            qs / one_es - sinpi / com + 0.5 / e * math.log((1.0 - con) / (1.0 + con))
        )
        phi += dphi
        if abs(dphi) <= tolerance:
            return phi
    raise DidNotConverge(
        f"authalic latitude did not converge after {max_iterations} iterations",
        iterations=max_iterations,
    )
