"""
Geodesic problems on the unit ellipsoid (Vincenty, 1975)

- geodesic_inverse: distance and forward azimuth between two points
- geodesic_direct: end point reached from a start point, azimuth and distance

Both iterate on an auxiliary-sphere quantity with an explicit cap; nearly
antipodal configurations that fail to settle raise DidNotConverge.
Distances are in units of the semi-major axis.
"""

import math
from typing import Final, NamedTuple

from src.core.errors import DidNotConverge

# =============================================================================
# ITERATION PARAMETERS
# =============================================================================

GEODESIC_MAX_ITER: Final[int] = 200
GEODESIC_TOL: Final[float] = 1e-12


# =============================================================================
# TYPES
# =============================================================================


class GeodesicLine(NamedTuple):
    """Result of the inverse problem."""

    distance: float
    azimuth: float


class GeodesicEndpoint(NamedTuple):
    """Result of the direct problem (radians)."""

    lam: float
    phi: float


# =============================================================================
# SERIES HELPERS
# =============================================================================


def _series_a(u2: float) -> float:
    return 1.0 + u2 / 16384.0 * (4096.0 + u2 * (-768.0 + u2 * (320.0 - 175.0 * u2)))


def _series_b(u2: float) -> float:
    return u2 / 1024.0 * (256.0 + u2 * (-128.0 + u2 * (74.0 - 47.0 * u2)))


def _delta_sigma(b_coef: float, sin_sigma: float, cos_sigma: float, cos_2sm: float) -> float:
    cos_2sm_sq = cos_2sm * cos_2sm
    return b_coef * sin_sigma * (
        cos_2sm
        + b_coef
        / 4.0
        * (
            cos_sigma * (-1.0 + 2.0 * cos_2sm_sq)
            - b_coef / 6.0 * cos_2sm * (-3.0 + 4.0 * sin_sigma * sin_sigma) * (-3.0 + 4.0 * cos_2sm_sq)
        )
    )


# =============================================================================
# INVERSE PROBLEM
# =============================================================================


def geodesic_inverse(
    phi1: float,
    phi2: float,
    dlam: float,
    f: float,
    max_iterations: int = GEODESIC_MAX_ITER,
    tolerance: float = GEODESIC_TOL,
) -> GeodesicLine:
    """
    Distance and forward azimuth from (0, phi1) to (dlam, phi2).

    Args:
        phi1: Latitude of the start point (radians)
        phi2: Latitude of the end point (radians)
        dlam: Longitude difference end - start (radians)
        f: Flattening of the ellipsoid
        max_iterations: Iteration cap on the auxiliary longitude
        tolerance: Convergence threshold on the auxiliary longitude

    Returns:
        GeodesicLine(distance on the unit ellipsoid, azimuth from north)

    Raises:
        DidNotConverge: For nearly antipodal points
    """
    one_f = 1.0 - f
    u1 = math.atan(one_f * math.tan(phi1))
    u2 = math.atan(one_f * math.tan(phi2))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = dlam
    for _ in range(max_iterations):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.hypot(cos_u2 * sin_lam, cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam)
        if sin_sigma == 0.0:
            return GeodesicLine(0.0, 0.0)
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos2_alpha = 1.0 - sin_alpha * sin_alpha
        # equatorial line: cos2_alpha == 0
        cos_2sm = cos_sigma - 2.0 * sin_u1 * sin_u2 / cos2_alpha if cos2_alpha != 0.0 else 0.0
        c = f / 16.0 * cos2_alpha * (4.0 + f * (4.0 - 3.0 * cos2_alpha))
        previous = lam
        lam = dlam + (1.0 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sm + c * cos_sigma * (-1.0 + 2.0 * cos_2sm * cos_2sm))
        )
        if abs(lam - previous) <= tolerance:
            break
    else:
        raise DidNotConverge(
            f"geodesic inverse did not converge after {max_iterations} iterations",
            iterations=max_iterations,
        )

    b = one_f
    u_sq = cos2_alpha * (1.0 - b * b) / (b * b)
    a_coef = _series_a(u_sq)
    b_coef = _series_b(u_sq)
    distance = b * a_coef * (sigma - _delta_sigma(b_coef, sin_sigma, cos_sigma, cos_2sm))
    azimuth = math.atan2(cos_u2 * math.sin(lam), cos_u1 * sin_u2 - sin_u1 * cos_u2 * math.cos(lam))
    return GeodesicLine(distance, azimuth)


# =============================================================================
# DIRECT PROBLEM
# =============================================================================


def geodesic_direct(
    phi1: float,
    azimuth: float,
    distance: float,
    f: float,
    max_iterations: int = GEODESIC_MAX_ITER,
    tolerance: float = GEODESIC_TOL,
) -> GeodesicEndpoint:
    """
    End point of the geodesic leaving (0, phi1) with the given azimuth.

    Args:
        phi1: Latitude of the start point (radians)
        azimuth: Forward azimuth from north (radians)
        distance: Length on the unit ellipsoid
        f: Flattening of the ellipsoid

    Returns:
        GeodesicEndpoint(longitude relative to the start, latitude)

    Raises:
        DidNotConverge: If the arc length iteration does not settle
    """
    one_f = 1.0 - f
    b = one_f
    sin_az, cos_az = math.sin(azimuth), math.cos(azimuth)
    tan_u1 = one_f * math.tan(phi1)
    cos_u1 = 1.0 / math.sqrt(1.0 + tan_u1 * tan_u1)
    sin_u1 = tan_u1 * cos_u1
    sigma1 = math.atan2(tan_u1, cos_az)
    sin_alpha = cos_u1 * sin_az
    cos2_alpha = 1.0 - sin_alpha * sin_alpha
    u_sq = cos2_alpha * (1.0 - b * b) / (b * b)
    a_coef = _series_a(u_sq)
    b_coef = _series_b(u_sq)

    base = distance / (b * a_coef)
    sigma = base
    for _ in range(max_iterations):
        cos_2sm = math.cos(2.0 * sigma1 + sigma)
        sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
        previous = sigma
        sigma = base + _delta_sigma(b_coef, sin_sigma, cos_sigma, cos_2sm)
        if abs(sigma - previous) <= tolerance:
            break
    else:
        raise DidNotConverge(
            f"geodesic direct did not converge after {max_iterations} iterations",
            iterations=max_iterations,
        )

    sin_sigma, cos_sigma = math.sin(sigma), math.cos(sigma)
    cos_2sm = math.cos(2.0 * sigma1 + sigma)
    tmp = sin_u1 * sin_sigma - cos_u1 * cos_sigma * cos_az
    phi2 = math.atan2(
        sin_u1 * cos_sigma + cos_u1 * sin_sigma * cos_az,
        one_f * math.hypot(sin_alpha, tmp),
    )
    lam = math.atan2(sin_sigma * sin_az, cos_u1 * cos_sigma - sin_u1 * sin_sigma * cos_az)
    c = f / 16.0 * cos2_alpha * (4.0 + f * (4.0 - 3.0 * cos2_alpha))
    dlam = lam - (1.0 - c) * f * sin_alpha * (
        sigma + c * sin_sigma * (cos_2sm + c * cos_sigma * (-1.0 + 2.0 * cos_2sm * cos_2sm))
    )
    return GeodesicEndpoint(dlam, phi2)
