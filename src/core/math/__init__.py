"""
Core math modules for the projection engine

Numerical primitives and iterative solvers with explicit iteration caps.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Angle constants
    DEG_TO_RAD,
    FORTPI,
    HALFPI,
    RAD_TO_DEG,
    TWOPI,
    # Tolerances
    EPS10,
    EPS12,
    ONE_TOL,
    # Guarded trigonometry
    aacos,
    aasin,
    aatan2,
    adjlon,
    asqrt,
    # Validation
    clamp,
    is_valid_float,
    validate_finite,
    validate_latitude,
)

# Angle parsing
from src.core.math.angles import format_dms, parse_dms

# Ellipsoidal series
from src.core.math.series import MeridianArc, authalic_phi, msfn, phi2, qsfn, tsfn

# Geodesics
from src.core.math.geodesic import GeodesicEndpoint, GeodesicLine, geodesic_direct, geodesic_inverse

# Geocentric conversion
from src.core.math.geocentric import Geocentric, Geodetic, geocentric_to_geodetic, geodetic_to_geocentric

__all__ = [
    # Numerical Safeguards - constants
    "DEG_TO_RAD",
    "FORTPI",
    "HALFPI",
    "RAD_TO_DEG",
    "TWOPI",
    "EPS10",
    "EPS12",
    "ONE_TOL",
    # Numerical Safeguards - guarded trigonometry
    "aacos",
    "aasin",
    "aatan2",
    "adjlon",
    "asqrt",
    # Numerical Safeguards - validation
    "clamp",
    "is_valid_float",
    "validate_finite",
    "validate_latitude",
    # Angles
    "format_dms",
    "parse_dms",
    # Series
    "MeridianArc",
    "authalic_phi",
    "msfn",
    "phi2",
    "qsfn",
    "tsfn",
    # Geodesics
    "GeodesicEndpoint",
    "GeodesicLine",
    "geodesic_direct",
    "geodesic_inverse",
    # Geocentric
    "Geocentric",
    "Geodetic",
    "geocentric_to_geodetic",
    "geodetic_to_geocentric",
]
