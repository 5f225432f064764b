"""
Domain models and value objects.

Contains the fundamental entities: Ellipsoid, Datum, ParameterSet, the
coordinate types and linear units.
"""

from src.core.domain.datum import Datum, HelmertShift, available_datums, lookup_datum
from src.core.domain.ellipsoid import Ellipsoid, available_ellipsoids, lookup
from src.core.domain.parameters import ParameterSet
from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.domain.units import (
    METER,
    LinearUnit,
    available_units,
    lookup_unit,
    meters_to_units,
    units_to_meters,
    validate_unit_factor,
)

# Short aliases used throughout the projection formulas
LP = GeographicPoint
XY = PlanarPoint

__all__ = [
    # Ellipsoid registry
    "Ellipsoid",
    "lookup",
    "available_ellipsoids",
    # Datum registry
    "Datum",
    "HelmertShift",
    "lookup_datum",
    "available_datums",
    # Parameters
    "ParameterSet",
    # Coordinates
    "GeographicPoint",
    "PlanarPoint",
    "LP",
    "XY",
    # Units
    "LinearUnit",
    "METER",
    "lookup_unit",
    "available_units",
    "validate_unit_factor",
    "meters_to_units",
    "units_to_meters",
]
