"""
LinearUnits: the only sanctioned conversion between metres and projected units

Projected coordinates may be expressed in any registered linear unit
(`units=` parameter) or an explicit metre factor (`to_meter=`). Families
always compute in metres; the base projection converts at the seam using
the factors from this module.

Mixing units without a converter from this module is not allowed.
"""

import math
from types import MappingProxyType
from typing import Final, Mapping, NamedTuple, Optional


# =============================================================================
# UNIT TABLE
# =============================================================================


class LinearUnit(NamedTuple):
    """Registered linear unit."""

    code: str
    to_meter: float
    description: str


METER: Final[LinearUnit] = LinearUnit("m", 1.0, "Meter")

_UNITS: Final[Mapping[str, LinearUnit]] = MappingProxyType(
    {
        unit.code: unit
        for unit in (
            LinearUnit("km", 1000.0, "Kilometer"),
            METER,
            LinearUnit("dm", 0.1, "Decimeter"),
            LinearUnit("cm", 0.01, "Centimeter"),
            LinearUnit("mm", 0.001, "Millimeter"),
            LinearUnit("kmi", 1852.0, "International Nautical Mile"),
            LinearUnit("in", 0.0254, "International Inch"),
            LinearUnit("ft", 0.3048, "International Foot"),
            LinearUnit("yd", 0.9144, "International Yard"),
            LinearUnit("mi", 1609.344, "International Statute Mile"),
            LinearUnit("fath", 1.8288, "International Fathom"),
            LinearUnit("ch", 20.1168, "International Chain"),
            LinearUnit("link", 0.201168, "International Link"),
            LinearUnit("us-in", 1.0 / 39.37, "U.S. Surveyor's Inch"),
            LinearUnit("us-ft", 0.304800609601219, "U.S. Surveyor's Foot"),
            LinearUnit("us-yd", 0.914401828803658, "U.S. Surveyor's Yard"),
            LinearUnit("us-ch", 20.11684023368047, "U.S. Surveyor's Chain"),
            LinearUnit("us-mi", 1609.347218694437, "U.S. Surveyor's Statute Mile"),
        )
    }
)


def lookup_unit(code: str) -> Optional[LinearUnit]:
    """Exact-code unit lookup (unit codes are case-sensitive); None if unknown."""
    return _UNITS.get(code)


def available_units() -> tuple[str, ...]:
    """Registered unit codes."""
    return tuple(_UNITS)


# =============================================================================
# CONVERTERS
# =============================================================================


def validate_unit_factor(to_meter: float) -> float:
    """
    Check a metre factor.

    Raises:
        ValueError: If the factor is not a finite positive number
    """
    if not math.isfinite(to_meter) or to_meter <= 0.0:
        raise ValueError(f"unit factor must be finite and > 0, got {to_meter}")
    return to_meter


def meters_to_units(value_m: float, to_meter: float) -> float:
    """Convert metres to the unit whose size in metres is `to_meter`."""
    return value_m / to_meter


def units_to_meters(value: float, to_meter: float) -> float:
    """Convert a value in the unit of size `to_meter` back to metres."""
    return value * to_meter
