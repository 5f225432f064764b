"""
Datum: geodetic datum with a Helmert shift to WGS84

A datum pairs an ellipsoid name with the 3 (translation) or 7 (translation,
rotation, scale) parameter transformation to WGS84, as carried by the proj
`towgs84=` parameter. Rotations are stored in arc-seconds and scale in ppm,
the units used on the wire.
"""

import math
from functools import lru_cache
from types import MappingProxyType
from typing import Final, Mapping, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator

# Arc-seconds -> radians
SEC_TO_RAD: Final[float] = math.pi / 180.0 / 3600.0


# =============================================================================
# TYPES
# =============================================================================


class HelmertShift(NamedTuple):
    """towgs84 parameters converted for computation."""

    dx: float
    dy: float
    dz: float
    rx: float
    ry: float
    rz: float
    scale: float


class Datum(BaseModel):
    """
    Geodetic datum.

    Immutable model (frozen=True).
    """

    name: str = Field("custom", min_length=1, description="Datum name")
    ellipsoid_name: Optional[str] = Field(None, description="Registry name of the datum's ellipsoid")
    towgs84: tuple[float, ...] = Field(..., description="3 or 7 Helmert parameters to WGS84")
    description: str = Field("", description="Human-readable name")

    model_config = {"frozen": True}

    @field_validator("towgs84")
    @classmethod
    def validate_parameter_count(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Helmert shifts carry either 3 or 7 finite values."""
        if len(v) not in (3, 7):
            raise ValueError(f"towgs84 needs 3 or 7 values, got {len(v)}")
        if not all(math.isfinite(p) for p in v):
            raise ValueError(f"towgs84 values must be finite, got {v}")
        return v

    @property
    def is_seven_parameter(self) -> bool:
        """True for a full Helmert (rotation + scale) shift."""
        return len(self.towgs84) == 7

    @property
    def is_identity(self) -> bool:
        """True when the shift to WGS84 does nothing."""
        if self.is_seven_parameter:
            return all(p == 0.0 for p in self.towgs84)
        return all(p == 0.0 for p in self.towgs84[:3])

    def shift_parameters(self) -> HelmertShift:
        """Parameters with rotations in radians and scale as a multiplier."""
        dx, dy, dz = self.towgs84[:3]
        if not self.is_seven_parameter:
            return HelmertShift(dx, dy, dz, 0.0, 0.0, 0.0, 1.0)
        rx, ry, rz, ppm = self.towgs84[3:]
        return HelmertShift(dx, dy, dz, rx * SEC_TO_RAD, ry * SEC_TO_RAD, rz * SEC_TO_RAD, 1.0 + ppm / 1e6)

    def same_shift(self, other: "Datum") -> bool:
        """True when both datums shift to WGS84 identically."""
        return self.shift_parameters() == other.shift_parameters()

    @classmethod
    def parse_towgs84(cls, text: str, name: str = "custom") -> "Datum":
        """
        Build a datum from comma-separated towgs84 text.

        Raises:
            ValueError: On non-numeric fields or a wrong parameter count
        """
        values = tuple(float(part) for part in text.split(","))
        return cls(name=name, towgs84=values)


# =============================================================================
# REGISTRY
# =============================================================================

_DATUM_TABLE: Final[tuple[tuple[str, str, tuple[float, ...], str], ...]] = (
    ("WGS84", "WGS84", (0.0, 0.0, 0.0), ""),
    ("GGRS87", "GRS80", (-199.87, 74.79, 246.62), "Greek Geodetic Reference System 1987"),
    ("NAD83", "GRS80", (0.0, 0.0, 0.0), "North American Datum 1983"),
    ("potsdam", "bessel", (606.0, 23.0, 413.0), "Potsdam Rauenberg 1950 DHDN"),
    ("carthage", "clrk80", (-263.0, 6.0, 431.0), "Carthage 1934 Tunisia"),
    ("hermannskogel", "bessel", (653.0, -212.0, 449.0), "Hermannskogel"),
    (
        "ire65",
        "mod_airy",
        (482.530, -130.596, 564.557, -1.042, -0.214, -0.631, 8.15),
        "Ireland 1965",
    ),
    (
        "nzgd49",
        "intl",
        (59.47, -5.04, 187.44, 0.47, -0.1, 1.024, -4.5993),
        "New Zealand Geodetic Datum 1949",
    ),
    (
        "OSGB36",
        "airy",
        (446.448, -125.157, 542.060, 0.1502, 0.2470, 0.8421, -20.4894),
        "Airy 1830",
    ),
)


@lru_cache(maxsize=1)
def _registry() -> Mapping[str, Datum]:
    return MappingProxyType(
        {
            name.upper(): Datum(name=name, ellipsoid_name=ellps, towgs84=params, description=description)
            for name, ellps, params, description in _DATUM_TABLE
        }
    )


def lookup_datum(name: str) -> Optional[Datum]:
    """Case-insensitive datum lookup; None for unknown names."""
    if not isinstance(name, str):
        return None
    return _registry().get(name.strip().upper())


def available_datums() -> tuple[str, ...]:
    """Registered datum names in table order."""
    return tuple(datum.name for datum in _registry().values())
