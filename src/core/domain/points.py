"""
Coordinate value types

- GeographicPoint (LP): longitude lambda and latitude phi, radians
- PlanarPoint (XY): projected easting/northing, metres or the projection's unit

Plain immutable NamedTuples: they unpack as (lam, phi) / (x, y) and compare
by value.
"""

import math
import re
from typing import NamedTuple

from src.core.errors import AngleParseError
from src.core.math.angles import parse_dms

_SEPARATOR = re.compile(r"[\s,]+")


class GeographicPoint(NamedTuple):
    """Longitude (lam) and latitude (phi) in radians."""

    lam: float
    phi: float

    @classmethod
    def parse(cls, text: str) -> "GeographicPoint":
        """
        Parse two DMS tokens separated by whitespace or a comma.

        The first token is the longitude, the second the latitude. No range
        checking is done here.

        Raises:
            AngleParseError: If there are not exactly two tokens or either
                token is malformed

        Examples:
            >>> p = GeographicPoint.parse("91 20")
            >>> round(math.degrees(p.lam), 9), round(math.degrees(p.phi), 9)
            (91.0, 20.0)
        """
        tokens = [token for token in _SEPARATOR.split(text.strip()) if token]
        if len(tokens) != 2:
            raise AngleParseError(f"expected two angles, got {len(tokens)} in {text!r}")
        return cls(parse_dms(tokens[0]), parse_dms(tokens[1]))

    @classmethod
    def from_degrees(cls, lon: float, lat: float) -> "GeographicPoint":
        return cls(math.radians(lon), math.radians(lat))

    def to_degrees(self) -> tuple[float, float]:
        """(longitude, latitude) in decimal degrees."""
        return math.degrees(self.lam), math.degrees(self.phi)


class PlanarPoint(NamedTuple):
    """Projected coordinates."""

    x: float
    y: float
