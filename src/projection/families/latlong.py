"""
Geographic pseudo-projection (latlong / longlat)

Planar x/y are longitude/latitude in radians, unchanged. Lets geographic
coordinate batches go through the Transformer like any projected ones.
"""

from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.errors import OutOfDomain
from src.core.math.numerical_safeguards import EPS12, HALFPI, validate_finite
from src.projection.base import Projection


class LatLong(Projection):
    """Identity mapping; x = longitude, y = latitude (radians)."""

    name = "latlong"
    title = "Lat/long (Geodetic)"
    is_latlong = True

    def forward(self, point: GeographicPoint) -> PlanarPoint:
        lam, phi = point
        self._check(lam, phi)
        return PlanarPoint(lam, phi)

    def inverse(self, point: PlanarPoint) -> GeographicPoint:
        x, y = point
        self._check(x, y)
        return GeographicPoint(x, y)

    @staticmethod
    def _check(lam: float, phi: float) -> None:
        validate_finite(lam, "longitude")
        validate_finite(phi, "latitude")
        if abs(phi) - HALFPI > EPS12:
            raise OutOfDomain(f"latitude beyond a pole: {phi!r}")

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        return lam, phi

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        return x, y


class LongLat(LatLong):
    name = "longlat"
