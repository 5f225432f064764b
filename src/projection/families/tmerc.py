"""
Transverse Mercator (tmerc) and Universal Transverse Mercator (utm)

Ellipsoidal forward/inverse use the classic meridian-arc power series
(Snyder, Map Projections - A Working Manual, eq. 8-9..8-11 and 8-18..8-22);
the spherical form is closed. UTM shares both maps and differs only in how
its parameters are derived.
"""

import math
from typing import Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, HALFPI, aasin, adjlon
from src.core.math.series import MeridianArc
from src.projection.base import Projection

# =============================================================================
# SERIES FACTORS
# =============================================================================

FC1: Final[float] = 1.0
FC2: Final[float] = 0.5
FC3: Final[float] = 0.16666666666666666666
FC4: Final[float] = 0.08333333333333333333
FC5: Final[float] = 0.05
FC6: Final[float] = 0.03333333333333333333
FC7: Final[float] = 0.02380952380952380952
FC8: Final[float] = 0.01785714285714285714

# =============================================================================
# UTM CONVENTION
# =============================================================================

UTM_SCALE_FACTOR: Final[float] = 0.9996
UTM_FALSE_EASTING: Final[float] = 500000.0
UTM_FALSE_NORTHING_SOUTH: Final[float] = 10000000.0
UTM_ZONE_COUNT: Final[int] = 60
UTM_ZONE_WIDTH_DEG: Final[float] = 6.0


class TransverseMercator(Projection):
    """Transverse Mercator, ellipsoidal series or spherical closed form."""

    name = "tmerc"
    title = "Transverse Mercator"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        self._apply_convention(params)

        if self.es:
            self.arc = MeridianArc(self.es)
            self.ml0 = self.arc.distance(self.phi0)
            self.esp = self.es / self.one_es
        else:
            self.arc = None
            self.esp = self.k0
            self.ml0 = 0.5 * self.esp

    def _apply_convention(self, params: ParameterSet) -> None:
        """Hook for specializations that fix parameters by convention."""

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if self.es:
            return self._e_forward(lam, phi)
        return self._s_forward(lam, phi)

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        if self.es:
            return self._e_inverse(x, y)
        return self._s_inverse(x, y)

    # -------------------------------------------------------------------------
    # Ellipsoid
    # -------------------------------------------------------------------------

    def _e_forward(self, lam: float, phi: float) -> tuple[float, float]:
        if lam < -HALFPI or lam > HALFPI:
            raise OutOfDomain(f"tmerc longitude more than 90 degrees from the central meridian: {lam!r}")

        sinphi = math.sin(phi)
        cosphi = math.cos(phi)
        t = sinphi / cosphi if abs(cosphi) > EPS10 else 0.0
        t *= t
        al = cosphi * lam
        als = al * al
        al /= math.sqrt(1.0 - self.es * sinphi * sinphi)
        n = self.esp * cosphi * cosphi

        # series evaluated innermost term first
        x_series = FC7 * als * (61.0 + t * (t * (179.0 - t) - 479.0))
        x_series = FC5 * als * (5.0 + t * (t - 18.0) + n * (14.0 - 58.0 * t) + x_series)
        x_series = FC1 + FC3 * als * (1.0 - t + n + x_series)
        x = self.k0 * al * x_series

        y_series = FC8 * als * (1385.0 + t * (t * (543.0 - t) - 3111.0))
        y_series = FC6 * als * (61.0 + t * (t - 58.0) + n * (270.0 - 330.0 * t) + y_series)
        y_series = 1.0 + FC4 * als * (5.0 - t + n * (9.0 + 4.0 * n) + y_series)
        arc = self.arc.distance(phi, sinphi, cosphi)
        y = self.k0 * (arc - self.ml0 + sinphi * al * lam * FC2 * y_series)
        return x, y

    def _e_inverse(self, x: float, y: float) -> tuple[float, float]:
        phi = self.arc.latitude(self.ml0 + y / self.k0)
        if abs(phi) >= HALFPI:
            return 0.0, math.copysign(HALFPI, y)

        sinphi = math.sin(phi)
        cosphi = math.cos(phi)
        t = sinphi / cosphi if abs(cosphi) > EPS10 else 0.0
        n = self.esp * cosphi * cosphi
        con = 1.0 - self.es * sinphi * sinphi
        d = x * math.sqrt(con) / self.k0
        con *= t
        t *= t
        ds = d * d

        # footpoint latitude correction
        phi_series = ds * FC8 * (1385.0 + t * (3633.0 + t * (4095.0 + 1574.0 * t)))
        phi_series = ds * FC6 * (61.0 + t * (90.0 - 252.0 * n + 45.0 * t) + 46.0 * n - phi_series)
        phi_series = 1.0 - ds * FC4 * (5.0 + t * (3.0 - 9.0 * n) + n * (1.0 - 4.0 * n) - phi_series)
        phi -= (con * ds / self.one_es) * FC2 * phi_series

        lam_series = ds * FC7 * (61.0 + t * (662.0 + t * (1320.0 + 720.0 * t)))
        lam_series = ds * FC5 * (5.0 + t * (28.0 + 24.0 * t + 8.0 * n) + 6.0 * n - lam_series)
        lam_series = FC1 - ds * FC3 * (1.0 + 2.0 * t + n - lam_series)
        lam = d * lam_series / cosphi
        return lam, phi

    # -------------------------------------------------------------------------
    # Sphere
    # -------------------------------------------------------------------------

    def _s_forward(self, lam: float, phi: float) -> tuple[float, float]:
        cosphi = math.cos(phi)
        b = cosphi * math.sin(lam)
        if abs(abs(b) - 1.0) <= EPS10:
            raise OutOfDomain("tmerc point on the projection's singular meridian")

        x = self.ml0 * math.log((1.0 + b) / (1.0 - b))
        y = cosphi * math.cos(lam) / math.sqrt(1.0 - b * b)
        if abs(y) >= 1.0:
            if abs(y) - 1.0 > EPS10:
                raise OutOfDomain("tmerc spherical argument out of range")
            y = 0.0
        else:
            y = math.acos(y)
        if phi < 0.0:
            y = -y
        return x, self.esp * (y - self.phi0)

    def _s_inverse(self, x: float, y: float) -> tuple[float, float]:
        h = math.exp(x / self.esp)
        g = 0.5 * (h - 1.0 / h)
        d = self.phi0 + y / self.esp
        h = math.cos(d)
        phi = aasin(math.sqrt((1.0 - h * h) / (1.0 + g * g)))
        if d < 0.0:
            phi = -phi
        lam = math.atan2(g, h) if (g or h) else 0.0
        return lam, phi


class UniversalTransverseMercator(TransverseMercator):
    """
    UTM: Transverse Mercator with k0 = 0.9996, x0 = 500 km, y0 = 10000 km in
    the south, and the central meridian of a 6-degree zone.

    The zone comes from `zone` (1..60) or, when absent, from `lon_0`; a
    longitude on a zone boundary belongs to the western zone.
    """

    name = "utm"
    title = "Universal Transverse Mercator (UTM)"

    def _apply_convention(self, params: ParameterSet) -> None:
        if self.es == 0.0:
            raise InvalidParameterCombination("utm requires an ellipsoid, not a sphere")

        self.south = params.boolean("south")
        self.x0 = UTM_FALSE_EASTING
        self.y0 = UTM_FALSE_NORTHING_SOUTH if self.south else 0.0

        if params.contains("zone"):
            zone = params.integer("zone")
            if not 1 <= zone <= UTM_ZONE_COUNT:
                raise InvalidParameterCombination(f"utm zone must be 1..{UTM_ZONE_COUNT}, got {zone}")
        else:
            zone = self.zone_for_longitude(self.lam0)

        self.zone = zone
        self.lam0 = self.central_meridian(zone)
        self.phi0 = 0.0
        self.k0 = UTM_SCALE_FACTOR

    @staticmethod
    def zone_for_longitude(lam: float) -> int:
        """
        Zone number (1..60) containing a longitude in radians.

        Examples:
            >>> UniversalTransverseMercator.zone_for_longitude(0.0)
            30
            >>> UniversalTransverseMercator.zone_for_longitude(math.radians(-177))
            1
        """
        # EPS10 absorbs radian round-off so boundary meridians stay in the western zone
        zone = math.ceil((math.degrees(adjlon(lam)) + 180.0) / UTM_ZONE_WIDTH_DEG - EPS10)
        return min(max(zone, 1), UTM_ZONE_COUNT)

    @staticmethod
    def central_meridian(zone: int) -> float:
        """Central meridian of a zone in radians."""
        return (zone - 0.5) * math.pi / 30.0 - math.pi

    def description(self) -> str:
        hemisphere = "S" if self.south else "N"
        return f"{super().description()}, zone {self.zone}{hemisphere}"
