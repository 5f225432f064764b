"""
Azimuthal Equidistant (aeqd)

Distances and azimuths from the centre point are preserved. Four aspects:
north pole, south pole, equatorial and oblique.

- sphere: closed-form great-circle distance and azimuth
- ellipsoid, polar: meridian arc from the pole
- ellipsoid, equatorial/oblique: geodesic inverse (forward) and direct
  (inverse) problems
- `guam`: the Guam elliptical approximation (Snyder eq. 25-17..25-18)
"""

import math
from enum import Enum
from typing import Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import OutOfDomain
from src.core.math.geodesic import geodesic_direct, geodesic_inverse
from src.core.math.numerical_safeguards import EPS10, HALFPI, aasin
from src.core.math.series import MeridianArc
from src.projection.base import Projection

# |cos c| within this of 1 means the point is the centre or its antipode
ANTIPODE_TOL: Final[float] = 1e-14

# Fixed number of refinement passes in the Guam inverse
GUAM_INVERSE_PASSES: Final[int] = 3


class Aspect(str, Enum):
    """Position of the projection centre."""

    NORTH_POLE = "north_pole"
    SOUTH_POLE = "south_pole"
    EQUATORIAL = "equatorial"
    OBLIQUE = "oblique"


def aspect_for_latitude(phi0: float) -> Aspect:
    """Aspect of an azimuthal projection centred at latitude phi0."""
    if abs(abs(phi0) - HALFPI) < EPS10:
        return Aspect.SOUTH_POLE if phi0 < 0.0 else Aspect.NORTH_POLE
    if abs(phi0) < EPS10:
        return Aspect.EQUATORIAL
    return Aspect.OBLIQUE


class AzimuthalEquidistant(Projection):
    """Azimuthal Equidistant, centred at (lon_0, lat_0)."""

    name = "aeqd"
    title = "Azimuthal Equidistant"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        self.aspect = aspect_for_latitude(self.phi0)
        if self.aspect is Aspect.NORTH_POLE:
            self.sinph0, self.cosph0 = 1.0, 0.0
        elif self.aspect is Aspect.SOUTH_POLE:
            self.sinph0, self.cosph0 = -1.0, 0.0
        elif self.aspect is Aspect.EQUATORIAL:
            self.sinph0, self.cosph0 = 0.0, 1.0
        else:
            self.sinph0, self.cosph0 = math.sin(self.phi0), math.cos(self.phi0)

        self.guam = params.boolean("guam") and self.es != 0.0
        self.arc = MeridianArc(self.es) if self.es else None
        # flattening of the unit ellipsoid for the geodesic solver
        self.f = 1.0 - math.sqrt(self.one_es)

        if self.guam:
            self.m1 = self.arc.distance(self.phi0, self.sinph0, self.cosph0)
        elif self.aspect is Aspect.NORTH_POLE and self.arc:
            self.mp = self.arc.distance(HALFPI, 1.0, 0.0)
        elif self.aspect is Aspect.SOUTH_POLE and self.arc:
            self.mp = self.arc.distance(-HALFPI, -1.0, 0.0)

    def description(self) -> str:
        suffix = ", Guam approximation" if self.guam else f", {self.aspect.value} aspect"
        return super().description() + suffix

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if self.guam:
            return self._guam_forward(lam, phi)
        if self.es:
            return self._e_forward(lam, phi)
        return self._s_forward(lam, phi)

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        if self.guam:
            return self._guam_inverse(x, y)
        if self.es:
            return self._e_inverse(x, y)
        return self._s_inverse(x, y)

    # -------------------------------------------------------------------------
    # Sphere
    # -------------------------------------------------------------------------

    def _s_forward(self, lam: float, phi: float) -> tuple[float, float]:
        sinphi = math.sin(phi)
        cosphi = math.cos(phi)
        coslam = math.cos(lam)

        if self.aspect in (Aspect.EQUATORIAL, Aspect.OBLIQUE):
            if self.aspect is Aspect.EQUATORIAL:
                cosc = cosphi * coslam
            else:
                cosc = self.sinph0 * sinphi + self.cosph0 * cosphi * coslam
            if abs(abs(cosc) - 1.0) < ANTIPODE_TOL:
                if cosc < 0.0:
                    raise OutOfDomain("aeqd: the antipode of the centre has no unique image")
                return 0.0, 0.0
            c = math.acos(cosc)
            k = c / math.sin(c)
            x = k * cosphi * math.sin(lam)
            if self.aspect is Aspect.EQUATORIAL:
                y = k * sinphi
            else:
                y = k * (self.cosph0 * sinphi - self.sinph0 * cosphi * coslam)
            return x, y

        if self.aspect is Aspect.NORTH_POLE:
            phi = -phi
            coslam = -coslam
        if abs(phi - HALFPI) < EPS10:
            raise OutOfDomain("aeqd: the opposite pole has no unique image")
        rho = HALFPI + phi
        return rho * math.sin(lam), rho * coslam

    def _s_inverse(self, x: float, y: float) -> tuple[float, float]:
        c_rh = math.hypot(x, y)
        if c_rh > math.pi:
            if c_rh - EPS10 > math.pi:
                raise OutOfDomain("aeqd: point beyond the antipode circle")
            c_rh = math.pi
        elif c_rh < EPS10:
            return 0.0, self.phi0

        if self.aspect is Aspect.NORTH_POLE:
            return math.atan2(x, -y), HALFPI - c_rh
        if self.aspect is Aspect.SOUTH_POLE:
            return math.atan2(x, y), c_rh - HALFPI

        sinc = math.sin(c_rh)
        cosc = math.cos(c_rh)
        if self.aspect is Aspect.EQUATORIAL:
            phi = aasin(y * sinc / c_rh)
            x *= sinc
            y = cosc * c_rh
        else:
            phi = aasin(cosc * self.sinph0 + y * sinc * self.cosph0 / c_rh)
            y = (cosc - self.sinph0 * math.sin(phi)) * c_rh
            x *= sinc * self.cosph0
        lam = 0.0 if y == 0.0 else math.atan2(x, y)
        return lam, phi

    # -------------------------------------------------------------------------
    # Ellipsoid
    # -------------------------------------------------------------------------

    def _e_forward(self, lam: float, phi: float) -> tuple[float, float]:
        if self.aspect in (Aspect.NORTH_POLE, Aspect.SOUTH_POLE):
            coslam = math.cos(lam)
            if self.aspect is Aspect.NORTH_POLE:
                coslam = -coslam
            rho = abs(self.mp - self.arc.distance(phi))
            return rho * math.sin(lam), rho * coslam

        if abs(lam) < EPS10 and abs(phi - self.phi0) < EPS10:
            return 0.0, 0.0
        line = geodesic_inverse(self.phi0, phi, lam, self.f)
        return line.distance * math.sin(line.azimuth), line.distance * math.cos(line.azimuth)

    def _e_inverse(self, x: float, y: float) -> tuple[float, float]:
        c = math.hypot(x, y)
        if c < EPS10:
            return 0.0, self.phi0

        if self.aspect in (Aspect.NORTH_POLE, Aspect.SOUTH_POLE):
            north = self.aspect is Aspect.NORTH_POLE
            phi = self.arc.latitude(self.mp - c if north else self.mp + c)
            return math.atan2(x, -y if north else y), phi

        end = geodesic_direct(self.phi0, math.atan2(x, y), c, self.f)
        return end.lam, end.phi

    # -------------------------------------------------------------------------
    # Guam
    # -------------------------------------------------------------------------

    def _guam_forward(self, lam: float, phi: float) -> tuple[float, float]:
        cosphi = math.cos(phi)
        sinphi = math.sin(phi)
        t = 1.0 / math.sqrt(1.0 - self.es * sinphi * sinphi)
        x = lam * cosphi * t
        y = self.arc.distance(phi, sinphi, cosphi) - self.m1 + 0.5 * lam * lam * cosphi * sinphi * t
        return x, y

    def _guam_inverse(self, x: float, y: float) -> tuple[float, float]:
        x2 = 0.5 * x * x
        phi = self.phi0
        t = 1.0
        for _ in range(GUAM_INVERSE_PASSES):
            t = self.e * math.sin(phi)
            t = math.sqrt(1.0 - t * t)
            phi = self.arc.latitude(self.m1 + y - x2 * math.tan(phi) * t)
        return x * t / math.cos(phi), phi
