"""
Stereographic (stere) and Oblique Stereographic on the Gauss sphere (sterea)

stere takes its aspect from lat_0: north or south pole, equatorial or oblique.

- sphere: Snyder eq. 21-2..21-6 with the centre scale k_0
- ellipsoid, polar: rho from the isometric function t(phi); lat_ts sets the
  latitude of true scale, in which case k_0 is not used
- ellipsoid, equatorial/oblique: stereographic of the conformal latitude chi
  (Snyder eq. 21-24..21-27)

sterea is the double stereographic: latitude and longitude are first carried
onto the Gauss conformal sphere tangent at lat_0, then projected with the
spherical oblique formulas. Used by the Dutch RD and New Brunswick grids.
"""

import math
from typing import Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import DidNotConverge, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, FORTPI, HALFPI, aasin, validate_latitude
from src.core.math.series import phi2, tsfn
from src.projection.base import Projection
from src.projection.families.aeqd import Aspect, aspect_for_latitude

# Iteration cap and tolerance for the inverse Gauss sphere latitude
GAUSS_MAX_ITER: Final[int] = 20
GAUSS_TOL: Final[float] = 1e-14

POLAR_ASPECTS: Final = (Aspect.NORTH_POLE, Aspect.SOUTH_POLE)


def conformal_latitude(phi: float, sinphi: float, e: float) -> float:
    """Conformal latitude chi of geodetic latitude phi."""
    return HALFPI - 2.0 * math.atan(tsfn(phi, sinphi, e))


class Stereographic(Projection):
    """
    Stereographic, centred at (lon_0, lat_0).

    Raises:
        ValueError: If lat_ts is beyond a pole (reported by the factory as
            InvalidParameterCombination)
    """

    name = "stere"
    title = "Stereographic"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        self.aspect = aspect_for_latitude(self.phi0)
        phits = params.radians("lat_ts", HALFPI)
        validate_latitude(phits, "lat_ts")
        phits = abs(phits)
        true_scale_at_pole = abs(phits - HALFPI) < EPS10

        if self.aspect is Aspect.EQUATORIAL:
            self.sinph0, self.cosph0 = 0.0, 1.0
        else:
            self.sinph0, self.cosph0 = math.sin(self.phi0), math.cos(self.phi0)

        if self.es:
            self.sin_chi1, self.cos_chi1 = 0.0, 1.0
            if self.aspect in POLAR_ASPECTS:
                if true_scale_at_pole:
                    e = self.e
                    self.akm1 = 2.0 * self.k0 / math.sqrt(math.pow(1.0 + e, 1.0 + e) * math.pow(1.0 - e, 1.0 - e))
                else:
                    t = math.sin(phits)
                    self.akm1 = math.cos(phits) / tsfn(phits, t, self.e)
                    self.akm1 /= math.sqrt(1.0 - self.es * t * t)
            elif self.aspect is Aspect.OBLIQUE:
                chi1 = conformal_latitude(self.phi0, self.sinph0, self.e)
                self.sin_chi1, self.cos_chi1 = math.sin(chi1), math.cos(chi1)
                self.akm1 = 2.0 * self.k0 * self.cosph0 / math.sqrt(1.0 - self.es * self.sinph0 * self.sinph0)
            else:
                self.akm1 = 2.0 * self.k0
        elif self.aspect in POLAR_ASPECTS and not true_scale_at_pole:
            self.akm1 = math.cos(phits) / math.tan(FORTPI - 0.5 * phits)
        else:
            self.akm1 = 2.0 * self.k0

    def description(self) -> str:
        return super().description() + f", {self.aspect.value} aspect"

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if self.es:
            return self._e_forward(lam, phi)
        return self._s_forward(lam, phi)

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        if self.es:
            return self._e_inverse(x, y)
        return self._s_inverse(x, y)

    # -------------------------------------------------------------------------
    # Sphere
    # -------------------------------------------------------------------------

    def _s_forward(self, lam: float, phi: float) -> tuple[float, float]:
        sinlam = math.sin(lam)
        coslam = math.cos(lam)

        if self.aspect in POLAR_ASPECTS:
            if self.aspect is Aspect.NORTH_POLE:
                phi = -phi
                coslam = -coslam
            if abs(phi - HALFPI) < EPS10:
                raise OutOfDomain("stere: the pole opposite the centre has no image")
            rho = self.akm1 * math.tan(FORTPI + 0.5 * phi)
            return rho * sinlam, rho * coslam

        sinphi = math.sin(phi)
        cosphi = math.cos(phi)
        denom = 1.0 + self.sinph0 * sinphi + self.cosph0 * cosphi * coslam
        if denom <= EPS10:
            raise OutOfDomain("stere: the antipode of the centre has no image")
        k = self.akm1 / denom
        return k * cosphi * sinlam, k * (self.cosph0 * sinphi - self.sinph0 * cosphi * coslam)

    def _s_inverse(self, x: float, y: float) -> tuple[float, float]:
        rho = math.hypot(x, y)
        c = 2.0 * math.atan(rho / self.akm1)
        sinc = math.sin(c)
        cosc = math.cos(c)

        if self.aspect in POLAR_ASPECTS:
            if self.aspect is Aspect.NORTH_POLE:
                y = -y
            if rho <= EPS10:
                return 0.0, self.phi0
            phi = aasin(-cosc if self.aspect is Aspect.SOUTH_POLE else cosc)
            return math.atan2(x, y), phi

        if rho <= EPS10:
            return 0.0, self.phi0
        phi = aasin(cosc * self.sinph0 + y * sinc * self.cosph0 / rho)
        return math.atan2(x * sinc, rho * self.cosph0 * cosc - y * self.sinph0 * sinc), phi

    # -------------------------------------------------------------------------
    # Ellipsoid
    # -------------------------------------------------------------------------

    def _e_forward(self, lam: float, phi: float) -> tuple[float, float]:
        sinlam = math.sin(lam)
        coslam = math.cos(lam)
        sinphi = math.sin(phi)

        if self.aspect in POLAR_ASPECTS:
            if self.aspect is Aspect.SOUTH_POLE:
                phi, sinphi, coslam = -phi, -sinphi, -coslam
            if abs(phi + HALFPI) < EPS10:
                raise OutOfDomain("stere: the pole opposite the centre has no image")
            rho = self.akm1 * tsfn(phi, sinphi, self.e)
            return rho * sinlam, -rho * coslam

        chi = conformal_latitude(phi, sinphi, self.e)
        sinchi = math.sin(chi)
        coschi = math.cos(chi)
        denom = self.cos_chi1 * (1.0 + self.sin_chi1 * sinchi + self.cos_chi1 * coschi * coslam)
        if denom <= EPS10:
            raise OutOfDomain("stere: the antipode of the centre has no image")
        k = self.akm1 / denom
        return k * coschi * sinlam, k * (self.cos_chi1 * sinchi - self.sin_chi1 * coschi * coslam)

    def _e_inverse(self, x: float, y: float) -> tuple[float, float]:
        rho = math.hypot(x, y)

        if self.aspect in POLAR_ASPECTS:
            if self.aspect is Aspect.NORTH_POLE:
                y = -y
            phi = phi2(rho / self.akm1, self.e)
            if self.aspect is Aspect.SOUTH_POLE:
                phi = -phi
            lam = 0.0 if x == 0.0 and y == 0.0 else math.atan2(x, y)
            return lam, phi

        c = 2.0 * math.atan2(rho * self.cos_chi1, self.akm1)
        sinc = math.sin(c)
        cosc = math.cos(c)
        if rho <= EPS10:
            chi = math.asin(self.sin_chi1)
            lam = 0.0
        else:
            chi = aasin(cosc * self.sin_chi1 + y * sinc * self.cos_chi1 / rho)
            lam = math.atan2(x * sinc, rho * self.cos_chi1 * cosc - y * self.sin_chi1 * sinc)
        return lam, phi2(math.tan(0.5 * (HALFPI - chi)), self.e)


# =============================================================================
# GAUSS CONFORMAL SPHERE
# =============================================================================


def _srat(esinp: float, exponent: float) -> float:
    return math.pow((1.0 - esinp) / (1.0 + esinp), exponent)


class GaussSphere:
    """
    Conformal mapping of the ellipsoid onto a sphere tangent at phi0.

    Attributes:
        radius: Sphere radius in units of the semi-major axis
        chi0: Latitude of phi0 on the sphere
    """

    def __init__(self, e: float, phi0: float):
        es = e * e
        sphi = math.sin(phi0)
        cphi = math.cos(phi0) ** 2
        self.e = e
        self.radius = math.sqrt(1.0 - es) / (1.0 - es * sphi * sphi)
        self.c = math.sqrt(1.0 + es * cphi * cphi / (1.0 - es))
        self.chi0 = math.asin(sphi / self.c)
        self.ratexp = 0.5 * self.c * e
        self.k = math.tan(0.5 * self.chi0 + FORTPI) / (
            math.pow(math.tan(0.5 * phi0 + FORTPI), self.c) * _srat(e * sphi, self.ratexp)
        )

    def to_sphere(self, lam: float, phi: float) -> tuple[float, float]:
        t = self.k * math.pow(math.tan(0.5 * phi + FORTPI), self.c) * _srat(self.e * math.sin(phi), self.ratexp)
        return self.c * lam, 2.0 * math.atan(t) - HALFPI

    def from_sphere(self, lam: float, chi: float) -> tuple[float, float]:
        """
        Raises:
            DidNotConverge: If the latitude iteration does not settle
        """
        num = math.pow(math.tan(0.5 * chi + FORTPI) / self.k, 1.0 / self.c)
        phi = chi
        for _ in range(GAUSS_MAX_ITER):
            nxt = 2.0 * math.atan(num * _srat(self.e * math.sin(phi), -0.5 * self.e)) - HALFPI
            if abs(nxt - phi) < GAUSS_TOL:
                return lam / self.c, nxt
            phi = nxt
        raise DidNotConverge(
            f"Gauss sphere latitude did not converge after {GAUSS_MAX_ITER} iterations",
            iterations=GAUSS_MAX_ITER,
        )


class ObliqueStereographic(Projection):
    """Double stereographic through the Gauss conformal sphere."""

    name = "sterea"
    title = "Oblique Stereographic Alternative"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        self.gauss = GaussSphere(self.e, self.phi0)
        self.sinc0 = math.sin(self.gauss.chi0)
        self.cosc0 = math.cos(self.gauss.chi0)
        self.r2 = 2.0 * self.gauss.radius

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        lam, chi = self.gauss.to_sphere(lam, phi)
        sinc = math.sin(chi)
        cosc = math.cos(chi)
        cosl = math.cos(lam)
        denom = 1.0 + self.sinc0 * sinc + self.cosc0 * cosc * cosl
        if denom <= EPS10:
            raise OutOfDomain("sterea: the antipode of the centre has no image")
        k = self.k0 * self.r2 / denom
        return k * cosc * math.sin(lam), k * (self.cosc0 * sinc - self.sinc0 * cosc * cosl)

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        x /= self.k0
        y /= self.k0
        rho = math.hypot(x, y)
        if rho <= EPS10:
            return self.gauss.from_sphere(0.0, self.gauss.chi0)
        c = 2.0 * math.atan2(rho, self.r2)
        sinc = math.sin(c)
        cosc = math.cos(c)
        chi = aasin(cosc * self.sinc0 + y * sinc * self.cosc0 / rho)
        lam = math.atan2(x * sinc, rho * self.cosc0 * cosc - y * self.sinc0 * sinc)
        return self.gauss.from_sphere(lam, chi)
