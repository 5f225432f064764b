"""
Airy minimum-error azimuthal projection (airy), spherical only

Forward follows Snyder eq. 24-19..24-23 with the balancing parameter lat_b
(default 0). By default only the hemisphere centred on (lon_0, lat_0) is
projected; `no_cut` lifts that restriction. There is no closed-form inverse;
it is solved with the damped Newton iteration of the base class.
"""

import math
from typing import Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import OutOfDomain
from src.core.math.numerical_safeguards import EPS10, HALFPI, aasin
from src.projection.base import Projection
from src.projection.families.aeqd import Aspect, aspect_for_latitude

AIRY_MAX_ITER: Final[int] = 50
AIRY_TOL: Final[float] = 1e-12


class Airy(Projection):
    """Airy minimum-error azimuthal."""

    name = "airy"
    title = "Airy"
    spherical_only = True

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        self.no_cut = params.boolean("no_cut")

        beta = 0.5 * (HALFPI - params.radians("lat_b"))
        if abs(beta) < EPS10:
            self.cb = -0.5
        else:
            cb = 1.0 / math.tan(beta)
            self.cb = cb * cb * math.log(math.cos(beta))

        self.aspect = aspect_for_latitude(self.phi0)
        self.p_halfpi = -HALFPI if self.aspect is Aspect.SOUTH_POLE else HALFPI
        self.sinph0 = math.sin(self.phi0)
        self.cosph0 = math.cos(self.phi0)

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        return self._project(lam, phi, restrict=not self.no_cut)

    def _project(self, lam: float, phi: float, restrict: bool) -> tuple[float, float]:
        sinlam = math.sin(lam)
        coslam = math.cos(lam)

        if self.aspect in (Aspect.EQUATORIAL, Aspect.OBLIQUE):
            sinphi = math.sin(phi)
            cosphi = math.cos(phi)
            cosz = cosphi * coslam
            if self.aspect is Aspect.OBLIQUE:
                cosz = self.sinph0 * sinphi + self.cosph0 * cosz
            if restrict and cosz < -EPS10:
                raise OutOfDomain("airy: point more than 90 degrees from the centre (set no_cut to allow)")
            s = 1.0 - cosz
            if abs(s) > EPS10:
                t = 0.5 * (1.0 + cosz)
                if t <= 0.0:
                    raise OutOfDomain("airy: the antipode of the centre has no image")
                krho = -math.log(t) / s - self.cb / t
            else:
                krho = 0.5 - self.cb
            x = krho * cosphi * sinlam
            if self.aspect is Aspect.OBLIQUE:
                y = krho * (self.cosph0 * sinphi - self.sinph0 * cosphi * coslam)
            else:
                y = krho * sinphi
            return x, y

        z = abs(self.p_halfpi - phi)
        if restrict and z - EPS10 > HALFPI:
            raise OutOfDomain("airy: point beyond the equator of a polar aspect (set no_cut to allow)")
        half = 0.5 * z
        if half <= EPS10:
            return 0.0, 0.0
        t = math.tan(half)
        krho = -2.0 * (math.log(math.cos(half)) / t + t * self.cb)
        x = krho * sinlam
        y = krho * coslam
        if self.aspect is Aspect.NORTH_POLE:
            y = -y
        return x, y

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        rho = math.hypot(x, y)
        if rho < EPS10:
            return 0.0, self.phi0
        guess = self._initial_guess(x, y, rho)
        return self._solve_inverse(
            x,
            y,
            guess,
            evaluate=lambda lam, phi: self._project(lam, phi, restrict=False),
            max_iterations=AIRY_MAX_ITER,
            tolerance=AIRY_TOL,
        )

    def _initial_guess(self, x: float, y: float, rho: float) -> tuple[float, float]:
        """Azimuthal guess: angular distance from the scale at the centre."""
        z = min(rho / (0.5 - self.cb), math.pi - EPS10)
        if self.aspect is Aspect.NORTH_POLE:
            return math.atan2(x, -y), HALFPI - z
        if self.aspect is Aspect.SOUTH_POLE:
            return math.atan2(x, y), z - HALFPI
        sinz = math.sin(z)
        cosz = math.cos(z)
        phi = aasin(cosz * self.sinph0 + y * sinz * self.cosph0 / rho)
        lam = math.atan2(x * sinz, rho * self.cosph0 * cosz - y * self.sinph0 * sinz)
        return lam, phi
