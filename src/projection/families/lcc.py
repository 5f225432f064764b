"""
Lambert Conformal Conic (lcc), one or two standard parallels

Without lat_2 the cone is tangent at lat_1 and lat_0 defaults to lat_1. With
both parallels given, lat_0 defaults to the equator.
"""

import math
from typing import Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, FORTPI, HALFPI, validate_latitude
from src.core.math.series import msfn, phi2, tsfn
from src.projection.base import Projection


class LambertConformalConic(Projection):
    """
    Lambert Conformal Conic.

    Raises:
        InvalidParameterCombination: If lat_1 == -lat_2
    """

    name = "lcc"
    title = "Lambert Conformal Conic"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        phi1 = params.radians("lat_1")
        phi_2 = params.radians("lat_2") if params.contains("lat_2") else phi1
        if not params.contains("lat_0") and not params.contains("lat_2"):
            self.phi0 = phi1
        if abs(phi1 + phi_2) < EPS10:
            raise InvalidParameterCombination("standard parallels are opposite (or both on the equator)")
        validate_latitude(phi1, "lat_1")
        validate_latitude(phi_2, "lat_2")

        sinphi = math.sin(phi1)
        cosphi = math.cos(phi1)
        n = sinphi
        secant = abs(phi1 - phi_2) >= EPS10
        at_pole = abs(abs(self.phi0) - HALFPI) < EPS10

        if self.es:
            m1 = msfn(sinphi, cosphi, self.es)
            ml1 = tsfn(phi1, sinphi, self.e)
            if secant:
                sinphi2 = math.sin(phi_2)
                n = math.log(m1 / msfn(sinphi2, math.cos(phi_2), self.es))
                n /= math.log(ml1 / tsfn(phi_2, sinphi2, self.e))
            self.c = m1 * math.pow(ml1, -n) / n
            self.rho0 = 0.0 if at_pole else self.c * math.pow(tsfn(self.phi0, math.sin(self.phi0), self.e), n)
        else:
            if secant:
                n = math.log(cosphi / math.cos(phi_2)) / math.log(
                    math.tan(FORTPI + 0.5 * phi_2) / math.tan(FORTPI + 0.5 * phi1)
                )
            self.c = cosphi * math.pow(math.tan(FORTPI + 0.5 * phi1), n) / n
            self.rho0 = 0.0 if at_pole else self.c * math.pow(math.tan(FORTPI + 0.5 * self.phi0), -n)

        self.n = n
        self.phi1 = phi1
        self.phi2 = phi_2

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if abs(abs(phi) - HALFPI) < EPS10:
            if phi * self.n <= 0.0:
                raise OutOfDomain("lcc: the pole opposite the cone apex has no image")
            rho = 0.0
        elif self.es:
            rho = self.c * math.pow(tsfn(phi, math.sin(phi), self.e), self.n)
        else:
            rho = self.c * math.pow(math.tan(FORTPI + 0.5 * phi), -self.n)
        lam *= self.n
        return self.k0 * rho * math.sin(lam), self.k0 * (self.rho0 - rho * math.cos(lam))

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        x /= self.k0
        y = self.rho0 - y / self.k0
        rho = math.hypot(x, y)
        if rho == 0.0:
            return 0.0, math.copysign(HALFPI, self.n)
        if self.n < 0.0:
            rho, x, y = -rho, -x, -y
        if self.es:
            phi = phi2(math.pow(rho / self.c, 1.0 / self.n), self.e)
        else:
            phi = 2.0 * math.atan(math.pow(self.c / rho, 1.0 / self.n)) - HALFPI
        return math.atan2(x, y) / self.n, phi
