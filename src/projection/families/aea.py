"""
Albers Equal-Area Conic (aea) and Lambert Equal-Area Conic (leac)

Conic constants n, C and rho0 are derived from the two standard parallels
(Snyder eq. 14-3..14-6). Lambert Equal-Area Conic is Albers with one
standard parallel at a pole.
"""

import math
from typing import Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, HALFPI, validate_latitude
from src.core.math.series import authalic_phi, msfn, qsfn
from src.projection.base import Projection

# |ec - |q|| below this means the inverse lands on a pole
POLE_TOL: Final[float] = 1e-7


class AlbersEqualArea(Projection):
    """
    Albers Equal-Area Conic.

    Parameters: lat_1, lat_2 (standard parallels), lat_0, lon_0.

    Raises:
        InvalidParameterCombination: If lat_1 == -lat_2 (the cone
            degenerates)
        ValueError: If a standard parallel lies beyond a pole
    """

    name = "aea"
    title = "Albers Equal Area"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        phi1, phi2 = self._standard_parallels(params)
        self.phi1 = phi1
        self.phi2 = phi2
        self._setup(phi1, phi2)

    def _standard_parallels(self, params: ParameterSet) -> tuple[float, float]:
        return params.radians("lat_1"), params.radians("lat_2")

    def _setup(self, phi1: float, phi2: float) -> None:
        if abs(phi1 + phi2) < EPS10:
            raise InvalidParameterCombination(
                f"standard parallels are opposite: lat_1={math.degrees(phi1):g}, lat_2={math.degrees(phi2):g}"
            )
        validate_latitude(phi1, "standard parallel")
        validate_latitude(phi2, "standard parallel")

        sinphi = math.sin(phi1)
        cosphi = math.cos(phi1)
        n = sinphi
        secant = abs(phi1 - phi2) >= EPS10

        if self.es:
            m1 = msfn(sinphi, cosphi, self.es)
            ml1 = qsfn(sinphi, self.e, self.one_es)
            if secant:
                sinphi2 = math.sin(phi2)
                m2 = msfn(sinphi2, math.cos(phi2), self.es)
                ml2 = qsfn(sinphi2, self.e, self.one_es)
                n = (m1 * m1 - m2 * m2) / (ml2 - ml1)
            if n == 0.0:
                raise InvalidParameterCombination("standard parallels give a degenerate cone")
            self.ec = 1.0 - 0.5 * self.one_es * math.log((1.0 - self.e) / (1.0 + self.e)) / self.e
            self.c = m1 * m1 + n * ml1
            self.dd = 1.0 / n
            self.rho0 = self.dd * math.sqrt(self.c - n * qsfn(math.sin(self.phi0), self.e, self.one_es))
        else:
            if secant:
                n = 0.5 * (n + math.sin(phi2))
            if n == 0.0:
                raise InvalidParameterCombination("standard parallels give a degenerate cone")
            self.n2 = n + n
            self.c = cosphi * cosphi + self.n2 * sinphi
            self.dd = 1.0 / n
            self.rho0 = self.dd * math.sqrt(self.c - self.n2 * math.sin(self.phi0))
        self.n = n

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if self.es:
            rho = self.c - self.n * qsfn(math.sin(phi), self.e, self.one_es)
        else:
            rho = self.c - self.n2 * math.sin(phi)
        if rho < 0.0:
            raise OutOfDomain(f"{self.name}: point outside the projected cone")
        rho = self.dd * math.sqrt(rho)
        lam *= self.n
        return rho * math.sin(lam), self.rho0 - rho * math.cos(lam)

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        y = self.rho0 - y
        rho = math.hypot(x, y)
        if rho == 0.0:
            return 0.0, math.copysign(HALFPI, self.n)

        if self.n < 0.0:
            rho, x, y = -rho, -x, -y
        phi = rho / self.dd
        if self.es:
            phi = (self.c - phi * phi) / self.n
            if abs(self.ec - abs(phi)) > POLE_TOL:
                phi = authalic_phi(phi, self.e, self.one_es)
            else:
                phi = math.copysign(HALFPI, phi)
        else:
            phi = (self.c - phi * phi) / self.n2
            phi = math.asin(phi) if abs(phi) <= 1.0 else math.copysign(HALFPI, phi)
        return math.atan2(x, y) / self.n, phi


class LambertEqualAreaConic(AlbersEqualArea):
    """
    Lambert Equal-Area Conic: Albers with lat_1 and the north pole (or the
    south pole when `south` is set) as standard parallels.
    """

    name = "leac"
    title = "Lambert Equal Area Conic"

    def _standard_parallels(self, params: ParameterSet) -> tuple[float, float]:
        pole = -HALFPI if params.boolean("south") else HALFPI
        return pole, params.radians("lat_1")
