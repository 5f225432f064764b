"""
Mercator (merc), ellipsoidal and spherical

The true-scale latitude `lat_ts` replaces k_0 when given. Poles have no
image.
"""

import math
from typing import Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, FORTPI, HALFPI
from src.core.math.series import msfn, phi2, tsfn
from src.projection.base import Projection


class Mercator(Projection):
    """Normal-aspect Mercator."""

    name = "merc"
    title = "Mercator"

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        if params.contains("lat_ts"):
            phits = abs(params.radians("lat_ts"))
            if phits >= HALFPI:
                raise InvalidParameterCombination("lat_ts must be below 90 degrees")
            if self.es:
                self.k0 = msfn(math.sin(phits), math.cos(phits), self.es)
            else:
                self.k0 = math.cos(phits)

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        if abs(abs(phi) - HALFPI) <= EPS10:
            raise OutOfDomain("merc: the poles have no image")
        if self.es:
            y = -self.k0 * math.log(tsfn(phi, math.sin(phi), self.e))
        else:
            y = self.k0 * math.log(math.tan(FORTPI + 0.5 * phi))
        return self.k0 * lam, y

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        if self.es:
            phi = phi2(math.exp(-y / self.k0), self.e)
        else:
            phi = HALFPI - 2.0 * math.atan(math.exp(-y / self.k0))
        return x / self.k0, phi
