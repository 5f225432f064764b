"""Equidistant Cylindrical / Plate Carree (eqc), spherical only."""

import math
from typing import Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination
from src.core.math.numerical_safeguards import EPS10, HALFPI
from src.projection.base import Projection


class EquidistantCylindrical(Projection):
    name = "eqc"
    title = "Equidistant Cylindrical (Plate Carree)"
    spherical_only = True

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        super().__init__(params, ellipsoid, datum)
        phi_ts = params.radians("lat_ts")
        if abs(phi_ts) >= HALFPI - EPS10:
            raise InvalidParameterCombination("lat_ts must be strictly between -90 and 90 degrees")
        self.rc = math.cos(phi_ts)

    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        return self.rc * lam, phi - self.phi0

    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        return x / self.rc, y + self.phi0
