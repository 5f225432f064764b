"""
Projection: abstract contract shared by every projection family

Generic pipeline (forward):
    1. reject non-finite input, |phi| > pi/2 and |lam| > 10 rad
    2. lam -= lon_0, wrapped into [-pi, pi] unless `over`
    3. family `_forward` on the unit ellipsoid (semi-major axis 1)
    4. scale by `a`, add false easting/northing, convert to output units

Inverse mirrors the pipeline. Families implement only `_forward` and
`_inverse`; instances are never modified after construction, so forward and
inverse are safe to call concurrently.
"""

import math
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Final, Optional

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.parameters import ParameterSet
from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.domain.units import lookup_unit, validate_unit_factor
from src.core.errors import DidNotConverge, InvalidParameterCombination, OutOfDomain
from src.core.math.numerical_safeguards import EPS10, EPS12, HALFPI, adjlon, clamp

# =============================================================================
# DOMAIN LIMITS
# =============================================================================

# Longitudes beyond this magnitude (radians) are rejected before wrapping
MAX_INPUT_LONGITUDE: Final[float] = 10.0

# =============================================================================
# NEWTON SOLVER PARAMETERS
# =============================================================================

NEWTON_MAX_ITER: Final[int] = 50
NEWTON_TOL: Final[float] = 1e-12
NEWTON_STEP: Final[float] = 1e-7
NEWTON_MAX_CORRECTION: Final[float] = 0.5


class Projection(ABC):
    """
    Map between geographic coordinates (radians) and a projected plane.

    Subclasses set `name` and `title` and implement `_forward`/`_inverse`
    on the unit ellipsoid. Common parameters read here:
    lon_0, lat_0, x_0, y_0, k_0 (or k0, or k), units / to_meter, over.

    Attributes:
        ellipsoid: Ellipsoid the projection is built on
        datum: Optional datum (used by the Transformer for datum shifts)
        a, es, e, one_es: Ellipsoid constants (es is 0 for sphere-only families)
        lam0, phi0: Projection centre (radians)
        x0, y0: False easting/northing (metres)
        k0: Scale factor
        to_meter, fr_meter: Output unit factors
    """

    name: ClassVar[str] = ""
    title: ClassVar[str] = ""
    spherical_only: ClassVar[bool] = False
    has_inverse: ClassVar[bool] = True
    is_latlong: ClassVar[bool] = False

    def __init__(self, params: ParameterSet, ellipsoid: Ellipsoid, datum: Optional[Datum] = None):
        self.ellipsoid = ellipsoid
        self.datum = datum

        self.a = ellipsoid.a
        self.es = 0.0 if self.spherical_only else ellipsoid.es
        self.e = math.sqrt(self.es)
        self.one_es = 1.0 - self.es

        self.lam0 = params.radians("lon_0")
        self.phi0 = params.radians("lat_0")
        if abs(self.phi0) > HALFPI + EPS10:
            raise InvalidParameterCombination(f"lat_0 outside [-90, 90]: {math.degrees(self.phi0):.6f}")

        self.x0 = params.float("x_0")
        self.y0 = params.float("y_0")

        # k_0 wins over k0, which wins over k
        scale_key = next((key for key in ("k_0", "k0") if params.contains(key)), "k")
        self.k0 = params.float(scale_key, 1.0)
        if self.k0 <= 0.0:
            raise InvalidParameterCombination(f"scale factor must be > 0, got {self.k0}")

        self.to_meter = self._resolve_unit(params)
        self.fr_meter = 1.0 / self.to_meter
        self.over = params.boolean("over")

    @staticmethod
    def _resolve_unit(params: ParameterSet) -> float:
        if params.contains("to_meter"):
            text = params.string("to_meter") or ""
            numerator, _, denominator = text.partition("/")
            try:
                factor = float(numerator)
                if denominator:
                    factor /= float(denominator)
                return validate_unit_factor(factor)
            except (ValueError, ZeroDivisionError) as exc:
                raise InvalidParameterCombination(f"invalid to_meter: {text!r}") from exc
        if params.contains("units"):
            code = params.string("units") or ""
            unit = lookup_unit(code)
            if unit is None:
                raise InvalidParameterCombination(f"unknown units: {code!r}")
            return unit.to_meter
        return 1.0

    # -------------------------------------------------------------------------
    # Public contract
    # -------------------------------------------------------------------------

    @property
    def is_sphere(self) -> bool:
        return self.es == 0.0

    def forward(self, point: GeographicPoint) -> PlanarPoint:
        """
        Project a geographic point.

        Args:
            point: (lam, phi) in radians

        Returns:
            PlanarPoint in the projection's units

        Raises:
            OutOfDomain: If the point cannot be represented
            DidNotConverge: If a family solver fails to settle
        """
        lam, phi = point
        if not (math.isfinite(lam) and math.isfinite(phi)):
            raise OutOfDomain(f"non-finite geographic input: {point!r}")

        t = abs(phi) - HALFPI
        if t > EPS12 or abs(lam) > MAX_INPUT_LONGITUDE:
            raise OutOfDomain(f"geographic input out of range: {point!r}")
        if abs(t) <= EPS12:
            phi = math.copysign(HALFPI, phi)

        lam -= self.lam0
        if not self.over:
            lam = adjlon(lam)

        x, y = self._forward(lam, phi)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise OutOfDomain(f"{self.name} produced a non-finite result for {point!r}")
        return PlanarPoint(
            self.fr_meter * (self.a * x + self.x0),
            self.fr_meter * (self.a * y + self.y0),
        )

    def inverse(self, point: PlanarPoint) -> GeographicPoint:
        """
        Unproject a planar point.

        Raises:
            OutOfDomain: If the point lies outside the projected region
            DidNotConverge: If an iterative inverse exceeds its cap
        """
        x, y = point
        if not (math.isfinite(x) and math.isfinite(y)):
            raise OutOfDomain(f"non-finite planar input: {point!r}")

        x = (x * self.to_meter - self.x0) / self.a
        y = (y * self.to_meter - self.y0) / self.a

        lam, phi = self._inverse(x, y)
        if not (math.isfinite(lam) and math.isfinite(phi)):
            raise OutOfDomain(f"{self.name} produced a non-finite result for {point!r}")

        lam += self.lam0
        if not self.over:
            lam = adjlon(lam)
        return GeographicPoint(lam, phi)

    def description(self) -> str:
        """
        Human-readable label, never empty.

        The text is fixed English built from the family title, the family
        name and the ellipsoid description. It does not vary with the
        process locale.
        """
        label = self.title or self.name or type(self).__name__
        return f"{label} [{self.name}] on {self.ellipsoid.description or self.ellipsoid.name}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ellps={self.ellipsoid.name!r}, lon_0={math.degrees(self.lam0):g})"

    # -------------------------------------------------------------------------
    # Family hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def _forward(self, lam: float, phi: float) -> tuple[float, float]:
        """Forward map on the unit ellipsoid; lam is relative to lon_0."""

    @abstractmethod
    def _inverse(self, x: float, y: float) -> tuple[float, float]:
        """Inverse map on the unit ellipsoid; returned lam is relative to lon_0."""

    # -------------------------------------------------------------------------
    # Iterative inverse
    # -------------------------------------------------------------------------

    def _solve_inverse(
        self,
        x: float,
        y: float,
        guess: tuple[float, float],
        evaluate: Optional[Callable[[float, float], tuple[float, float]]] = None,
        max_iterations: int = NEWTON_MAX_ITER,
        tolerance: float = NEWTON_TOL,
    ) -> tuple[float, float]:
        """
        Invert `evaluate` (default: _forward) by damped Newton iteration.

        The Jacobian is estimated by forward differences; each correction is
        clamped to NEWTON_MAX_CORRECTION radians and the latitude is kept
        within [-pi/2, pi/2].

        Raises:
            DidNotConverge: If the residual stays above tolerance after
                max_iterations, or the Jacobian becomes singular
        """
        evaluate = evaluate or self._forward
        lam, phi = guess
        for _ in range(max_iterations):
            fx, fy = evaluate(lam, phi)
            rx, ry = fx - x, fy - y
            if math.hypot(rx, ry) <= tolerance:
                return lam, phi

            h_phi = -NEWTON_STEP if phi > 0.0 else NEWTON_STEP
            x_lam, y_lam = evaluate(lam + NEWTON_STEP, phi)
            x_phi, y_phi = evaluate(lam, phi + h_phi)
            j11 = (x_lam - fx) / NEWTON_STEP
            j21 = (y_lam - fy) / NEWTON_STEP
            j12 = (x_phi - fx) / h_phi
            j22 = (y_phi - fy) / h_phi

            det = j11 * j22 - j12 * j21
            if det == 0.0 or not math.isfinite(det):
                raise DidNotConverge(f"{self.name} inverse hit a singular Jacobian")

            d_lam = clamp((j22 * rx - j12 * ry) / det, -NEWTON_MAX_CORRECTION, NEWTON_MAX_CORRECTION)
            d_phi = clamp((j11 * ry - j21 * rx) / det, -NEWTON_MAX_CORRECTION, NEWTON_MAX_CORRECTION)
            lam -= d_lam
            phi = clamp(phi - d_phi, -HALFPI, HALFPI)

        raise DidNotConverge(
            f"{self.name} inverse did not converge after {max_iterations} iterations",
            iterations=max_iterations,
        )
