"""
Transformer: batch conversion between two projections

For each point in a window of parallel coordinate buffers:
    source.inverse -> (optional datum shift) -> target.forward
and the planar result overwrites x[i], y[i] in place. z is only read (as
ellipsoidal height for the datum shift) and never written.

The datum shift goes through geocentric coordinates whenever either
projection carries a datum and the pair differs in datum or ellipsoid. The
towgs84 Helmert step is applied only when both sides carry a datum.

The first error aborts the batch and propagates unchanged. Buffer contents
are then indeterminate: points before the failing one are already written.
"""

import logging
from dataclasses import dataclass
from typing import MutableSequence, Optional, Sequence

from src.core.domain.datum import Datum
from src.core.domain.ellipsoid import Ellipsoid
from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.math.geocentric import Geocentric, geocentric_to_geodetic, geodetic_to_geocentric
from src.projection.base import Projection

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class TransformerConfig:
    """
    Transformer configuration.

    apply_datum_shift: convert through geocentric coordinates when either
        projection carries a datum and the two differ
    """

    apply_datum_shift: bool = True


# =============================================================================
# HELMERT SHIFT
# =============================================================================


def geocentric_to_wgs84(point: Geocentric, datum: Datum) -> Geocentric:
    """Apply a datum's towgs84 shift to a geocentric point."""
    dx, dy, dz, rx, ry, rz, m = datum.shift_parameters()
    x, y, z = point
    if not datum.is_seven_parameter:
        return Geocentric(x + dx, y + dy, z + dz)
    return Geocentric(
        m * (x - rz * y + ry * z) + dx,
        m * (rz * x + y - rx * z) + dy,
        m * (-ry * x + rx * y + z) + dz,
    )


def geocentric_from_wgs84(point: Geocentric, datum: Datum) -> Geocentric:
    """Inverse of geocentric_to_wgs84."""
    dx, dy, dz, rx, ry, rz, m = datum.shift_parameters()
    x, y, z = point
    if not datum.is_seven_parameter:
        return Geocentric(x - dx, y - dy, z - dz)
    xt = (x - dx) / m
    yt = (y - dy) / m
    zt = (z - dz) / m
    return Geocentric(
        xt + rz * yt - ry * zt,
        -rz * xt + yt + rx * zt,
        ry * xt - rx * yt + zt,
    )


# =============================================================================
# TRANSFORMER
# =============================================================================


class Transformer:
    """
    Stateless batch transformer; borrows projections and buffers per call.

    Examples:
        >>> from src.projection.factory import create_projection
        >>> utm = create_projection(["proj=utm", "ellps=WGS84"])
        >>> x, y = [10.0], [10.0]
        >>> Transformer().transform(utm, utm, 1, 0, x, y)
        >>> abs(x[0] - 10.0) < 0.01
        True
    """

    def __init__(self, config: Optional[TransformerConfig] = None):
        """
        Args:
            config: Transformer configuration (default: TransformerConfig())
        """
        self.config = config or TransformerConfig()

    def transform(
        self,
        source: Projection,
        target: Projection,
        count: int,
        offset: int,
        x: MutableSequence[float],
        y: MutableSequence[float],
        z: Optional[Sequence[float]] = None,
    ) -> None:
        """
        Convert x[offset:offset+count], y[...] from source to target in place.

        Args:
            source: Projection the input coordinates are in
            target: Projection to convert into
            count: Number of points
            offset: Index of the first point
            x, y: Coordinate buffers, overwritten in place
            z: Optional heights (metres), read for datum shifts only

        Raises:
            ValueError: Negative count/offset or a window beyond a buffer
                (checked before anything is written)
            OutOfDomain, DidNotConverge: From the first failing point
        """
        self._check_window(count, offset, x, y, z)
        shift = self._needs_datum_shift(source, target)
        logger.debug(
            "Transforming %d points from %s to %s (datum shift: %s)",
            count,
            source.name,
            target.name,
            shift,
        )

        for i in range(offset, offset + count):
            geographic = source.inverse(PlanarPoint(x[i], y[i]))
            if shift:
                height = z[i] if z is not None else 0.0
                geographic = self._shift_datum(geographic, height, source, target)
            planar = target.forward(geographic)
            x[i] = planar.x
            y[i] = planar.y

    def transform_point(
        self, source: Projection, target: Projection, point: PlanarPoint, height: float = 0.0
    ) -> PlanarPoint:
        """Convert a single planar point."""
        x, y = [point[0]], [point[1]]
        self.transform(source, target, 1, 0, x, y, [height])
        return PlanarPoint(x[0], y[0])

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_window(count, offset, x, y, z) -> None:
        if count < 0 or offset < 0:
            raise ValueError(f"count and offset must be non-negative, got count={count}, offset={offset}")
        end = offset + count
        buffers = {"x": x, "y": y} if z is None else {"x": x, "y": y, "z": z}
        for label, buffer in buffers.items():
            if end > len(buffer):
                raise ValueError(f"window [{offset}, {end}) exceeds buffer {label} of length {len(buffer)}")

    def _needs_datum_shift(self, source: Projection, target: Projection) -> bool:
        """
        True when points must pass through geocentric coordinates.

        Projections without datums on either side are never shifted. With a
        datum on only one side the point is carried across the ellipsoid
        change without a Helmert step.
        """
        if not self.config.apply_datum_shift:
            return False
        if source.datum is None and target.datum is None:
            return False
        if source.ellipsoid != target.ellipsoid:
            return True
        if source.datum is None or target.datum is None:
            return False
        return not source.datum.same_shift(target.datum)

    @staticmethod
    def _shift_datum(point: GeographicPoint, height: float, source: Projection, target: Projection) -> GeographicPoint:
        src: Ellipsoid = source.ellipsoid
        dst: Ellipsoid = target.ellipsoid
        geocentric = geodetic_to_geocentric(point.lam, point.phi, height, src.a, src.es)
        if source.datum is not None and target.datum is not None:
            geocentric = geocentric_from_wgs84(geocentric_to_wgs84(geocentric, source.datum), target.datum)
        geodetic = geocentric_to_geodetic(*geocentric, dst.a, dst.es)
        return GeographicPoint(geodetic.lam, geodetic.phi)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_DEFAULT_TRANSFORMER = Transformer()


def transform(
    source: Projection,
    target: Projection,
    count: int,
    offset: int,
    x: MutableSequence[float],
    y: MutableSequence[float],
    z: Optional[Sequence[float]] = None,
) -> None:
    """Transformer.transform with the default configuration."""
    _DEFAULT_TRANSFORMER.transform(source, target, count, offset, x, y, z)


def transform_point(source: Projection, target: Projection, point: PlanarPoint, height: float = 0.0) -> PlanarPoint:
    """Transformer.transform_point with the default configuration."""
    return _DEFAULT_TRANSFORMER.transform_point(source, target, point, height)
