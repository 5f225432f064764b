"""
Tests for Transformer (batch source -> target conversion)
"""

import math

import pytest

from src.core.domain.datum import lookup_datum
from src.core.domain.points import PlanarPoint
from src.core.errors import OutOfDomain
from src.core.math.geocentric import Geocentric
from src.projection.factory import create_projection
from src.transform import Transformer, TransformerConfig, transform, transform_point
from src.transform.transformer import geocentric_from_wgs84, geocentric_to_wgs84


@pytest.fixture
def utm():
    return create_projection(["proj=utm", "ellps=WGS84"])


@pytest.fixture
def aea():
    return create_projection(["proj=aea", "lat_1=20", "lat_2=20", "ellps=WGS84"])


@pytest.fixture
def potsdam():
    return create_projection(["proj=latlong", "datum=potsdam"])


@pytest.fixture
def wgs84():
    return create_projection(["proj=latlong", "datum=WGS84"])


# =============================================================================
# BATCH TRANSFORM
# =============================================================================


class TestTransform:
    """Tests for Transformer.transform"""

    def test_round_trip_through_albers(self, utm, aea) -> None:
        x, y = [10.0], [10.0]
        transformer = Transformer()
        transformer.transform(utm, aea, 1, 0, x, y)
        assert (x[0], y[0]) != (10.0, 10.0)
        transformer.transform(aea, utm, 1, 0, x, y)
        assert x[0] == pytest.approx(10.0, abs=0.01)
        assert y[0] == pytest.approx(10.0, abs=0.01)

    def test_z_never_written(self, utm, aea) -> None:
        x, y, z = [10.0, 20.0], [10.0, 20.0], [123.0, 456.0]
        Transformer().transform(utm, aea, 2, 0, x, y, z)
        assert z == [123.0, 456.0]

    def test_window(self, utm, aea) -> None:
        x = [1.0, 500000.0, 600000.0, 4.0]
        y = [1.0, 4000000.0, 4100000.0, 4.0]
        Transformer().transform(utm, aea, 2, 1, x, y)
        assert x[0] == 1.0 and y[0] == 1.0
        assert x[3] == 4.0 and y[3] == 4.0
        assert x[1] != 500000.0
        assert x[2] != 600000.0

    def test_zero_count_is_a_no_op(self, utm, aea) -> None:
        x, y = [10.0], [10.0]
        Transformer().transform(utm, aea, 0, 1, x, y)
        assert x == [10.0] and y == [10.0]

    @pytest.mark.parametrize(
        "count,offset,sizes",
        [
            (3, 0, (2, 3, None)),
            (2, 1, (3, 2, None)),
            (2, 0, (2, 2, 1)),
            (-1, 0, (2, 2, None)),
            (1, -1, (2, 2, None)),
        ],
    )
    def test_window_checked_before_writing(self, utm, aea, count, offset, sizes) -> None:
        nx, ny, nz = sizes
        x, y = [10.0] * nx, [10.0] * ny
        z = None if nz is None else [0.0] * nz
        with pytest.raises(ValueError):
            Transformer().transform(utm, aea, count, offset, x, y, z)
        assert x == [10.0] * nx
        assert y == [10.0] * ny

    def test_first_error_aborts(self, aea) -> None:
        merc = create_projection(["proj=merc", "ellps=WGS84"])
        geo = create_projection(["proj=latlong", "ellps=WGS84"])
        x = [0.0, 0.0, 0.1]
        y = [0.1, math.pi / 2, 0.1]
        with pytest.raises(OutOfDomain):
            Transformer().transform(geo, merc, 3, 0, x, y)
        assert x[0] == 0.0
        assert y[0] != 0.1
        assert (x[2], y[2]) == (0.1, 0.1)

    def test_module_level_transform(self, utm, aea) -> None:
        x, y = [10.0], [10.0]
        transform(utm, aea, 1, 0, x, y)
        transform(aea, utm, 1, 0, x, y)
        assert x[0] == pytest.approx(10.0, abs=0.01)


# =============================================================================
# DATUM SHIFT
# =============================================================================


class TestDatumShift:
    """Tests for the geocentric datum shift between projections"""

    def test_shift_moves_point(self, potsdam, wgs84) -> None:
        start = PlanarPoint(math.radians(10.0), math.radians(50.0))
        shifted = transform_point(potsdam, wgs84, start)
        assert shifted.x != pytest.approx(start.x, abs=1e-7)
        # well under a kilometre
        assert shifted.x == pytest.approx(start.x, abs=2e-4)
        assert shifted.y == pytest.approx(start.y, abs=2e-4)

    def test_shift_round_trip(self, potsdam, wgs84) -> None:
        start = PlanarPoint(math.radians(10.0), math.radians(50.0))
        back = transform_point(wgs84, potsdam, transform_point(potsdam, wgs84, start))
        assert back.x == pytest.approx(start.x, abs=1e-8)
        assert back.y == pytest.approx(start.y, abs=1e-8)

    def test_shift_disabled(self, potsdam, wgs84) -> None:
        start = PlanarPoint(math.radians(10.0), math.radians(50.0))
        transformer = Transformer(TransformerConfig(apply_datum_shift=False))
        assert transformer.transform_point(potsdam, wgs84, start) == start

    def test_no_shift_without_datums(self) -> None:
        bessel = create_projection(["proj=latlong", "ellps=bessel"])
        grs80 = create_projection(["proj=latlong", "ellps=GRS80"])
        start = PlanarPoint(0.2, 0.7)
        assert transform_point(bessel, grs80, start) == start

    def test_datum_on_one_side_changes_ellipsoid_only(self, potsdam) -> None:
        wgs84_ellipsoid = create_projection(["proj=latlong", "ellps=WGS84"])
        start = PlanarPoint(math.radians(10.0), math.radians(50.0))
        moved = transform_point(potsdam, wgs84_ellipsoid, start)
        # no translation, so the longitude survives and only the latitude moves
        assert moved.x == pytest.approx(start.x, abs=1e-12)
        assert moved.y != pytest.approx(start.y, abs=1e-6)
        assert moved.y == pytest.approx(start.y, abs=2e-4)

    def test_datum_on_one_side_round_trip(self, potsdam) -> None:
        wgs84_ellipsoid = create_projection(["proj=latlong", "ellps=WGS84"])
        start = PlanarPoint(math.radians(10.0), math.radians(50.0))
        back = transform_point(wgs84_ellipsoid, potsdam, transform_point(potsdam, wgs84_ellipsoid, start))
        assert back.x == pytest.approx(start.x, abs=1e-8)
        assert back.y == pytest.approx(start.y, abs=1e-8)

    def test_datum_on_one_side_same_ellipsoid_not_shifted(self, potsdam) -> None:
        bessel = create_projection(["proj=latlong", "ellps=bessel"])
        start = PlanarPoint(0.2, 0.7)
        assert transform_point(potsdam, bessel, start) == start

    def test_same_datum_not_shifted(self, potsdam) -> None:
        start = PlanarPoint(0.2, 0.7)
        assert transform_point(potsdam, potsdam, start) == start

    def test_seven_parameter_helmert_round_trip(self) -> None:
        datum = lookup_datum("OSGB36")
        point = Geocentric(3909833.018, -147097.1376, 5020322.492)
        back = geocentric_from_wgs84(geocentric_to_wgs84(point, datum), datum)
        assert back.x == pytest.approx(point.x, abs=1e-3)
        assert back.y == pytest.approx(point.y, abs=1e-3)
        assert back.z == pytest.approx(point.z, abs=1e-3)

    def test_three_parameter_helmert_is_translation(self) -> None:
        datum = lookup_datum("potsdam")
        shifted = geocentric_to_wgs84(Geocentric(0.0, 0.0, 0.0), datum)
        assert tuple(shifted) == (606.0, 23.0, 413.0)
