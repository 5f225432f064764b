"""
Tests for the domain models

Checks:
1. Ellipsoid: validation, derived quantities, alternative constructors, immutability
2. Ellipsoid registry: case-insensitive lookup, read-only table
3. Datum: towgs84 validation and parameter conversion, registry
4. Coordinate types: GeographicPoint / PlanarPoint
5. Linear units
"""

import math

import pytest
from pydantic import ValidationError

from src.core.domain.datum import SEC_TO_RAD, Datum, available_datums, lookup_datum
from src.core.domain.ellipsoid import Ellipsoid, available_ellipsoids, lookup
from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.domain.units import (
    available_units,
    lookup_unit,
    meters_to_units,
    units_to_meters,
    validate_unit_factor,
)
from src.core.errors import AngleParseError

# =============================================================================
# ELLIPSOID
# =============================================================================


class TestEllipsoid:
    """Tests for the Ellipsoid model"""

    def test_wgs84_derived_quantities(self) -> None:
        wgs84 = lookup("WGS84")
        assert wgs84.a == 6378137.0
        assert wgs84.f == pytest.approx(1 / 298.257223563)
        assert wgs84.es == pytest.approx(0.00669437999014, rel=1e-11)
        assert wgs84.b == pytest.approx(6356752.314245, abs=1e-5)
        assert wgs84.e == pytest.approx(math.sqrt(wgs84.es))
        assert wgs84.one_es == pytest.approx(1 - wgs84.es)
        assert wgs84.esp == pytest.approx(wgs84.es / (1 - wgs84.es))
        assert not wgs84.is_sphere

    def test_sphere(self) -> None:
        sphere = Ellipsoid.sphere("ball", 6370997.0)
        assert sphere.is_sphere
        assert sphere.es == 0.0
        assert sphere.b == sphere.a

    def test_from_semi_minor(self) -> None:
        clrk66 = Ellipsoid.from_semi_minor("clrk66", 6378206.4, 6356583.8)
        assert clrk66.rf == pytest.approx(294.978698214)
        assert clrk66.b == pytest.approx(6356583.8)

    def test_from_semi_minor_rejects_b_above_a(self) -> None:
        with pytest.raises(ValueError, match="semi-minor"):
            Ellipsoid.from_semi_minor("bad", 10.0, 11.0)

    def test_from_eccentricity_squared(self) -> None:
        ell = Ellipsoid.from_eccentricity_squared("x", 6378137.0, 0.00669437999014)
        assert ell.rf == pytest.approx(298.257223563, rel=1e-9)

    def test_invalid_axis_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Ellipsoid(name="bad", a=-1.0, rf=300.0)
        with pytest.raises(ValidationError):
            Ellipsoid(name="bad", a=float("inf"), rf=300.0)

    def test_invalid_flattening_rejected(self) -> None:
        with pytest.raises(ValidationError, match="flattening"):
            Ellipsoid(name="bad", a=1.0, rf=0.5)

    def test_immutable(self) -> None:
        wgs84 = lookup("WGS84")
        with pytest.raises(ValidationError):
            wgs84.a = 1.0


class TestEllipsoidRegistry:
    """Tests for lookup / available_ellipsoids"""

    @pytest.mark.parametrize("name", available_ellipsoids())
    def test_lookup_case_insensitive(self, name: str) -> None:
        assert lookup(name.upper()) == lookup(name.lower())
        assert lookup(name) is not None

    def test_merit(self) -> None:
        assert lookup("MERIT") == lookup("merit")
        assert lookup("merit").rf == 298.257

    def test_unknown_is_none(self) -> None:
        assert lookup("foobar") is None
        assert lookup(None) is None

    def test_semi_minor_entries(self) -> None:
        assert lookup("airy").b == pytest.approx(6356256.910)
        assert lookup("sphere").is_sphere

    def test_contains_common_names(self) -> None:
        names = available_ellipsoids()
        for expected in ("WGS84", "GRS80", "clrk66", "bessel", "intl", "krass"):
            assert expected in names


# =============================================================================
# DATUM
# =============================================================================


class TestDatum:
    """Tests for the Datum model"""

    def test_three_parameter(self) -> None:
        datum = Datum(towgs84=(1.0, 2.0, 3.0))
        assert not datum.is_seven_parameter
        assert datum.shift_parameters() == (1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 1.0)

    def test_seven_parameter_conversion(self) -> None:
        datum = Datum(towgs84=(1.0, 2.0, 3.0, 1.0, -2.0, 0.5, 10.0))
        shift = datum.shift_parameters()
        assert shift.rx == pytest.approx(SEC_TO_RAD)
        assert shift.ry == pytest.approx(-2 * SEC_TO_RAD)
        assert shift.scale == pytest.approx(1.00001)

    def test_wrong_count_rejected(self) -> None:
        with pytest.raises(ValidationError, match="3 or 7"):
            Datum(towgs84=(1.0, 2.0))

    def test_parse_towgs84(self) -> None:
        datum = Datum.parse_towgs84("606,23,413", name="potsdam")
        assert datum.towgs84 == (606.0, 23.0, 413.0)

    def test_identity(self) -> None:
        assert lookup_datum("WGS84").is_identity
        assert not lookup_datum("potsdam").is_identity

    def test_registry(self) -> None:
        assert lookup_datum("osgb36") == lookup_datum("OSGB36")
        assert lookup_datum("OSGB36").ellipsoid_name == "airy"
        assert lookup_datum("nowhere") is None
        assert "NAD83" in available_datums()

    def test_same_shift(self) -> None:
        assert lookup_datum("WGS84").same_shift(lookup_datum("NAD83"))
        assert not lookup_datum("WGS84").same_shift(lookup_datum("potsdam"))


# =============================================================================
# COORDINATES
# =============================================================================


class TestGeographicPoint:
    """Tests for GeographicPoint"""

    def test_parse_dms_pair(self) -> None:
        point = GeographicPoint.parse("12d32'12\"S 45d24'1\"E")
        assert point.lam == pytest.approx(-math.radians(12 + 32 / 60 + 12 / 3600))
        assert point.phi == pytest.approx(math.radians(45 + 24 / 60 + 1 / 3600))

    def test_parse_comma_separated(self) -> None:
        assert GeographicPoint.parse("91,20") == GeographicPoint.parse("91 20")

    def test_no_range_check(self) -> None:
        point = GeographicPoint.parse("400 100")
        assert point.to_degrees() == pytest.approx((400.0, 100.0))

    @pytest.mark.parametrize("text", ["10", "1 2 3", "", "a b"])
    def test_parse_rejects_bad_input(self, text: str) -> None:
        with pytest.raises(AngleParseError):
            GeographicPoint.parse(text)

    def test_degrees_round_trip(self) -> None:
        point = GeographicPoint.from_degrees(10.0, -20.0)
        assert point.to_degrees() == pytest.approx((10.0, -20.0))

    def test_unpacks(self) -> None:
        lam, phi = GeographicPoint(0.1, 0.2)
        assert (lam, phi) == (0.1, 0.2)
        x, y = PlanarPoint(1.0, 2.0)
        assert (x, y) == (1.0, 2.0)


# =============================================================================
# UNITS
# =============================================================================


class TestLinearUnits:
    """Tests for the linear units table"""

    def test_lookup(self) -> None:
        assert lookup_unit("m").to_meter == 1.0
        assert lookup_unit("km").to_meter == 1000.0
        assert lookup_unit("us-ft").to_meter == pytest.approx(1200 / 3937)
        assert lookup_unit("furlong") is None

    def test_conversions(self) -> None:
        assert meters_to_units(1000.0, 1000.0) == 1.0
        assert units_to_meters(2.0, 0.3048) == pytest.approx(0.6096)

    def test_validate_factor(self) -> None:
        assert validate_unit_factor(0.5) == 0.5
        with pytest.raises(ValueError):
            validate_unit_factor(0.0)

    def test_available(self) -> None:
        assert {"m", "km", "ft", "us-ft"} <= set(available_units())
