"""
Tests for ProjectionFactory and the generic Projection pipeline

Covers:
- family lookup and construction errors
- ellipsoid and datum resolution order
- strict vs permissive numeric parameters
- mapping (JSON) definitions
- forward/inverse checks shared by every family
"""

import logging
import math

import pytest
from jsonschema import ValidationError

from src.core.domain.points import GeographicPoint, PlanarPoint
from src.core.errors import (
    ErrorKind,
    InvalidParameterCombination,
    MissingEllipsoid,
    OutOfDomain,
    UnknownFamily,
)
from src.projection import (
    ProjectionConfig,
    ProjectionFactory,
    available_families,
    create_projection,
)

# Minimal valid parameters for every registered family
FAMILY_TOKENS = {
    "tmerc": [],
    "utm": ["zone=33"],
    "aea": ["lat_1=29.5", "lat_2=45.5"],
    "leac": ["lat_1=40"],
    "lcc": ["lat_1=33", "lat_2=45"],
    "aeqd": ["lat_0=40"],
    "stere": ["lat_0=90"],
    "sterea": ["lat_0=52"],
    "airy": [],
    "merc": [],
    "eqc": [],
    "latlong": [],
    "longlat": [],
}


# =============================================================================
# FAMILY LOOKUP
# =============================================================================


class TestFamilyLookup:
    """Tests for proj= resolution"""

    def test_available_families(self) -> None:
        families = available_families()
        assert set(FAMILY_TOKENS) <= set(families)

    def test_missing_proj(self) -> None:
        with pytest.raises(UnknownFamily) as exc_info:
            create_projection(["ellps=WGS84"])
        assert exc_info.value.kind is ErrorKind.UNKNOWN_FAMILY

    def test_unknown_proj(self) -> None:
        with pytest.raises(UnknownFamily, match="foobar"):
            create_projection(["proj=foobar", "ellps=WGS84"])

    def test_string_tokens_rejected(self) -> None:
        with pytest.raises(TypeError):
            create_projection("+proj=merc +ellps=WGS84")

    @pytest.mark.parametrize("family", sorted(FAMILY_TOKENS))
    def test_every_family_constructs(self, family: str) -> None:
        projection = create_projection([f"proj={family}", "ellps=WGS84", *FAMILY_TOKENS[family]])
        assert projection.name == family
        assert projection.description()

    def test_description_text(self) -> None:
        projection = create_projection(["proj=merc", "ellps=WGS84"])
        assert projection.description() == f"{projection.title} [merc] on WGS 84"


# =============================================================================
# ELLIPSOID RESOLUTION
# =============================================================================


class TestEllipsoidResolution:
    """Tests for the ellipsoid resolution order"""

    def test_named_ellipsoid(self) -> None:
        projection = create_projection(["proj=merc", "ellps=clrk66"])
        assert projection.ellipsoid.name == "clrk66"
        assert projection.a == 6378206.4

    def test_semi_major_and_inverse_flattening(self) -> None:
        projection = create_projection(["proj=merc", "a=6378137", "rf=298.257223563"])
        assert projection.ellipsoid.name == "custom"
        assert projection.es == pytest.approx(0.00669437999014, rel=1e-10)

    def test_semi_major_and_semi_minor(self) -> None:
        projection = create_projection(["proj=merc", "a=6378206.4", "b=6356583.8"])
        assert projection.ellipsoid.rf == pytest.approx(294.978698214, rel=1e-9)

    def test_semi_major_and_flattening(self) -> None:
        projection = create_projection(["proj=merc", "a=6378137", "f=0.0033528106647474805"])
        assert projection.ellipsoid.rf == pytest.approx(298.257223563, rel=1e-9)

    def test_semi_major_and_eccentricity_squared(self) -> None:
        projection = create_projection(["proj=merc", "a=6378137", "es=0.006694379990141316"])
        assert projection.ellipsoid.rf == pytest.approx(298.257223563, rel=1e-8)

    def test_sphere_radius(self) -> None:
        projection = create_projection(["proj=merc", "R=6370997"])
        assert projection.is_sphere
        assert projection.a == 6370997.0

    def test_named_ellipsoid_wins_over_radius(self) -> None:
        projection = create_projection(["proj=merc", "ellps=WGS84", "R=6370997"])
        assert projection.a == 6378137.0

    def test_ellipsoid_from_datum(self) -> None:
        projection = create_projection(["proj=merc", "datum=potsdam"])
        assert projection.ellipsoid.name == "bessel"
        assert projection.datum is not None
        assert projection.datum.name == "potsdam"

    def test_configured_default(self) -> None:
        factory = ProjectionFactory(ProjectionConfig(default_ellipsoid="GRS80"))
        projection = factory.create(["proj=merc"])
        assert projection.ellipsoid.name == "GRS80"

    def test_missing_ellipsoid(self) -> None:
        with pytest.raises(MissingEllipsoid) as exc_info:
            create_projection(["proj=merc"])
        assert exc_info.value.kind is ErrorKind.MISSING_ELLIPSOID

    def test_unknown_ellipsoid(self) -> None:
        with pytest.raises(MissingEllipsoid, match="unknown ellipsoid"):
            create_projection(["proj=merc", "ellps=nosuch"])

    def test_semi_major_without_shape(self) -> None:
        with pytest.raises(MissingEllipsoid):
            create_projection(["proj=merc", "a=6378137"])

    @pytest.mark.parametrize(
        "tokens",
        [
            ["a=6378137", "rf=0.5"],
            ["a=-1", "rf=298.257"],
            ["a=6378137", "b=7000000"],
            ["a=6378137", "es=1.5"],
            ["R=0"],
        ],
    )
    def test_invalid_ellipsoid_parameters(self, tokens: list[str]) -> None:
        with pytest.raises(InvalidParameterCombination):
            create_projection(["proj=merc", *tokens])


# =============================================================================
# DATUM RESOLUTION
# =============================================================================


class TestDatumResolution:
    """Tests for datum= / towgs84= / nadgrids="""

    def test_towgs84_three_parameters(self) -> None:
        projection = create_projection(["proj=merc", "ellps=bessel", "towgs84=606,23,413"])
        assert projection.datum.towgs84 == (606.0, 23.0, 413.0)

    def test_towgs84_seven_parameters(self) -> None:
        projection = create_projection(
            ["proj=merc", "ellps=airy", "towgs84=446.448,-125.157,542.06,0.1502,0.247,0.8421,-20.4894"]
        )
        assert projection.datum.is_seven_parameter

    def test_bad_towgs84(self) -> None:
        with pytest.raises(InvalidParameterCombination, match="towgs84"):
            create_projection(["proj=merc", "ellps=WGS84", "towgs84=1,2"])

    def test_unknown_datum(self) -> None:
        with pytest.raises(InvalidParameterCombination, match="unknown datum"):
            create_projection(["proj=merc", "datum=atlantis"])

    def test_grid_shift_rejected(self) -> None:
        with pytest.raises(InvalidParameterCombination, match="nadgrids"):
            create_projection(["proj=merc", "ellps=clrk66", "nadgrids=conus"])


# =============================================================================
# NUMERIC PARAMETERS
# =============================================================================


class TestNumericParameters:
    """Tests for strict and permissive parsing"""

    def test_permissive_reads_zero_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="src.core.domain.parameters"):
            projection = create_projection(["proj=merc", "lon_0=abc", "ellps=WGS84"])
        assert projection.lam0 == 0.0
        assert "lon_0" in caplog.text

    def test_strict_rejects_malformed(self) -> None:
        factory = ProjectionFactory(ProjectionConfig(strict_numeric=True))
        with pytest.raises(InvalidParameterCombination, match="lon_0"):
            factory.create(["proj=merc", "lon_0=abc", "ellps=WGS84"])

    def test_scale_factor_must_be_positive(self) -> None:
        with pytest.raises(InvalidParameterCombination):
            create_projection(["proj=tmerc", "k_0=0", "ellps=WGS84"])

    def test_k_alias(self) -> None:
        projection = create_projection(["proj=tmerc", "k=0.9996", "ellps=WGS84"])
        assert projection.k0 == 0.9996

    def test_k0_alias(self) -> None:
        projection = create_projection(["proj=tmerc", "k0=0.5", "ellps=WGS84"])
        assert projection.k0 == 0.5

    @pytest.mark.parametrize(
        "tokens,expected",
        [
            (["k_0=0.9", "k0=0.8", "k=0.7"], 0.9),
            (["k0=0.8", "k=0.7"], 0.8),
            (["k=0.7"], 0.7),
            ([], 1.0),
        ],
    )
    def test_scale_factor_precedence(self, tokens: list[str], expected: float) -> None:
        projection = create_projection(["proj=tmerc", "ellps=WGS84", *tokens])
        assert projection.k0 == expected

    @pytest.mark.parametrize("token", ["=5", "=", "  =0.5"])
    def test_token_without_key(self, token: str) -> None:
        with pytest.raises(InvalidParameterCombination, match="without a key"):
            create_projection(["proj=merc", "ellps=WGS84", token])

    def test_origin_latitude_beyond_pole(self) -> None:
        with pytest.raises(InvalidParameterCombination, match="lat_0"):
            create_projection(["proj=tmerc", "lat_0=100", "ellps=WGS84"])


# =============================================================================
# ALTERNATE INPUT FORMS
# =============================================================================


class TestDefinitionForms:
    """Tests for proj strings and mapping definitions"""

    def test_create_from_string(self) -> None:
        projection = ProjectionFactory().create_from_string("+proj=utm +zone=33 +ellps=WGS84")
        assert projection.name == "utm"
        assert projection.zone == 33

    def test_create_from_mapping(self) -> None:
        projection = ProjectionFactory().create_from_mapping(
            {"proj": "utm", "zone": 33, "south": True, "over": False, "ellps": "WGS84"}
        )
        assert projection.south
        assert not projection.over
        assert projection.y0 == 10000000.0

    def test_create_from_mapping_towgs84_list(self) -> None:
        projection = ProjectionFactory().create_from_mapping(
            {"proj": "merc", "ellps": "bessel", "towgs84": [606, 23, 413]}
        )
        assert projection.datum.towgs84 == (606.0, 23.0, 413.0)

    def test_create_from_mapping_requires_proj(self) -> None:
        with pytest.raises(ValidationError):
            ProjectionFactory().create_from_mapping({"ellps": "WGS84"})


# =============================================================================
# GENERIC PIPELINE
# =============================================================================


class TestProjectionPipeline:
    """Tests for the checks and scaling shared by every family"""

    @pytest.fixture
    def merc(self):
        return create_projection(["proj=merc", "ellps=WGS84"])

    @pytest.mark.parametrize("point", [(float("nan"), 0.0), (0.0, float("inf"))])
    def test_non_finite_input(self, merc, point) -> None:
        with pytest.raises(OutOfDomain):
            merc.forward(GeographicPoint(*point))
        with pytest.raises(OutOfDomain):
            merc.inverse(PlanarPoint(*point))

    def test_latitude_beyond_pole(self, merc) -> None:
        with pytest.raises(OutOfDomain):
            merc.forward(GeographicPoint(0.0, math.pi / 2 + 1e-6))

    def test_longitude_magnitude_limit(self, merc) -> None:
        with pytest.raises(OutOfDomain):
            merc.forward(GeographicPoint(10.5, 0.0))

    def test_longitude_wrapped(self, merc) -> None:
        wrapped = merc.forward(GeographicPoint.from_degrees(200.0, 10.0))
        expected = merc.forward(GeographicPoint.from_degrees(-160.0, 10.0))
        assert wrapped.x == pytest.approx(expected.x, abs=1e-6)

    def test_over_disables_wrapping(self) -> None:
        eqc = create_projection(["proj=eqc", "over", "R=1"])
        xy = eqc.forward(GeographicPoint.from_degrees(200.0, 0.0))
        assert xy.x == pytest.approx(math.radians(200.0))
        back = eqc.inverse(xy)
        assert back.lam == pytest.approx(math.radians(200.0))

    def test_pole_within_tolerance_snapped(self) -> None:
        tmerc = create_projection(["proj=tmerc", "ellps=WGS84"])
        xy = tmerc.forward(GeographicPoint(0.0, math.pi / 2 + 1e-13))
        assert xy.x == pytest.approx(0.0, abs=1e-6)
        assert xy.y == pytest.approx(10001965.7293, abs=1e-3)

    def test_false_origin(self) -> None:
        merc = create_projection(["proj=merc", "x_0=1000", "y_0=-2000", "ellps=WGS84"])
        xy = merc.forward(GeographicPoint(0.0, 0.0))
        assert xy.x == pytest.approx(1000.0, abs=1e-6)
        assert xy.y == pytest.approx(-2000.0, abs=1e-6)

    def test_units_kilometres(self) -> None:
        metres = create_projection(["proj=merc", "ellps=WGS84"])
        kilometres = create_projection(["proj=merc", "units=km", "ellps=WGS84"])
        point = GeographicPoint.from_degrees(10.0, 45.0)
        assert kilometres.forward(point).x == pytest.approx(metres.forward(point).x / 1000.0)
        back = kilometres.inverse(kilometres.forward(point))
        assert back.phi == pytest.approx(point.phi, abs=1e-12)

    def test_to_meter_ratio(self) -> None:
        projection = create_projection(["proj=merc", "to_meter=1200/3937", "ellps=WGS84"])
        assert projection.to_meter == pytest.approx(0.3048006096012192)

    @pytest.mark.parametrize("tokens", [["units=parsec"], ["to_meter=0"], ["to_meter=1/0"], ["to_meter=x"]])
    def test_bad_units(self, tokens: list[str]) -> None:
        with pytest.raises(InvalidParameterCombination):
            create_projection(["proj=merc", "ellps=WGS84", *tokens])

    def test_instance_unchanged_by_transform(self, merc) -> None:
        before = dict(vars(merc))
        merc.forward(GeographicPoint.from_degrees(10.0, 45.0))
        merc.inverse(PlanarPoint(1113194.9079, 5591295.9186))
        assert vars(merc) == before

    def test_repr(self, merc) -> None:
        assert "Mercator" in repr(merc)
