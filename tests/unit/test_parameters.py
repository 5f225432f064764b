"""
Tests for ParameterSet

Checks:
1. Token parsing (key=value, bare flags, '+' prefix, overwrite)
2. Permissive accessors (zero on malformed, default on absent)
3. Strict accessors and strict mode
"""

import logging
import math

import pytest

from src.core.domain.parameters import ParameterSet
from src.core.errors import AngleParseError, InvalidParameterCombination


@pytest.fixture
def params() -> ParameterSet:
    return ParameterSet(
        ["proj=utm", "+zone=33", "south", "lat_1=12d30'N", "k_0=0.9996", "bad=abc", "towgs84=1,2,3"]
    )


class TestParsing:
    """Tests for token parsing"""

    def test_key_value_and_flags(self, params: ParameterSet) -> None:
        assert params.contains("proj")
        assert params.string("proj") == "utm"
        assert params.is_flag("south")
        assert params.string("south") == ""
        assert not params.is_flag("proj")

    def test_plus_prefix_stripped(self, params: ParameterSet) -> None:
        assert params.string("zone") == "33"
        assert "+zone" not in params

    def test_repeated_key_overwrites(self) -> None:
        params = ParameterSet(["lat_0=10", "lat_0=20"])
        assert params.float("lat_0") == 20.0
        assert len(params) == 1

    def test_flag_then_value_is_not_flag(self) -> None:
        params = ParameterSet(["over", "over=false"])
        assert not params.is_flag("over")
        assert not params.boolean("over")

    def test_keys_case_sensitive(self) -> None:
        params = ParameterSet(["R=6370997"])
        assert params.contains("R")
        assert not params.contains("r")

    def test_parse_proj_string(self) -> None:
        params = ParameterSet.parse("+proj=merc +lat_ts=30 +no_defs")
        assert params.keys() == ("proj", "lat_ts", "no_defs")
        assert list(params) == ["proj", "lat_ts", "no_defs"]

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="without a key"):
            ParameterSet(["=5"])


class TestPermissiveAccessors:
    """Tests for integer / float / radians / boolean"""

    def test_integer(self, params: ParameterSet) -> None:
        assert params.integer("zone") == 33

    def test_float(self, params: ParameterSet) -> None:
        assert params.float("k_0") == 0.9996

    def test_absent_returns_zero(self, params: ParameterSet) -> None:
        assert params.integer("missing") == 0
        assert params.float("missing") == 0.0
        assert params.radians("missing") == 0.0

    def test_absent_returns_default(self, params: ParameterSet) -> None:
        assert params.float("k", 1.0) == 1.0

    def test_malformed_returns_zero(self, params: ParameterSet) -> None:
        assert params.integer("bad") == 0
        assert params.float("bad") == 0.0
        assert params.radians("bad") == 0.0

    def test_malformed_logs_warning(self, params: ParameterSet, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="src.core.domain.parameters"):
            params.float("bad")
        assert "bad" in caplog.text

    def test_non_finite_is_malformed(self) -> None:
        assert ParameterSet(["x=nan"]).float("x") == 0.0

    def test_radians_parses_dms(self, params: ParameterSet) -> None:
        assert params.radians("lat_1") == pytest.approx(math.radians(12.5))

    def test_boolean(self) -> None:
        params = ParameterSet(["a", "b=true", "c=f", "d=0", "e=yes"])
        assert params.boolean("a")
        assert params.boolean("b")
        assert not params.boolean("c")
        assert not params.boolean("d")
        assert params.boolean("e")
        assert not params.boolean("missing")


class TestStrictAccessors:
    """Tests for try_* accessors and strict mode"""

    def test_try_float(self, params: ParameterSet) -> None:
        assert params.try_float("k_0") == 0.9996

    def test_try_absent_raises_key_error(self, params: ParameterSet) -> None:
        with pytest.raises(KeyError):
            params.try_float("missing")
        with pytest.raises(KeyError):
            params.try_integer("missing")

    def test_try_malformed_raises_value_error(self, params: ParameterSet) -> None:
        with pytest.raises(ValueError):
            params.try_integer("bad")
        with pytest.raises(ValueError):
            params.try_float("bad")
        with pytest.raises(AngleParseError):
            params.try_radians("bad")

    def test_explicit_zero_distinguished_from_failure(self) -> None:
        params = ParameterSet(["x_0=0", "y_0=zero"])
        assert params.try_float("x_0") == 0.0
        with pytest.raises(ValueError):
            params.try_float("y_0")

    def test_try_float_list(self, params: ParameterSet) -> None:
        assert params.try_float_list("towgs84") == (1.0, 2.0, 3.0)

    def test_strict_mode_raises_on_malformed(self) -> None:
        params = ParameterSet(["bad=abc"], strict=True)
        with pytest.raises(InvalidParameterCombination, match="bad"):
            params.float("bad")

    def test_strict_mode_keeps_defaults_for_absent(self) -> None:
        params = ParameterSet([], strict=True)
        assert params.float("x_0") == 0.0
        assert params.float("k", 1.0) == 1.0
