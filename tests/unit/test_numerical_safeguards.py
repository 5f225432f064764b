"""
Tests for the Numerical Safeguards module

Checks:
1. Guarded inverse trigonometry (aasin, aacos, asqrt, aatan2)
2. Longitude normalisation (adjlon)
3. Finite-value and latitude validation
"""

import math

import pytest

from src.core.errors import OutOfDomain
from src.core.math.numerical_safeguards import (
    HALFPI,
    ONE_TOL,
    aacos,
    aasin,
    aatan2,
    adjlon,
    asqrt,
    clamp,
    is_valid_float,
    validate_finite,
    validate_latitude,
)

# =============================================================================
# GUARDED TRIGONOMETRY
# =============================================================================


class TestAasin:
    """Tests for aasin"""

    def test_inside_domain_matches_asin(self) -> None:
        assert aasin(0.5) == pytest.approx(math.asin(0.5))

    def test_rounding_overshoot_clamped(self) -> None:
        """|v| slightly above 1 maps to +-pi/2"""
        assert aasin(1.0 + 1e-15) == HALFPI
        assert aasin(-1.0 - 1e-15) == -HALFPI

    def test_beyond_tolerance_raises(self) -> None:
        with pytest.raises(OutOfDomain, match="asin"):
            aasin(ONE_TOL + 1e-9)


class TestAacos:
    """Tests for aacos"""

    def test_rounding_overshoot_clamped(self) -> None:
        assert aacos(1.0 + 1e-15) == 0.0
        assert aacos(-1.0 - 1e-15) == math.pi

    def test_beyond_tolerance_raises(self) -> None:
        with pytest.raises(OutOfDomain, match="acos"):
            aacos(-1.1)


class TestAsqrtAatan2:
    """Tests for asqrt and aatan2"""

    def test_asqrt_negative_is_zero(self) -> None:
        assert asqrt(-1e-18) == 0.0
        assert asqrt(4.0) == 2.0

    def test_aatan2_both_zero(self) -> None:
        assert aatan2(0.0, 0.0) == 0.0
        assert aatan2(1.0, 1.0) == pytest.approx(math.pi / 4)


# =============================================================================
# LONGITUDE NORMALISATION
# =============================================================================


class TestAdjlon:
    """Tests for adjlon"""

    def test_small_values_unchanged(self) -> None:
        assert adjlon(1.0) == 1.0
        assert adjlon(-3.0) == -3.0

    def test_wraps_past_pi(self) -> None:
        assert adjlon(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert adjlon(-3 * math.pi / 2) == pytest.approx(math.pi / 2)

    def test_many_turns(self) -> None:
        assert adjlon(0.25 + 10 * math.pi) == pytest.approx(0.25)

    @pytest.mark.parametrize("lon", [-100.0, -7.0, 3.2, 4.0, 50.0])
    def test_result_in_range(self, lon: float) -> None:
        assert -math.pi <= adjlon(lon) <= math.pi


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidation:
    """Tests for validators"""

    def test_is_valid_float(self) -> None:
        assert is_valid_float(1.0)
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))

    def test_clamp(self) -> None:
        assert clamp(5.0, 0.0, 1.0) == 1.0
        assert clamp(-5.0, 0.0, 1.0) == 0.0
        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_validate_finite_raises_out_of_domain(self) -> None:
        validate_finite(1.0, "x")
        with pytest.raises(OutOfDomain, match="x must be a finite number"):
            validate_finite(float("nan"), "x")

    def test_validate_latitude(self) -> None:
        validate_latitude(HALFPI)
        with pytest.raises(ValueError, match="within"):
            validate_latitude(HALFPI + 1e-6)
        with pytest.raises(ValueError, match="NaN"):
            validate_latitude(float("nan"))
