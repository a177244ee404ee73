"""Unit tests for ray fixed-point math."""

import pytest

from defi_adapters.core.constants import HALF_RAY, MAX_UINT256, RAY
from defi_adapters.core.errors import AdapterError, DivisionByZero
from defi_adapters.protocols.morpho_aave_v3.ray_math import (
    ONE,
    percent_mul,
    ray_div,
    ray_div_up,
    ray_min,
    ray_mul,
    weighted_avg,
)


class TestRayMul:
    """Tests for ray_mul."""

    def test_identity(self):
        """Multiplying by one ray keeps the value."""
        assert ray_mul(123456789, ONE) == 123456789
        assert ray_mul(RAY, RAY) == RAY

    def test_rounds_half_up(self):
        """Exact halves round up, anything below rounds down."""
        assert ray_mul(1, HALF_RAY) == 1
        assert ray_mul(1, HALF_RAY - 1) == 0

    def test_scales_amount(self):
        """A raw amount times a ray index gives a raw amount."""
        assert ray_mul(1000, 11 * RAY // 10) == 1100

    def test_overflow(self):
        """Products beyond uint256 are rejected."""
        with pytest.raises(OverflowError):
            ray_mul(MAX_UINT256, 2)


class TestRayDiv:
    """Tests for ray_div and ray_div_up."""

    def test_rounds_half_up(self):
        assert ray_div(1, 2 * RAY) == 1
        assert ray_div(1, 3 * RAY) == 0

    def test_div_up_rounds_up(self):
        assert ray_div_up(1, 3 * RAY) == 1
        assert ray_div_up(3 * RAY, 3 * RAY) == RAY

    def test_division_by_zero(self):
        """Zero divisors raise DivisionByZero."""
        with pytest.raises(DivisionByZero):
            ray_div(RAY, 0)
        with pytest.raises(DivisionByZero):
            ray_div_up(RAY, 0)

    def test_division_by_zero_is_adapter_and_zero_division_error(self):
        with pytest.raises(AdapterError):
            ray_div(1, 0)
        with pytest.raises(ZeroDivisionError):
            ray_div(1, 0)

    def test_mul_then_div_within_one_unit(self):
        """ray_div(ray_mul(a, b), b) recovers a within one unit."""
        for a, b in [
            (10**18, 1_050_000_000_000_000_000_000_000_000),
            (987654321987654321, 1_234_567_890_123_456_789_012_345_678),
            (7, 3 * RAY + 1),
        ]:
            assert abs(ray_div(ray_mul(a, b), b) - a) <= 1

    def test_overflow(self):
        with pytest.raises(OverflowError):
            ray_div(MAX_UINT256, 1)


class TestPercentMath:
    """Tests for percent_mul and weighted_avg."""

    def test_percent_mul(self):
        assert percent_mul(10_000, 5_000) == 5_000
        assert percent_mul(RAY, 1_000) == RAY // 10

    def test_percent_mul_rounds_half_up(self):
        assert percent_mul(1, 5_000) == 1
        assert percent_mul(1, 4_999) == 0

    def test_weighted_avg_midpoint(self):
        """A 50% cursor lands in the middle."""
        assert weighted_avg(RAY, 2 * RAY, 5_000) == 3 * RAY // 2

    def test_weighted_avg_bounds(self):
        assert weighted_avg(RAY, 2 * RAY, 0) == RAY
        assert weighted_avg(RAY, 2 * RAY, 10_000) == 2 * RAY

    def test_weighted_avg_rejects_percentage_above_one(self):
        with pytest.raises(ValueError):
            weighted_avg(RAY, 2 * RAY, 10_001)


class TestRayMin:
    def test_ray_min(self):
        assert ray_min(1, 2) == 1
        assert ray_min(RAY, RAY - 1) == RAY - 1

    @pytest.mark.parametrize("a, b", [(0, 0), (1, 2), (RAY, RAY), (RAY, RAY - 1), (0, RAY), (RAY + 1, RAY)])
    def test_commutative(self, a, b):
        assert ray_min(a, b) == ray_min(b, a)

    @pytest.mark.parametrize("a", [0, 1, RAY - 1, RAY, RAY + 1])
    def test_idempotent(self, a):
        assert ray_min(a, a) == a
