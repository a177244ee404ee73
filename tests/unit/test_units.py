"""Unit tests for unit formatting and rate conversion."""

from decimal import Decimal

import pytest

from defi_adapters.core.constants import SECONDS_PER_YEAR
from defi_adapters.core.units import apr_to_apy, format_units


class TestFormatUnits:
    """Tests for format_units."""

    @pytest.mark.parametrize(
        "value_raw,decimals,expected",
        [
            (1_500_000, 6, "1.5"),
            (10**18, 18, "1.0"),
            (1, 18, "0.000000000000000001"),
            (0, 18, "0.0"),
            (-25 * 10**17, 18, "-2.5"),
            (42, 0, "42.0"),
        ],
    )
    def test_format(self, value_raw, decimals, expected):
        assert format_units(value_raw, decimals) == expected


class TestAprToApy:
    """Tests for apr_to_apy."""

    def test_compounding_raises_yield(self):
        apy = apr_to_apy(Decimal("0.05"), SECONDS_PER_YEAR)
        assert Decimal("0.05127") < apy < Decimal("0.05128")

    def test_single_period(self):
        assert apr_to_apy(Decimal("0.05"), 1) == Decimal("0.05")

    def test_non_positive_apr(self):
        assert apr_to_apy(Decimal("0"), SECONDS_PER_YEAR) == Decimal("0")
        assert apr_to_apy(Decimal("-0.01"), SECONDS_PER_YEAR) == Decimal("0")
