"""Unit tests for peer-to-peer and pool amount reconciliation."""

from defi_adapters.core.constants import RAY, WAD
from defi_adapters.protocols.morpho_aave_v3.reconciler import blended_rate, total_amount


class TestTotalAmount:
    """Tests for total_amount."""

    def test_matched_plus_pool(self):
        assert total_amount(1000, 11 * RAY // 10, 500) == 1600

    def test_nothing_matched(self):
        assert total_amount(0, 2 * RAY, 500 * WAD) == 500 * WAD


class TestBlendedRate:
    """Tests for blended_rate."""

    def test_weighted_by_amount(self):
        """Equal amounts average the two rates."""
        assert blended_rate(4 * RAY // 100, 100 * WAD, 2 * RAY // 100, 100 * WAD) == 3 * RAY // 100

    def test_all_on_pool(self):
        assert blended_rate(4 * RAY // 100, 0, 2 * RAY // 100, 100 * WAD) == 2 * RAY // 100

    def test_all_peer_to_peer(self):
        assert blended_rate(4 * RAY // 100, 100 * WAD, 2 * RAY // 100, 0) == 4 * RAY // 100

    def test_empty_market_returns_pool_rate(self):
        """An empty market does not divide by zero."""
        assert blended_rate(4 * RAY // 100, 0, 2 * RAY // 100, 0) == 2 * RAY // 100
