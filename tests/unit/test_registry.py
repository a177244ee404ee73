"""Unit tests for the adapter registry and filters."""

from unittest.mock import MagicMock

import pytest

from defi_adapters.core.constants import Chain, Protocol
from defi_adapters.core.models import PositionType
from defi_adapters.data.adapters.filters import (
    chain_filter,
    multi_chain_filter,
    multi_protocol_filter,
    protocol_filter,
)
from defi_adapters.data.adapters.morpho_aave_v3.adapter import MorphoAaveV3PoolAdapter
from defi_adapters.data.adapters.registry import AdapterRegistry, register_default_adapters
from defi_adapters.protocols.morpho_aave_v3.config import BORROW_PROTOCOL_PRODUCT_ID, SUPPLY_PRODUCT_ID


class TestFilters:
    """Tests for chain and protocol filters."""

    @pytest.mark.parametrize("value", ["1", "ethereum", "ETHEREUM", " Ethereum "])
    def test_chain_filter(self, value):
        assert chain_filter(value) == Chain.ETHEREUM

    def test_chain_filter_empty(self):
        assert chain_filter(None) is None
        assert chain_filter("") is None

    def test_chain_filter_unknown(self):
        with pytest.raises(ValueError):
            chain_filter("solana")

    @pytest.mark.parametrize("value", ["morpho-aave-v3", "MORPHO_AAVE_V3"])
    def test_protocol_filter(self, value):
        assert protocol_filter(value) == Protocol.MORPHO_AAVE_V3

    def test_protocol_filter_unknown(self):
        with pytest.raises(ValueError):
            protocol_filter("not-a-protocol")

    def test_multi_filters(self):
        assert multi_chain_filter("1, arbitrum,,") == [Chain.ETHEREUM, Chain.ARBITRUM]
        assert multi_protocol_filter("morpho-aave-v3,aave-v3") == [Protocol.MORPHO_AAVE_V3, Protocol.AAVE_V3]
        assert multi_chain_filter(None) is None


class TestAdapterRegistry:
    """Tests for AdapterRegistry."""

    @pytest.fixture(autouse=True)
    def clean_registry(self):
        AdapterRegistry.clear()
        yield
        AdapterRegistry.clear()

    def test_register_and_create(self, mock_settings, chain_reader):
        adapter = MagicMock()
        factory = MagicMock(return_value=adapter)
        AdapterRegistry.register(Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, "product", factory)

        created = AdapterRegistry.create_adapter(
            Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, "product", chain_reader, mock_settings
        )

        assert created is adapter
        factory.assert_called_once_with(mock_settings, chain_reader)

    def test_create_unregistered(self, mock_settings, chain_reader):
        with pytest.raises(ValueError, match="No adapter registered"):
            AdapterRegistry.create_adapter(Protocol.CURVE, Chain.ETHEREUM, "pool", chain_reader, mock_settings)

    def test_available_adapters_filtered(self):
        factory = MagicMock()
        AdapterRegistry.register(Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, "a", factory)
        AdapterRegistry.register(Protocol.AAVE_V3, Chain.ARBITRUM, "b", factory)

        assert len(AdapterRegistry.get_available_adapters()) == 2
        assert AdapterRegistry.get_available_adapters(chains=[Chain.ARBITRUM]) == [
            (Protocol.AAVE_V3, Chain.ARBITRUM, "b")
        ]
        assert AdapterRegistry.get_available_adapters(protocols=[Protocol.CURVE]) == []

    def test_default_adapters(self, mock_settings, chain_reader):
        register_default_adapters()

        keys = AdapterRegistry.get_available_adapters(protocols=[Protocol.MORPHO_AAVE_V3])
        assert sorted(product for _, _, product in keys) == sorted([SUPPLY_PRODUCT_ID, BORROW_PROTOCOL_PRODUCT_ID])

        supply = AdapterRegistry.create_adapter(
            Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, SUPPLY_PRODUCT_ID, chain_reader, mock_settings
        )
        borrow = AdapterRegistry.create_adapter(
            Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, BORROW_PROTOCOL_PRODUCT_ID, chain_reader, mock_settings
        )

        assert isinstance(supply, MorphoAaveV3PoolAdapter)
        assert supply.position_type == PositionType.SUPPLY
        assert borrow.position_type == PositionType.BORROW
        assert borrow.metadata_store.metadata_dir == mock_settings.metadata_dir

    @pytest.mark.asyncio
    async def test_default_adapter_close_releases_cache(self, mock_settings, chain_reader):
        register_default_adapters()
        adapter = AdapterRegistry.create_adapter(
            Protocol.MORPHO_AAVE_V3, Chain.ETHEREUM, SUPPLY_PRODUCT_ID, chain_reader, mock_settings
        )
        cache = adapter.token_resolver.cache
        cache.set("key", 1)
        assert cache._cache is not None

        await adapter.close()

        assert cache._cache is None
        chain_reader.close.assert_awaited_once()
