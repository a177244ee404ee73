"""Pytest configuration and fixtures."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from web3 import Web3

from defi_adapters.core.constants import Chain
from defi_adapters.core.models import Erc20Metadata
from defi_adapters.data.sources.chain_reader import ChainReader

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
AWETH = "0x4d5f47fa6a74757f35c14fd3a6ef8e3c9bc514e8"
USER = "0x1111111111111111111111111111111111111111"


class FakeFunctions:
    """Contract functions namespace recording name and bound arguments."""

    def __init__(self, address: str):
        self._address = address

    def __getattr__(self, name):
        return lambda *args: SimpleNamespace(address=self._address, fn_name=name, args=args)


class FakeEvents:
    def __getattr__(self, name):
        return SimpleNamespace(event_name=name)


def fake_contract(address: str, abi=None) -> SimpleNamespace:
    checksum_address = Web3.to_checksum_address(address)
    return SimpleNamespace(
        address=checksum_address,
        functions=FakeFunctions(checksum_address),
        events=FakeEvents(),
    )


@pytest.fixture
def weth() -> Erc20Metadata:
    return Erc20Metadata(address=WETH, name="Wrapped Ether", symbol="WETH", decimals=18)


@pytest.fixture
def aweth() -> Erc20Metadata:
    return Erc20Metadata(address=AWETH, name="Aave Ethereum WETH", symbol="aEthWETH", decimals=18)


@pytest.fixture
def mock_settings(tmp_path: Path):
    """Create mock settings for testing."""
    settings = MagicMock()
    settings.cache_dir = tmp_path / "cache"
    settings.cache_ttl_seconds = 300
    settings.metadata_dir = tmp_path / "metadata"
    settings.rpc_rate_limit = 10
    settings.rpc_rate_window = 1.0
    settings.rpc_urls = {Chain.ETHEREUM: "http://localhost:8545"}
    settings.log_level = "INFO"

    def ensure_cache_dir():
        settings.cache_dir.mkdir(parents=True, exist_ok=True)
        return settings.cache_dir

    settings.ensure_cache_dir.side_effect = ensure_cache_dir

    return settings


@pytest.fixture
def chain_reader():
    """Mock chain reader on Ethereum.

    Contract bindings record function names and arguments; ``call`` and
    ``get_events`` are AsyncMocks for each test to program.
    """
    reader = MagicMock(spec=ChainReader)
    reader.chain = Chain.ETHEREUM
    reader.contract.side_effect = fake_contract
    reader.call = AsyncMock()
    reader.get_events = AsyncMock(return_value=[])
    reader.get_block_number = AsyncMock(return_value=1000)
    reader.gather = ChainReader.gather
    reader.close = AsyncMock()

    return reader
