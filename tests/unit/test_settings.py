"""Unit tests for application settings."""

from pathlib import Path

import pytest

from config.settings import Settings
from defi_adapters.core.constants import Chain


class TestSettings:
    """Tests for Settings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("ETHEREUM_RPC_URL", "ETH_ALCHEMY_API_KEY", "ARBITRUM_RPC_URL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def test_alchemy_key_builds_ethereum_url(self):
        settings = Settings(_env_file=None, eth_alchemy_api_key="abc")

        assert settings.rpc_urls == {Chain.ETHEREUM: "https://eth-mainnet.g.alchemy.com/v2/abc"}

    def test_explicit_url_wins(self):
        settings = Settings(_env_file=None, eth_alchemy_api_key="abc", ethereum_rpc_url="http://node:8545")

        assert settings.eth_rpc_url == "http://node:8545"

    def test_unconfigured_chains_omitted(self, monkeypatch):
        monkeypatch.setenv("ARBITRUM_RPC_URL", "http://arbitrum:8545")

        settings = Settings(_env_file=None)

        assert settings.rpc_urls == {Chain.ARBITRUM: "http://arbitrum:8545"}

    def test_paths_and_log_level_normalised(self):
        settings = Settings(_env_file=None, metadata_dir="meta", log_level=" debug ")

        assert settings.metadata_dir == Path("meta")
        assert settings.log_level == "DEBUG"

    def test_rate_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, rpc_rate_limit=0)
