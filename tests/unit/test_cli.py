"""Unit tests for the command line interface."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from defi_adapters import cli
from defi_adapters.core.constants import WAD, Chain, Protocol
from defi_adapters.core.models import ProtocolTokenTvl


class TestCli:
    """Tests for argument parsing and command output."""

    @pytest.fixture
    def adapter(self):
        adapter = MagicMock()
        adapter.protocol = Protocol.MORPHO_AAVE_V3
        adapter.chain = Chain.ETHEREUM
        adapter.product_id = "optimizer-supply"
        adapter.get_total_value_locked = AsyncMock(
            return_value=[
                ProtocolTokenTvl(
                    address="0x4d5f47fa6a74757f35c14fd3a6ef8e3c9bc514e8",
                    name="Aave Ethereum WETH",
                    symbol="aEthWETH",
                    decimals=18,
                    total_supply_raw=1560 * WAD,
                )
            ]
        )
        return adapter

    def test_parse_profits(self):
        args = cli.build_parser().parse_args(
            ["profits", "0xuser", "--from-block", "100", "--chain", "ethereum"]
        )

        assert args.command == "profits"
        assert args.user_address == "0xuser"
        assert args.from_block == 100
        assert args.to_block is None
        assert args.chain == "ethereum"

    def test_profits_requires_from_block(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["profits", "0xuser"])

    def test_parse_rates_with_block(self):
        args = cli.build_parser().parse_args(["apy", "--block", "18000000"])

        assert args.command == "apy"
        assert args.block == 18_000_000

    @pytest.mark.asyncio
    async def test_show_tvl(self, adapter, mock_settings, capsys):
        args = cli.build_parser().parse_args(["tvl"])

        await cli.show_tvl([adapter], mock_settings, args)

        output = capsys.readouterr().out
        assert "aEthWETH" in output
        assert "1560.0" in output
        adapter.get_total_value_locked.assert_awaited_once_with(None)

    def test_main_reports_bad_filter(self):
        assert cli.main(["tvl", "--chain", "not-a-chain"]) == 1
