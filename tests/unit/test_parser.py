"""Unit tests for Morpho-AaveV3 response parsing."""

import pytest

from defi_adapters.core.constants import RAY, WAD, ZERO_ADDRESS
from defi_adapters.data.adapters.morpho_aave_v3.parser import MorphoAaveV3Parser

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
AWETH = "0x4d5F47FA6A74757f35C14fD3a6Ef8E3C9BC514E8"
VARIABLE_DEBT_WETH = "0xeA51d7853EEFb32b6ee06b1C12E6dcCA88Be0fFE"


class TestMorphoAaveV3Parser:
    """Tests for MorphoAaveV3Parser."""

    @pytest.fixture
    def parser(self):
        return MorphoAaveV3Parser()

    @pytest.fixture
    def market(self):
        return (
            ((RAY, 2 * RAY), (3 * RAY, 4 * RAY)),
            ((1 * WAD, 10 * WAD), (2 * WAD, 20 * WAD)),
            WETH,
            (False,) * 10,
            True,
            VARIABLE_DEBT_WETH,
            1_700_000_000,
            1_500,
            3_333,
            AWETH,
            ZERO_ADDRESS,
            7 * WAD,
        )

    @pytest.fixture
    def reserve(self):
        return (
            (0,),
            11 * RAY // 10,
            3 * RAY // 100,
            12 * RAY // 10,
            5 * RAY // 100,
            0,
            1_700_000_000,
            0,
            AWETH,
            ZERO_ADDRESS,
            VARIABLE_DEBT_WETH,
            ZERO_ADDRESS,
            0,
            0,
            0,
        )

    def test_parse_market(self, parser, market, reserve):
        snapshot = parser.parse_market(market, reserve)

        assert snapshot.underlying == WETH.lower()
        assert snapshot.indexes.supply.pool_index == RAY
        assert snapshot.indexes.supply.p2p_index == 2 * RAY
        assert snapshot.indexes.borrow.pool_index == 3 * RAY
        assert snapshot.indexes.borrow.p2p_index == 4 * RAY
        assert snapshot.deltas.supply.scaled_delta == WAD
        assert snapshot.deltas.supply.scaled_p2p_total == 10 * WAD
        assert snapshot.deltas.borrow.scaled_p2p_total == 20 * WAD
        assert snapshot.reserve_factor == 1_500
        assert snapshot.p2p_index_cursor == 3_333
        assert snapshot.idle_supply == 7 * WAD
        assert snapshot.a_token == AWETH.lower()
        assert snapshot.variable_debt_token == VARIABLE_DEBT_WETH.lower()

    def test_parse_reserve(self, parser, reserve):
        parsed = parser.parse_reserve(reserve)

        assert parsed.liquidity_index == 11 * RAY // 10
        assert parsed.current_liquidity_rate == 3 * RAY // 100
        assert parsed.variable_borrow_index == 12 * RAY // 10
        assert parsed.current_variable_borrow_rate == 5 * RAY // 100
        assert parser.parse_reserve_a_token(reserve) == AWETH.lower()

    def test_negative_delta_rejected(self, parser, market, reserve):
        market = (market[0], ((-1, 0), (0, 0))) + market[2:]
        with pytest.raises(ValueError):
            parser.parse_market(market, reserve)

    def test_reserve_factor_out_of_range(self, parser, market, reserve):
        market = market[:7] + (10_001,) + market[8:]
        with pytest.raises(ValueError):
            parser.parse_market(market, reserve)

    def test_parse_movement(self, parser, aweth, weth):
        event = {
            "args": {"amount": 5 * WAD},
            "blockNumber": 123,
            "logIndex": 4,
            "transactionHash": bytes.fromhex("ab" * 32),
        }

        movement = parser.parse_movement(event, aweth, weth)

        assert movement.protocol_token == aweth
        assert movement.block_number == 123
        assert movement.log_index == 4
        token_movement = movement.underlying_tokens_movement[weth.address]
        assert token_movement.movement_value_raw == 5 * WAD
        assert token_movement.movement_value == "5.0"
        assert token_movement.transaction_hash == "0x" + "ab" * 32
