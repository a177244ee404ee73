"""Unit tests for profit calculation."""

import pytest

from defi_adapters.core.constants import WAD
from defi_adapters.core.models import MovementsByBlock, PositionType, TokenMovement
from defi_adapters.core.profits import (
    aggregate_movements,
    build_underlying_profit,
    compute_profit,
    merge_totals,
)

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"


def movement(protocol_token, token, amount_raw: int, block_number: int) -> MovementsByBlock:
    return MovementsByBlock(
        protocol_token=protocol_token,
        block_number=block_number,
        underlying_tokens_movement={
            token.address: TokenMovement(
                address=token.address,
                name=token.name,
                symbol=token.symbol,
                decimals=token.decimals,
                movement_value_raw=amount_raw,
                transaction_hash="0x01",
            )
        },
    )


class TestAggregateMovements:
    """Tests for aggregate_movements and merge_totals."""

    def test_sums_per_token(self, aweth, weth):
        movements = [movement(aweth, weth, 100 * WAD, 10), movement(aweth, weth, 50 * WAD, 5)]
        assert aggregate_movements(movements) == {WETH: 150 * WAD}

    def test_empty(self):
        assert aggregate_movements([]) == {}

    def test_merge_totals_adds_instead_of_overwriting(self):
        merged = merge_totals({WETH: 100}, {WETH: 50}, {"0xother": 7})
        assert merged == {WETH: 150, "0xother": 7}


class TestComputeProfit:
    """Tests for compute_profit."""

    def test_supply_profit(self):
        """Deposits of 150 and withdrawals of 30 fully explain the balance change."""
        profit = compute_profit(
            end_value_raw=120,
            outflows_raw=30,
            inflows_raw=150,
            start_value_raw=0,
            position_type=PositionType.SUPPLY,
        )
        assert profit == 0

    def test_supply_interest(self):
        profit = compute_profit(
            end_value_raw=1_050,
            outflows_raw=0,
            inflows_raw=0,
            start_value_raw=1_000,
            position_type=PositionType.SUPPLY,
        )
        assert profit == 50

    def test_borrow_interest_is_negative(self):
        """Debt growing from 100 to 110 is a cost of 10."""
        profit = compute_profit(
            end_value_raw=110,
            outflows_raw=0,
            inflows_raw=0,
            start_value_raw=100,
            position_type=PositionType.BORROW,
        )
        assert profit == -10

    def test_movements_explain_balance_change(self, aweth, weth):
        """Deposits [100, 50], withdrawals [30], start 200, end 320."""
        deposits = aggregate_movements([movement(aweth, weth, 100, 1), movement(aweth, weth, 50, 2)])
        withdrawals = aggregate_movements([movement(aweth, weth, 30, 3)])

        assert deposits[WETH] == 150
        assert withdrawals[WETH] == 30
        assert compute_profit(320, withdrawals[WETH], deposits[WETH], 200, PositionType.SUPPLY) == 0

    def test_supply_and_borrow_are_negatives(self):
        args = (1_234, 56, 789, 300)
        supply = compute_profit(*args, position_type=PositionType.SUPPLY)
        borrow = compute_profit(*args, position_type=PositionType.BORROW)

        assert supply == -borrow

    @pytest.mark.parametrize("position_type", [PositionType.SUPPLY, PositionType.BORROW])
    def test_no_activity(self, position_type):
        assert compute_profit(0, 0, 0, 0, position_type) == 0


class TestBuildUnderlyingProfit:
    """Tests for build_underlying_profit."""

    def test_calculation_data(self, weth):
        profit = build_underlying_profit(
            token=weth,
            start_value_raw=200 * WAD,
            end_value_raw=325 * WAD,
            events_in={WETH: 150 * WAD},
            events_out={WETH: 30 * WAD},
            position_type=PositionType.SUPPLY,
        )

        assert profit.profit_raw == 5 * WAD
        assert profit.profit == "5.0"
        assert profit.calculation_data.deposits == "150.0"
        assert profit.calculation_data.withdrawals == "30.0"
        assert profit.calculation_data.start_position_value == "200.0"
        assert profit.calculation_data.end_position_value == "325.0"

    def test_missing_flows_count_as_zero(self, weth):
        profit = build_underlying_profit(
            token=weth,
            start_value_raw=100,
            end_value_raw=90,
            events_in={},
            events_out={},
            position_type=PositionType.BORROW,
        )

        assert profit.profit_raw == 10
        assert profit.calculation_data.deposits_raw == 0
