"""Profit calculation from position snapshots and aggregated movements."""

from collections import defaultdict
from typing import Dict, Iterable

from defi_adapters.core.models import CalculationData, Erc20Metadata, MovementsByBlock, PositionType, UnderlyingProfit


def aggregate_movements(movements: Iterable[MovementsByBlock]) -> Dict[str, int]:
    """Sum raw movement amounts per underlying token address.

    Ordering is irrelevant, only the totals matter.
    """
    totals: Dict[str, int] = defaultdict(int)
    for movement in movements:
        for address, token_movement in movement.underlying_tokens_movement.items():
            totals[address] += token_movement.movement_value_raw
    return dict(totals)


def merge_totals(*totals: Dict[str, int]) -> Dict[str, int]:
    """Add several per-token totals together."""
    merged: Dict[str, int] = defaultdict(int)
    for total in totals:
        for address, amount in total.items():
            merged[address] += amount
    return dict(merged)


def compute_profit(
    end_value_raw: int,
    outflows_raw: int,
    inflows_raw: int,
    start_value_raw: int,
    position_type: PositionType,
) -> int:
    """
    Profit over a block range.

    profit = end + outflows - inflows - start

    A growing borrow balance is a cost, so the sign is flipped for borrow
    positions.
    """
    profit = end_value_raw + outflows_raw - inflows_raw - start_value_raw
    if position_type == PositionType.BORROW:
        profit *= -1
    return profit


def build_underlying_profit(
    token: Erc20Metadata,
    start_value_raw: int,
    end_value_raw: int,
    events_in: Dict[str, int],
    events_out: Dict[str, int],
    position_type: PositionType,
) -> UnderlyingProfit:
    """Assemble an ``UnderlyingProfit`` with its calculation data."""
    inflows = events_in.get(token.address, 0)
    outflows = events_out.get(token.address, 0)

    return UnderlyingProfit(
        address=token.address,
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        profit_raw=compute_profit(end_value_raw, outflows, inflows, start_value_raw, position_type),
        calculation_data=CalculationData(
            decimals=token.decimals,
            withdrawals_raw=outflows,
            deposits_raw=inflows,
            start_position_value_raw=start_value_raw,
            end_position_value_raw=end_value_raw,
        ),
    )
