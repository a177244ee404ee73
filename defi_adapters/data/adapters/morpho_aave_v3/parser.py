"""Morpho-AaveV3 contract response parser.

Converts decoded contract call results and event logs into domain models.
web3 decodes struct outputs as positional tuples, so fields are read by
their position in the ABI.
"""

from typing import Any, Sequence

from web3 import Web3

from defi_adapters.core.models import Erc20Metadata, MovementsByBlock, TokenMovement
from defi_adapters.protocols.morpho_aave_v3.market import (
    MarketDeltas,
    MarketIndexes,
    MarketSideDelta,
    MarketSideIndexes,
    MarketSnapshot,
    PoolReserve,
)

# Morpho market struct positions
_MARKET_INDEXES = 0
_MARKET_DELTAS = 1
_MARKET_UNDERLYING = 2
_MARKET_VARIABLE_DEBT_TOKEN = 5
_MARKET_RESERVE_FACTOR = 7
_MARKET_P2P_INDEX_CURSOR = 8
_MARKET_A_TOKEN = 9
_MARKET_IDLE_SUPPLY = 11

# Aave ReserveData struct positions
_RESERVE_LIQUIDITY_INDEX = 1
_RESERVE_CURRENT_LIQUIDITY_RATE = 2
_RESERVE_VARIABLE_BORROW_INDEX = 3
_RESERVE_CURRENT_VARIABLE_BORROW_RATE = 4
_RESERVE_A_TOKEN_ADDRESS = 8


class MorphoAaveV3Parser:
    """Parser for Morpho-AaveV3 and Aave V3 pool responses."""

    @staticmethod
    def parse_side_indexes(value: Sequence[int]) -> MarketSideIndexes:
        pool_index, p2p_index = value
        return MarketSideIndexes(pool_index=int(pool_index), p2p_index=int(p2p_index))

    @staticmethod
    def parse_side_delta(value: Sequence[int]) -> MarketSideDelta:
        scaled_delta, scaled_p2p_total = value
        return MarketSideDelta(scaled_delta=int(scaled_delta), scaled_p2p_total=int(scaled_p2p_total))

    @staticmethod
    def parse_reserve(value: Sequence[Any]) -> PoolReserve:
        """Parse Aave ``getReserveData`` output."""
        return PoolReserve(
            liquidity_index=int(value[_RESERVE_LIQUIDITY_INDEX]),
            variable_borrow_index=int(value[_RESERVE_VARIABLE_BORROW_INDEX]),
            current_liquidity_rate=int(value[_RESERVE_CURRENT_LIQUIDITY_RATE]),
            current_variable_borrow_rate=int(value[_RESERVE_CURRENT_VARIABLE_BORROW_RATE]),
        )

    @staticmethod
    def parse_reserve_a_token(value: Sequence[Any]) -> str:
        return str(value[_RESERVE_A_TOKEN_ADDRESS]).lower()

    @classmethod
    def parse_market(cls, market: Sequence[Any], reserve: Sequence[Any]) -> MarketSnapshot:
        """
        Join a Morpho ``market`` output with the pool reserve of its underlying.

        Args:
            market: Decoded Morpho market struct
            reserve: Decoded Aave ReserveData struct

        Returns:
            MarketSnapshot for the block both were read at
        """
        supply_indexes, borrow_indexes = market[_MARKET_INDEXES]
        supply_delta, borrow_delta = market[_MARKET_DELTAS]

        return MarketSnapshot(
            underlying=str(market[_MARKET_UNDERLYING]).lower(),
            indexes=MarketIndexes(
                supply=cls.parse_side_indexes(supply_indexes),
                borrow=cls.parse_side_indexes(borrow_indexes),
            ),
            deltas=MarketDeltas(
                supply=cls.parse_side_delta(supply_delta),
                borrow=cls.parse_side_delta(borrow_delta),
            ),
            idle_supply=int(market[_MARKET_IDLE_SUPPLY]),
            reserve_factor=int(market[_MARKET_RESERVE_FACTOR]),
            p2p_index_cursor=int(market[_MARKET_P2P_INDEX_CURSOR]),
            a_token=str(market[_MARKET_A_TOKEN]).lower(),
            variable_debt_token=str(market[_MARKET_VARIABLE_DEBT_TOKEN]).lower(),
            reserve=cls.parse_reserve(reserve),
        )

    @staticmethod
    def parse_movement(
        event: Any,
        protocol_token: Erc20Metadata,
        underlying_token: Erc20Metadata,
    ) -> MovementsByBlock:
        """Convert a decoded Morpho event into a movement of the underlying token."""
        return MovementsByBlock(
            protocol_token=protocol_token,
            block_number=int(event["blockNumber"]),
            log_index=int(event["logIndex"]),
            underlying_tokens_movement={
                underlying_token.address: TokenMovement(
                    address=underlying_token.address,
                    name=underlying_token.name,
                    symbol=underlying_token.symbol,
                    decimals=underlying_token.decimals,
                    movement_value_raw=int(event["args"]["amount"]),
                    transaction_hash=Web3.to_hex(event["transactionHash"]),
                ),
            },
        )
