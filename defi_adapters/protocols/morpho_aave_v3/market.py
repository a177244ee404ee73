"""Point-in-time market state of a Morpho-AaveV3 market.

Every value is a ray-scaled int unless noted otherwise. Snapshots are built
fresh for each query since the underlying state changes every block.
"""

from dataclasses import dataclass

from defi_adapters.core.constants import PERCENTAGE_FACTOR


@dataclass(frozen=True)
class MarketSideIndexes:
    """Pool and peer-to-peer index of one market side."""

    pool_index: int
    p2p_index: int


@dataclass(frozen=True)
class MarketIndexes:
    """Indexes of both market sides as of the last market update."""

    supply: MarketSideIndexes
    borrow: MarketSideIndexes


@dataclass(frozen=True)
class MarketSideDelta:
    """Unmatched peer-to-peer liquidity of one market side.

    ``scaled_delta`` is scaled by the pool index, ``scaled_p2p_total`` by the
    peer-to-peer index.
    """

    scaled_delta: int
    scaled_p2p_total: int

    def __post_init__(self):
        if self.scaled_delta < 0 or self.scaled_p2p_total < 0:
            raise ValueError("Market deltas must be non-negative")


@dataclass(frozen=True)
class MarketDeltas:
    supply: MarketSideDelta
    borrow: MarketSideDelta


@dataclass(frozen=True)
class PoolReserve:
    """Aave pool reserve indexes and per-year rates for the market's underlying."""

    liquidity_index: int
    variable_borrow_index: int
    current_liquidity_rate: int
    current_variable_borrow_rate: int


@dataclass(frozen=True)
class MarketSnapshot:
    """Morpho market state joined with its Aave pool reserve at one block."""

    underlying: str
    indexes: MarketIndexes
    deltas: MarketDeltas
    idle_supply: int
    reserve_factor: int  # Basis points
    p2p_index_cursor: int  # Basis points
    a_token: str
    variable_debt_token: str
    reserve: PoolReserve

    def __post_init__(self):
        if self.idle_supply < 0:
            raise ValueError("Idle supply must be non-negative")
        for name in ("reserve_factor", "p2p_index_cursor"):
            value = getattr(self, name)
            if not 0 <= value <= PERCENTAGE_FACTOR:
                raise ValueError(f"{name} out of range: {value}")
