"""Morpho-AaveV3 protocol-specific implementations.

Configuration: defi_adapters.protocols.morpho_aave_v3.config
Ray math: defi_adapters.protocols.morpho_aave_v3.ray_math
Peer-to-peer indexes: defi_adapters.protocols.morpho_aave_v3.p2p_indexes
Peer-to-peer rates: defi_adapters.protocols.morpho_aave_v3.p2p_rates
Reconciliation: defi_adapters.protocols.morpho_aave_v3.reconciler
"""

from .config import (
    BORROW_PROTOCOL_PRODUCT_ID,
    MORPHO_AAVE_V3_ETHEREUM,
    SUPPLY_PRODUCT_ID,
    MorphoAaveV3Config,
)
from .market import (
    MarketDeltas,
    MarketIndexes,
    MarketSideDelta,
    MarketSideIndexes,
    MarketSnapshot,
    PoolReserve,
)
from .p2p_indexes import P2PIndexes, compute_p2p_indexes, compute_proportion_idle
from .p2p_rates import compute_p2p_borrow_rate_per_year, compute_p2p_supply_rate_per_year
from .reconciler import blended_rate, total_amount

__all__ = [
    "BORROW_PROTOCOL_PRODUCT_ID",
    "MORPHO_AAVE_V3_ETHEREUM",
    "SUPPLY_PRODUCT_ID",
    "MorphoAaveV3Config",
    "MarketDeltas",
    "MarketIndexes",
    "MarketSideDelta",
    "MarketSideIndexes",
    "MarketSnapshot",
    "PoolReserve",
    "P2PIndexes",
    "compute_p2p_indexes",
    "compute_proportion_idle",
    "compute_p2p_borrow_rate_per_year",
    "compute_p2p_supply_rate_per_year",
    "blended_rate",
    "total_amount",
]
