"""Peer-to-peer index computation for Morpho-AaveV3 markets.

Reproduces the protocol's InterestRatesLib: the peer-to-peer indexes grow at
a rate between the pool supply and pool borrow rates, set by the
``p2p_index_cursor``, minus the reserve factor share of the spread. The part
of peer-to-peer liquidity that is actually on the pool (the delta) grows at
the pool rate and idle supply does not grow at all.

Reference: https://github.com/morpho-org/morpho-aave-v3/blob/main/src/libraries/InterestRatesLib.sol
"""

from dataclasses import dataclass

from .market import MarketDeltas, MarketSideDelta, MarketSideIndexes
from .ray_math import ONE, percent_mul, ray_div, ray_div_up, ray_min, ray_mul, weighted_avg


@dataclass(frozen=True)
class GrowthFactors:
    """Index growth factors since the last market update (ray)."""

    pool_supply_growth_factor: int
    p2p_supply_growth_factor: int
    pool_borrow_growth_factor: int
    p2p_borrow_growth_factor: int


@dataclass(frozen=True)
class P2PIndexes:
    new_p2p_supply_index: int
    new_p2p_borrow_index: int


def compute_proportion_idle(idle_supply: int, supply_delta: MarketSideDelta, supply_p2p_index: int) -> int:
    """
    Share of the peer-to-peer supply that is idle, in ray, clamped to ``[0, RAY]``.

    Args:
        idle_supply: Raw idle supply of the market
        supply_delta: Supply side deltas
        supply_p2p_index: Last peer-to-peer supply index

    Returns:
        Proportion of idle supply (0 when nothing is matched peer-to-peer)
    """
    if idle_supply == 0 or supply_delta.scaled_p2p_total == 0:
        return 0

    total_p2p_supply = ray_mul(supply_delta.scaled_p2p_total, supply_p2p_index)
    if total_p2p_supply == 0:
        return 0

    # Rounding may push the ratio slightly above 1
    return ray_min(ONE, ray_div(idle_supply, total_p2p_supply))


def compute_growth_factors(
    new_pool_supply_index: int,
    new_pool_borrow_index: int,
    last_pool_supply_index: int,
    last_pool_borrow_index: int,
    p2p_index_cursor: int,
    reserve_factor: int,
) -> GrowthFactors:
    """Computes pool and peer-to-peer growth factors since the last update."""
    pool_supply_growth_factor = ray_div(new_pool_supply_index, last_pool_supply_index)
    pool_borrow_growth_factor = ray_div(new_pool_borrow_index, last_pool_borrow_index)

    if pool_supply_growth_factor <= pool_borrow_growth_factor:
        p2p_growth_factor = weighted_avg(pool_supply_growth_factor, pool_borrow_growth_factor, p2p_index_cursor)
        # The reserve factor takes its share of the spread to the pool rate, not of the whole growth
        p2p_supply_growth_factor = p2p_growth_factor - percent_mul(
            p2p_growth_factor - pool_supply_growth_factor, reserve_factor
        )
        p2p_borrow_growth_factor = p2p_growth_factor + percent_mul(
            pool_borrow_growth_factor - p2p_growth_factor, reserve_factor
        )
    else:
        # Pool supply grew faster than pool borrow (flash loan fees): peer-to-peer
        # growth follows the pool borrow growth on both sides.
        p2p_supply_growth_factor = pool_borrow_growth_factor
        p2p_borrow_growth_factor = pool_borrow_growth_factor

    return GrowthFactors(
        pool_supply_growth_factor=pool_supply_growth_factor,
        p2p_supply_growth_factor=p2p_supply_growth_factor,
        pool_borrow_growth_factor=pool_borrow_growth_factor,
        p2p_borrow_growth_factor=p2p_borrow_growth_factor,
    )


def compute_p2p_index(
    pool_growth_factor: int,
    p2p_growth_factor: int,
    last_indexes: MarketSideIndexes,
    delta: MarketSideDelta,
    proportion_idle: int = 0,
) -> int:
    """Computes the new peer-to-peer index of one market side."""
    if delta.scaled_p2p_total == 0 or (delta.scaled_delta == 0 and proportion_idle == 0):
        return ray_mul(last_indexes.p2p_index, p2p_growth_factor)

    share_of_the_delta = ray_min(
        ray_div_up(
            ray_mul(delta.scaled_delta, last_indexes.pool_index),
            ray_mul(delta.scaled_p2p_total, last_indexes.p2p_index),
        ),
        # Keeps share_of_the_delta + proportion_idle <= 1 despite rounding
        ONE - proportion_idle,
    )

    # Idle supply earns nothing: its share is carried at a growth factor of exactly one
    return ray_mul(
        last_indexes.p2p_index,
        ray_mul(p2p_growth_factor, ONE - share_of_the_delta - proportion_idle)
        + ray_mul(pool_growth_factor, share_of_the_delta)
        + proportion_idle,
    )


def compute_p2p_indexes(
    last_supply_indexes: MarketSideIndexes,
    last_borrow_indexes: MarketSideIndexes,
    deltas: MarketDeltas,
    pool_supply_index: int,
    pool_borrow_index: int,
    reserve_factor: int,
    p2p_index_cursor: int,
    proportion_idle: int,
) -> P2PIndexes:
    """
    Computes the current peer-to-peer supply and borrow indexes.

    Args:
        last_supply_indexes: Supply indexes stored at the last market update
        last_borrow_indexes: Borrow indexes stored at the last market update
        deltas: Market deltas
        pool_supply_index: Current pool liquidity index
        pool_borrow_index: Current pool variable borrow index
        reserve_factor: Reserve factor in basis points
        p2p_index_cursor: Peer-to-peer index cursor in basis points
        proportion_idle: Proportion of idle supply (ray), supply side only

    Returns:
        P2PIndexes with both new indexes
    """
    growth_factors = compute_growth_factors(
        new_pool_supply_index=pool_supply_index,
        new_pool_borrow_index=pool_borrow_index,
        last_pool_supply_index=last_supply_indexes.pool_index,
        last_pool_borrow_index=last_borrow_indexes.pool_index,
        p2p_index_cursor=p2p_index_cursor,
        reserve_factor=reserve_factor,
    )

    new_p2p_supply_index = compute_p2p_index(
        pool_growth_factor=growth_factors.pool_supply_growth_factor,
        p2p_growth_factor=growth_factors.p2p_supply_growth_factor,
        last_indexes=last_supply_indexes,
        delta=deltas.supply,
        proportion_idle=proportion_idle,
    )
    new_p2p_borrow_index = compute_p2p_index(
        pool_growth_factor=growth_factors.pool_borrow_growth_factor,
        p2p_growth_factor=growth_factors.p2p_borrow_growth_factor,
        last_indexes=last_borrow_indexes,
        delta=deltas.borrow,
    )

    return P2PIndexes(
        new_p2p_supply_index=new_p2p_supply_index,
        new_p2p_borrow_index=new_p2p_borrow_index,
    )
