"""Annualised peer-to-peer rates for Morpho-AaveV3 markets.

Same blend as the index computation, applied to the pool's current per-year
rates instead of index growth. Used for APR/APY display.
"""

from .market import MarketSideDelta
from .ray_math import ONE, percent_mul, ray_div_up, ray_min, ray_mul, weighted_avg


def _proportion_delta(delta: MarketSideDelta, pool_index: int, p2p_index: int, cap: int) -> int:
    return ray_min(
        ray_div_up(
            ray_mul(delta.scaled_delta, pool_index),
            ray_mul(delta.scaled_p2p_total, p2p_index),
        ),
        cap,
    )


def compute_p2p_supply_rate_per_year(
    pool_supply_rate_per_year: int,
    pool_borrow_rate_per_year: int,
    pool_index: int,
    p2p_index: int,
    proportion_idle: int,
    p2p_index_cursor: int,
    reserve_factor: int,
    delta: MarketSideDelta,
) -> int:
    """
    Peer-to-peer supply rate per year (ray).

    The matched part earns the cursor-blended rate minus the reserve factor
    share of the spread, the delta part earns the pool supply rate and the
    idle part earns nothing.

    Args:
        pool_supply_rate_per_year: Pool current liquidity rate
        pool_borrow_rate_per_year: Pool current variable borrow rate
        pool_index: Pool supply index
        p2p_index: Current peer-to-peer supply index
        proportion_idle: Proportion of idle supply (ray)
        p2p_index_cursor: Peer-to-peer index cursor in basis points
        reserve_factor: Reserve factor in basis points
        delta: Supply side deltas

    Returns:
        Supply rate per year in ray
    """
    if pool_supply_rate_per_year > pool_borrow_rate_per_year:
        p2p_supply_rate = pool_borrow_rate_per_year
    else:
        p2p_rate = weighted_avg(pool_supply_rate_per_year, pool_borrow_rate_per_year, p2p_index_cursor)
        p2p_supply_rate = p2p_rate - percent_mul(p2p_rate - pool_supply_rate_per_year, reserve_factor)

    if delta.scaled_p2p_total == 0 or (delta.scaled_delta == 0 and proportion_idle == 0):
        return p2p_supply_rate

    proportion_delta = _proportion_delta(delta, pool_index, p2p_index, ONE - proportion_idle)

    return ray_mul(p2p_supply_rate, ONE - proportion_delta - proportion_idle) + ray_mul(
        pool_supply_rate_per_year, proportion_delta
    )


def compute_p2p_borrow_rate_per_year(
    pool_supply_rate_per_year: int,
    pool_borrow_rate_per_year: int,
    pool_index: int,
    p2p_index: int,
    p2p_index_cursor: int,
    reserve_factor: int,
    delta: MarketSideDelta,
) -> int:
    """
    Peer-to-peer borrow rate per year (ray).

    Idle supply has no borrow-side counterpart, so only the delta share is
    moved to the pool borrow rate.
    """
    if pool_supply_rate_per_year > pool_borrow_rate_per_year:
        p2p_borrow_rate = pool_borrow_rate_per_year
    else:
        p2p_rate = weighted_avg(pool_supply_rate_per_year, pool_borrow_rate_per_year, p2p_index_cursor)
        p2p_borrow_rate = p2p_rate + percent_mul(pool_borrow_rate_per_year - p2p_rate, reserve_factor)

    if delta.scaled_delta == 0 or delta.scaled_p2p_total == 0:
        return p2p_borrow_rate

    proportion_delta = _proportion_delta(delta, pool_index, p2p_index, ONE)

    return ray_mul(p2p_borrow_rate, ONE - proportion_delta) + ray_mul(pool_borrow_rate_per_year, proportion_delta)
