"""Peer-to-peer and pool amount reconciliation."""

from .ray_math import ray_div, ray_mul


def total_amount(scaled_p2p_total: int, new_p2p_index: int, pool_held_raw: int) -> int:
    """Total market amount: matched peer-to-peer amount plus what Morpho holds on the pool."""
    return ray_mul(scaled_p2p_total, new_p2p_index) + pool_held_raw


def blended_rate(p2p_rate: int, p2p_amount: int, pool_rate: int, pool_amount: int) -> int:
    """
    Amount-weighted average of the peer-to-peer and pool rates.

    Args:
        p2p_rate: Peer-to-peer rate per year (ray)
        p2p_amount: Raw amount matched peer-to-peer
        pool_rate: Pool rate per year (ray)
        pool_amount: Raw amount held on the pool

    Returns:
        Blended rate per year (ray), the pool rate when the market is empty
    """
    total = p2p_amount + pool_amount
    if total == 0:
        return pool_rate
    return ray_div(ray_mul(p2p_rate, p2p_amount) + ray_mul(pool_rate, pool_amount), total)
