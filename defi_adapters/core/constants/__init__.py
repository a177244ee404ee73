"""Core constants module.

Re-exports all constants for convenience.
"""

from defi_adapters.core.constants.generic import (
    SECONDS_PER_YEAR,
    WAD,
    RAY,
    HALF_RAY,
    PERCENTAGE_FACTOR,
    HALF_PERCENTAGE_FACTOR,
    MAX_UINT256,
    ZERO_ADDRESS,
)

from defi_adapters.core.constants.chains import Chain
from defi_adapters.core.constants.protocols import Protocol

__all__ = [
    # Generic
    "SECONDS_PER_YEAR",
    "WAD",
    "RAY",
    "HALF_RAY",
    "PERCENTAGE_FACTOR",
    "HALF_PERCENTAGE_FACTOR",
    "MAX_UINT256",
    "ZERO_ADDRESS",
    # Chains
    "Chain",
    # Protocols
    "Protocol",
]
