"""Generic constants for DeFi protocol calculations.

These constants are protocol-agnostic and can be used across different protocols.
"""

# Time constants
SECONDS_PER_YEAR = 365 * 24 * 3600  # 31,536,000 (Aave/Morpho convention)

# Precision constants
WAD = 10**18  # Standard 18 decimal precision
RAY = 10**27  # 27 decimal precision (Aave / Morpho-AaveV3 indexes and rates)
HALF_RAY = RAY // 2

# Basis points
PERCENTAGE_FACTOR = 10_000  # 100.00%
HALF_PERCENTAGE_FACTOR = PERCENTAGE_FACTOR // 2

# Largest value representable by a uint256 on-chain
MAX_UINT256 = 2**256 - 1

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
