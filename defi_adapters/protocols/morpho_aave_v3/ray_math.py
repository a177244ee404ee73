"""Ray (1e27) fixed-point math matching the on-chain WadRayMath and PercentageMath libraries.

All values are Python ints, so intermediate products never lose precision.
Products larger than a uint256 are rejected the same way the contracts revert.

See:
https://github.com/aave/aave-v3-core/blob/master/contracts/protocol/libraries/math/WadRayMath.sol
https://github.com/aave/aave-v3-core/blob/master/contracts/protocol/libraries/math/PercentageMath.sol
"""

from defi_adapters.core.constants import (
    HALF_PERCENTAGE_FACTOR,
    HALF_RAY,
    MAX_UINT256,
    PERCENTAGE_FACTOR,
    RAY,
)
from defi_adapters.core.errors import DivisionByZero

ONE = RAY


def _check_uint256(value: int, operation: str) -> int:
    if value > MAX_UINT256:
        raise OverflowError(f"{operation} overflow")
    return value


def ray_mul(a: int, b: int) -> int:
    """Multiplies two rays, rounding half up."""
    return _check_uint256(a * b + HALF_RAY, "ray_mul") // RAY


def ray_div(a: int, b: int) -> int:
    """Divides two rays, rounding half up."""
    if b == 0:
        raise DivisionByZero("ray_div by zero")
    return _check_uint256(a * RAY + b // 2, "ray_div") // b


def ray_div_up(a: int, b: int) -> int:
    """Divides two rays, rounding up."""
    if b == 0:
        raise DivisionByZero("ray_div_up by zero")
    return _check_uint256(a * RAY + b - 1, "ray_div_up") // b


def percent_mul(value: int, percentage: int) -> int:
    """Multiplies a value by a basis-point percentage, rounding half up."""
    return _check_uint256(value * percentage + HALF_PERCENTAGE_FACTOR, "percent_mul") // PERCENTAGE_FACTOR


def weighted_avg(x: int, y: int, percentage: int) -> int:
    """Weighted average ``x * (1 - p) + y * p`` with ``p`` in basis points, rounding half up."""
    if percentage > PERCENTAGE_FACTOR:
        raise ValueError(f"Percentage out of range: {percentage}")
    z = x * (PERCENTAGE_FACTOR - percentage) + y * percentage + HALF_PERCENTAGE_FACTOR
    return _check_uint256(z, "weighted_avg") // PERCENTAGE_FACTOR


def ray_min(a: int, b: int) -> int:
    return a if a <= b else b
