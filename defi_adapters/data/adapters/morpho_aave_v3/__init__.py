"""Morpho-AaveV3 optimizer adapters."""

from .adapter import MorphoAaveV3PoolAdapter, PoolMetadata
from .parser import MorphoAaveV3Parser

__all__ = ["MorphoAaveV3PoolAdapter", "PoolMetadata", "MorphoAaveV3Parser"]
