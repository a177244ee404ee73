"""EVM chain identifiers."""

from enum import IntEnum


class Chain(IntEnum):
    """Supported EVM chains keyed by chain id."""

    ETHEREUM = 1
    OPTIMISM = 10
    BSC = 56
    POLYGON = 137
    FANTOM = 250
    BASE = 8453
    ARBITRUM = 42161
    AVALANCHE = 43114
    LINEA = 59144

    @property
    def chain_name(self) -> str:
        """Lower-case name used in metadata file names."""
        return self.name.lower()

