"""Protocol identifiers."""

from enum import Enum


class Protocol(str, Enum):
    """Protocol ids as used in metadata paths and filters."""

    AAVE_V2 = "aave-v2"
    AAVE_V3 = "aave-v3"
    COMPOUND_V2 = "compound-v2"
    CURVE = "curve"
    GMX = "gmx"
    LIDO = "lido"
    MAKER = "maker"
    MORPHO_AAVE_V2 = "morpho-aave-v2"
    MORPHO_AAVE_V3 = "morpho-aave-v3"
    MORPHO_BLUE = "morpho-blue"
    MORPHO_COMPOUND_V2 = "morpho-compound-v2"
    STARGATE = "stargate"
    UNISWAP_V3 = "uniswap-v3"
