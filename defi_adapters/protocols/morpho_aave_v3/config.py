"""Morpho-AaveV3 protocol configuration and contract addresses."""

from dataclasses import dataclass

from defi_adapters.core.constants import Chain

from .assets import BORROW_PROTOCOL_TOKEN_ADDRESS, WETH_ADDRESS

# Product identifiers
SUPPLY_PRODUCT_ID = "optimizer-supply"
BORROW_PROTOCOL_PRODUCT_ID = "optimizer-borrow"


@dataclass(frozen=True)
class MorphoAaveV3Config:
    """Contract addresses of one Morpho-AaveV3 deployment.

    Passed to adapters at construction time; never mutated.
    """

    chain: Chain
    morpho_address: str
    pool_address: str
    oracle_address: str
    borrow_protocol_token_address: str
    borrow_underlying_token_address: str


# Morpho-AaveV3 ETH Optimizer (Ethereum mainnet)
MORPHO_AAVE_V3_ETHEREUM = MorphoAaveV3Config(
    chain=Chain.ETHEREUM,
    morpho_address="0x33333aea097c193e66081e930c33020272b33333",
    pool_address="0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
    oracle_address="0xA50ba011c48153De246E5192C8f9258A2ba79Ca9",
    borrow_protocol_token_address=BORROW_PROTOCOL_TOKEN_ADDRESS,
    borrow_underlying_token_address=WETH_ADDRESS,
)
