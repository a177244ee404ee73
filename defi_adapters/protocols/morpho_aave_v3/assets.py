"""Token addresses used by the Morpho-AaveV3 adapters (Ethereum mainnet)."""

WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

# Protocol token reported for the optimizer borrow product
BORROW_PROTOCOL_TOKEN_ADDRESS = "0x4d5f47fa6a74757f35c14fd3a6ef8e3c9bc514e8"
