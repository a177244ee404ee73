"""Error taxonomy shared by adapters and the interest-rate core."""

from typing import Optional


class AdapterError(Exception):
    """Base class for all adapter errors."""


class DivisionByZero(AdapterError, ZeroDivisionError):
    """Fixed-point division with a zero divisor."""


class MarketNotFound(AdapterError, LookupError):
    """A protocol token address has no resolved metadata entry."""

    def __init__(self, protocol_token_address: str):
        self.protocol_token_address = protocol_token_address
        super().__init__(f"Protocol token pool not found: {protocol_token_address}")


class TokenMetadataNotFound(AdapterError, LookupError):
    """Token metadata is neither in the static files nor readable on-chain."""

    def __init__(self, token_address: str, chain_id: int):
        self.token_address = token_address
        self.chain_id = chain_id
        super().__init__(f"Cannot find token metadata for {token_address} on chain {chain_id}")


class NotImplementedAdapterError(AdapterError, NotImplementedError):
    """Capability intentionally not provided by an adapter."""

    def __init__(self, capability: Optional[str] = None):
        message = f"{capability} is not implemented" if capability else "Not implemented"
        super().__init__(message)


class UpstreamReadFailure(AdapterError):
    """A chain or event read failed. The original exception is chained."""
