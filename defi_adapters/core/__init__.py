"""Core module - models, constants, errors and profit math."""

from .constants import RAY, SECONDS_PER_YEAR, Chain, Protocol
from .errors import (
    AdapterError,
    DivisionByZero,
    MarketNotFound,
    NotImplementedAdapterError,
    TokenMetadataNotFound,
    UpstreamReadFailure,
)
from .models import Erc20Metadata, PositionType, ProtocolPosition, TokenType

__all__ = [
    "RAY",
    "SECONDS_PER_YEAR",
    "Chain",
    "Protocol",
    "AdapterError",
    "DivisionByZero",
    "MarketNotFound",
    "NotImplementedAdapterError",
    "TokenMetadataNotFound",
    "UpstreamReadFailure",
    "Erc20Metadata",
    "PositionType",
    "ProtocolPosition",
    "TokenType",
]
