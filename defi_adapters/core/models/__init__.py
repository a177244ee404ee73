"""Core data models for DeFi adapters."""

from .token import Erc20Metadata, PositionType, TokenType
from .position import ProtocolPosition, Underlying
from .movement import MovementsByBlock, TokenMovement
from .results import ProtocolTokenApr, ProtocolTokenApy, ProtocolTokenTvl, UnderlyingTokenRate
from .profit import CalculationData, ProfitsWithRange, ProtocolTokenProfits, UnderlyingProfit
from .protocol import ProtocolDetails

__all__ = [
    "Erc20Metadata",
    "PositionType",
    "TokenType",
    "ProtocolPosition",
    "Underlying",
    "MovementsByBlock",
    "TokenMovement",
    "ProtocolTokenApr",
    "ProtocolTokenApy",
    "ProtocolTokenTvl",
    "UnderlyingTokenRate",
    "CalculationData",
    "ProfitsWithRange",
    "ProtocolTokenProfits",
    "UnderlyingProfit",
    "ProtocolDetails",
]
