"""Position data models for user balances held through an adapter."""

from dataclasses import dataclass, field
from typing import List

from defi_adapters.core.units import format_units

from .token import Erc20Metadata, TokenType


@dataclass
class Underlying:
    """Underlying token balance backing a protocol token position."""

    address: str
    name: str
    symbol: str
    decimals: int
    balance_raw: int
    type: TokenType = TokenType.UNDERLYING

    @property
    def balance(self) -> str:
        """Human-readable balance."""
        return format_units(self.balance_raw, self.decimals)

    @classmethod
    def from_metadata(cls, token: Erc20Metadata, balance_raw: int) -> "Underlying":
        return cls(
            address=token.address,
            name=token.name,
            symbol=token.symbol,
            decimals=token.decimals,
            balance_raw=balance_raw,
        )


@dataclass
class ProtocolPosition:
    """User position in a protocol token, with its underlying breakdown."""

    address: str
    name: str
    symbol: str
    decimals: int
    balance_raw: int
    tokens: List[Underlying] = field(default_factory=list)
    type: TokenType = TokenType.PROTOCOL

    @property
    def balance(self) -> str:
        """Human-readable balance."""
        return format_units(self.balance_raw, self.decimals)

