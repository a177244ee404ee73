"""Rate and total-value-locked result models."""

from dataclasses import dataclass
from decimal import Decimal

from defi_adapters.core.units import format_units

from .token import Erc20Metadata, TokenType


@dataclass
class ProtocolTokenApr:
    """APR of a protocol token, as a percentage (5.0 = 5%)."""

    address: str
    name: str
    symbol: str
    decimals: int
    apr_decimal: Decimal

    @classmethod
    def from_metadata(cls, token: Erc20Metadata, apr_decimal: Decimal) -> "ProtocolTokenApr":
        return cls(token.address, token.name, token.symbol, token.decimals, apr_decimal)


@dataclass
class ProtocolTokenApy:
    """APY of a protocol token, as a percentage (5.0 = 5%)."""

    address: str
    name: str
    symbol: str
    decimals: int
    apy_decimal: Decimal

    @classmethod
    def from_metadata(cls, token: Erc20Metadata, apy_decimal: Decimal) -> "ProtocolTokenApy":
        return cls(token.address, token.name, token.symbol, token.decimals, apy_decimal)


@dataclass
class UnderlyingTokenRate:
    """Amount of underlying token backing one whole protocol token."""

    address: str
    name: str
    symbol: str
    decimals: int
    underlying_rate_raw: int
    type: TokenType = TokenType.UNDERLYING

    @property
    def underlying_rate(self) -> str:
        return format_units(self.underlying_rate_raw, self.decimals)


@dataclass
class ProtocolTokenTvl:
    """Total value locked in a protocol token market."""

    address: str
    name: str
    symbol: str
    decimals: int
    total_supply_raw: int
    type: TokenType = TokenType.PROTOCOL

    @property
    def total_supply(self) -> str:
        return format_units(self.total_supply_raw, self.decimals)
