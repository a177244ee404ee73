"""Profit models for time-windowed profit and loss."""

from dataclasses import dataclass, field
from typing import List

from defi_adapters.core.units import format_units

from .token import TokenType


@dataclass
class CalculationData:
    """Inputs of a profit computation for one underlying token."""

    decimals: int
    withdrawals_raw: int = 0
    deposits_raw: int = 0
    start_position_value_raw: int = 0
    end_position_value_raw: int = 0

    @property
    def withdrawals(self) -> str:
        return format_units(self.withdrawals_raw, self.decimals)

    @property
    def deposits(self) -> str:
        return format_units(self.deposits_raw, self.decimals)

    @property
    def start_position_value(self) -> str:
        return format_units(self.start_position_value_raw, self.decimals)

    @property
    def end_position_value(self) -> str:
        return format_units(self.end_position_value_raw, self.decimals)


@dataclass
class UnderlyingProfit:
    """Profit earned (or interest paid, negative) in one underlying token."""

    address: str
    name: str
    symbol: str
    decimals: int
    profit_raw: int
    calculation_data: CalculationData
    type: TokenType = TokenType.UNDERLYING

    @property
    def profit(self) -> str:
        return format_units(self.profit_raw, self.decimals)


@dataclass
class ProtocolTokenProfits:
    """Profits for every underlying token of one protocol token."""

    address: str
    name: str
    symbol: str
    decimals: int
    tokens: List[UnderlyingProfit] = field(default_factory=list)
    type: TokenType = TokenType.PROTOCOL


@dataclass
class ProfitsWithRange:
    """Profits of a user over ``[from_block, to_block]``."""

    from_block: int
    to_block: int
    tokens: List[ProtocolTokenProfits] = field(default_factory=list)
