"""Movement models for event-based deposits, withdrawals, borrows and repays."""

from dataclasses import dataclass, field
from typing import Dict

from defi_adapters.core.units import format_units

from .token import Erc20Metadata


@dataclass
class TokenMovement:
    """Amount of one underlying token moved by a single event."""

    address: str
    name: str
    symbol: str
    decimals: int
    movement_value_raw: int
    transaction_hash: str

    @property
    def movement_value(self) -> str:
        return format_units(self.movement_value_raw, self.decimals)


@dataclass
class MovementsByBlock:
    """Movements emitted by one event log."""

    protocol_token: Erc20Metadata
    block_number: int
    log_index: int = 0
    underlying_tokens_movement: Dict[str, TokenMovement] = field(default_factory=dict)
