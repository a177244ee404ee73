"""Token identity models."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class TokenType(str, Enum):
    """Role of a token inside an adapter result."""

    PROTOCOL = "protocol"
    UNDERLYING = "underlying"
    CLAIMABLE = "claimable"


class PositionType(str, Enum):
    """Kind of position a product represents."""

    SUPPLY = "supply"
    BORROW = "borrow"
    LEND = "lend"
    STAKE = "stake"
    REWARD = "reward"


@dataclass(frozen=True)
class Erc20Metadata:
    """ERC20 token identity."""

    address: str  # Lower-cased token address
    name: str
    symbol: str
    decimals: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Erc20Metadata":
        return cls(
            address=str(data["address"]).lower(),
            name=data["name"],
            symbol=data["symbol"],
            decimals=int(data["decimals"]),
        )
