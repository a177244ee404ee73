"""Protocol product description."""

from dataclasses import dataclass

from defi_adapters.core.constants import Chain, Protocol

from .token import PositionType


@dataclass(frozen=True)
class ProtocolDetails:
    """Static description of an adapter's product."""

    protocol_id: Protocol
    name: str
    description: str
    site_url: str
    icon_url: str
    position_type: PositionType
    chain_id: Chain
    product_id: str
