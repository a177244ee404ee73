"""Base protocol adapter interface.

Defines the interface every protocol adapter implements, so positions,
rates, TVL and profits can be queried the same way for any protocol
product on any chain.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from defi_adapters.core.constants import Chain, Protocol
from defi_adapters.core.errors import NotImplementedAdapterError
from defi_adapters.core.models import (
    Erc20Metadata,
    MovementsByBlock,
    ProfitsWithRange,
    ProtocolDetails,
    ProtocolPosition,
    ProtocolTokenApr,
    ProtocolTokenApy,
    ProtocolTokenTvl,
    UnderlyingTokenRate,
)
from defi_adapters.data.metadata.store import MetadataKey
from defi_adapters.data.sources.chain_reader import ChainReader


class ProtocolAdapter(ABC):
    """Abstract base class for protocol product adapters.

    One instance serves one product of one protocol on one chain.
    """

    chain_reader: ChainReader

    @property
    @abstractmethod
    def protocol(self) -> Protocol:
        """Return the protocol this adapter serves."""
        ...

    @property
    @abstractmethod
    def chain(self) -> Chain:
        """Return the chain this adapter reads from."""
        ...

    @property
    @abstractmethod
    def product_id(self) -> str:
        """Return the product identifier within the protocol."""
        ...

    @property
    def metadata_key(self) -> MetadataKey:
        """Key of the metadata file of this product."""
        return MetadataKey(protocol=self.protocol, product=self.product_id, chain=self.chain)

    @abstractmethod
    def get_protocol_details(self) -> ProtocolDetails:
        """Return static protocol and product details."""
        ...

    # ========== METADATA METHODS ==========

    @abstractmethod
    async def build_metadata(self) -> Dict[str, Any]:
        """Build the protocol token to underlying token metadata from chain state.

        Returns:
            JSON-serialisable metadata keyed by protocol token address
        """
        ...

    @abstractmethod
    async def get_protocol_tokens(self) -> List[Erc20Metadata]:
        """Return the protocol tokens of this product."""
        ...

    # ========== POSITION METHODS ==========

    @abstractmethod
    async def get_positions(
        self,
        user_address: str,
        block_number: Optional[int] = None,
    ) -> List[ProtocolPosition]:
        """Fetch non-zero positions of a user.

        Args:
            user_address: Address of the user
            block_number: Block to read at (None = latest)

        Returns:
            List of ProtocolPosition objects
        """
        ...

    @abstractmethod
    async def get_profits(
        self,
        user_address: str,
        from_block: int,
        to_block: int,
    ) -> ProfitsWithRange:
        """Compute the profit of a user's positions over a block range."""
        ...

    # ========== MOVEMENT METHODS ==========

    @abstractmethod
    async def get_deposits(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        ...

    @abstractmethod
    async def get_withdrawals(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        ...

    async def get_claimed_rewards(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        raise NotImplementedAdapterError("get_claimed_rewards")

    async def get_claimable_rewards(
        self,
        user_address: str,
        block_number: Optional[int] = None,
    ) -> List[ProtocolPosition]:
        raise NotImplementedAdapterError("get_claimable_rewards")

    # ========== MARKET METHODS ==========

    @abstractmethod
    async def get_total_value_locked(
        self,
        block_number: Optional[int] = None,
    ) -> List[ProtocolTokenTvl]:
        """Return the total amount held by each protocol token."""
        ...

    @abstractmethod
    async def get_apr(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> ProtocolTokenApr:
        ...

    @abstractmethod
    async def get_apy(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> ProtocolTokenApy:
        ...

    async def get_protocol_token_to_underlying_token_rate(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> List[UnderlyingTokenRate]:
        raise NotImplementedAdapterError("get_protocol_token_to_underlying_token_rate")

    async def close(self):
        """Release resources held by the adapter."""
        pass
