"""Adapter registry mapping (protocol, chain, product) to adapter factories.

The table is filled once at startup by ``register_default_adapters`` and
only read afterwards.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from config.settings import Settings, get_settings
from defi_adapters.core.constants import Chain, Protocol
from defi_adapters.data.adapters.base import ProtocolAdapter
from defi_adapters.data.sources.chain_reader import ChainReader

logger = logging.getLogger(__name__)

AdapterKey = Tuple[Protocol, Chain, str]
AdapterFactory = Callable[[Settings, ChainReader], ProtocolAdapter]


class AdapterRegistry:
    """Registry of adapter factories keyed by protocol, chain and product."""

    _factories: Dict[AdapterKey, AdapterFactory] = {}

    @classmethod
    def register(
        cls,
        protocol: Protocol,
        chain: Chain,
        product_id: str,
        factory: AdapterFactory,
    ) -> None:
        """Register an adapter factory.

        Args:
            protocol: Protocol of the adapter
            chain: Chain the adapter reads from
            product_id: Product identifier within the protocol
            factory: Callable creating the adapter from settings and a chain reader
        """
        cls._factories[(protocol, chain, product_id)] = factory
        logger.debug(f"Registered adapter factory for {protocol.value}/{chain.chain_name}/{product_id}")

    @classmethod
    def create_adapter(
        cls,
        protocol: Protocol,
        chain: Chain,
        product_id: str,
        chain_reader: ChainReader,
        settings: Optional[Settings] = None,
    ) -> ProtocolAdapter:
        """Create an adapter.

        Raises:
            ValueError: If no factory is registered for the key
        """
        key = (protocol, chain, product_id)
        if key not in cls._factories:
            available = [f"{p.value}/{c.chain_name}/{product}" for p, c, product in cls._factories]
            raise ValueError(
                f"No adapter registered for {protocol.value}/{chain.chain_name}/{product_id}. "
                f"Available adapters: {available}"
            )

        settings = settings or get_settings()
        adapter = cls._factories[key](settings, chain_reader)
        logger.info(f"Created adapter for {protocol.value}/{chain.chain_name}/{product_id}")
        return adapter

    @classmethod
    def get_available_adapters(
        cls,
        protocols: Optional[List[Protocol]] = None,
        chains: Optional[List[Chain]] = None,
    ) -> List[AdapterKey]:
        """List registered keys, optionally restricted to some protocols and chains."""
        return [
            (protocol, chain, product_id)
            for protocol, chain, product_id in cls._factories
            if (not protocols or protocol in protocols) and (not chains or chain in chains)
        ]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered factories.

        Primarily useful for testing.
        """
        cls._factories.clear()


def register_default_adapters() -> None:
    """Register the built-in adapters.

    Call once during application initialization.
    """
    # Import here to avoid circular imports
    from defi_adapters.core.models import PositionType
    from defi_adapters.data.adapters.morpho_aave_v3.adapter import MorphoAaveV3PoolAdapter
    from defi_adapters.data.cache.disk_cache import DiskCache
    from defi_adapters.data.metadata.store import MetadataFileStore
    from defi_adapters.data.metadata.token_metadata import TokenMetadataResolver
    from defi_adapters.protocols.morpho_aave_v3.config import (
        BORROW_PROTOCOL_PRODUCT_ID,
        MORPHO_AAVE_V3_ETHEREUM,
        SUPPLY_PRODUCT_ID,
    )

    for product_id, position_type in (
        (SUPPLY_PRODUCT_ID, PositionType.SUPPLY),
        (BORROW_PROTOCOL_PRODUCT_ID, PositionType.BORROW),
    ):
        AdapterRegistry.register(
            Protocol.MORPHO_AAVE_V3,
            MORPHO_AAVE_V3_ETHEREUM.chain,
            product_id,
            lambda settings, chain_reader, position_type=position_type: MorphoAaveV3PoolAdapter(
                position_type,
                MORPHO_AAVE_V3_ETHEREUM,
                chain_reader,
                settings=settings,
                metadata_store=MetadataFileStore(settings.metadata_dir),
                token_resolver=TokenMetadataResolver(chain_reader, DiskCache(settings, namespace="token_metadata")),
            ),
        )

    logger.info("Registered default adapters")
