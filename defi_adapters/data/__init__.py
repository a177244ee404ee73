"""Data layer for DeFi adapters: chain reads, metadata and protocol adapters."""

from .cache.disk_cache import CacheKeys, DiskCache
from .sources.chain_reader import ChainReader
from .metadata.store import MetadataFileStore, MetadataKey
from .metadata.token_metadata import TokenMetadataResolver
from .adapters.base import ProtocolAdapter
from .adapters.registry import AdapterRegistry, register_default_adapters

__all__ = [
    "CacheKeys",
    "DiskCache",
    "ChainReader",
    "MetadataFileStore",
    "MetadataKey",
    "TokenMetadataResolver",
    "ProtocolAdapter",
    "AdapterRegistry",
    "register_default_adapters",
]
