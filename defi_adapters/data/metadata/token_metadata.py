"""ERC20 token metadata resolution.

Lookup order: static JSON file bundled per chain, then the disk cache of
earlier on-chain lookups, then a live ERC20 read. Resolution fails with
``TokenMetadataNotFound`` only when all three come up empty.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from defi_adapters.core.constants import Chain
from defi_adapters.core.errors import TokenMetadataNotFound, UpstreamReadFailure
from defi_adapters.core.models import Erc20Metadata
from defi_adapters.data.cache.disk_cache import CacheKeys, DiskCache
from defi_adapters.data.sources.chain_reader import ChainReader
from defi_adapters.data.sources.erc20 import ERC20_ABI, ERC20_BYTES32_ABI

logger = logging.getLogger(__name__)

TOKENS_DIR = Path(__file__).parent / "tokens"


@lru_cache()
def load_static_token_metadata(chain: Chain) -> Dict[str, Dict[str, Any]]:
    """Load the bundled token metadata file of a chain, keyed by lower-cased address."""
    file_path = TOKENS_DIR / f"{chain.chain_name}.json"
    if not file_path.exists():
        return {}

    with open(file_path, "r") as f:
        data = json.load(f)

    return {address.lower(): token for address, token in data.items()}


def decode_bytes32(value: bytes) -> str:
    """Decode a right-padded bytes32 string."""
    return value.rstrip(b"\x00").decode("utf-8", errors="replace")


class TokenMetadataResolver:
    """Resolves token identity on the chain of a ``ChainReader``."""

    def __init__(self, chain_reader: ChainReader, cache: Optional[DiskCache] = None):
        self.chain_reader = chain_reader
        self.cache = cache

    @property
    def chain(self) -> Chain:
        return self.chain_reader.chain

    async def get_token_metadata(self, token_address: str) -> Erc20Metadata:
        """
        Resolve ERC20 metadata for a token.

        Args:
            token_address: Token address (any case)

        Returns:
            Erc20Metadata with a lower-cased address

        Raises:
            TokenMetadataNotFound: If the token is unknown and cannot be read on-chain
        """
        address = token_address.lower()

        static_token = load_static_token_metadata(self.chain).get(address)
        if static_token:
            logger.debug(f"Token metadata for {address} found in static file")
            return Erc20Metadata.from_dict(static_token)

        if self.cache is None:
            return await self._resolve_on_chain(address)

        cache_key = CacheKeys.token_metadata(self.chain.value, address)
        cached = await self.cache.get_or_set_async(cache_key, lambda: self._resolve_on_chain_dict(address))
        return Erc20Metadata.from_dict(cached)

    def close(self):
        if self.cache is not None:
            self.cache.close()

    async def _resolve_on_chain(self, address: str) -> Erc20Metadata:
        token = await self._fetch_on_chain(address)
        if token is None:
            logger.error(f"Cannot find token metadata for {address} on {self.chain.chain_name}")
            raise TokenMetadataNotFound(address, self.chain.value)

        logger.debug(f"Token metadata for {address} found on chain")
        return token

    async def _resolve_on_chain_dict(self, address: str) -> Dict[str, Any]:
        return (await self._resolve_on_chain(address)).to_dict()

    async def _fetch_on_chain(self, address: str) -> Optional[Erc20Metadata]:
        contract = self.chain_reader.contract(address, ERC20_ABI)
        try:
            name = await self._read_string(address, contract.functions.name(), "name")
            symbol = await self._read_string(address, contract.functions.symbol(), "symbol")
            decimals = await self.chain_reader.call(contract.functions.decimals())
        except UpstreamReadFailure as e:
            logger.warning(f"Failed to fetch token metadata on-chain for {address}: {e}")
            return None

        return Erc20Metadata(address=address, name=name, symbol=symbol, decimals=int(decimals))

    async def _read_string(self, address: str, fn, field: str) -> str:
        try:
            return await self.chain_reader.call(fn)
        except UpstreamReadFailure:
            logger.warning(f"Failed to fetch token {field} of {address} as a string. Using bytes32 fallback")

        fallback = self.chain_reader.contract(address, ERC20_BYTES32_ABI)
        raw = await self.chain_reader.call(getattr(fallback.functions, field)())
        return decode_bytes32(raw)
