"""Rate-limited read-only access to one EVM chain."""

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from aiolimiter import AsyncLimiter
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract.async_contract import AsyncContract, AsyncContractEvent, AsyncContractFunction
from web3.exceptions import Web3Exception

from config.settings import Settings, get_settings
from defi_adapters.core.constants import Chain
from defi_adapters.core.errors import UpstreamReadFailure

logger = logging.getLogger(__name__)


class ChainReader:
    """Point-in-time contract calls and event queries against one chain.

    Every read goes through the same rate limiter. Failures are raised as
    ``UpstreamReadFailure`` with the original exception chained; there are
    no retries.
    """

    def __init__(self, chain: Chain, settings: Optional[Settings] = None):
        self.chain = chain
        self.settings = settings or get_settings()
        self._web3: Optional[AsyncWeb3] = None
        self._rate_limiter = AsyncLimiter(self.settings.rpc_rate_limit, self.settings.rpc_rate_window)

    def _get_web3(self) -> AsyncWeb3:
        """Get or create Web3 instance."""
        if self._web3 is None:
            rpc_url = self.settings.rpc_urls.get(self.chain)
            if not rpc_url:
                raise ValueError(
                    f"RPC URL not configured for {self.chain.chain_name}. "
                    f"Set {self.chain.chain_name.upper()}_RPC_URL in .env"
                )
            self._web3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        return self._web3

    def contract(self, address: str, abi: List[Dict[str, Any]]) -> AsyncContract:
        """Bind an ABI to a contract address."""
        web3 = self._get_web3()
        return web3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)

    async def call(self, fn: AsyncContractFunction, block_number: Optional[int] = None) -> Any:
        """
        Call a view function as of a block.

        Args:
            fn: Contract function with its arguments bound
            block_number: Block to read at (None = latest)

        Returns:
            Decoded return value

        Raises:
            UpstreamReadFailure: If the call fails
        """
        block_identifier = block_number if block_number is not None else "latest"
        try:
            async with self._rate_limiter:
                return await fn.call(block_identifier=block_identifier)
        except (Web3Exception, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Call {fn.fn_name} failed on {self.chain.chain_name} at block {block_identifier}: {e}")
            raise UpstreamReadFailure(f"Call {fn.fn_name} failed: {e}") from e

    async def get_events(
        self,
        event: AsyncContractEvent,
        argument_filters: Dict[str, Any],
        from_block: int,
        to_block: int,
    ) -> List[Any]:
        """
        Fetch decoded events in a block range.

        Args:
            event: Contract event to query
            argument_filters: Filters on indexed event arguments
            from_block: Starting block number
            to_block: Ending block number

        Returns:
            Decoded events sorted by block number, then log index

        Raises:
            UpstreamReadFailure: If the query fails
        """
        try:
            async with self._rate_limiter:
                logs = await event.get_logs(
                    argument_filters=argument_filters,
                    from_block=from_block,
                    to_block=to_block,
                )
        except (Web3Exception, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {event.event_name} events on {self.chain.chain_name}: {e}")
            raise UpstreamReadFailure(f"Fetching {event.event_name} events failed: {e}") from e

        logger.debug(f"Fetched {len(logs)} {event.event_name} events in blocks {from_block}-{to_block}")
        return sorted(logs, key=lambda log: (log["blockNumber"], log["logIndex"]))

    async def get_block_number(self) -> int:
        """Get the current block number."""
        web3 = self._get_web3()
        try:
            async with self._rate_limiter:
                return await web3.eth.block_number
        except (Web3Exception, OSError, asyncio.TimeoutError) as e:
            raise UpstreamReadFailure(f"Fetching block number failed: {e}") from e

    @staticmethod
    async def gather(*aws: Awaitable[Any]) -> List[Any]:
        """Await independent reads concurrently, failing on the first error."""
        return list(await asyncio.gather(*aws))

    async def close(self):
        """Close the provider."""
        if self._web3 is not None:
            provider = self._web3.provider
            if hasattr(provider, "disconnect"):
                await provider.disconnect()
        self._web3 = None
