"""Morpho-AaveV3 optimizer adapter implementing the ProtocolAdapter interface.

One class serves both products; the position type selects which side of
each market (supply or borrow) is read. Market state is re-read on every
call, only the protocol token metadata is cached for the adapter lifetime.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from web3 import Web3

from config.settings import Settings, get_settings
from defi_adapters.core.constants import RAY, SECONDS_PER_YEAR, ZERO_ADDRESS, Chain, Protocol
from defi_adapters.core.errors import MarketNotFound, UpstreamReadFailure
from defi_adapters.core.models import (
    Erc20Metadata,
    MovementsByBlock,
    PositionType,
    ProfitsWithRange,
    ProtocolDetails,
    ProtocolPosition,
    ProtocolTokenApr,
    ProtocolTokenApy,
    ProtocolTokenProfits,
    ProtocolTokenTvl,
    Underlying,
    UnderlyingTokenRate,
)
from defi_adapters.core.profits import aggregate_movements, build_underlying_profit, merge_totals
from defi_adapters.core.units import apr_to_apy
from defi_adapters.data.adapters.base import ProtocolAdapter
from defi_adapters.data.adapters.morpho_aave_v3.parser import MorphoAaveV3Parser
from defi_adapters.data.metadata.store import MetadataFileStore
from defi_adapters.data.metadata.token_metadata import TokenMetadataResolver
from defi_adapters.data.sources.chain_reader import ChainReader
from defi_adapters.protocols.morpho_aave_v3.abis import AAVE_V3_POOL_ABI, ATOKEN_ABI, MORPHO_AAVE_V3_ABI
from defi_adapters.protocols.morpho_aave_v3.config import (
    BORROW_PROTOCOL_PRODUCT_ID,
    SUPPLY_PRODUCT_ID,
    MorphoAaveV3Config,
)
from defi_adapters.protocols.morpho_aave_v3.market import MarketSnapshot
from defi_adapters.protocols.morpho_aave_v3.p2p_indexes import (
    P2PIndexes,
    compute_p2p_indexes,
    compute_proportion_idle,
)
from defi_adapters.protocols.morpho_aave_v3.p2p_rates import (
    compute_p2p_borrow_rate_per_year,
    compute_p2p_supply_rate_per_year,
)
from defi_adapters.protocols.morpho_aave_v3.ray_math import ray_mul
from defi_adapters.protocols.morpho_aave_v3.reconciler import blended_rate, total_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolMetadata:
    """Protocol token and the underlying token it tracks."""

    protocol_token: Erc20Metadata
    underlying_token: Erc20Metadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol_token": self.protocol_token.to_dict(),
            "underlying_token": self.underlying_token.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PoolMetadata":
        return cls(
            protocol_token=Erc20Metadata.from_dict(data["protocol_token"]),
            underlying_token=Erc20Metadata.from_dict(data["underlying_token"]),
        )


@dataclass(frozen=True)
class MarketState:
    """Market snapshot with its derived peer-to-peer values and the amount Morpho holds on the pool."""

    snapshot: MarketSnapshot
    proportion_idle: int
    p2p_indexes: P2PIndexes
    pool_held_raw: int


def _checksum(address: str) -> str:
    return Web3.to_checksum_address(address)


class MorphoAaveV3PoolAdapter(ProtocolAdapter):
    """Adapter for the Morpho-AaveV3 ETH Optimizer supply or borrow product."""

    def __init__(
        self,
        position_type: PositionType,
        config: MorphoAaveV3Config,
        chain_reader: ChainReader,
        settings: Optional[Settings] = None,
        metadata_store: Optional[MetadataFileStore] = None,
        token_resolver: Optional[TokenMetadataResolver] = None,
    ):
        if position_type not in (PositionType.SUPPLY, PositionType.BORROW):
            raise ValueError(f"Unsupported position type: {position_type.value}")

        self.settings = settings or get_settings()
        self.position_type = position_type
        self.config = config
        self.chain_reader = chain_reader
        self.metadata_store = metadata_store
        self.token_resolver = token_resolver or TokenMetadataResolver(chain_reader)
        self._parser = MorphoAaveV3Parser()
        self._morpho = chain_reader.contract(config.morpho_address, MORPHO_AAVE_V3_ABI)
        self._pool = chain_reader.contract(config.pool_address, AAVE_V3_POOL_ABI)
        self._metadata_cache: Optional[Dict[str, PoolMetadata]] = None

    @property
    def protocol(self) -> Protocol:
        return Protocol.MORPHO_AAVE_V3

    @property
    def chain(self) -> Chain:
        return self.config.chain

    @property
    def product_id(self) -> str:
        if self.position_type == PositionType.SUPPLY:
            return SUPPLY_PRODUCT_ID
        return BORROW_PROTOCOL_PRODUCT_ID

    @property
    def is_supply(self) -> bool:
        return self.position_type == PositionType.SUPPLY

    def get_protocol_details(self) -> ProtocolDetails:
        side = "supply" if self.is_supply else "borrow"
        return ProtocolDetails(
            protocol_id=self.protocol,
            name="MorphoAaveV3",
            description=f"MorphoAaveV3 optimizer {side} adapter",
            site_url="https://morpho.org",
            icon_url="https://cdn.morpho.org/images/v2/morpho/favicon.png",
            position_type=self.position_type,
            chain_id=self.chain,
            product_id=self.product_id,
        )

    # ========== METADATA METHODS ==========

    async def build_metadata(self) -> Dict[str, Any]:
        """
        Build protocol token metadata from chain state.

        The supply product lists every market created on Morpho with its
        aToken as protocol token. The optimizer only allows borrowing WETH,
        so the borrow product has a single fixed entry.
        """
        if self.is_supply:
            markets = await self.chain_reader.call(self._morpho.functions.marketsCreated())
            pools = await self.chain_reader.gather(*[self._build_supply_pool(market) for market in markets])
        else:
            protocol_token, underlying_token = await self.chain_reader.gather(
                self.token_resolver.get_token_metadata(self.config.borrow_protocol_token_address),
                self.token_resolver.get_token_metadata(self.config.borrow_underlying_token_address),
            )
            pools = [PoolMetadata(protocol_token=protocol_token, underlying_token=underlying_token)]

        logger.info(f"Built metadata for {len(pools)} {self.product_id} markets on {self.chain.chain_name}")
        return {pool.protocol_token.address: pool.to_dict() for pool in pools}

    async def _build_supply_pool(self, market_address: str) -> PoolMetadata:
        reserve = await self.chain_reader.call(self._pool.functions.getReserveData(_checksum(market_address)))
        a_token_address = self._parser.parse_reserve_a_token(reserve)

        a_token = self.chain_reader.contract(a_token_address, ATOKEN_ABI)
        try:
            underlying_address = await self.chain_reader.call(a_token.functions.UNDERLYING_ASSET_ADDRESS())
        except UpstreamReadFailure as e:
            logger.warning(f"No underlying asset for aToken {a_token_address}: {e}")
            underlying_address = ZERO_ADDRESS

        protocol_token, underlying_token = await self.chain_reader.gather(
            self.token_resolver.get_token_metadata(a_token_address),
            self.token_resolver.get_token_metadata(str(underlying_address)),
        )
        return PoolMetadata(protocol_token=protocol_token, underlying_token=underlying_token)

    async def _get_metadata(self) -> Dict[str, PoolMetadata]:
        if self._metadata_cache is not None:
            return self._metadata_cache

        if self.metadata_store is not None:
            raw = await self.metadata_store.get_or_build(self.metadata_key, self.build_metadata)
        else:
            raw = await self.build_metadata()

        # Concurrent first calls may both build; the results are identical.
        self._metadata_cache = {address.lower(): PoolMetadata.from_dict(pool) for address, pool in raw.items()}
        return self._metadata_cache

    async def _fetch_pool_metadata(self, protocol_token_address: str) -> PoolMetadata:
        pool = (await self._get_metadata()).get(protocol_token_address.lower())
        if pool is None:
            logger.error(f"Protocol token pool not found: {protocol_token_address}")
            raise MarketNotFound(protocol_token_address)
        return pool

    async def get_protocol_tokens(self) -> List[Erc20Metadata]:
        return [pool.protocol_token for pool in (await self._get_metadata()).values()]

    # ========== MARKET STATE ==========

    async def _get_market_state(self, underlying_address: str, block_number: Optional[int]) -> MarketState:
        """Read the market and its pool reserve, then derive the current peer-to-peer indexes."""
        underlying = _checksum(underlying_address)
        market, reserve = await self.chain_reader.gather(
            self.chain_reader.call(self._morpho.functions.market(underlying), block_number),
            self.chain_reader.call(self._pool.functions.getReserveData(underlying), block_number),
        )
        snapshot = self._parser.parse_market(market, reserve)

        # Morpho's share of the pool: aToken for supply, variable debt token for borrow
        pool_token_address = snapshot.a_token if self.is_supply else snapshot.variable_debt_token
        pool_token = self.chain_reader.contract(pool_token_address, ATOKEN_ABI)
        pool_held_raw = await self.chain_reader.call(
            pool_token.functions.balanceOf(_checksum(self.config.morpho_address)),
            block_number,
        )

        proportion_idle = compute_proportion_idle(
            snapshot.idle_supply,
            snapshot.deltas.supply,
            snapshot.indexes.supply.p2p_index,
        )
        p2p_indexes = compute_p2p_indexes(
            last_supply_indexes=snapshot.indexes.supply,
            last_borrow_indexes=snapshot.indexes.borrow,
            deltas=snapshot.deltas,
            pool_supply_index=snapshot.reserve.liquidity_index,
            pool_borrow_index=snapshot.reserve.variable_borrow_index,
            reserve_factor=snapshot.reserve_factor,
            p2p_index_cursor=snapshot.p2p_index_cursor,
            proportion_idle=proportion_idle,
        )
        return MarketState(
            snapshot=snapshot,
            proportion_idle=proportion_idle,
            p2p_indexes=p2p_indexes,
            pool_held_raw=int(pool_held_raw),
        )

    def _p2p_amount(self, state: MarketState) -> int:
        if self.is_supply:
            return ray_mul(state.snapshot.deltas.supply.scaled_p2p_total, state.p2p_indexes.new_p2p_supply_index)
        return ray_mul(state.snapshot.deltas.borrow.scaled_p2p_total, state.p2p_indexes.new_p2p_borrow_index)

    # ========== MARKET METHODS ==========

    async def get_total_value_locked(
        self,
        block_number: Optional[int] = None,
    ) -> List[ProtocolTokenTvl]:
        """Total supplied or borrowed through Morpho per market, matched plus on pool."""
        pools = list((await self._get_metadata()).values())
        states = await self.chain_reader.gather(
            *[self._get_market_state(pool.underlying_token.address, block_number) for pool in pools]
        )

        results = []
        for pool, state in zip(pools, states):
            if self.is_supply:
                scaled_p2p_total = state.snapshot.deltas.supply.scaled_p2p_total
                new_p2p_index = state.p2p_indexes.new_p2p_supply_index
            else:
                scaled_p2p_total = state.snapshot.deltas.borrow.scaled_p2p_total
                new_p2p_index = state.p2p_indexes.new_p2p_borrow_index

            token = pool.protocol_token
            results.append(
                ProtocolTokenTvl(
                    address=token.address,
                    name=token.name,
                    symbol=token.symbol,
                    decimals=token.decimals,
                    total_supply_raw=total_amount(scaled_p2p_total, new_p2p_index, state.pool_held_raw),
                )
            )
        return results

    async def _get_protocol_token_apr(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> Decimal:
        """Blended per-year rate of a market as a fraction (0.05 = 5%)."""
        pool = await self._fetch_pool_metadata(protocol_token_address)
        state = await self._get_market_state(pool.underlying_token.address, block_number)
        snapshot = state.snapshot
        reserve = snapshot.reserve

        if self.is_supply:
            pool_rate = reserve.current_liquidity_rate
            p2p_rate = compute_p2p_supply_rate_per_year(
                pool_supply_rate_per_year=reserve.current_liquidity_rate,
                pool_borrow_rate_per_year=reserve.current_variable_borrow_rate,
                pool_index=reserve.liquidity_index,
                p2p_index=state.p2p_indexes.new_p2p_supply_index,
                proportion_idle=state.proportion_idle,
                p2p_index_cursor=snapshot.p2p_index_cursor,
                reserve_factor=snapshot.reserve_factor,
                delta=snapshot.deltas.supply,
            )
        else:
            pool_rate = reserve.current_variable_borrow_rate
            p2p_rate = compute_p2p_borrow_rate_per_year(
                pool_supply_rate_per_year=reserve.current_liquidity_rate,
                pool_borrow_rate_per_year=reserve.current_variable_borrow_rate,
                pool_index=reserve.variable_borrow_index,
                p2p_index=state.p2p_indexes.new_p2p_borrow_index,
                p2p_index_cursor=snapshot.p2p_index_cursor,
                reserve_factor=snapshot.reserve_factor,
                delta=snapshot.deltas.borrow,
            )

        rate = blended_rate(p2p_rate, self._p2p_amount(state), pool_rate, state.pool_held_raw)
        return Decimal(rate) / Decimal(RAY)

    async def get_apr(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> ProtocolTokenApr:
        apr = await self._get_protocol_token_apr(protocol_token_address, block_number)
        pool = await self._fetch_pool_metadata(protocol_token_address)
        return ProtocolTokenApr.from_metadata(pool.protocol_token, apr * 100)

    async def get_apy(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> ProtocolTokenApy:
        apr = await self._get_protocol_token_apr(protocol_token_address, block_number)
        apy = apr_to_apy(apr, SECONDS_PER_YEAR)
        pool = await self._fetch_pool_metadata(protocol_token_address)
        return ProtocolTokenApy.from_metadata(pool.protocol_token, apy * 100)

    async def get_underlying_token_conversion_rate(
        self,
        protocol_token_address: str,
        block_number: Optional[int] = None,
    ) -> List[UnderlyingTokenRate]:
        """One protocol token is worth one underlying token.

        aToken balances are already scaled by the pool index, so the rate is
        pegged at ``10 ** decimals``.
        """
        pool = await self._fetch_pool_metadata(protocol_token_address)
        underlying = pool.underlying_token
        return [
            UnderlyingTokenRate(
                address=underlying.address,
                name=underlying.name,
                symbol=underlying.symbol,
                decimals=underlying.decimals,
                underlying_rate_raw=10 ** pool.protocol_token.decimals,
            )
        ]

    # ========== POSITION METHODS ==========

    async def _get_balance(self, underlying_address: str, user_address: str, block_number: Optional[int]) -> int:
        underlying = _checksum(underlying_address)
        user = _checksum(user_address)
        if self.is_supply:
            supply_balance, collateral_balance = await self.chain_reader.gather(
                self.chain_reader.call(self._morpho.functions.supplyBalance(underlying, user), block_number),
                self.chain_reader.call(self._morpho.functions.collateralBalance(underlying, user), block_number),
            )
            return int(supply_balance) + int(collateral_balance)
        return int(await self.chain_reader.call(self._morpho.functions.borrowBalance(underlying, user), block_number))

    async def get_positions(
        self,
        user_address: str,
        block_number: Optional[int] = None,
    ) -> List[ProtocolPosition]:
        """Non-zero positions of a user, each backed 1:1 by its underlying token."""
        pools = list((await self._get_metadata()).values())
        balances = await self.chain_reader.gather(
            *[self._get_balance(pool.underlying_token.address, user_address, block_number) for pool in pools]
        )

        positions = []
        for pool, balance_raw in zip(pools, balances):
            if balance_raw == 0:
                continue
            token = pool.protocol_token
            positions.append(
                ProtocolPosition(
                    address=token.address,
                    name=token.name,
                    symbol=token.symbol,
                    decimals=token.decimals,
                    balance_raw=balance_raw,
                    tokens=[Underlying.from_metadata(pool.underlying_token, balance_raw)],
                )
            )
        return positions

    # ========== MOVEMENT METHODS ==========

    async def _get_movements(
        self,
        event_name: str,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        """Movements of one Morpho event type for a user in one market."""
        pool = await self._fetch_pool_metadata(protocol_token_address)
        event = getattr(self._morpho.events, event_name)
        events = await self.chain_reader.get_events(
            event,
            argument_filters={
                "onBehalf": _checksum(user_address),
                "underlying": _checksum(pool.underlying_token.address),
            },
            from_block=from_block,
            to_block=to_block,
        )
        return [self._parser.parse_movement(e, pool.protocol_token, pool.underlying_token) for e in events]

    async def get_deposits(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements("Supplied", user_address, protocol_token_address, from_block, to_block)

    async def get_collateral_deposits(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements(
            "CollateralSupplied", user_address, protocol_token_address, from_block, to_block
        )

    async def get_withdrawals(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements("Withdrawn", user_address, protocol_token_address, from_block, to_block)

    async def get_collateral_withdrawals(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements(
            "CollateralWithdrawn", user_address, protocol_token_address, from_block, to_block
        )

    async def get_borrows(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements("Borrowed", user_address, protocol_token_address, from_block, to_block)

    async def get_repays(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> List[MovementsByBlock]:
        return await self._get_movements("Repaid", user_address, protocol_token_address, from_block, to_block)

    async def _get_flows(
        self,
        user_address: str,
        protocol_token_address: str,
        from_block: int,
        to_block: int,
    ) -> Tuple[Dict[str, int], Dict[str, int]]:
        """Aggregated (inflows, outflows) per underlying token address."""
        args = (user_address, protocol_token_address, from_block, to_block)
        if self.is_supply:
            deposits, collateral_deposits, withdrawals, collateral_withdrawals = await self.chain_reader.gather(
                self.get_deposits(*args),
                self.get_collateral_deposits(*args),
                self.get_withdrawals(*args),
                self.get_collateral_withdrawals(*args),
            )
            events_in = merge_totals(aggregate_movements(deposits), aggregate_movements(collateral_deposits))
            events_out = merge_totals(aggregate_movements(withdrawals), aggregate_movements(collateral_withdrawals))
            return events_in, events_out

        # Borrowing increases the debt, repaying reduces it
        borrows, repays = await self.chain_reader.gather(self.get_borrows(*args), self.get_repays(*args))
        return aggregate_movements(borrows), aggregate_movements(repays)

    async def get_profits(
        self,
        user_address: str,
        from_block: int,
        to_block: int,
    ) -> ProfitsWithRange:
        """
        Profit per underlying token over ``[from_block, to_block]``.

        profit = end + outflows - inflows - start, negated for borrow
        positions. Markets held at either end of the range are included.

        Args:
            user_address: Address of the user
            from_block: Starting block number
            to_block: Ending block number

        Returns:
            ProfitsWithRange with one entry per protocol token
        """
        start_positions, end_positions = await self.chain_reader.gather(
            self.get_positions(user_address, from_block),
            self.get_positions(user_address, to_block),
        )
        start_values = {p.address: p.balance_raw for p in start_positions}
        end_values = {p.address: p.balance_raw for p in end_positions}

        protocol_token_addresses = list(end_values)
        protocol_token_addresses += [a for a in start_values if a not in end_values]

        flows = await self.chain_reader.gather(
            *[self._get_flows(user_address, address, from_block, to_block) for address in protocol_token_addresses]
        )

        tokens = []
        for address, (events_in, events_out) in zip(protocol_token_addresses, flows):
            pool = await self._fetch_pool_metadata(address)
            protocol_token = pool.protocol_token
            tokens.append(
                ProtocolTokenProfits(
                    address=protocol_token.address,
                    name=protocol_token.name,
                    symbol=protocol_token.symbol,
                    decimals=protocol_token.decimals,
                    tokens=[
                        build_underlying_profit(
                            token=pool.underlying_token,
                            start_value_raw=start_values.get(address, 0),
                            end_value_raw=end_values.get(address, 0),
                            events_in=events_in,
                            events_out=events_out,
                            position_type=self.position_type,
                        )
                    ],
                )
            )

        return ProfitsWithRange(from_block=from_block, to_block=to_block, tokens=tokens)

    async def close(self):
        self.token_resolver.close()
        await self.chain_reader.close()
