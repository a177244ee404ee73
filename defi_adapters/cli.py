"""Command line interface for DeFi adapters.

Commands:
    build-metadata   Rebuild adapter metadata files from chain state
    positions        User positions
    apr / apy        Protocol token rates
    tvl              Total value locked per protocol token
    profits          User profits over a block range
"""

import argparse
import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from config.settings import Settings, get_settings
from defi_adapters.core.constants import Chain
from defi_adapters.core.errors import AdapterError
from defi_adapters.data.adapters.base import ProtocolAdapter
from defi_adapters.data.adapters.filters import multi_chain_filter, multi_protocol_filter
from defi_adapters.data.adapters.registry import AdapterRegistry, register_default_adapters
from defi_adapters.data.metadata.store import MetadataFileStore
from defi_adapters.data.sources.chain_reader import ChainReader

logger = logging.getLogger(__name__)

console = Console()


def _create_adapters(args: argparse.Namespace, settings: Settings) -> List[ProtocolAdapter]:
    """Create every registered adapter matching the command filters."""
    keys = AdapterRegistry.get_available_adapters(
        protocols=multi_protocol_filter(args.protocol),
        chains=multi_chain_filter(args.chain),
    )
    if args.product:
        keys = [key for key in keys if key[2] == args.product]

    readers: Dict[Chain, ChainReader] = {}
    adapters = []
    for protocol, chain, product_id in keys:
        if chain not in readers:
            readers[chain] = ChainReader(chain, settings)
        adapters.append(AdapterRegistry.create_adapter(protocol, chain, product_id, readers[chain], settings))
    return adapters


def _adapter_label(adapter: ProtocolAdapter) -> str:
    return f"{adapter.protocol.value}/{adapter.chain.chain_name}/{adapter.product_id}"


async def build_metadata(adapters: List[ProtocolAdapter], settings: Settings, args: argparse.Namespace) -> None:
    store = MetadataFileStore(settings.metadata_dir)
    for adapter in adapters:
        metadata = await adapter.build_metadata()
        path = store.save(adapter.metadata_key, metadata)
        console.print(f"[green]{_adapter_label(adapter)}[/green]: {len(metadata)} markets -> {path}")


async def show_positions(adapters: List[ProtocolAdapter], settings: Settings, args: argparse.Namespace) -> None:
    table = Table(title=f"Positions - {args.user_address}")
    table.add_column("Adapter")
    table.add_column("Token")
    table.add_column("Balance", justify="right")
    table.add_column("Underlying")

    for adapter in adapters:
        for position in await adapter.get_positions(args.user_address, args.block):
            underlying = ", ".join(f"{t.balance} {t.symbol}" for t in position.tokens)
            table.add_row(_adapter_label(adapter), position.symbol, position.balance, underlying)

    console.print(table)


async def show_rates(adapters: List[ProtocolAdapter], settings: Settings, args: argparse.Namespace) -> None:
    is_apy = args.command == "apy"
    table = Table(title="APY" if is_apy else "APR")
    table.add_column("Adapter")
    table.add_column("Token")
    table.add_column("Rate (%)", justify="right")

    for adapter in adapters:
        for token in await adapter.get_protocol_tokens():
            if is_apy:
                rate = (await adapter.get_apy(token.address, args.block)).apy_decimal
            else:
                rate = (await adapter.get_apr(token.address, args.block)).apr_decimal
            table.add_row(_adapter_label(adapter), token.symbol, f"{rate:.4f}")

    console.print(table)


async def show_tvl(adapters: List[ProtocolAdapter], settings: Settings, args: argparse.Namespace) -> None:
    table = Table(title="Total value locked")
    table.add_column("Adapter")
    table.add_column("Token")
    table.add_column("Total", justify="right")

    for adapter in adapters:
        for tvl in await adapter.get_total_value_locked(args.block):
            table.add_row(_adapter_label(adapter), tvl.symbol, tvl.total_supply)

    console.print(table)


async def show_profits(adapters: List[ProtocolAdapter], settings: Settings, args: argparse.Namespace) -> None:
    table = Table(title=f"Profits - {args.user_address}")
    table.add_column("Adapter")
    table.add_column("Token")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Deposits", justify="right")
    table.add_column("Withdrawals", justify="right")
    table.add_column("Profit", justify="right")

    for adapter in adapters:
        to_block = args.to_block
        if to_block is None:
            to_block = await adapter.chain_reader.get_block_number()

        profits = await adapter.get_profits(args.user_address, args.from_block, to_block)
        for protocol_token in profits.tokens:
            for token in protocol_token.tokens:
                data = token.calculation_data
                table.add_row(
                    _adapter_label(adapter),
                    token.symbol,
                    data.start_position_value,
                    data.end_position_value,
                    data.deposits,
                    data.withdrawals,
                    token.profit,
                )

    console.print(table)


COMMANDS = {
    "build-metadata": build_metadata,
    "positions": show_positions,
    "apr": show_rates,
    "apy": show_rates,
    "tvl": show_tvl,
    "profits": show_profits,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="defi-adapters", description="Query DeFi protocol adapters")

    filters = argparse.ArgumentParser(add_help=False)
    filters.add_argument("--chain", help="Comma-separated chain ids or names")
    filters.add_argument("--protocol", help="Comma-separated protocol ids")
    filters.add_argument("--product", help="Product id")

    block = argparse.ArgumentParser(add_help=False)
    block.add_argument("--block", type=int, default=None, help="Block number (default: latest)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("build-metadata", parents=[filters], help="Rebuild adapter metadata files")

    positions = subparsers.add_parser("positions", parents=[filters, block], help="Show user positions")
    positions.add_argument("user_address")

    subparsers.add_parser("apr", parents=[filters, block], help="Show protocol token APR")
    subparsers.add_parser("apy", parents=[filters, block], help="Show protocol token APY")
    subparsers.add_parser("tvl", parents=[filters, block], help="Show total value locked")

    profits = subparsers.add_parser("profits", parents=[filters], help="Show user profits over a block range")
    profits.add_argument("user_address")
    profits.add_argument("--from-block", type=int, required=True)
    profits.add_argument("--to-block", type=int, default=None, help="End block (default: latest)")

    return parser


async def run(args: argparse.Namespace, settings: Settings) -> None:
    register_default_adapters()
    adapters = _create_adapters(args, settings)
    if not adapters:
        console.print("[yellow]No adapter matches the given filters[/yellow]")
        return

    logger.info(f"Running {args.command} on {len(adapters)} adapters")
    try:
        await COMMANDS[args.command](adapters, settings, args)
    finally:
        for adapter in adapters:
            await adapter.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = build_parser().parse_args(argv)
    try:
        asyncio.run(run(args, settings))
    except (AdapterError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
