"""Parsing of user supplied chain and protocol filters."""

from typing import List, Optional

from defi_adapters.core.constants import Chain, Protocol


def chain_filter(filter_input: Optional[str]) -> Optional[Chain]:
    """
    Match a chain by id, enum name or chain name (case-insensitive).

    Raises:
        ValueError: If nothing matches
    """
    if not filter_input:
        return None

    value = filter_input.strip().lower()
    for chain in Chain:
        if value in (str(chain.value), chain.name.lower(), chain.chain_name):
            return chain

    raise ValueError(f"No chain matches the given filter: {filter_input}")


def protocol_filter(filter_input: Optional[str]) -> Optional[Protocol]:
    """
    Match a protocol by id or enum name (case-insensitive).

    Raises:
        ValueError: If nothing matches
    """
    if not filter_input:
        return None

    value = filter_input.strip().lower()
    for protocol in Protocol:
        if value in (protocol.value, protocol.name.lower()):
            return protocol

    raise ValueError(f"No protocol matches the given filter: {filter_input}")


def multi_chain_filter(filter_input: Optional[str]) -> Optional[List[Chain]]:
    """Parse a comma-separated list of chain filters, skipping blank entries."""
    if not filter_input:
        return None
    return [chain_filter(part) for part in filter_input.split(",") if part.strip()]


def multi_protocol_filter(filter_input: Optional[str]) -> Optional[List[Protocol]]:
    """Parse a comma-separated list of protocol filters, skipping blank entries."""
    if not filter_input:
        return None
    return [protocol_filter(part) for part in filter_input.split(",") if part.strip()]
