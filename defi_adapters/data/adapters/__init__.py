"""Protocol adapters.

Provides the shared adapter interface and the registry used to create
adapters by protocol, chain and product.
"""

from defi_adapters.data.adapters.base import ProtocolAdapter
from defi_adapters.data.adapters.registry import AdapterRegistry, register_default_adapters

__all__ = [
    "ProtocolAdapter",
    "AdapterRegistry",
    "register_default_adapters",
]
