"""Protocol-specific implementations.

This module contains protocol configuration, contract ABIs and the
interest-rate math of supported protocols.

Currently supported:
- Morpho-AaveV3 ETH Optimizer (defi_adapters.protocols.morpho_aave_v3)
"""
