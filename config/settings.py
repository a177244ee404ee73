"""Pydantic settings for DeFi adapters configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from defi_adapters.core.constants import Chain


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ethereum RPC
    eth_alchemy_api_key: Optional[str] = Field(default=None, description="Alchemy API key for Ethereum RPC")
    ethereum_rpc_url: Optional[str] = Field(default=None, description="Ethereum RPC URL (overrides Alchemy)")

    # Other chains
    arbitrum_rpc_url: Optional[str] = Field(default=None, description="Arbitrum RPC URL")
    optimism_rpc_url: Optional[str] = Field(default=None, description="Optimism RPC URL")
    polygon_rpc_url: Optional[str] = Field(default=None, description="Polygon RPC URL")
    base_rpc_url: Optional[str] = Field(default=None, description="Base RPC URL")

    # RPC rate limits
    rpc_rate_limit: int = Field(default=25, ge=1, description="Max RPC requests per window")
    rpc_rate_window: float = Field(default=1.0, gt=0, description="RPC rate limit window in seconds")

    # Cache Configuration
    cache_dir: Path = Field(default=Path(".cache/defi_adapters"), description="Cache directory path")
    cache_ttl_seconds: int = Field(default=86400, ge=60, description="Cache TTL in seconds")

    # Adapter metadata files
    metadata_dir: Path = Field(default=Path("metadata"), description="Adapter metadata directory")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("cache_dir", "metadata_dir", mode="before")
    @classmethod
    def parse_path(cls, v):
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        """Normalise the logging level name."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def eth_rpc_url(self) -> Optional[str]:
        """Get Ethereum RPC URL, explicit URL first, then Alchemy API key."""
        if self.ethereum_rpc_url:
            return self.ethereum_rpc_url
        if self.eth_alchemy_api_key:
            return f"https://eth-mainnet.g.alchemy.com/v2/{self.eth_alchemy_api_key}"
        return None

    @property
    def rpc_urls(self) -> Dict[Chain, str]:
        """Configured RPC URLs by chain."""
        urls = {
            Chain.ETHEREUM: self.eth_rpc_url,
            Chain.ARBITRUM: self.arbitrum_rpc_url,
            Chain.OPTIMISM: self.optimism_rpc_url,
            Chain.POLYGON: self.polygon_rpc_url,
            Chain.BASE: self.base_rpc_url,
        }
        return {chain: url for chain, url in urls.items() if url}

    def ensure_cache_dir(self) -> Path:
        """Ensure cache directory exists and return it."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
