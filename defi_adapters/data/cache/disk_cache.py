"""SQLite-based disk cache with TTL support."""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import diskcache

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiskCache:
    """
    SQLite-based disk cache with TTL support.

    Uses diskcache for persistent caching with automatic expiration. Values
    must be plain JSON-like data (dicts, lists, strings, ints).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        namespace: str = "defi_adapters",
    ):
        self.settings = settings or get_settings()
        self.namespace = namespace
        self._cache: Optional[diskcache.Cache] = None

    def _get_cache(self) -> diskcache.Cache:
        """Get or create the cache instance."""
        if self._cache is None:
            cache_dir = self.settings.ensure_cache_dir() / self.namespace
            cache_dir.mkdir(parents=True, exist_ok=True)
            self._cache = diskcache.Cache(str(cache_dir))
        return self._cache

    def get(
        self,
        key: str,
        default: Optional[T] = None,
    ) -> Optional[T]:
        """
        Get a value from the cache.

        Args:
            key: Cache key
            default: Default value if not found or expired

        Returns:
            Cached value or default
        """
        try:
            cache = self._get_cache()
            return cache.get(key, default=default)
        except Exception as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return default

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[int] = None,
    ) -> bool:
        """
        Set a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds (None = use default)

        Returns:
            True if successful
        """
        if ttl is None:
            ttl = self.settings.cache_ttl_seconds

        try:
            cache = self._get_cache()
            cache.set(key, value, expire=ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    async def get_or_set_async(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """
        Get a value from cache, or compute and cache it.

        Args:
            key: Cache key
            factory: Async function to call if key not found
            ttl: Time-to-live in seconds

        Returns:
            Cached or computed value
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"Cache hit for {key}")
            return value

        logger.debug(f"Cache miss for {key}")
        value = await factory()
        self.set(key, value, ttl)
        return value

    def close(self):
        """Close the cache connection."""
        if self._cache:
            self._cache.close()
            self._cache = None


class CacheKeys:
    """Standard cache key patterns."""

    @staticmethod
    def token_metadata(chain_id: int, address: str) -> str:
        return f"token_metadata:{chain_id}:{address.lower()}"
