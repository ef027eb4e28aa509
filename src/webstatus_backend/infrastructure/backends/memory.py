"""In-memory byte cache backend implementation."""

import math
import time
from collections.abc import Callable
from datetime import timedelta
from typing import NamedTuple

from cachetools import TLRUCache  # type: ignore[import-untyped]

from webstatus_backend.core.entities.cache_config import (
    CacheOption,
    apply_cache_options,
    new_cache_config,
)
from webstatus_backend.core.exceptions import CachedDataNotFoundError, InvalidValueTypeError


class _Entry(NamedTuple):
    value: bytes
    ttl_seconds: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    if entry.ttl_seconds <= 0:
        return math.inf
    return now + entry.ttl_seconds


class InMemoryCacheBackend:
    """In-memory byte cache backend using LRU with per-entry TTL.

    Suitable for single-process deployments and local development. Uses
    cachetools' TLRUCache so each entry expires after its own TTL, as
    resolved from the backend default and the options of the call.
    """

    def __init__(
        self,
        key_prefix: str = "",
        default_ttl: timedelta | float | None = None,
        maxsize: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            key_prefix: Prefix for every stored key, e.g. the deployed revision.
            default_ttl: TTL used when a call does not override it.
                None or zero means entries never expire.
            maxsize: Maximum number of items in the cache.
            timer: Clock used for expiry.
        """
        self._key_prefix = key_prefix
        self._default_config = new_cache_config(default_ttl)
        self._maxsize = maxsize
        self._cache: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    def _cache_key(self, key: str) -> str:
        if not self._key_prefix:
            return key
        return f"{self._key_prefix}-{key}"

    async def cache(self, key: str, value: bytes, *options: CacheOption) -> None:
        """Store value under key.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            *options: Options applied over the backend default configuration.
        """
        config = apply_cache_options(self._default_config, options)
        self._cache[self._cache_key(key)] = _Entry(
            value=value,
            ttl_seconds=config.ttl.total_seconds(),
        )

    async def get(self, key: str) -> bytes:
        """Retrieve the value stored under key.

        Args:
            key: The cache key.

        Returns:
            The cached value as bytes.

        Raises:
            CachedDataNotFoundError: If the key is missing or expired.
        """
        entry = self._cache.get(self._cache_key(key))
        if entry is None:
            raise CachedDataNotFoundError(key)
        if not isinstance(entry.value, bytes):
            raise InvalidValueTypeError(type(entry.value).__name__)
        return entry.value

    async def clear(self) -> None:
        """Clear all cached values."""
        self._cache.clear()

    def __len__(self) -> int:
        """Return the number of items in the cache."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
