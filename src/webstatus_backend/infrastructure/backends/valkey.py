"""Valkey byte cache backend implementation."""

from datetime import timedelta

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError, TimeoutError

from webstatus_backend.core.entities.cache_config import (
    CacheOption,
    apply_cache_options,
    new_cache_config,
)
from webstatus_backend.core.exceptions import CachedDataNotFoundError, InvalidValueTypeError


class ValkeyCacheBackend:
    """Valkey cache backend for distributed deployments.

    Valkey speaks the Redis protocol, so the redis asyncio client is used.
    Keys are prefixed (typically with the deployed revision) so releases
    never read each other's entries. Connection errors are retried with
    exponential backoff by the client.
    """

    def __init__(
        self,
        key_prefix: str,
        host: str = "localhost",
        port: int | str = 6379,
        default_ttl: timedelta | float | None = None,
        retries: int = 5,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Valkey cache backend.

        Args:
            key_prefix: Prefix for all cache keys.
            host: Valkey host.
            port: Valkey port. Often comes from the environment as a string.
            default_ttl: TTL used when a call does not override it.
                None or zero stores without expiry.
            retries: Retries for connection and timeout errors.
            client: A preconfigured client, mostly for tests.
        """
        self._key_prefix = key_prefix
        self._default_config = new_cache_config(default_ttl)
        if client is None:
            client = redis.Redis(
                host=host,
                port=int(port),
                retry=Retry(ExponentialBackoff(), retries),
                retry_on_error=[ConnectionError, TimeoutError],
            )
        self._redis: redis.Redis = client

    def _cache_key(self, key: str) -> str:
        return f"{self._key_prefix}-{key}"

    async def cache(self, key: str, value: bytes, *options: CacheOption) -> None:
        """Store value under key.

        Args:
            key: The cache key.
            value: The value to store as bytes.
            *options: Options applied over the backend default configuration.
        """
        config = apply_cache_options(self._default_config, options)

        if config.has_ttl:
            await self._redis.set(self._cache_key(key), value, ex=config.ttl_seconds)
        else:
            await self._redis.set(self._cache_key(key), value)

    async def get(self, key: str) -> bytes:
        """Retrieve the value stored under key.

        Args:
            key: The cache key.

        Returns:
            The cached value as bytes.

        Raises:
            CachedDataNotFoundError: If the key is missing or expired.
            InvalidValueTypeError: If the stored value is not bytes.
        """
        result = await self._redis.get(self._cache_key(key))
        if result is None:
            raise CachedDataNotFoundError(key)
        if not isinstance(result, bytes):
            raise InvalidValueTypeError(type(result).__name__)
        return result

    async def ping(self) -> bool:
        """Check connectivity to the server."""
        return bool(await self._redis.ping())

    async def close(self) -> None:
        """Close the connection pool."""
        await self._redis.aclose()

    async def __aenter__(self) -> "ValkeyCacheBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
