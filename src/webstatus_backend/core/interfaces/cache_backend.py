"""Byte cache backend interface."""

from typing import Protocol

from webstatus_backend.core.entities.cache_config import CacheOption


class RawBytesDataCacher(Protocol):
    """Contract for byte-oriented cache backends.

    Values are opaque bytes stored under string keys. One backend instance
    is shared by every operation response cache in the process. Expiry and
    eviction are entirely the backend's concern.
    """

    async def cache(self, key: str, value: bytes, *options: CacheOption) -> None:
        """Store a value under a key.

        Args:
            key: The cache key.
            value: The value to store.
            *options: Options applied over the backend's default
                configuration, in order.
        """
        ...

    async def get(self, key: str) -> bytes:
        """Retrieve the value stored under a key.

        Args:
            key: The cache key.

        Returns:
            The stored bytes.

        Raises:
            CachedDataNotFoundError: If nothing is stored under the key.
        """
        ...
