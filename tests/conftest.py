"""Pytest configuration for webstatus_backend tests."""

from dataclasses import dataclass, field

import pytest

from webstatus_backend.core.entities.cache_config import (
    CacheConfig,
    CacheOption,
    apply_cache_options,
    new_cache_config,
)
from webstatus_backend.core.exceptions import CachedDataNotFoundError


@dataclass
class CacheCall:
    """One recorded call to RecordingCacher.cache."""

    key: str
    value: bytes
    config: CacheConfig


@dataclass
class RecordingCacher:
    """Byte cacher fake that records stores and serves scripted lookups.

    Lookups return ``get_value`` when set, raise ``get_error`` when set,
    and otherwise fall back to whatever was stored.
    """

    cache_error: Exception | None = None
    get_value: bytes | None = None
    get_error: Exception | None = None
    cache_calls: list[CacheCall] = field(default_factory=list)
    get_calls: list[str] = field(default_factory=list)
    store: dict[str, bytes] = field(default_factory=dict)

    async def cache(self, key: str, value: bytes, *options: CacheOption) -> None:
        config = apply_cache_options(new_cache_config(0), options)
        self.cache_calls.append(CacheCall(key=key, value=value, config=config))
        if self.cache_error is not None:
            raise self.cache_error
        self.store[key] = value

    async def get(self, key: str) -> bytes:
        self.get_calls.append(key)
        if self.get_error is not None:
            raise self.get_error
        if self.get_value is not None:
            return self.get_value
        if key in self.store:
            return self.store[key]
        raise CachedDataNotFoundError(key)


@pytest.fixture
def recording_cacher() -> RecordingCacher:
    """Create a recording byte cacher."""
    return RecordingCacher()
