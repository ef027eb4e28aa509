"""Core domain layer for webstatus_backend."""

from webstatus_backend.core.entities import (
    CacheConfig,
    CacheOption,
    OperationCacheKey,
    RouteCacheOptions,
)
from webstatus_backend.core.interfaces import (
    ISerializer,
    RawBytesDataCacher,
)
from webstatus_backend.core.services import (
    OperationResponseCache,
    OperationResponseCaches,
)

__all__ = [
    # Entities
    "CacheConfig",
    "CacheOption",
    "OperationCacheKey",
    "RouteCacheOptions",
    # Interfaces
    "ISerializer",
    "RawBytesDataCacher",
    # Services
    "OperationResponseCache",
    "OperationResponseCaches",
]
