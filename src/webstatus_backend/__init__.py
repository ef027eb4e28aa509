"""webstatus_backend - HTTP API layer for web platform feature status.

Serves feature, metadata and metrics read operations from storage, with
a per-operation response cache in front of every cacheable route. The
cache sits on a shared byte backend (Valkey in production, in-memory
for local development) and is strictly best effort: a broken cache
behaves as if there were no cache.

Example:
    from datetime import timedelta
    from webstatus_backend import (
        InMemoryCacheBackend,
        OperationResponseCache,
        with_ttl,
    )
    from webstatus_backend.core.entities.api import (
        Feature,
        GetFeatureRequestObject,
    )

    backend = InMemoryCacheBackend(key_prefix="rev1", default_ttl=300)
    cache = OperationResponseCache[GetFeatureRequestObject, Feature](
        backend,
        "getFeature",
        Feature,
        override_cache_options=[with_ttl(timedelta(hours=1))],
    )

    request = GetFeatureRequestObject(feature_id="grid")
    feature = await cache.lookup(request)
    if feature is None:
        feature = await load_feature(request)
        await cache.attempt_cache(request, feature)

Serving the API:
    from webstatus_backend.main import run

    run(metadata_storer, wpt_metrics_storer, query_parser)
"""

from webstatus_backend.core.entities import (
    CacheConfig,
    CacheOption,
    OperationCacheKey,
    RouteCacheOptions,
    apply_cache_options,
    new_cache_config,
    with_ttl,
)
from webstatus_backend.core.exceptions import (
    CachedDataNotFoundError,
    CacheError,
    SerializationError,
)
from webstatus_backend.core.interfaces import ISerializer, RawBytesDataCacher
from webstatus_backend.core.services import (
    OperationResponseCache,
    OperationResponseCaches,
    init_operation_response_caches,
)
from webstatus_backend.infrastructure import (
    InMemoryCacheBackend,
    JsonSerializer,
    ValkeyCacheBackend,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Cache configuration
    "CacheConfig",
    "CacheOption",
    "RouteCacheOptions",
    "apply_cache_options",
    "new_cache_config",
    "with_ttl",
    "OperationCacheKey",
    # Errors
    "CacheError",
    "CachedDataNotFoundError",
    "SerializationError",
    # Interfaces
    "ISerializer",
    "RawBytesDataCacher",
    # Services
    "OperationResponseCache",
    "OperationResponseCaches",
    "init_operation_response_caches",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "ValkeyCacheBackend",
    "JsonSerializer",
]
