"""Domain entities for webstatus_backend."""

from webstatus_backend.core.entities.cache_config import (
    CacheConfig,
    CacheOption,
    RouteCacheOptions,
    apply_cache_options,
    new_cache_config,
    with_ttl,
)
from webstatus_backend.core.entities.cache_key import KEY_SEPARATOR, OperationCacheKey
from webstatus_backend.core.entities.feature_result import (
    FeatureResult,
    MovedFeatureResult,
    RegularFeatureResult,
    SplitFeatureResult,
)

__all__ = [
    "CacheConfig",
    "CacheOption",
    "RouteCacheOptions",
    "apply_cache_options",
    "new_cache_config",
    "with_ttl",
    "KEY_SEPARATOR",
    "OperationCacheKey",
    # Storage results
    "FeatureResult",
    "MovedFeatureResult",
    "RegularFeatureResult",
    "SplitFeatureResult",
]
