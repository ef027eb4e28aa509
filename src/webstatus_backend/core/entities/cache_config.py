"""Cache configuration entity and composable cache options."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import timedelta

TTLLike = timedelta | int | float | None


def _to_timedelta(ttl: TTLLike) -> timedelta:
    if ttl is None:
        return timedelta(0)
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=ttl)


@dataclass(frozen=True)
class CacheConfig:
    """Per-call cache configuration.

    Backends build a baseline configuration from their own defaults and
    then apply the options supplied with each call. A zero TTL means
    "unset": the backend decides, which usually means no expiry.
    """

    ttl: timedelta = timedelta(0)

    @property
    def has_ttl(self) -> bool:
        """Check whether an explicit TTL is set."""
        return self.ttl > timedelta(0)

    @property
    def ttl_seconds(self) -> int:
        """The TTL in whole seconds, rounded up so short TTLs still expire."""
        seconds = self.ttl.total_seconds()
        whole = int(seconds)
        return whole + 1 if seconds > whole else whole


CacheOption = Callable[[CacheConfig], CacheConfig]


def new_cache_config(ttl: TTLLike = None) -> CacheConfig:
    """Create a cache configuration with an explicit TTL.

    Args:
        ttl: A timedelta or a number of seconds. None or zero leaves it unset.

    Returns:
        A new CacheConfig.
    """
    return CacheConfig(ttl=_to_timedelta(ttl))


def with_ttl(ttl: TTLLike) -> CacheOption:
    """Option that sets the TTL of a configuration.

    Example:
        options = [with_ttl(timedelta(minutes=10))]
        cfg = apply_cache_options(new_cache_config(), options)
    """
    value = _to_timedelta(ttl)

    def option(config: CacheConfig) -> CacheConfig:
        return replace(config, ttl=value)

    return option


def apply_cache_options(
    config: CacheConfig,
    options: Iterable[CacheOption],
) -> CacheConfig:
    """Apply options to a configuration in order. The last write wins.

    Args:
        config: The baseline configuration. It is not modified.
        options: Options to apply.

    Returns:
        The resulting configuration.
    """
    for option in options:
        config = option(config)
    return config


@dataclass(frozen=True)
class RouteCacheOptions:
    """Cache option overrides grouped by route family."""

    # Applies to routes that only carry aggregated stats on features.
    # Routes with several data sources (e.g. WPT metrics) are not included.
    aggregated_feature_stats_options: tuple[CacheOption, ...] = field(
        default_factory=tuple
    )
