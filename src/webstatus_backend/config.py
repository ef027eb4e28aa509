"""Process configuration read from the environment."""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta

from webstatus_backend.core.entities.cache_config import RouteCacheOptions, with_ttl
from webstatus_backend.utils.durations import parse_duration

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _env_duration(key: str, default: str) -> timedelta:
    raw = os.getenv(key, default)
    try:
        return parse_duration(raw)
    except ValueError:
        logger.error("unable to parse duration key=%s input_value=%r", key, raw)
        return timedelta(0)


@dataclass(frozen=True)
class Settings:
    """Settings for the API server."""

    cache_ttl: timedelta = timedelta(minutes=5)
    aggregated_feature_stats_ttl: timedelta = timedelta(hours=1)
    valkey_host: str = ""
    valkey_port: str = "6379"
    # Keys are prefixed with the revision so deploys never share entries.
    cache_key_prefix: str = "test-revision"
    base_url: str = "http://localhost:8080"
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            cache_ttl=_env_duration("CACHE_TTL", "5m"),
            aggregated_feature_stats_ttl=_env_duration(
                "AGGREGATED_FEATURE_STATS_TTL", "1h"
            ),
            valkey_host=os.getenv("VALKEYHOST", ""),
            valkey_port=os.getenv("VALKEYPORT", "6379"),
            cache_key_prefix=os.getenv("K_REVISION") or "test-revision",
            base_url=os.getenv("BASE_URL", "http://localhost:8080"),
            port=int(os.getenv("PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def use_valkey(self) -> bool:
        """Whether a Valkey host is configured."""
        return bool(self.valkey_host)

    def route_cache_options(self) -> RouteCacheOptions:
        """Cache option overrides for route families."""
        return RouteCacheOptions(
            aggregated_feature_stats_options=(
                with_ttl(self.aggregated_feature_stats_ttl),
            ),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
