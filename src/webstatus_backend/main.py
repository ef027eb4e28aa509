"""Server entry point wiring settings, cache backend and handlers."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from webstatus_backend.adapters.fastapi import Server, create_app
from webstatus_backend.config import Settings, configure_logging
from webstatus_backend.core.interfaces.cache_backend import RawBytesDataCacher
from webstatus_backend.core.interfaces.storage import (
    SearchQueryParser,
    WebFeatureMetadataStorer,
    WPTMetricsStorer,
)
from webstatus_backend.core.services.operation_response_caches import (
    init_operation_response_caches,
)
from webstatus_backend.infrastructure.backends import (
    InMemoryCacheBackend,
    ValkeyCacheBackend,
)

logger = logging.getLogger(__name__)


def build_cache_backend(settings: Settings) -> RawBytesDataCacher:
    """Create the shared byte cache backend described by the settings."""
    logger.info(
        "cache settings duration=%s prefix=%s aggregated_feature_stats_ttl=%s",
        settings.cache_ttl,
        settings.cache_key_prefix,
        settings.aggregated_feature_stats_ttl,
    )
    if settings.use_valkey:
        return ValkeyCacheBackend(
            key_prefix=settings.cache_key_prefix,
            host=settings.valkey_host,
            port=settings.valkey_port,
            default_ttl=settings.cache_ttl,
        )

    logger.warning("VALKEYHOST not set, using the in-memory cache backend")
    return InMemoryCacheBackend(
        key_prefix=settings.cache_key_prefix,
        default_ttl=settings.cache_ttl,
    )


def build_app(
    settings: Settings,
    metadata_storer: WebFeatureMetadataStorer,
    wpt_metrics_storer: WPTMetricsStorer,
    query_parser: SearchQueryParser,
    cache_backend: RawBytesDataCacher | None = None,
) -> FastAPI:
    """Assemble the API application.

    Storage and the search query parser are provided by the deployment.

    Args:
        settings: Process settings.
        metadata_storer: Feature metadata store.
        wpt_metrics_storer: Feature and metrics store.
        query_parser: Search query grammar parser.
        cache_backend: Byte cache backend. Built from settings if omitted.

    Returns:
        The ASGI application.
    """
    backend = cache_backend
    if backend is None:
        backend = build_cache_backend(settings)
    caches = init_operation_response_caches(backend, settings.route_cache_options())
    server = Server(
        metadata_storer=metadata_storer,
        wpt_metrics_storer=wpt_metrics_storer,
        operation_response_caches=caches,
        query_parser=query_parser,
        base_url=settings.base_url,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        close = getattr(backend, "close", None)
        if close is not None:
            logger.info("closing cache backend connection")
            await close()

    return create_app(server, cache_backend=backend, lifespan=lifespan)


def run(
    metadata_storer: WebFeatureMetadataStorer,
    wpt_metrics_storer: WPTMetricsStorer,
    query_parser: SearchQueryParser,
) -> None:
    """Read settings from the environment and serve the API."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = build_app(settings, metadata_storer, wpt_metrics_storer, query_parser)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
