"""Tests for the server wiring."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from webstatus_backend.config import Settings
from webstatus_backend.infrastructure.backends import (
    InMemoryCacheBackend,
    ValkeyCacheBackend,
)
from webstatus_backend.main import build_app, build_cache_backend


class TestBuildCacheBackend:
    """Tests for build_cache_backend."""

    def test_in_memory_without_valkey_host(self) -> None:
        """Test that the in-memory backend is used for local runs."""
        backend = build_cache_backend(Settings())

        assert isinstance(backend, InMemoryCacheBackend)

    def test_valkey_with_host(self) -> None:
        """Test that a configured host selects the Valkey backend."""
        backend = build_cache_backend(
            Settings(valkey_host="valkey", valkey_port="6380", cache_key_prefix="rev1")
        )

        assert isinstance(backend, ValkeyCacheBackend)


class TestBuildApp:
    """Tests for build_app."""

    def test_routes(self) -> None:
        """Test that the API routes are mounted under /v1."""
        app = build_app(
            Settings(cache_ttl=timedelta(minutes=1)),
            AsyncMock(),
            AsyncMock(),
            MagicMock(),
            cache_backend=InMemoryCacheBackend(),
        )

        paths = app.openapi()["paths"]
        assert "/v1/features" in paths
        assert "/v1/features/{feature_id}" in paths
        assert "/v1/stats/baseline_status/low_date_feature_counts" in paths
        assert "/health" in paths

    @pytest.mark.asyncio
    async def test_shutdown_closes_backend(self) -> None:
        """Test that the backend connection is closed on shutdown."""
        backend = AsyncMock()
        app = build_app(Settings(), AsyncMock(), AsyncMock(), MagicMock(), backend)

        async with app.router.lifespan_context(app):
            backend.close.assert_not_awaited()

        backend.close.assert_awaited_once()
