"""Tests for the FastAPI application."""

import datetime as dt
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from webstatus_backend.adapters.fastapi import Server, create_app
from webstatus_backend.core.entities.api import (
    BaselineStatusMetric,
    BaselineStatusMetricsPage,
    BrowserPathParam,
    BrowserReleaseFeatureMetricsPage,
    ChannelPathParam,
    ChromiumDailyStatsPage,
    ChromiumUsageStat,
    Feature,
    FeatureMetadata,
    FeaturePage,
    PageMetadataWithTotal,
    WPTMetricView,
    WPTRunMetric,
    WPTRunMetricsPage,
)
from webstatus_backend.core.entities.feature_result import (
    MovedFeatureResult,
    RegularFeatureResult,
    SplitFeatureResult,
)
from webstatus_backend.core.exceptions import QueryReturnedNoResultsError
from webstatus_backend.core.services.operation_response_caches import (
    init_operation_response_caches,
)
from webstatus_backend.infrastructure.backends.memory import InMemoryCacheBackend

START = dt.date(2000, 1, 1)
END = dt.date(2000, 1, 10)
DATE_RANGE = "startAt=2000-01-01&endAt=2000-01-10"
TIMESTAMP = dt.datetime(2000, 1, 1, tzinfo=dt.timezone.utc)


@pytest.fixture
def wpt_metrics_storer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def metadata_storer() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def app(metadata_storer: AsyncMock, wpt_metrics_storer: AsyncMock) -> FastAPI:
    """Create an application backed by mocked storage."""
    server = Server(
        metadata_storer=metadata_storer,
        wpt_metrics_storer=wpt_metrics_storer,
        operation_response_caches=init_operation_response_caches(
            InMemoryCacheBackend(key_prefix="test")
        ),
        query_parser=MagicMock(),
        base_url="https://api.example.com",
    )
    return create_app(server)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestFeatureRoutes:
    """Tests for the /v1/features routes."""

    @pytest.mark.asyncio
    async def test_get_feature(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test reading a feature, omitting unset fields."""
        wpt_metrics_storer.get_feature.return_value = RegularFeatureResult(
            Feature(feature_id="feature1", name="Feature 1")
        )

        response = await client.get("/v1/features/feature1")

        assert response.status_code == 200
        assert response.json() == {"feature_id": "feature1", "name": "Feature 1"}

    @pytest.mark.asyncio
    async def test_get_feature_metric_view(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that the metric view query parameter reaches storage."""
        wpt_metrics_storer.get_feature.return_value = RegularFeatureResult(
            Feature(feature_id="feature1", name="Feature 1")
        )

        await client.get("/v1/features/feature1?wpt_metric_view=subtest_counts")

        args = wpt_metrics_storer.get_feature.await_args.args
        assert args[1] is WPTMetricView.SUBTEST_COUNTS

    @pytest.mark.asyncio
    async def test_get_feature_unknown_metric_view(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that an unknown metric view falls back to test counts."""
        wpt_metrics_storer.get_feature.return_value = RegularFeatureResult(
            Feature(feature_id="feature1", name="Feature 1")
        )

        response = await client.get("/v1/features/feature1?wpt_metric_view=bogus")

        assert response.status_code == 200
        args = wpt_metrics_storer.get_feature.await_args.args
        assert args[1] is WPTMetricView.TEST_COUNTS

    @pytest.mark.asyncio
    async def test_get_feature_moved(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that a moved feature is a permanent redirect."""
        wpt_metrics_storer.get_feature.return_value = MovedFeatureResult("feature2")

        response = await client.get("/v1/features/feature1")

        assert response.status_code == 301
        assert response.headers["location"] == (
            "https://api.example.com/v1/features/feature2"
        )

    @pytest.mark.asyncio
    async def test_get_feature_split(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that a split feature is gone."""
        wpt_metrics_storer.get_feature.return_value = SplitFeatureResult(
            ("feature2", "feature3")
        )

        response = await client.get("/v1/features/feature1")

        assert response.status_code == 410
        assert response.json() == {
            "code": 410,
            "message": "feature is split",
            "new_features": ["feature2", "feature3"],
            "type": "split",
        }

    @pytest.mark.asyncio
    async def test_get_feature_not_found(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the error body of a missing feature."""
        wpt_metrics_storer.get_feature.side_effect = QueryReturnedNoResultsError()

        response = await client.get("/v1/features/nope")

        assert response.status_code == 404
        assert response.json() == {"code": 404, "message": "feature id nope is not found"}

    @pytest.mark.asyncio
    async def test_list_features(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test listing features."""
        wpt_metrics_storer.features_search.return_value = FeaturePage(
            data=[Feature(feature_id="feature1", name="Feature 1")],
            metadata=PageMetadataWithTotal(total=1),
        )

        response = await client.get("/v1/features?page_size=10&sort=name_asc")

        assert response.status_code == 200
        assert response.json() == {
            "data": [{"feature_id": "feature1", "name": "Feature 1"}],
            "metadata": {"total": 1},
        }

    @pytest.mark.asyncio
    async def test_list_features_bad_query(self, client: httpx.AsyncClient) -> None:
        """Test that an undecodable query is a 400 in the API error format."""
        response = await client.get("/v1/features", params={"q": "%zz"})

        assert response.status_code == 400
        assert response.json() == {
            "code": 400,
            "message": "query string cannot be decoded",
        }

    @pytest.mark.asyncio
    async def test_feature_metadata(
        self, client: httpx.AsyncClient, metadata_storer: AsyncMock
    ) -> None:
        """Test reading feature metadata."""
        metadata_storer.get_feature_metadata.return_value = FeatureMetadata(
            description="desc"
        )

        response = await client.get("/v1/features/feature1/feature-metadata")

        assert response.status_code == 200
        assert response.json() == {"description": "desc"}

    @pytest.mark.asyncio
    async def test_feature_wpt_metrics(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the per-feature WPT metrics route."""
        storer = wpt_metrics_storer.list_metrics_for_feature_id_browser_and_channel
        storer.return_value = WPTRunMetricsPage(
            data=[WPTRunMetric(run_timestamp=TIMESTAMP, test_pass_count=5)]
        )

        response = await client.get(
            "/v1/features/feature1/stats/wpt/browsers/chrome/channels/stable/test_counts"
            f"?{DATE_RANGE}"
        )

        assert response.status_code == 200
        assert response.json()["data"][0]["test_pass_count"] == 5
        storer.assert_awaited_once_with(
            "feature1",
            BrowserPathParam.CHROME,
            ChannelPathParam.STABLE,
            WPTMetricView.TEST_COUNTS,
            START,
            END,
            100,
            None,
        )

    @pytest.mark.asyncio
    async def test_chromium_daily_usage_stats(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the Chromium usage route."""
        wpt_metrics_storer.list_chromium_daily_usage_stats.return_value = (
            ChromiumDailyStatsPage(data=[ChromiumUsageStat(timestamp=TIMESTAMP, usage=0.5)])
        )

        response = await client.get(
            f"/v1/features/feature1/stats/usage/chrome/daily_stats?{DATE_RANGE}"
        )

        assert response.status_code == 200
        assert response.json()["data"][0]["usage"] == 0.5

    @pytest.mark.asyncio
    async def test_missing_date_range(self, client: httpx.AsyncClient) -> None:
        """Test that the date range is required."""
        response = await client.get("/v1/features/feature1/stats/usage/chrome/daily_stats")

        assert response.status_code == 422


class TestStatsRoutes:
    """Tests for the /v1/stats routes."""

    @pytest.mark.asyncio
    async def test_feature_counts(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the browser feature count route."""
        wpt_metrics_storer.list_browser_feature_count_metric.return_value = (
            BrowserReleaseFeatureMetricsPage(data=[])
        )

        response = await client.get(
            f"/v1/stats/features/browsers/firefox/feature_counts?{DATE_RANGE}"
        )

        assert response.status_code == 200
        assert response.json() == {"data": []}

    @pytest.mark.asyncio
    async def test_missing_one_implementation_counts(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that repeated browser query parameters are collected."""
        wpt_metrics_storer.list_missing_one_impl_counts.return_value = (
            BrowserReleaseFeatureMetricsPage(data=[])
        )

        response = await client.get(
            "/v1/stats/features/browsers/chrome/missing_one_implementation_counts"
            f"?{DATE_RANGE}&browser=firefox&browser=safari"
        )

        assert response.status_code == 200
        args = wpt_metrics_storer.list_missing_one_impl_counts.await_args.args
        assert args[0] is BrowserPathParam.CHROME
        assert args[1] == [BrowserPathParam.FIREFOX, BrowserPathParam.SAFARI]

    @pytest.mark.asyncio
    async def test_aggregated_wpt_metrics(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the aggregated WPT metrics route with a feature filter."""
        storer = wpt_metrics_storer.list_metrics_over_time_with_aggregated_totals
        storer.return_value = WPTRunMetricsPage(data=[])

        response = await client.get(
            "/v1/stats/wpt/browsers/edge/channels/experimental/subtest_counts"
            f"?{DATE_RANGE}&featureIds=a&featureIds=b"
        )

        assert response.status_code == 200
        assert storer.await_args.args[0] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_baseline_status_counts(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test the baseline status counts route."""
        wpt_metrics_storer.list_baseline_status_counts.return_value = (
            BaselineStatusMetricsPage(
                data=[BaselineStatusMetric(count=3, timestamp=TIMESTAMP)]
            )
        )

        response = await client.get(
            f"/v1/stats/baseline_status/low_date_feature_counts?{DATE_RANGE}"
        )

        assert response.status_code == 200
        assert response.json()["data"][0]["count"] == 3

    @pytest.mark.asyncio
    async def test_storage_failure(
        self, client: httpx.AsyncClient, wpt_metrics_storer: AsyncMock
    ) -> None:
        """Test that storage failures are a 500 in the API error format."""
        wpt_metrics_storer.list_baseline_status_counts.side_effect = RuntimeError("x")

        response = await client.get(
            f"/v1/stats/baseline_status/low_date_feature_counts?{DATE_RANGE}"
        )

        assert response.status_code == 500
        assert response.json() == {
            "code": 500,
            "message": "unable to get baseline status metrics",
        }


class TestHealth:
    """Tests for the health route."""

    @pytest.mark.asyncio
    async def test_without_cache_backend(self, client: httpx.AsyncClient) -> None:
        """Test the health route when no backend is reported."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "cache": "not configured"}

    @pytest.mark.asyncio
    async def test_unhealthy_backend(self) -> None:
        """Test that a failing ping is reported without failing the route."""
        backend = AsyncMock()
        backend.ping.side_effect = ConnectionError("refused")
        server = Server(
            AsyncMock(),
            AsyncMock(),
            init_operation_response_caches(InMemoryCacheBackend()),
            MagicMock(),
        )
        app = create_app(server, cache_backend=backend)

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["cache"] == "unhealthy: refused"
