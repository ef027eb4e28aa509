"""Storage and query parser interfaces consumed by the HTTP handlers."""

from datetime import date
from typing import Any, Protocol

from webstatus_backend.core.entities.api import (
    BaselineStatusMetricsPage,
    BrowserPathParam,
    BrowserReleaseFeatureMetricsPage,
    ChannelPathParam,
    ChromiumDailyStatsPage,
    FeatureMetadata,
    FeaturePage,
    ListFeaturesParamsSort,
    WPTMetricView,
    WPTRunMetricsPage,
)
from webstatus_backend.core.entities.feature_result import FeatureResult


class WebFeatureMetadataStorer(Protocol):
    """Contract for the feature metadata store."""

    async def get_feature_metadata(self, feature_id: str) -> FeatureMetadata:
        """Fetch metadata for a feature.

        Raises:
            QueryReturnedNoResultsError: If the feature is unknown.
        """
        ...


class WPTMetricsStorer(Protocol):
    """Contract for the feature and metrics store.

    Paginated methods raise InvalidPageTokenError for a token they cannot
    decode, and QueryReturnedNoResultsError where an entity is missing.
    """

    async def get_feature(
        self,
        feature_id: str,
        wpt_metric_view: WPTMetricView,
        browsers: list[BrowserPathParam],
    ) -> FeatureResult: ...

    async def features_search(
        self,
        page_token: str | None,
        page_size: int,
        search_node: Any | None,
        sort: ListFeaturesParamsSort | None,
        wpt_metric_view: WPTMetricView,
        browsers: list[BrowserPathParam],
    ) -> FeaturePage: ...

    async def list_metrics_for_feature_id_browser_and_channel(
        self,
        feature_id: str,
        browser: BrowserPathParam,
        channel: ChannelPathParam,
        metric_view: WPTMetricView,
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> WPTRunMetricsPage: ...

    async def list_metrics_over_time_with_aggregated_totals(
        self,
        feature_ids: list[str],
        browser: BrowserPathParam,
        channel: ChannelPathParam,
        metric_view: WPTMetricView,
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> WPTRunMetricsPage: ...

    async def list_chromium_daily_usage_stats(
        self,
        feature_id: str,
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> ChromiumDailyStatsPage: ...

    async def list_browser_feature_count_metric(
        self,
        browser: BrowserPathParam,
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> BrowserReleaseFeatureMetricsPage: ...

    async def list_missing_one_impl_counts(
        self,
        target_browser: BrowserPathParam,
        other_browsers: list[BrowserPathParam],
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> BrowserReleaseFeatureMetricsPage: ...

    async def list_baseline_status_counts(
        self,
        start_at: date,
        end_at: date,
        page_size: int,
        page_token: str | None,
    ) -> BaselineStatusMetricsPage: ...


class SearchQueryParser(Protocol):
    """Contract for the feature search grammar parser."""

    def parse(self, query: str) -> Any:
        """Parse a decoded search query into a search node.

        Raises:
            SearchQueryParseError: If the query does not match the grammar.
        """
        ...
