"""Registry of the operation response caches used by the HTTP handlers."""

from dataclasses import dataclass
from typing import Any

from webstatus_backend.core.entities.api import (
    BaselineStatusMetricsPage,
    BrowserReleaseFeatureMetricsPage,
    ChromiumDailyStatsPage,
    Feature,
    FeatureMetadata,
    FeaturePage,
    GetFeatureMetadataRequestObject,
    GetFeatureRequestObject,
    ListAggregatedBaselineStatusCountsRequestObject,
    ListAggregatedFeatureSupportRequestObject,
    ListAggregatedWPTMetricsRequestObject,
    ListChromiumDailyUsageStatsRequestObject,
    ListFeaturesRequestObject,
    ListFeatureWPTMetricsRequestObject,
    ListMissingOneImplementationCountsRequestObject,
    WPTRunMetricsPage,
)
from webstatus_backend.core.entities.cache_config import RouteCacheOptions
from webstatus_backend.core.interfaces.cache_backend import RawBytesDataCacher
from webstatus_backend.core.services.operation_response_cache import (
    OperationResponseCache,
)


@dataclass(frozen=True)
class OperationResponseCaches:
    """One OperationResponseCache per cacheable API operation.

    Every cache wraps the same RawBytesDataCacher but works independently,
    typed for its own request object and response.
    """

    get_feature_cache: OperationResponseCache[GetFeatureRequestObject, Feature]
    list_features_cache: OperationResponseCache[ListFeaturesRequestObject, FeaturePage]
    get_feature_metadata_cache: OperationResponseCache[
        GetFeatureMetadataRequestObject, FeatureMetadata
    ]
    list_feature_wpt_metrics_cache: OperationResponseCache[
        ListFeatureWPTMetricsRequestObject, WPTRunMetricsPage
    ]
    list_chromium_daily_usage_stats_cache: OperationResponseCache[
        ListChromiumDailyUsageStatsRequestObject, ChromiumDailyStatsPage
    ]
    list_aggregated_feature_support_cache: OperationResponseCache[
        ListAggregatedFeatureSupportRequestObject, BrowserReleaseFeatureMetricsPage
    ]
    list_missing_one_implementation_counts_cache: OperationResponseCache[
        ListMissingOneImplementationCountsRequestObject,
        BrowserReleaseFeatureMetricsPage,
    ]
    list_aggregated_wpt_metrics_cache: OperationResponseCache[
        ListAggregatedWPTMetricsRequestObject, WPTRunMetricsPage
    ]
    list_aggregated_baseline_status_counts_cache: OperationResponseCache[
        ListAggregatedBaselineStatusCountsRequestObject, BaselineStatusMetricsPage
    ]

    def all(self) -> list[OperationResponseCache[Any, Any]]:
        """Return every cache in the registry."""
        return [
            self.get_feature_cache,
            self.list_features_cache,
            self.get_feature_metadata_cache,
            self.list_feature_wpt_metrics_cache,
            self.list_chromium_daily_usage_stats_cache,
            self.list_aggregated_feature_support_cache,
            self.list_missing_one_implementation_counts_cache,
            self.list_aggregated_wpt_metrics_cache,
            self.list_aggregated_baseline_status_counts_cache,
        ]


def init_operation_response_caches(
    cacher: RawBytesDataCacher,
    route_cache_options: RouteCacheOptions | None = None,
) -> OperationResponseCaches:
    """Build the operation response caches around one shared backend.

    Aggregated feature stats routes get the aggregated option overrides;
    every other route uses the backend defaults. No I/O happens here.

    Args:
        cacher: The shared byte cache backend.
        route_cache_options: Per route-family option overrides.

    Returns:
        The populated registry.
    """
    route_cache_options = route_cache_options or RouteCacheOptions()
    aggregated = route_cache_options.aggregated_feature_stats_options

    return OperationResponseCaches(
        get_feature_cache=OperationResponseCache(
            cacher, "getFeature", Feature
        ),
        list_features_cache=OperationResponseCache(
            cacher, "listFeatures", FeaturePage
        ),
        get_feature_metadata_cache=OperationResponseCache(
            cacher, "getFeatureMetadata", FeatureMetadata
        ),
        list_feature_wpt_metrics_cache=OperationResponseCache(
            cacher, "listFeatureWPTMetrics", WPTRunMetricsPage
        ),
        list_chromium_daily_usage_stats_cache=OperationResponseCache(
            cacher, "listChromiumDailyUsageStats", ChromiumDailyStatsPage
        ),
        list_aggregated_feature_support_cache=OperationResponseCache(
            cacher,
            "listAggregatedFeatureSupport",
            BrowserReleaseFeatureMetricsPage,
            override_cache_options=aggregated,
        ),
        list_missing_one_implementation_counts_cache=OperationResponseCache(
            cacher,
            "ListMissingOneImplementationCounts",
            BrowserReleaseFeatureMetricsPage,
            override_cache_options=aggregated,
        ),
        list_aggregated_wpt_metrics_cache=OperationResponseCache(
            cacher, "listAggregatedWPTMetrics", WPTRunMetricsPage
        ),
        list_aggregated_baseline_status_counts_cache=OperationResponseCache(
            cacher,
            "listAggregatedBaselineStatusCounts",
            BaselineStatusMetricsPage,
            override_cache_options=aggregated,
        ),
    )
